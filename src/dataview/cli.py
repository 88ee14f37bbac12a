"""Typer CLI entry point for dataview."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_settings
from .history import RecentSearchStore
from .models import ColumnSpec, FilterOption, FilterType, ViewConfig
from .outputs import ExcelExporter, export_csv, row_values
from .view import DataView

app = typer.Typer(
    name="dataview",
    help="dataview: search, filter, sort and page through JSON datasets",
    rich_markup_mode="rich",
)

console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    settings = get_settings()
    settings.logs_dir.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(settings.logs_dir / "dataview.log", encoding="utf-8"),
        ],
    )


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _load_records(path: Path) -> list[Any]:
    """Read a JSON array (or an object wrapping one under data/items/results)."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        _fail(f"Cannot read records from {path}: {e}")
    if isinstance(payload, dict):
        for key in ("data", "items", "results"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
    if not isinstance(payload, list):
        _fail(f"{path} does not contain a JSON array of records")
    return payload


def _load_view(path: Path | None, records: list[Any], records_path: Path) -> ViewConfig:
    if path is not None:
        try:
            return ViewConfig.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            _fail(f"Cannot read view config {path}: {e}")
        except ValidationError as e:
            _fail(f"Invalid view config {path}:\n{e}")

    # No view file: show every top-level key of the first record and search them all
    first = next((r for r in records if isinstance(r, dict)), {})
    keys = list(first)
    return ViewConfig(
        name=records_path.stem,
        search_fields=keys,
        columns=[ColumnSpec(key=k) for k in keys],
    )


def _parse_filter_value(option: FilterOption, raw: str) -> Any:
    """Turn the text after ``id=`` into the value shape for *option*."""
    match option.type:
        case FilterType.MULTISELECT:
            return [part.strip() for part in raw.split(",") if part.strip()]
        case FilterType.DATERANGE:
            start, sep, end = raw.partition("..")
            if not sep:
                return {"from": raw, "to": raw}
            return {"from": start.strip() or None, "to": end.strip() or None}
        case FilterType.NUMBER if option.range_filter:
            start, sep, end = raw.partition("..")
            if not sep:
                return {"from": raw, "to": raw}
            return {"from": start.strip() or None, "to": end.strip() or None}
    return raw


def _render(view: DataView, columns: list[ColumnSpec], title: str) -> None:
    snap = view.snapshot
    table = Table(title=title)
    for col in columns:
        table.add_column(col.title, style="cyan" if col is columns[0] else None, max_width=60)
    for record in snap.displayed_rows:
        table.add_row(*(escape(str(v)) for v in row_values(record, columns)))
    console.print(table)

    pages = " ".join(
        "…" if n is None else (f"[bold]{n}[/bold]" if n == snap.current_page else str(n))
        for n in snap.page_numbers
    )
    console.print(
        f"Showing {snap.start_item}-{snap.end_item} of {snap.total_items} "
        f"| page {snap.current_page}/{snap.total_pages} [{pages}] "
        f"| {snap.active_filter_count} filter(s) active"
    )
    if snap.recent_searches:
        console.print(f"[dim]Recent searches: {', '.join(snap.recent_searches)}[/dim]")


@app.command()
def show(
    records_path: Path = typer.Argument(..., help="JSON file with the records"),
    view_path: Optional[Path] = typer.Option(None, "--view", "-V", help="View config JSON"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Free-text search"),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="Filter as id=value (repeatable)"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort key (dot-path)"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-n", help="Rows per page"),
    export: Optional[Path] = typer.Option(None, "--export", "-o", help="Export all matching rows (.csv or .xlsx)"),
    no_history: bool = typer.Option(False, "--no-history", help="Do not read or write search history"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Search, filter, sort and page through a JSON dataset."""
    _setup_logging(verbose)
    settings = get_settings()
    records = _load_records(records_path)
    config = _load_view(view_path, records, records_path)

    if page_size is not None and page_size not in settings.page_size_options:
        logger.warning("Page size %d is not one of %s", page_size, settings.page_size_options)

    store = None if no_history else RecentSearchStore(settings.history_dir, limit=settings.recent_limit)
    try:
        view = DataView.from_config(
            config,
            records,
            page_size=page_size or config.page_size or settings.page_size,
            recent_searches=store.load(config.name) if store else (),
            recent_limit=settings.recent_limit,
        )

        for raw in filters or []:
            filter_id, sep, value = raw.partition("=")
            option = view.registry.get(filter_id.strip())
            if not sep:
                _fail(f"Filter must look like id=value, got {raw!r}")
            if option is None:
                _fail(f"Unknown filter {filter_id!r}; available: {', '.join(view.registry.ids) or 'none'}")
            view.set_filter(option.id, _parse_filter_value(option, value))
        if filters:
            view.apply_filters()

        if search:
            view.search(search)
            if store is not None:
                store.save(config.name, view.recent_searches)

        if sort:
            view.set_sort(sort, "desc" if desc else "asc")

        view.go_to_page(page)
        _render(view, config.columns, config.name)

        if export is not None:
            rows = view.filtered_rows()
            if export.suffix.lower() == ".xlsx":
                dest = ExcelExporter(export.parent).export(rows, config.columns, filename=export.name,
                                                           sheet_title=config.name)
            else:
                dest = export_csv(rows, config.columns, export)
            console.print(f"[green]Exported {len(rows)} rows to:[/green] {dest}")
    finally:
        if store is not None:
            store.close()


@app.command()
def describe(
    view_path: Path = typer.Argument(..., help="View config JSON"),
):
    """List the filters, search fields and columns of a view config."""
    try:
        config = ViewConfig.model_validate_json(view_path.read_text(encoding="utf-8"))
    except OSError as e:
        _fail(f"Cannot read view config {view_path}: {e}")
    except ValidationError as e:
        _fail(f"Invalid view config {view_path}:\n{e}")

    table = Table(title=f"Filters of {config.name}")
    table.add_column("ID", style="cyan")
    table.add_column("Label")
    table.add_column("Type", style="green")
    table.add_column("Field", style="dim")
    table.add_column("Options")
    for f in config.filters:
        kind = f"{f.type.value} (range)" if f.range_filter else f.type.value
        table.add_row(f.id, f.label, kind, f.key, ", ".join(o.value for o in f.options))
    console.print(table)
    console.print(f"Search fields: {', '.join(config.search_fields) or '-'}")
    console.print(f"Columns: {', '.join(c.title for c in config.columns) or '-'}")


@app.command()
def history(
    view: Optional[str] = typer.Option(None, "--view", help="View name (default: all views)"),
    clear: bool = typer.Option(False, "--clear", help="Forget the stored searches"),
):
    """Show or clear persisted recent searches."""
    settings = get_settings()
    with RecentSearchStore(settings.history_dir, limit=settings.recent_limit) as store:
        if clear:
            store.clear(view)
            console.print(f"[green]Cleared search history for {view or 'all views'}.[/green]")
            return

        names = [view] if view else store.views()
        table = Table(title="Recent searches")
        table.add_column("View", style="cyan")
        table.add_column("Searches", style="green")
        for name in names:
            table.add_row(name, ", ".join(store.load(name)))
        console.print(table)


if __name__ == "__main__":
    app()
