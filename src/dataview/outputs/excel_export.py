"""Write list-view rows to a styled Excel workbook."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..models import ColumnSpec
from .csv_export import row_values

logger = logging.getLogger(__name__)

# ── Shared style constants ──────────────────────────────────────────

_HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
_HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
_HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
_THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
_MAX_COL_WIDTH = 60


class ExcelExporter:
    """Exports the rows of a list view to a single-sheet .xlsx workbook."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export(
        self,
        rows: Iterable[Any],
        columns: Sequence[ColumnSpec],
        filename: str | None = None,
        sheet_title: str = "Export",
    ) -> Path:
        """Write *rows* and return the saved file path."""
        if filename is None:
            filename = f"dataview_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"

        wb = Workbook()
        ws = wb.active
        ws.title = sheet_title[:31]
        ws.append([c.title for c in columns])
        count = 0
        for record in rows:
            ws.append([_excel_value(v) for v in row_values(record, columns)])
            count += 1

        self._style_header(ws)
        if count:
            ws.auto_filter.ref = ws.dimensions
        ws.freeze_panes = "A2"
        self._auto_width(ws)

        dest = self.output_dir / filename
        wb.save(str(dest))
        logger.info("Excel export of %d rows saved to %s", count, dest)
        return dest

    def _style_header(self, ws, row: int = 1) -> None:
        for cell in ws[row]:
            cell.font = _HEADER_FONT
            cell.fill = _HEADER_FILL
            cell.alignment = _HEADER_ALIGNMENT
            cell.border = _THIN_BORDER

    def _auto_width(self, ws) -> None:
        """Fit each column to its longest value, capped at *_MAX_COL_WIDTH*."""
        for col_cells in ws.columns:
            longest = max((len(str(c.value)) for c in col_cells if c.value is not None), default=0)
            ws.column_dimensions[get_column_letter(col_cells[0].column)].width = min(longest + 3, _MAX_COL_WIDTH)


def _excel_value(value: Any) -> Any:
    # openpyxl accepts str/number/bool/date; anything else is written as text
    if value is None or isinstance(value, (str, int, float, bool, datetime)):
        return value
    return str(value)
