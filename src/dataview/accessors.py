"""Field access into opaque records (dicts, pydantic models, plain objects).

Also holds the lenient parsers shared by the filter store and the predicate
compiler: both must agree on which dates and numbers are usable.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any, Callable

logger = logging.getLogger(__name__)

Accessor = Callable[[Any], Any]

# Raised by caller accessors such as ``lambda r: r["user"]["name"]`` on dirty rows
_ACCESS_ERRORS = (AttributeError, IndexError, KeyError, TypeError)


def resolve_path(record: Any, path: str) -> Any:
    """Follow a dotted *path* (``"paymentMethod.name"``) through *record*.

    Mappings are read by key, sequences by integer segment, anything else by
    attribute. Returns None as soon as a segment is missing.
    """
    current = record
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not segment.lstrip("-").isdigit():
                return None
            idx = int(segment)
            if not -len(current) <= idx < len(current):
                return None
            current = current[idx]
        else:
            current = getattr(current, segment, None)
    return current


def guard(func: Accessor) -> Accessor:
    """Wrap a caller-supplied accessor so lookup errors read as a missing value."""
    def access(record: Any) -> Any:
        try:
            return func(record)
        except _ACCESS_ERRORS as e:
            logger.debug("Accessor %r failed on %r: %s", func, record, e)
            return None

    return access


def make_accessor(source: str | Accessor) -> Accessor:
    """Turn a dot-path or a callable into a null-safe ``record -> value`` function."""
    if callable(source):
        return guard(source)
    path = str(source)
    return lambda record: resolve_path(record, path)


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

def parse_date(value: Any) -> date | None:
    """Parse an ISO date/datetime string (or date object) to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number
