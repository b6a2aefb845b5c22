"""Page window math for paginated listings."""

import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 12


@dataclass(frozen=True)
class PageWindow:
    """Requested page, its size, the row offset and the number of pages available."""

    page: int
    size: int
    offset: int
    total_pages: int


def _positive_int(value: Any, default: int) -> int:
    """
    Parse a query-string style number. Missing, non-numeric, non-finite and
    non-positive values (after truncating fractions) yield default.
    """
    if value is None or isinstance(value, bool):
        return default
    # Integers are parsed exactly so large page numbers echo back unchanged.
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        pass
    else:
        return parsed if parsed > 0 else default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    parsed = int(number)
    return parsed if parsed > 0 else default


def paginate(page: Any, size: Any, total_count: int) -> PageWindow:
    """
    Compute the window for page/size over total_count rows.

    A page past the last one is not an error: the offset simply lands beyond
    the result set and the caller returns an empty page with total_pages intact.
    """
    page_number = _positive_int(page, DEFAULT_PAGE)
    page_size = _positive_int(size, DEFAULT_PAGE_SIZE)
    return PageWindow(
        page=page_number,
        size=page_size,
        offset=page_size * (page_number - 1),
        total_pages=math.ceil(max(total_count, 0) / page_size),
    )
