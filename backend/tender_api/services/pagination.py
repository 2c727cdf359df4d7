from typing import NamedTuple

DEFAULT_LIMIT = 5
MAX_LIMIT = 50
DEFAULT_OFFSET = 0


class Page(NamedTuple):
    limit: int
    offset: int


def _to_int(raw) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_page(limit_raw=None, offset_raw=None) -> Page:
    """Lenient paging: bad values fall back to the defaults instead of failing the request."""
    limit = _to_int(limit_raw)
    if limit is None or limit < 0:
        limit = DEFAULT_LIMIT
    elif limit > MAX_LIMIT:
        limit = MAX_LIMIT
    offset = _to_int(offset_raw)
    if offset is None or offset < 0:
        offset = DEFAULT_OFFSET
    return Page(limit, offset)
