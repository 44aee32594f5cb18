"""Offset/limit arithmetic shared by the song list and verse queries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from musiclib.errors import InvalidArgument, OutOfRange

# Signed 64-bit range; larger values cannot be bound as SQL integers
MAX_QUERY_INT = 2**63 - 1
_DECIMAL_INT = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class PageWindow:
    start: int
    end: int
    has_more: bool

    @property
    def size(self) -> int:
        return self.end - self.start

    def slice(self, items):
        return items[self.start:self.end]


def parse_query_int(raw: str, message: str) -> int:
    """Parse a plain decimal query value or raise InvalidArgument(message).

    Only an optional minus sign and ASCII digits are accepted, within the
    signed 64-bit range.
    """
    text = str(raw).strip()
    if not _DECIMAL_INT.fullmatch(text):
        raise InvalidArgument(message)
    value = int(text)
    if not -MAX_QUERY_INT - 1 <= value <= MAX_QUERY_INT:
        raise InvalidArgument(message)
    return value


def _parse_non_negative(raw: Optional[str], default: int, name: str) -> int:
    if raw is None or str(raw).strip() == "":
        return default
    value = parse_query_int(raw, f"Invalid {name} value")
    if value < 0:
        raise InvalidArgument(f"Invalid {name} value")
    return value


def parse_window(
    limit_raw: Optional[str],
    offset_raw: Optional[str],
    *,
    default_limit: int = 10,
    default_offset: int = 0,
) -> Tuple[int, int]:
    """Convert query-string limit/offset into ints, applying defaults.

    Missing or blank values take the defaults; anything non-numeric,
    negative or outside the 64-bit range raises InvalidArgument.
    """
    limit = _parse_non_negative(limit_raw, default_limit, "limit")
    offset = _parse_non_negative(offset_raw, default_offset, "offset")
    return limit, offset


def paginate(total_length: int, offset: int, limit: int) -> PageWindow:
    """Bound ``offset``/``limit`` against a sequence of ``total_length`` items.

    Offset 0 on an empty sequence is an empty page; any other offset at or
    past the end raises OutOfRange.
    """
    if offset < 0:
        raise InvalidArgument("Invalid offset value")
    if limit < 0:
        raise InvalidArgument("Invalid limit value")
    if total_length <= 0:
        if offset == 0:
            return PageWindow(start=0, end=0, has_more=False)
        raise OutOfRange("Offset is out of range")
    if offset >= total_length:
        raise OutOfRange("Offset is out of range")

    end = min(offset + limit, total_length)
    return PageWindow(start=offset, end=end, has_more=end < total_length)


__all__ = ["MAX_QUERY_INT", "PageWindow", "paginate", "parse_query_int", "parse_window"]
