"""String parameter conversions — numbers, page numbers and dates."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date

from fastapi_action_dispatch.keys import Param

# Sentinel returned for input that is not a 32-bit integer
NOT_A_NUMBER = -(2**31)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_NUMBER = re.compile(r"[+-]?[0-9]+")
_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def to_number(text: str | None) -> int:
    """Parse a signed decimal integer, or return NOT_A_NUMBER."""
    if text is None or not _NUMBER.fullmatch(text):
        return NOT_A_NUMBER
    number = int(text)
    if not _INT_MIN <= number <= _INT_MAX:
        return NOT_A_NUMBER
    return number


def get_page(params: Mapping[str, str]) -> int:
    """Requested page number; 1 when absent or malformed. Not clamped."""
    page = to_number(params.get(Param.PAGE.value))
    if page == NOT_A_NUMBER:
        return 1
    return page


def to_date(text: str | None) -> date:
    """Parse ``YYYY-MM-DD``. Absent or empty input means today.

    Raises ValueError for anything else.
    """
    if not text:
        return date.today()
    if not _ISO_DATE.fullmatch(text):
        raise ValueError(f"Invalid date {text!r}, expected YYYY-MM-DD")
    return date.fromisoformat(text)
