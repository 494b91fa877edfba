"""Phone number normalization and matching."""

from __future__ import annotations

import re

_NON_PHONE_CHARS = re.compile(r"[^0-9+]")


def normalize_phone(raw: str) -> str:
    """Strip everything except digits and plus signs."""
    return _NON_PHONE_CHARS.sub("", raw)


def phone_matches(num: str, search_number: str) -> bool:
    """Match a normalized stored number against a normalized search number.

    Covers numbers stored with or without a leading ``+`` or ``+1`` country
    code, plus substring overlap in either direction. Short numbers can
    produce false positives.
    """
    return (
        num == search_number
        or num == f"+{search_number}"
        or num == f"+1{search_number}"
        or f"+1{num}" == search_number
        or num in search_number
        or search_number in num
    )
