"""Pure text and field normalizers shared by the adapters and the record normalizer."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Pattern, Sequence, Tuple

WHITESPACE_RE = re.compile(r"[\s\u00a0]+")
PURE_NUMERIC_RE = re.compile(r"^\d+$")
BARE_IDENTIFIER_RE = re.compile(r"^[A-Z]{2}\d+[A-Z]?\d*$")
NAME_SEPARATOR_RE = re.compile(r"[,;]")

TRUNCATION_MARKER = "..."

# Most specific first; a looser pattern must not shadow a stricter one.
IDENTIFIER_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"\b([A-Z]{2}\d{8,}[A-Z]?\d*)\b"),  # US20170364492A1, EP12345678B1
    re.compile(r"\b(WO\d{4}/\d+)\b"),  # WO2021/123456
    re.compile(r"\b(\d{4}/\d+)\b"),  # 2021/123456
    re.compile(r"\b([A-Z]{2}\s?\d{6,})\b"),  # US 123456
)

# (pattern, order of the year/month/day groups)
DATE_PATTERNS: Sequence[Tuple[Pattern[str], Tuple[int, int, int]]] = (
    (re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})"), (1, 2, 3)),  # ISO
    (re.compile(r"(\d{4})/(\d{1,2})/(\d{1,2})"), (1, 2, 3)),  # big-endian slash
    (re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})"), (3, 1, 2)),  # US
    (re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})"), (3, 2, 1)),  # European dotted
)
YEAR_RE = re.compile(r"\b(\d{4})\b")


def clean_text(value: Optional[str]) -> str:
    """Collapse whitespace runs (including non-breaking spaces) and trim."""

    if not value:
        return ""
    return WHITESPACE_RE.sub(" ", str(value)).strip()


def is_pure_numeric(value: str) -> bool:
    return bool(PURE_NUMERIC_RE.match(value))


def is_bare_identifier(value: str) -> bool:
    """True when the whole string looks like a publication number and nothing else."""

    return bool(BARE_IDENTIFIER_RE.match(clean_text(value)))


def extract_identifier(value: Optional[str]) -> str:
    """Return the first publication-number-looking token in ``value`` or ``""``."""

    if not value:
        return ""
    for pattern in IDENTIFIER_PATTERNS:
        match = pattern.search(value)
        if match:
            return re.sub(r"\s+", "", match.group(1))
    return ""


def normalize_date(value: Optional[str]) -> str:
    """Parse the supported date layouts into ``YYYY-MM-DD``.

    A bare four digit year maps to January 1st. Anything unrecognized, or a
    matched date that does not exist on the calendar, yields ``""``.
    """

    text = clean_text(value)
    if not text:
        return ""

    for pattern, (year_idx, month_idx, day_idx) in DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        year = int(match.group(year_idx))
        month = int(match.group(month_idx))
        day = int(match.group(day_idx))
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            return ""

    match = YEAR_RE.search(text)
    if match:
        try:
            return date(int(match.group(1)), 1, 1).isoformat()
        except ValueError:
            return ""
    return ""


def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[:max_len] + TRUNCATION_MARKER


def split_names(value: Optional[str]) -> List[str]:
    """Split a combined name cell (``"A, B; C"``) into cleaned names."""

    names = []
    for part in NAME_SEPARATOR_RE.split(value or ""):
        name = clean_text(part)
        if name and not is_pure_numeric(name):
            names.append(name)
    return names


def append_query_param(url: str, key: str, value: str) -> str:
    if not url:
        return ""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{key}={value}"
