"""Collapse raw, source-specific field maps into canonical ``PatentRecord`` objects."""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Sequence, Union

from app.schemas.patent import PatentRecord, PatentSource
from app.services.extraction.base import UNKNOWN_INVENTOR, RawFieldMap
from app.services.extraction.text import (
    append_query_param,
    clean_text,
    is_pure_numeric,
    normalize_date,
    truncate,
)

ABSTRACT_MAX_CHARS = 600
DETAIL_URL_TEMPLATE = "https://patents.google.com/patent/{id}/en"

EMBEDDED_ID_RE = re.compile(r"WO\d{4}/\d+|[A-Z]{2}\d{4,}[A-Z]?\d*")
SCALAR_NAME_SEPARATOR_RE = re.compile(r"[;\n]")
TITLE_SEPARATOR_CHARS = " -–—:|"

RawInput = Union[RawFieldMap, Mapping[str, Any], PatentRecord]


def _text(value: Any) -> str:
    if value is None or isinstance(value, (list, tuple, dict)):
        return ""
    return clean_text(str(value))


def _first_text(raw: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = _text(raw.get(key))
        if value:
            return value
    return ""


def normalize_identifier(value: Any) -> str:
    identifier = _text(value).upper()
    match = EMBEDDED_ID_RE.search(identifier)
    return match.group(0) if match else identifier


def normalize_title(value: Any, identifier: str) -> str:
    title = _text(value)
    if not identifier:
        return title
    while title.upper().startswith(identifier):
        rest = title[len(identifier):]
        # Only a whole token counts as the prefix: "US12345678" is not "US1234567".
        if rest and rest[0] not in TITLE_SEPARATOR_CHARS:
            break
        title = rest.lstrip(TITLE_SEPARATOR_CHARS)
    return title


def normalize_inventors(raw: Mapping[str, Any]) -> List[str]:
    value = raw.get("inventors")
    if value in (None, "", []):
        value = raw.get("inventor")

    if isinstance(value, (list, tuple)):
        candidates = [_text(item) for item in value]
    else:
        candidates = [clean_text(part) for part in SCALAR_NAME_SEPARATOR_RE.split(_text(value))]

    inventors = [name for name in candidates if name and not is_pure_numeric(name)]
    return inventors or [UNKNOWN_INVENTOR]


def normalize_source(value: Any) -> Optional[PatentSource]:
    if isinstance(value, PatentSource):
        return value
    try:
        return PatentSource(_text(value).lower())
    except ValueError:
        return None


def normalize_rank(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        rank = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return rank if rank >= 1 else None


def normalize(raw: RawInput) -> PatentRecord:
    """Build a fully populated ``PatentRecord`` from any raw field map.

    Total by construction: missing or malformed fields degrade to empty
    strings or sentinels, and ``normalize(normalize(x)) == normalize(x)``.
    """

    if isinstance(raw, PatentRecord):
        raw = raw.model_dump(by_alias=True, mode="json")
    elif not isinstance(raw, Mapping):
        raw = {}

    identifier = normalize_identifier(raw.get("id"))
    source_url = _first_text(raw, "sourceUrl", "source_url", "googlePatentUrl", "detailUrl")
    if not source_url and identifier:
        source_url = DETAIL_URL_TEMPLATE.format(id=identifier)
    pdf_url = _first_text(raw, "pdfUrl", "pdf_url")
    if not pdf_url and identifier:
        pdf_url = append_query_param(source_url, "oq", identifier)

    return PatentRecord(
        id=identifier,
        title=normalize_title(raw.get("title"), identifier),
        date=normalize_date(_text(raw.get("date"))),
        inventors=normalize_inventors(raw),
        applicant=_first_text(raw, "applicant", "assignee"),
        abstract=truncate(_text(raw.get("abstract")), ABSTRACT_MAX_CHARS),
        source_url=source_url,
        pdf_url=pdf_url,
        status="available",
        source=normalize_source(raw.get("source")),
        rank=normalize_rank(raw.get("rank")),
    )


def normalize_all(raws: Sequence[RawInput]) -> List[PatentRecord]:
    if not isinstance(raws, (list, tuple)):
        return []
    return [normalize(raw) for raw in raws]
