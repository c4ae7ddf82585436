"""Adapter for WIPO PATENTSCOPE result tables.

PATENTSCOPE renders each hit as a table row whose last cell packs several
fields into one text blob::

    1.20170364492WEB CONTENT MANAGEMENT US - 21.12.2017 ...

The row link only carries the bare publication number, so the country code
and publication date are recovered from the blob by position. The layout is
an observed rendering, not a documented format; when the blob does not match,
the adapter falls back to the per-cell selectors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from app.services.extraction.base import PageRequest, PageUnavailableError, ResultPageAdapter
from app.services.extraction.document import NodeHandle
from app.services.extraction.resolver import lookups, resolve_text
from app.services.extraction.text import (
    clean_text,
    extract_identifier,
    is_pure_numeric,
    normalize_date,
    split_names,
)

WIPO_SEARCH_URL = "https://patentscope.wipo.int/search/en/advancedSearch.jsf"

SUMMARY_RE = re.compile(
    r"^\s*\d+\.(?P<number>\d+)?\s*(?P<title>.*?)\s+(?P<country>[A-Z]{2})\s*-\s*"
    r"(?P<date>\d{2}\.\d{2}\.\d{4})?"
)
PUBLICATION_NUMBER_RE = re.compile(r"^[A-Z]{0,2}[\d/\s]+[A-Z]?\d*$")
LEADING_ID_RE = re.compile(r"^[A-Z]{2}\d+[A-Z]?\d*\s*[-:]?\s*")

SEARCH_BOX_SELECTORS = (
    'textarea[placeholder*="search" i]',
    'textarea[name*="search"]',
    'textarea[id*="fpSearch"]',
    "textarea",
)
MIN_TITLE_CHARS = 10


@dataclass(frozen=True)
class SummaryParts:
    number: str = ""
    title: str = ""
    country: str = ""
    date: str = ""


def split_summary(text: str) -> SummaryParts:
    """Split an ``"<index>.<number><title> <CC> - <DD.MM.YYYY>"`` blob positionally."""

    match = SUMMARY_RE.search(clean_text(text))
    if not match:
        return SummaryParts()
    return SummaryParts(
        number=match.group("number") or "",
        title=clean_text(match.group("title")),
        country=match.group("country"),
        date=match.group("date") or "",
    )


def make_query_submitter(query: str) -> Callable[[Any], Awaitable[None]]:
    """Build the page hook that types ``query`` into the advanced search form."""

    async def submit(page: Any) -> None:
        await page.wait_for_selector("textarea")
        search_box = None
        for selector in SEARCH_BOX_SELECTORS:
            search_box = await page.query_selector(selector)
            if search_box is not None:
                break
        if search_box is None:
            raise PageUnavailableError("Could not find the PATENTSCOPE search textarea")
        await search_box.fill("")
        await search_box.type(query, delay=10)
        await search_box.press("Enter")

    return submit


class WipoPatentscopeAdapter(ResultPageAdapter):
    name = "wipo"

    container_selectors = (
        "tbody tr:has(a)",
        ".ps-patent-result",
        ".search-result",
        'tr:has(a[href*="detail"])',
        '[class*="result"]:has(a)',
    )
    primary_link_selectors = (
        'a[href*="detail"]',
        ".patent-title a",
        ".title a",
        "td:nth-child(2) a",
    )
    title_lookups = lookups(
        ".patent-title a",
        ".title a",
        "td:nth-child(2) a",
        ".title",
        "h3",
        "h4",
    )
    inventor_lookups = lookups(".inventor", ".inventors", "td:nth-child(4)")
    applicant_lookups = lookups(".applicant", ".assignee", '[class*="applicant"]')
    date_lookups = lookups(".publication-date", ".date", "td:nth-child(3)", '[class*="date"]')
    abstract_lookups = lookups(".abstract", ".description", ".summary", "td:last-child")
    pdf_link_lookups = lookups('a[href*=".pdf"]', 'a[title*="PDF" i]', attribute="href")
    pdf_query_param = "format"
    name_splitter = staticmethod(split_names)

    def page_request(self, keywords: Sequence[str]) -> PageRequest:
        return PageRequest(
            url=WIPO_SEARCH_URL,
            ready_selector=".search-results, .results, tbody tr",
            prepare=make_query_submitter(" ".join(keywords)),
        )

    def summary(self, item: NodeHandle) -> SummaryParts:
        return split_summary(resolve_text(item, self.abstract_lookups))

    def is_identifier_like(self, value: str, patent_id: str) -> bool:
        return super().is_identifier_like(value, patent_id) or bool(
            PUBLICATION_NUMBER_RE.match(value)
        )

    def resolve_identifier(self, item: NodeHandle, detail_url: str, link_text: str) -> str:
        parts = self.summary(item)
        number = extract_identifier(link_text)
        if not number and link_text and PUBLICATION_NUMBER_RE.match(link_text):
            number = re.sub(r"\s+", "", link_text)
        number = number or extract_identifier(item.text) or parts.number
        if number and parts.country and not number[:2].isalpha():
            return parts.country + number.lstrip("/")
        return number

    def resolve_title(self, item: NodeHandle, patent_id: str, link_text: str) -> str:
        if link_text and not self.is_identifier_like(link_text, patent_id):
            return LEADING_ID_RE.sub("", link_text)

        parts = self.summary(item)
        if parts.title and not self.is_identifier_like(parts.title, patent_id):
            return parts.title

        found = resolve_text(
            item,
            self.title_lookups,
            accept=lambda text: not is_pure_numeric(text)
            and len(LEADING_ID_RE.sub("", text)) > MIN_TITLE_CHARS,
        )
        return LEADING_ID_RE.sub("", found)

    def resolve_date(self, item: NodeHandle) -> str:
        parsed = normalize_date(self.summary(item).date)
        return parsed or super().resolve_date(item)

    def pdf_query_value(self, patent_id: str) -> str:
        return "pdf"
