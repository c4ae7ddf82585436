"""Shared result-page walking for the source adapters."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, List, Optional, Pattern, Sequence, TypedDict, Union

from app.services.extraction.document import DocumentHandle, NodeHandle
from app.services.extraction.resolver import (
    Lookup,
    resolve_list,
    resolve_node,
    resolve_nodes,
    resolve_text,
)
from app.services.extraction.text import (
    append_query_param,
    clean_text,
    extract_identifier,
    is_bare_identifier,
    normalize_date,
    truncate,
)

LOGGER = logging.getLogger(__name__)

UNKNOWN_INVENTOR = "Unknown Inventor"
NO_ABSTRACT = "No abstract available"
ABSTRACT_MAX_CHARS = 300
ABSTRACT_MIN_CHARS = 20
MAX_NAMES = 5


class PageUnavailableError(RuntimeError):
    """The rendered page never reached a state the adapter can read."""


class RawFieldMap(TypedDict, total=False):
    """Source-specific field map emitted by an adapter; every key is optional."""

    id: str
    title: str
    date: str
    inventors: Union[List[str], str]
    inventor: str
    applicant: str
    assignee: str
    abstract: str
    sourceUrl: str
    googlePatentUrl: str
    detailUrl: str
    pdfUrl: str
    country: str
    source: str
    rank: int
    status: str


@dataclass(frozen=True)
class PageRequest:
    """How the renderer reaches a source's result page for one query."""

    url: str
    ready_selector: str
    wait_until: str = "domcontentloaded"
    prepare: Optional[Callable[[Any], Awaitable[None]]] = None


class ResultPageAdapter:
    """Walk a rendered result page and emit one ``RawFieldMap`` per usable item.

    Subclasses only declare selector lists and the URL heuristics of their
    source; the per-item algorithm is shared.
    """

    name: str = ""
    container_selectors: Sequence[str] = ()
    primary_link_selectors: Sequence[str] = ()
    id_url_patterns: Sequence[Pattern[str]] = ()
    title_lookups: Sequence[Lookup] = ()
    inventor_lookups: Sequence[Lookup] = ()
    applicant_lookups: Sequence[Lookup] = ()
    date_lookups: Sequence[Lookup] = ()
    abstract_lookups: Sequence[Lookup] = ()
    pdf_link_lookups: Sequence[Lookup] = ()
    pdf_query_param: str = "oq"
    name_splitter: Optional[Callable[[str], List[str]]] = None

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.logger = logger or LOGGER
        self._today = today or date.today

    # -- page access -----------------------------------------------------

    def page_request(self, keywords: Sequence[str]) -> PageRequest:
        raise NotImplementedError

    # -- extraction ------------------------------------------------------

    def find_items(self, document: DocumentHandle) -> List[NodeHandle]:
        return resolve_nodes(document, self.container_selectors)

    def extract_items(self, document: DocumentHandle, max_results: int) -> List[RawFieldMap]:
        """Extract at most ``max_results`` raw records from ``document``."""

        if max_results <= 0:
            return []
        items = self.find_items(document)[:max_results]
        self.logger.info("%s: found %s candidate result items", self.name, len(items))

        results: List[RawFieldMap] = []
        for index, item in enumerate(items, start=1):
            try:
                record = self.extract_item(item, index)
            except Exception as exc:
                self.logger.warning("%s: failed to parse item %s: %s", self.name, index, exc)
                continue
            if record is None:
                continue
            results.append(record)
        return results[:max_results]

    def extract_item(self, item: NodeHandle, rank: int) -> Optional[RawFieldMap]:
        link = resolve_node(item, self.primary_link_selectors)
        detail_url = (link.attr("href") or "") if link is not None else ""
        link_text = clean_text(link.text) if link is not None else ""

        patent_id = self.resolve_identifier(item, detail_url, link_text)
        title = self.resolve_title(item, patent_id, link_text)
        if not patent_id or not title:
            self.logger.info(
                "%s: dropping item %s, missing id or title (id=%r, title=%r)",
                self.name,
                rank,
                patent_id,
                title[:50],
            )
            return None

        record: RawFieldMap = {
            "id": patent_id,
            "title": title,
            "date": self.resolve_date(item),
            "inventors": self.resolve_inventors(item),
            "applicant": self.resolve_applicant(item),
            "abstract": self.resolve_abstract(item),
            "sourceUrl": detail_url,
            "pdfUrl": self.resolve_pdf_url(item, detail_url, patent_id),
            "source": self.name,
            "rank": rank,
            "status": "available",
        }
        self.logger.debug("%s: item %s -> %s %s", self.name, rank, patent_id, title[:50])
        return record

    # -- per-field hooks -------------------------------------------------

    def resolve_identifier(self, item: NodeHandle, detail_url: str, link_text: str) -> str:
        for pattern in self.id_url_patterns:
            match = pattern.search(detail_url)
            if match:
                return clean_text(match.group(1))
        return extract_identifier(link_text) or extract_identifier(item.text)

    def is_identifier_like(self, value: str, patent_id: str) -> bool:
        return value == patent_id or is_bare_identifier(value)

    def resolve_title(self, item: NodeHandle, patent_id: str, link_text: str) -> str:
        if link_text and not self.is_identifier_like(link_text, patent_id):
            return link_text
        return resolve_text(
            item,
            self.title_lookups,
            accept=lambda text: text != link_text
            and not self.is_identifier_like(text, patent_id)
            and len(text) > len(patent_id) + 5,
        )

    def resolve_inventors(self, item: NodeHandle) -> List[str]:
        names = resolve_list(
            item, self.inventor_lookups, limit=MAX_NAMES, split=self.name_splitter
        )
        return names or [UNKNOWN_INVENTOR]

    def resolve_applicant(self, item: NodeHandle) -> str:
        return resolve_text(item, self.applicant_lookups, accept=lambda text: text != "-")

    def resolve_date(self, item: NodeHandle) -> str:
        found = resolve_text(item, self.date_lookups, accept=lambda text: bool(normalize_date(text)))
        return normalize_date(found) or self._today().isoformat()

    def resolve_abstract(self, item: NodeHandle) -> str:
        found = resolve_text(item, self.abstract_lookups, min_length=ABSTRACT_MIN_CHARS)
        return truncate(found, ABSTRACT_MAX_CHARS) if found else NO_ABSTRACT

    def resolve_pdf_url(self, item: NodeHandle, detail_url: str, patent_id: str) -> str:
        direct = resolve_text(item, self.pdf_link_lookups)
        if direct:
            return direct
        return append_query_param(detail_url, self.pdf_query_param, self.pdf_query_value(patent_id))

    def pdf_query_value(self, patent_id: str) -> str:
        return patent_id


def compile_patterns(*patterns: str) -> List[Pattern[str]]:
    return [re.compile(pattern) for pattern in patterns]
