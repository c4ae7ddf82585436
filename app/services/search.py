"""Run source adapters for a query and merge their normalized records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Dict, List, Optional, Sequence

from app.schemas.patent import PatentRecord
from app.services.browser import PageRenderer
from app.services.extraction.base import ResultPageAdapter
from app.services.extraction.google import GooglePatentsAdapter
from app.services.extraction.wipo import WipoPatentscopeAdapter
from app.services.normalizer import normalize_all

LOGGER = logging.getLogger(__name__)

ALL_SOURCES = "all"


@dataclass
class SearchOutcome:
    patents: List[PatentRecord]
    sources: List[str]
    failed_sources: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


def default_adapters(logger: Optional[logging.Logger] = None) -> Dict[str, ResultPageAdapter]:
    return {
        "google": GooglePatentsAdapter(logger=logger),
        "wipo": WipoPatentscopeAdapter(logger=logger),
    }


class SearchService:
    """Query each requested source and concatenate the canonical records."""

    def __init__(
        self,
        renderer: PageRenderer,
        adapters: Optional[Dict[str, ResultPageAdapter]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.renderer = renderer
        self.logger = logger or LOGGER
        self.adapters = adapters if adapters is not None else default_adapters(self.logger)

    def resolve_sources(self, source: str) -> List[str]:
        if source == ALL_SOURCES:
            return list(self.adapters)
        if source not in self.adapters:
            raise ValueError(f"Unknown patent source: {source}")
        return [source]

    async def search_source(
        self, name: str, keywords: Sequence[str], max_results: int
    ) -> List[PatentRecord]:
        adapter = self.adapters[name]
        document = await self.renderer.render(adapter.page_request(keywords))
        raws = adapter.extract_items(document, max_results)
        return normalize_all(raws)[:max_results]

    async def search(self, keywords: Sequence[str], max_results: int, source: str = ALL_SOURCES) -> SearchOutcome:
        sources = self.resolve_sources(source)
        self.logger.info("Searching %s for %s (max %s per source)", sources, list(keywords), max_results)

        patents: List[PatentRecord] = []
        failed: List[str] = []
        for name in sources:
            try:
                records = await self.search_source(name, keywords, max_results)
            except Exception as exc:
                self.logger.warning("Source %s failed: %s", name, exc)
                failed.append(name)
                continue
            self.logger.info("%s returned %s records", name, len(records))
            patents.extend(records)

        return SearchOutcome(patents=patents, sources=sources, failed_sources=failed)
