"""Adapter for Google Patents search result pages."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from app.services.extraction.base import PageRequest, ResultPageAdapter, compile_patterns
from app.services.extraction.resolver import lookups

GOOGLE_PATENTS_ORIGIN = "https://patents.google.com/"


def build_search_url(keywords: Sequence[str]) -> str:
    """One claims-restricted ``q`` parameter per keyword."""

    query = "&".join(f"q={quote(f'CL=({keyword})', safe='')}" for keyword in keywords if keyword)
    return f"{GOOGLE_PATENTS_ORIGIN}?{query}"


class GooglePatentsAdapter(ResultPageAdapter):
    name = "google"

    container_selectors = (
        "search-result-item",
        ".search-result-item",
        "article",
        ".result",
        "[data-result]",
        ".gs_r",
    )
    primary_link_selectors = (
        'a[href*="patents.google.com"]',
        'a[href*="patent"]',
        "h3 a",
        "h4 a",
    )
    id_url_patterns = compile_patterns(
        r"patent/([^/?&#]+)",
        r"/([A-Z]{2}\d+[A-Z]?\d*)",
        r"patent=([^&#]+)",
    )
    title_lookups = lookups(
        "h3",
        "h4",
        ".title",
        ".patent-title",
        '[data-result="title"]',
        ".result-title",
    )
    inventor_lookups = lookups(
        '[data-result="inventor"] span',
        ".inventor span",
        "[data-inventor]",
        ".metadata .inventor",
        ".author",
        ".inventors span",
    )
    applicant_lookups = lookups(
        '[data-result="assignee"] span',
        ".assignee",
        "[data-assignee]",
    )
    date_lookups = lookups(
        '[data-result="publication_date"]',
        ".publication-date",
        ".pub-date",
        ".date",
        "[data-date]",
    )
    abstract_lookups = lookups(
        '[data-result="snippet"]',
        ".snippet",
        ".abstract",
        ".description",
        ".summary",
        "p:not(:empty)",
    )
    pdf_link_lookups = lookups('a[href$=".pdf"]', attribute="href")
    pdf_query_param = "oq"

    def page_request(self, keywords: Sequence[str]) -> PageRequest:
        return PageRequest(
            url=build_search_url(keywords),
            ready_selector="search-result-item",
            wait_until="networkidle",
        )
