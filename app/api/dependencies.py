"""Shared API dependencies for FastAPI routes."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.browser import PlaywrightRenderer
from app.services.pdf import PdfDownloader
from app.services.search import SearchService


def get_search_service() -> SearchService:
    """Build a search service backed by the headless browser renderer."""

    return SearchService(renderer=PlaywrightRenderer(get_settings()))


def get_pdf_downloader() -> Generator[PdfDownloader, None, None]:
    """Yield a downloader and ensure its HTTP client is closed after use."""

    downloader = PdfDownloader(settings=get_settings())
    try:
        yield downloader
    finally:
        downloader.close()


AppSettings = Annotated[Settings, Depends(get_settings)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
PdfDownloaderDep = Annotated[PdfDownloader, Depends(get_pdf_downloader)]
