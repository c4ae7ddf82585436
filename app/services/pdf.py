"""Fetch, validate and persist patent PDF files."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup

from app.core.config import Settings, get_settings
from app.schemas.download import DownloadResult

LOGGER = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"
DETAIL_PAGE_TEMPLATE = "https://patents.google.com/patent/{id}"
UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


class DownloadError(Exception):
    """Base class for every acquisition failure."""

    kind = "download"

    def __init__(self, patent_id: str, message: str) -> None:
        super().__init__(message)
        self.patent_id = patent_id


class FetchError(DownloadError):
    """The source could not be reached (connection error, timeout)."""

    kind = "fetch"


class HttpStatusError(FetchError):
    """The source answered with a non-success status code."""

    kind = "http_status"

    def __init__(self, patent_id: str, status_code: int) -> None:
        super().__init__(patent_id, f"HTTP error! status: {status_code}")
        self.status_code = status_code


class InvalidContentError(DownloadError):
    """The payload does not start with the PDF signature."""

    kind = "invalid_content"


class StorageError(DownloadError):
    """The destination directory or file could not be written."""

    kind = "storage"


def default_pdf_source(patent_id: str) -> str:
    return DETAIL_PAGE_TEMPLATE.format(id=patent_id)


def pdf_filename(patent_id: str) -> str:
    """Deterministic file name so repeated downloads overwrite instead of duplicating."""

    stem = UNSAFE_FILENAME_RE.sub("_", patent_id.strip()).strip("._") or "patent"
    return f"{stem}.pdf"


def is_pdf(payload: bytes) -> bool:
    return payload[: len(PDF_SIGNATURE)] == PDF_SIGNATURE


def find_citation_pdf_url(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    meta = soup.find("meta", attrs={"name": "citation_pdf_url"})
    if meta and meta.get("content"):
        return meta["content"].strip()
    return None


class PdfDownloader:
    """Download patent PDFs into a directory, one file per identifier."""

    def __init__(
        self,
        destination: Optional[Path] = None,
        client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.destination = Path(destination or self.settings.downloads_dir)
        self.logger = logger or LOGGER
        self._client = client or httpx.Client(
            timeout=self.settings.http_timeout_seconds, follow_redirects=True
        )

    def _headers(self, patent_id: str) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/pdf,*/*",
            "Referer": default_pdf_source(patent_id),
        }

    def _get(self, patent_id: str, url: str) -> httpx.Response:
        try:
            response = self._client.get(url, headers=self._headers(patent_id))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(patent_id, f"Request to {url} failed: {exc}") from exc
        if not response.is_success:
            raise HttpStatusError(patent_id, response.status_code)
        return response

    def fetch(self, patent_id: str, source_url: Optional[str] = None) -> bytes:
        """Return validated PDF bytes for ``patent_id``.

        A detail page that advertises ``citation_pdf_url`` is followed once.
        """

        url = source_url or default_pdf_source(patent_id)
        response = self._get(patent_id, url)
        payload = response.content

        if not is_pdf(payload) and "html" in response.headers.get("content-type", ""):
            pdf_link = find_citation_pdf_url(response.text)
            if pdf_link:
                try:
                    pdf_link = str(response.url.join(pdf_link))
                except httpx.InvalidURL as exc:
                    raise FetchError(patent_id, f"Invalid citation_pdf_url {pdf_link!r}: {exc}") from exc
                self.logger.info("Following citation_pdf_url for %s: %s", patent_id, pdf_link)
                payload = self._get(patent_id, pdf_link).content

        if not is_pdf(payload):
            raise InvalidContentError(patent_id, "Downloaded file is not a valid PDF")
        return payload

    def store(self, patent_id: str, payload: bytes, destination: Optional[Path] = None) -> Path:
        folder = Path(destination or self.destination)
        target = folder / pdf_filename(patent_id)
        try:
            folder.mkdir(parents=True, exist_ok=True)
            handle, tmp_name = tempfile.mkstemp(dir=folder, prefix=".part-", suffix=".pdf")
            try:
                with os.fdopen(handle, "wb") as stream:
                    stream.write(payload)
                os.replace(tmp_name, target)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(patent_id, f"Could not write {target}: {exc}") from exc
        return target

    def acquire(
        self,
        patent_id: str,
        source_url: Optional[str] = None,
        destination: Optional[Path] = None,
    ) -> Path:
        """Download, validate and persist the PDF for ``patent_id``; return its path."""

        self.logger.info("Downloading PDF for patent %s", patent_id)
        try:
            payload = self.fetch(patent_id, source_url)
            path = self.store(patent_id, payload, destination)
        except DownloadError as exc:
            self.logger.warning("Download failed for %s: %s", patent_id, exc)
            raise
        self.logger.info("Downloaded %s (%s KB)", path, round(len(payload) / 1024))
        return path

    def acquire_batch(
        self,
        patent_ids: Sequence[str],
        destination: Optional[Path] = None,
    ) -> List[DownloadResult]:
        """Acquire each identifier in turn; a failure only marks its own entry."""

        results: List[DownloadResult] = []
        for patent_id in patent_ids:
            try:
                path = self.acquire(patent_id, destination=destination)
            except DownloadError as exc:
                results.append(DownloadResult(patent_id=patent_id, status="failed", error=str(exc)))
                continue
            results.append(
                DownloadResult(
                    patent_id=patent_id,
                    status="success",
                    file_path=str(path),
                    size_bytes=path.stat().st_size,
                )
            )
        return results

    def close(self) -> None:
        self._client.close()
