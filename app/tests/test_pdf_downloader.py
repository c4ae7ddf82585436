"""PDF acquisition tests with a mocked HTTP transport."""

from __future__ import annotations

import httpx
import pytest

from app.core.config import Settings
from app.services.pdf import (
    FetchError,
    HttpStatusError,
    InvalidContentError,
    PdfDownloader,
    StorageError,
    pdf_filename,
)

PDF_BYTES = b"%PDF-1.7\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF"
CITATION_PAGE = """
<html><head>
  <meta name="citation_pdf_url" content="https://patentimages.example.test/US1234567A.pdf">
</head><body>Detail page</body></html>
"""


def make_downloader(tmp_path, handler, **kwargs):
    settings = Settings(downloads_dir=tmp_path / "downloads", user_agent="pytest-agent")
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return PdfDownloader(client=client, settings=settings, **kwargs)


def pdf_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=PDF_BYTES, headers={"content-type": "application/pdf"})


def test_acquire_writes_exact_bytes(tmp_path) -> None:
    downloader = make_downloader(tmp_path, pdf_response)

    path = downloader.acquire("US1234567A", "https://patents.example.test/US1234567A.pdf")

    assert path == tmp_path / "downloads" / "US1234567A.pdf"
    assert path.read_bytes() == PDF_BYTES


def test_default_source_and_headers(tmp_path) -> None:
    seen = []

    def handler(request):
        seen.append(request)
        return pdf_response(request)

    make_downloader(tmp_path, handler).acquire("US1234567A")

    [request] = seen
    assert str(request.url) == "https://patents.google.com/patent/US1234567A"
    assert request.headers["user-agent"] == "pytest-agent"
    assert request.headers["referer"] == "https://patents.google.com/patent/US1234567A"


def test_non_pdf_payload_is_rejected_without_writing(tmp_path) -> None:
    def handler(request):
        return httpx.Response(200, text="<html>Not found</html>", headers={"content-type": "text/html"})

    downloader = make_downloader(tmp_path, handler)

    with pytest.raises(InvalidContentError):
        downloader.acquire("US1234567A")

    assert list(tmp_path.rglob("*.pdf")) == []


def test_citation_pdf_url_is_followed_once(tmp_path) -> None:
    seen = []

    def handler(request):
        seen.append(str(request.url))
        if request.url.path.endswith(".pdf"):
            return pdf_response(request)
        return httpx.Response(200, text=CITATION_PAGE, headers={"content-type": "text/html; charset=utf-8"})

    path = make_downloader(tmp_path, handler).acquire("US1234567A")

    assert seen == [
        "https://patents.google.com/patent/US1234567A",
        "https://patentimages.example.test/US1234567A.pdf",
    ]
    assert path.read_bytes() == PDF_BYTES


def test_http_status_error_carries_status(tmp_path) -> None:
    downloader = make_downloader(tmp_path, lambda request: httpx.Response(404))

    with pytest.raises(HttpStatusError) as excinfo:
        downloader.acquire("US1234567A")

    assert excinfo.value.status_code == 404
    assert excinfo.value.patent_id == "US1234567A"
    assert isinstance(excinfo.value, FetchError)
    assert str(excinfo.value) == "HTTP error! status: 404"


def test_transport_error_becomes_fetch_error(tmp_path) -> None:
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as excinfo:
        make_downloader(tmp_path, handler).acquire("US1234567A")

    assert excinfo.value.kind == "fetch"


def test_unwritable_destination_raises_storage_error(tmp_path) -> None:
    occupied = tmp_path / "occupied"
    occupied.write_text("not a directory")
    downloader = make_downloader(tmp_path, pdf_response)

    with pytest.raises(StorageError):
        downloader.acquire("US1234567A", destination=occupied)


def test_repeated_download_overwrites_single_file(tmp_path) -> None:
    payloads = [PDF_BYTES, PDF_BYTES + b"\n% second revision"]

    def handler(request):
        return httpx.Response(200, content=payloads.pop(0))

    downloader = make_downloader(tmp_path, handler)
    downloader.acquire("US1234567A")
    path = downloader.acquire("US1234567A")

    assert path.read_bytes().endswith(b"second revision")
    assert [item.name for item in path.parent.iterdir()] == ["US1234567A.pdf"]


def test_batch_reports_one_result_per_identifier(tmp_path) -> None:
    def handler(request):
        if request.url.path.endswith("BAD1"):
            return httpx.Response(500)
        return pdf_response(request)

    destination = tmp_path / "temp"
    results = make_downloader(tmp_path, handler).acquire_batch(
        ["US1234567A", "BAD1", "EP7654321B1"], destination=destination
    )

    assert [result.patent_id for result in results] == ["US1234567A", "BAD1", "EP7654321B1"]
    assert [result.status for result in results] == ["success", "failed", "success"]
    assert results[1].error == "HTTP error! status: 500"
    assert results[1].file_path is None
    assert results[0].size_bytes == len(PDF_BYTES)
    assert results[2].file_path == str(destination / "EP7654321B1.pdf")


def test_pdf_filename_is_filesystem_safe() -> None:
    assert pdf_filename("WO2021/123456") == "WO2021_123456.pdf"
    assert pdf_filename(" US1234567A ") == "US1234567A.pdf"
    assert pdf_filename("../..") == "patent.pdf"


def test_relative_citation_link_is_resolved_against_page(tmp_path) -> None:
    seen = []

    def handler(request):
        seen.append(str(request.url))
        if request.url.path.endswith(".pdf"):
            return pdf_response(request)
        return httpx.Response(
            200,
            text='<html><head><meta name="citation_pdf_url" content="/files/US1234567A.pdf"></head></html>',
            headers={"content-type": "text/html"},
        )

    path = make_downloader(tmp_path, handler).acquire("US1234567A")

    assert seen[-1] == "https://patents.google.com/files/US1234567A.pdf"
    assert path.read_bytes() == PDF_BYTES


def test_batch_survives_malformed_identifier(tmp_path) -> None:
    destination = tmp_path / "temp"

    results = make_downloader(tmp_path, pdf_response).acquire_batch(
        ["US1234567A", "BAD\x01ID", "EP7654321B1"], destination=destination
    )

    assert [result.status for result in results] == ["success", "failed", "success"]
    assert results[1].patent_id == "BAD\x01ID"
    assert results[1].error
    assert (destination / "EP7654321B1.pdf").read_bytes() == PDF_BYTES
