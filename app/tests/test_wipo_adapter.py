"""Extraction tests for the PATENTSCOPE adapter and its query hook."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from app.services.extraction.base import UNKNOWN_INVENTOR, PageUnavailableError
from app.services.extraction.document import SoupDocument
from app.services.extraction.wipo import (
    WIPO_SEARCH_URL,
    WipoPatentscopeAdapter,
    make_query_submitter,
    split_summary,
)

RESULTS_URL = "https://patentscope.wipo.int/search/en/result.jsf"

SUMMARY_ROW = """
<tr>
  <td>1</td>
  <td><a href="/search/en/detail.jsf?docId=US20170364492">20170364492</a></td>
  <td>21.12.2017</td>
  <td>Jane Doe, 7; John Roe</td>
  <td>1.20170364492WEB CONTENT MANAGEMENT SYSTEM US - 21.12.2017 Acme Corp</td>
</tr>
"""

TITLED_ROW = """
<tr>
  <td>2</td>
  <td><a href="/search/en/detail.jsf?docId=WO2021123456">WO2021123456 - Solar cell encapsulation film</a></td>
  <td>05/06/2021</td>
  <td></td>
  <td>no structured summary here</td>
</tr>
"""


def table(*rows: str) -> SoupDocument:
    html = f"""
    <html><body><table>
      <thead><tr><th>#</th><th>Number</th><th>Date</th><th>Inventors</th><th>Summary</th></tr></thead>
      <tbody>{''.join(rows)}</tbody>
    </table></body></html>
    """
    return SoupDocument.from_html(html, url=RESULTS_URL)


@pytest.fixture
def adapter():
    return WipoPatentscopeAdapter(today=lambda: date(2024, 1, 2))


def test_split_summary_reads_positional_fields() -> None:
    parts = split_summary("1.20170364492WEB CONTENT MANAGEMENT SYSTEM US - 21.12.2017 Acme Corp")

    assert parts.number == "20170364492"
    assert parts.title == "WEB CONTENT MANAGEMENT SYSTEM"
    assert parts.country == "US"
    assert parts.date == "21.12.2017"


def test_split_summary_without_match_is_empty() -> None:
    parts = split_summary("free text without the expected layout")

    assert parts.number == parts.title == parts.country == parts.date == ""


def test_summary_row_recovers_country_title_and_date(adapter) -> None:
    [record] = adapter.extract_items(table(SUMMARY_ROW), max_results=10)

    assert record["id"] == "US20170364492"
    assert record["title"] == "WEB CONTENT MANAGEMENT SYSTEM"
    assert record["date"] == "2017-12-21"
    assert record["inventors"] == ["Jane Doe", "John Roe"]
    assert record["sourceUrl"] == "https://patentscope.wipo.int/search/en/detail.jsf?docId=US20170364492"
    assert record["pdfUrl"] == (
        "https://patentscope.wipo.int/search/en/detail.jsf?docId=US20170364492&format=pdf"
    )
    assert record["source"] == "wipo"
    assert record["rank"] == 1


def test_link_text_title_strips_leading_identifier(adapter) -> None:
    [record] = adapter.extract_items(table(TITLED_ROW), max_results=10)

    assert record["id"] == "WO2021123456"
    assert record["title"] == "Solar cell encapsulation film"
    assert record["date"] == "2021-05-06"
    assert record["inventors"] == [UNKNOWN_INVENTOR]
    assert record["abstract"] == "no structured summary here"


def test_header_rows_and_rows_without_links_are_ignored(adapter) -> None:
    empty_row = "<tr><td>3</td><td>no link</td><td></td><td></td><td></td></tr>"

    records = adapter.extract_items(table(SUMMARY_ROW, empty_row, TITLED_ROW), max_results=10)

    assert [record["id"] for record in records] == ["US20170364492", "WO2021123456"]
    assert [record["rank"] for record in records] == [1, 2]


def test_max_results_caps_rows(adapter) -> None:
    records = adapter.extract_items(table(SUMMARY_ROW, TITLED_ROW), max_results=1)

    assert len(records) == 1


def test_direct_pdf_link_wins_over_detail_url(adapter) -> None:
    row = TITLED_ROW.replace(
        "<td>2</td>", '<td>2 <a title="Download PDF" href="/docs/WO2021123456.pdf">get</a></td>'
    )

    [record] = adapter.extract_items(table(row), max_results=10)

    assert record["pdfUrl"] == "https://patentscope.wipo.int/docs/WO2021123456.pdf"


def test_page_request_targets_advanced_search() -> None:
    request = WipoPatentscopeAdapter().page_request(["solar", "film"])

    assert request.url == WIPO_SEARCH_URL
    assert request.prepare is not None


class FakeSearchBox:
    def __init__(self):
        self.calls = []

    async def fill(self, value):
        self.calls.append(("fill", value))

    async def type(self, value, delay=0):
        self.calls.append(("type", value))

    async def press(self, key):
        self.calls.append(("press", key))


class FakePage:
    def __init__(self, box=None):
        self.box = box

    async def wait_for_selector(self, selector):
        return None

    async def query_selector(self, selector):
        return self.box if selector == "textarea" else None


def test_query_submitter_types_query_and_submits() -> None:
    box = FakeSearchBox()

    asyncio.run(make_query_submitter("solar film")(FakePage(box)))

    assert box.calls == [("fill", ""), ("type", "solar film"), ("press", "Enter")]


def test_query_submitter_without_search_box_raises() -> None:
    with pytest.raises(PageUnavailableError):
        asyncio.run(make_query_submitter("solar")(FakePage()))
