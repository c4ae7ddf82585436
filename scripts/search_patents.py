"""Search patent sources from the command line and optionally download the PDFs."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.schemas.patent import PatentRecord
from app.services.browser import PlaywrightRenderer
from app.services.pdf import PdfDownloader
from app.services.search import SearchService

LOGGER = logging.getLogger("search_patents")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search Google Patents / WIPO and normalise the results")
    parser.add_argument("keywords", nargs="+", help="Keywords; each one becomes a separate query clause")
    parser.add_argument("--source", default="all", choices=["all", "google", "wipo"], help="Sources to query")
    parser.add_argument("--max-results", type=int, help="Result cap per source")
    parser.add_argument("--output", type=Path, help="Write the normalised records to this JSON file")
    parser.add_argument("--download", action="store_true", help="Download the PDF of every record found")
    parser.add_argument("--downloads-dir", type=Path, help="Override the PDF destination directory")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args()


def print_records(records: List[PatentRecord]) -> None:
    print(f"Total patents found: {len(records)}")
    for index, record in enumerate(records, start=1):
        print(f"\n--- Patent {index} ---")
        print("ID:", record.id)
        print("Title:", record.title)
        print("Date:", record.date)
        print("Inventors:", ", ".join(record.inventors))
        if record.applicant:
            print("Applicant:", record.applicant)
        print("Abstract:", record.abstract)
        if record.pdf_url:
            print("PDF URL:", record.pdf_url)
        if record.source:
            print("Source:", record.source.value)


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)
    settings = get_settings()
    max_results = min(args.max_results or settings.default_max_results, settings.max_results_limit)

    service = SearchService(renderer=PlaywrightRenderer(settings))
    outcome = asyncio.run(service.search(args.keywords, max_results, args.source))
    if outcome.failed_sources:
        LOGGER.warning("Sources that failed: %s", ", ".join(outcome.failed_sources))
    print_records(outcome.patents)

    if args.output:
        payload = [record.model_dump(by_alias=True, mode="json") for record in outcome.patents]
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        LOGGER.info("Wrote %s records to %s", len(payload), args.output)

    if args.download and outcome.patents:
        downloader = PdfDownloader(destination=args.downloads_dir, settings=settings)
        try:
            results = downloader.acquire_batch([record.id for record in outcome.patents if record.id])
        finally:
            downloader.close()
        for result in results:
            print(f"{result.patent_id}: {result.status} {result.file_path or result.error}")


if __name__ == "__main__":
    main()
