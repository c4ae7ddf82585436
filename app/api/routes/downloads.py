"""PDF download endpoints."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Response, status

from app import schemas
from app.api.dependencies import AppSettings, PdfDownloaderDep
from app.services.pdf import DownloadError, FetchError, InvalidContentError

router = APIRouter(tags=["downloads"])

logger = logging.getLogger(__name__)


def _error_status(exc: DownloadError) -> int:
    if isinstance(exc, (FetchError, InvalidContentError)):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@router.post(
    "/download",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
def download_patent(payload: schemas.DownloadRequest, downloader: PdfDownloaderDep) -> Response:
    """Download one patent PDF, keep a copy on disk and stream the bytes back."""

    patent_id = payload.patent_id.strip()
    if not patent_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Patent ID is required")

    try:
        path = downloader.acquire(patent_id, payload.pdf_url)
    except DownloadError as exc:
        raise HTTPException(
            status_code=_error_status(exc),
            detail={"error": "PDF download failed", "details": str(exc), "kind": exc.kind},
        ) from exc

    return Response(content=path.read_bytes(), media_type="application/pdf")


@router.post("/batch-download", response_model=schemas.BatchDownloadResponse)
def batch_download(
    payload: schemas.BatchDownloadRequest,
    downloader: PdfDownloaderDep,
    settings: AppSettings,
) -> schemas.BatchDownloadResponse:
    """Download several patents into the temp directory, one result per identifier."""

    patent_ids = [patent_id.strip() for patent_id in payload.patent_ids if patent_id.strip()]
    if not patent_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Patent IDs array is required"
        )

    logger.info("Batch downloading %s patents", len(patent_ids))
    results = downloader.acquire_batch(patent_ids, destination=settings.temp_dir)
    return schemas.BatchDownloadResponse(results=results, timestamp=datetime.now(UTC))
