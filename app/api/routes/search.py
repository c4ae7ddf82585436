"""Patent search endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app import schemas
from app.api.dependencies import AppSettings, SearchServiceDep

router = APIRouter(tags=["search"])

logger = logging.getLogger(__name__)


@router.post("/search", response_model=schemas.SearchResponse)
async def search_patents(
    payload: schemas.SearchRequest,
    service: SearchServiceDep,
    settings: AppSettings,
) -> schemas.SearchResponse:
    """Search the requested sources and return canonical patent records.

    Sources that fail are reported in ``failedSources``; the request itself
    only fails when it is malformed.
    """

    keywords = payload.keyword_list
    if not keywords:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Keywords are required")

    max_results = min(payload.max_results, settings.max_results_limit)
    logger.info("Searching for patents with keywords: %s", keywords)
    outcome = await service.search(keywords, max_results, payload.source)

    return schemas.SearchResponse(
        patents=outcome.patents,
        total=len(outcome.patents),
        keywords=payload.keywords,
        timestamp=outcome.timestamp,
        sources=outcome.sources,
        failed_sources=outcome.failed_sources,
    )
