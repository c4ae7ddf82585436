"""Schemas for PDF download endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.patent import CamelModel


class DownloadRequest(CamelModel):
    patent_id: str = Field(..., min_length=1, description="Identifier used to name the PDF.")
    pdf_url: Optional[str] = Field(
        None, description="Source URL; defaults to the Google Patents detail page."
    )


class DownloadResult(CamelModel):
    """Outcome of one acquisition inside a batch."""

    patent_id: str
    status: Literal["success", "failed"]
    file_path: Optional[str] = None
    error: Optional[str] = None
    size_bytes: Optional[int] = None


class BatchDownloadRequest(CamelModel):
    patent_ids: List[str] = Field(default_factory=list)


class BatchDownloadResponse(CamelModel):
    results: List[DownloadResult]
    timestamp: datetime
