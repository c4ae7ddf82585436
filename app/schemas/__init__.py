"""Schema exports."""

from app.schemas.download import (
	BatchDownloadRequest,
	BatchDownloadResponse,
	DownloadRequest,
	DownloadResult,
)
from app.schemas.patent import (
	PatentRecord,
	PatentSource,
	SearchRequest,
	SearchResponse,
)

__all__ = [
	"BatchDownloadRequest",
	"BatchDownloadResponse",
	"DownloadRequest",
	"DownloadResult",
	"PatentRecord",
	"PatentSource",
	"SearchRequest",
	"SearchResponse",
]
