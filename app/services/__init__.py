"""Service exports."""

from app.services.normalizer import normalize, normalize_all
from app.services.pdf import DownloadError, PdfDownloader
from app.services.search import SearchOutcome, SearchService

__all__ = [
	"normalize",
	"normalize_all",
	"DownloadError",
	"PdfDownloader",
	"SearchOutcome",
	"SearchService",
]
