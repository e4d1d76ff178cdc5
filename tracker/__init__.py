from .models import TrackedPaper, Citation, SyncResult, validate_paper_id
from .normalize import NormalizationPolicy, normalize_record
from .paper_store import PaperStore
from .synchronizer import CitationSynchronizer

__all__ = [
    "TrackedPaper", "Citation", "SyncResult", "validate_paper_id",
    "NormalizationPolicy", "normalize_record",
    "PaperStore", "CitationSynchronizer",
]
