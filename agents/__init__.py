from .inspire_agent import InspireClient
from .errors import (
    CitationError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamError,
    NetworkError,
    StorageError,
)

__all__ = [
    "InspireClient",
    "CitationError",
    "InvalidArgumentError",
    "NotFoundError",
    "UpstreamError",
    "NetworkError",
    "StorageError",
]
