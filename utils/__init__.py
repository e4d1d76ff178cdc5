from .logger import get_logger
from .rate_limit import RateLimiter
from .text_clean import clean_title, clean_abstract, truncate

__all__ = [
    "get_logger", "RateLimiter",
    "clean_title", "clean_abstract", "truncate",
]
