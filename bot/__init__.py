from .commands import CitationService, CommandDispatcher
from .app import CitationBot

__all__ = ["CitationService", "CommandDispatcher", "CitationBot"]
