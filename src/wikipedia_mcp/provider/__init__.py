"""Content provider client and the interfaces the tools rely on."""

from .models import ImageRecord, SearchResult
from .base import ContentProvider, PageHandle, ImageSource
from .client import WikipediaClient, WikiPage

__all__ = [
    "ImageRecord",
    "SearchResult",
    "ContentProvider",
    "PageHandle",
    "ImageSource",
    "WikipediaClient",
    "WikiPage",
]
