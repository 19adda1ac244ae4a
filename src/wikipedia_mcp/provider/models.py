"""Data models for payloads returned by the content provider."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class ImageRecord(BaseModel):
    """A single image attached to a page.

    Attributes:
        url: Direct URL of the image file. Identity for deduplication.
        title: File page title, e.g. ``File:Einstein 1921.jpg``.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    title: str


class SearchResult(BaseModel):
    """Outcome of a title search.

    Attributes:
        results: Raw search hits as returned by the provider.
        suggestion: Spelling suggestion offered by the provider, if any.
    """

    results: List[Any]
    suggestion: Optional[str] = None
