"""Structural interfaces the tools expect from a content provider."""

from typing import Any, Dict, List, Protocol

from .models import ImageRecord, SearchResult


class ImageSource(Protocol):
    """Anything that hands out successive batches of page images."""

    title: str

    async def images(self, *, auto_suggest: bool, redirect: bool, limit: int) -> List[ImageRecord]: ...


class PageHandle(ImageSource, Protocol):
    """A resolved page."""

    pageid: int
    fullurl: str

    async def summary(self) -> Dict[str, Any]: ...

    async def content(self) -> str: ...


class ContentProvider(Protocol):
    """Read-only lookups offered by the knowledge base."""

    async def search(self, query: str) -> SearchResult: ...

    async def page(self, title: str) -> PageHandle: ...

    async def on_this_day(self, month: int, day: int) -> Dict[str, Any]: ...
