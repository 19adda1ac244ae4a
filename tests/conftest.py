from typing import Any, Dict, List, Optional, Sequence, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

from wikipedia_mcp.config import Settings
from wikipedia_mcp.provider import ImageRecord, SearchResult
from wikipedia_mcp.tools import ToolDispatcher, WikipediaTools

BatchScript = Sequence[Union[List[ImageRecord], Exception]]


def make_images(prefix: str, count: int, start: int = 0, extension: str = ".jpg") -> List[ImageRecord]:
    return [
        ImageRecord(url=f"https://upload.example.org/{prefix}_{i}{extension}", title=f"File:{prefix} {i}{extension}")
        for i in range(start, start + count)
    ]


class ScriptedImageSource:
    """Image source replaying a fixed list of batches (or exceptions)."""

    def __init__(self, batches: BatchScript, title: str = "Albert Einstein"):
        self.title = title
        self._batches = list(batches)
        self.calls: List[Dict[str, Any]] = []

    async def images(self, *, auto_suggest: bool, redirect: bool, limit: int) -> List[ImageRecord]:
        self.calls.append({"auto_suggest": auto_suggest, "redirect": redirect, "limit": limit})
        if not self._batches:
            return []
        batch = self._batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return batch

    @property
    def requested_limits(self) -> List[int]:
        return [call["limit"] for call in self.calls]


class EndlessImageSource:
    """Image source that always fills the requested batch with fresh images."""

    def __init__(self, title: str = "Albert Einstein"):
        self.title = title
        self.requested_limits: List[int] = []
        self._served = 0

    async def images(self, *, auto_suggest: bool, redirect: bool, limit: int) -> List[ImageRecord]:
        self.requested_limits.append(limit)
        batch = make_images("endless", limit, start=self._served)
        self._served += limit
        return batch


def make_page(title: str = "Albert Einstein", images: Optional[BatchScript] = None) -> MagicMock:
    page = MagicMock()
    page.title = title
    page.pageid = 736
    page.fullurl = f"https://en.wikipedia.org/wiki/{title.replace(' ', '_')}"
    page.summary = AsyncMock(return_value={"title": title, "extract": f"{title} was a physicist."})
    page.content = AsyncMock(return_value=f"{title} was a German-born theoretical physicist.")
    source = ScriptedImageSource(images or [], title=title)
    page.images = AsyncMock(side_effect=source.images)
    page.image_source = source
    return page


@pytest.fixture
def settings() -> Settings:
    return Settings(language="en", user_agent="wikipedia-mcp-tests/1.0", timeout=5.0)


@pytest.fixture
def page() -> MagicMock:
    return make_page(images=[make_images("einstein", 3)])


@pytest.fixture
def provider(page: MagicMock) -> MagicMock:
    mock = MagicMock()
    mock.search = AsyncMock(
        return_value=SearchResult(results=[{"ns": 0, "title": "Albert Einstein", "pageid": 736}], suggestion=None)
    )
    mock.page = AsyncMock(return_value=page)
    mock.on_this_day = AsyncMock(return_value={"selected": [], "events": [{"year": 1879, "text": "Born"}]})
    return mock


@pytest.fixture
def dispatcher(provider: MagicMock) -> ToolDispatcher:
    return ToolDispatcher(WikipediaTools(provider).build_registry())
