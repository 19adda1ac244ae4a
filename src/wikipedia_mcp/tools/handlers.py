"""The four Wikipedia lookups exposed as tools."""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from ..logger import get_logger
from ..provider import ContentProvider
from .arguments import ImageLimit, IsoDate, NonBlankText
from .images import DEFAULT_IMAGE_LIMIT, ImageCollector
from .registry import ToolRegistry

logger = get_logger(__name__)


class WikipediaTools:
    """Tool handlers bound to one content provider.

    Handlers raise ``ProviderError`` when the provider fails; turning that into
    a flagged tool result is the dispatcher's job.
    """

    def __init__(self, provider: ContentProvider, collector: Optional[ImageCollector] = None):
        self.provider = provider
        self.collector = collector or ImageCollector()

    async def on_this_day(
        self, date: Annotated[IsoDate, Field(description="ISO8601 date portion (YYYY-MM-DD)")]
    ) -> Dict[str, Any]:
        """Get historical events that occurred on a specific date"""
        # The provider feed is keyed by month and day only; the year is ignored.
        _, month, day = date.split("-")
        logger.debug("Fetching on-this-day data for %s-%s", month, day)
        return await self.provider.on_this_day(int(month), int(day))

    async def find_page(self, query: Annotated[NonBlankText, Field(description="Search query")]) -> Dict[str, Any]:
        """Search for Wikipedia pages matching a query"""
        result = await self.provider.search(query)
        return result.model_dump()

    async def get_page(self, title: Annotated[NonBlankText, Field(description="Page title")]) -> Dict[str, Any]:
        """Get content of a Wikipedia page by title"""
        page = await self.provider.page(title)
        summary = await page.summary()
        content = await page.content()
        return {"title": page.title, "summary": summary, "content": content, "url": page.fullurl}

    async def get_images_for_page(
        self,
        title: Annotated[NonBlankText, Field(description="Page title")],
        limit: Annotated[
            ImageLimit, Field(description=f"Maximum number of images to retrieve (default: {DEFAULT_IMAGE_LIMIT})")
        ] = DEFAULT_IMAGE_LIMIT,
    ) -> List[Dict[str, Any]]:
        """Get images from a Wikipedia page by title"""
        page = await self.provider.page(title)
        images = await self.collector.collect(page, limit)
        return [image.model_dump() for image in images]

    def build_registry(self) -> ToolRegistry:
        """Register the handlers under their wire names.

        Returns:
            A registry listing onThisDay, findPage, getPage and getImagesForPage.
        """
        registry = ToolRegistry()
        registry.register(
            self.on_this_day,
            name="onThisDay",
            error_label="Error fetching on this day data",
            usage='{ date: "YYYY-MM-DD" }',
        )
        registry.register(
            self.find_page,
            name="findPage",
            error_label="Error searching for pages",
            usage="{ query: string }",
        )
        registry.register(
            self.get_page,
            name="getPage",
            error_label="Error fetching page",
            usage="{ title: string }",
        )
        registry.register(
            self.get_images_for_page,
            name="getImagesForPage",
            error_label="Error fetching images",
            usage="{ title: string, limit?: string | number }",
        )
        return registry
