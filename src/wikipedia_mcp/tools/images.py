"""Paginated collection of page images.

The provider caps a single image listing at 50 entries, so larger requests
are split into sequential batches. Each batch is sized from what is still
missing, which is why batches cannot run in parallel.
"""

from typing import List, Sequence, Set

from ..logger import get_logger
from ..provider import ImageRecord, ImageSource

logger = get_logger(__name__)

__all__ = ["ImageCollector", "BATCH_SIZE", "DEFAULT_IMAGE_LIMIT", "ALLOWED_EXTENSIONS"]

BATCH_SIZE = 50
DEFAULT_IMAGE_LIMIT = 50
ALLOWED_EXTENSIONS = (".svg", ".gif", ".jpg", ".jpeg", ".png", ".webp")


class ImageCollector:
    """Accumulates unique, displayable images of a page across batches."""

    batch_size = BATCH_SIZE

    async def collect(self, source: ImageSource, limit: int = DEFAULT_IMAGE_LIMIT) -> List[ImageRecord]:
        """Collect up to ``limit`` images from ``source``.

        Iteration stops when the quota is met, when the provider returns an
        empty or short batch, or when a batch contributes nothing new. A batch
        that raises is logged and skipped; the images gathered so far are kept.

        Args:
            source: Page handle to pull image batches from.
            limit: Maximum number of images to return. Values <= 0 yield an
                empty list without contacting the provider.

        Returns:
            Images in discovery order, unique by url, filtered to allowed formats.
        """
        collected: List[ImageRecord] = []
        seen_urls: Set[str] = set()
        batches = -(-limit // self.batch_size) if limit > 0 else 0

        for index in range(batches):
            if len(collected) >= limit:
                break

            requested = min(self.batch_size, limit - len(collected))
            logger.info(f"Fetching batch {index + 1}/{batches} ({requested} images)")

            try:
                batch = await source.images(auto_suggest=False, redirect=False, limit=requested)
            except Exception as e:
                logger.warning(f"Error fetching batch {index + 1}: {e}", exc_info=True)
                continue

            if not batch:
                logger.debug("Provider returned an empty batch, stopping.")
                break

            fresh = self._filter_batch(batch, seen_urls)
            if not fresh:
                logger.debug("Batch %d contained no new displayable images, stopping.", index + 1)
                break

            collected.extend(fresh)
            logger.info(f"Retrieved {len(collected)}/{limit} images so far")

            if len(batch) < requested:
                break

        logger.info(f"Total images retrieved: {len(collected)}")
        return collected

    @staticmethod
    def _filter_batch(batch: Sequence[ImageRecord], seen_urls: Set[str]) -> List[ImageRecord]:
        """Drop already-seen urls and non-image formats, recording the urls kept."""
        fresh = []
        for record in batch:
            if record.url in seen_urls:
                continue
            if not is_allowed_image(record.url):
                continue
            seen_urls.add(record.url)
            fresh.append(record)
        return fresh


def is_allowed_image(url: str) -> bool:
    """Whether ``url`` points to a displayable image format (case-insensitive)."""
    return url.lower().endswith(ALLOWED_EXTENSIONS)
