"""Async client for the Wikipedia content provider.

Search, page metadata, plain-text content and image listings come from the
MediaWiki Action API (``/w/api.php``); page summaries and on-this-day feeds
come from the Wikimedia REST API (``/api/rest_v1``).
"""

from types import TracebackType
from typing import Any, Dict, List, Optional, Type
from urllib.parse import quote

import httpx

from ..config import Settings
from ..exceptions import PageNotFoundError, ProviderError
from ..logger import get_logger
from .models import ImageRecord, SearchResult

logger = get_logger(__name__)

__all__ = ["WikipediaClient", "WikiPage"]

ACTION_API_PATH = "/w/api.php"
REST_API_PATH = "/api/rest_v1"
ON_THIS_DAY_KINDS = ("all", "selected", "births", "deaths", "events", "holidays")


class WikiPage:
    """Handle to a single existing page.

    The handle remembers the image-listing continuation cursor, so successive
    calls to :meth:`images` walk through the page's images instead of
    returning the first slice again.
    """

    def __init__(self, client: "WikipediaClient", pageid: int, title: str, fullurl: str):
        self._client = client
        self.pageid = pageid
        self.title = title
        self.fullurl = fullurl
        self._images_continue: Dict[str, Any] = {}
        self._images_exhausted = False

    def __repr__(self) -> str:
        return f"WikiPage(pageid={self.pageid!r}, title={self.title!r})"

    async def summary(self) -> Dict[str, Any]:
        """Fetch the REST summary of the page (extract, thumbnail, description...).

        Returns:
            The summary object as returned by the provider.

        Raises:
            PageNotFoundError: If the provider has no summary for the title.
            ProviderError: If the request fails.
        """
        path = f"{REST_API_PATH}/page/summary/{quote(self.title.replace(' ', '_'), safe='')}"
        data = await self._client._get_json(path, not_found_title=self.title)
        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected summary payload for '{self.title}'")
        return data

    async def content(self) -> str:
        """Fetch the full plain-text content of the page.

        Returns:
            The page text without markup.
        """
        data = await self._client._query(prop="extracts", explaintext="1", titles=self.title, redirects="1")
        page = self._client._first_page(data, self.title)
        return str(page.get("extract") or "")

    async def images(self, *, auto_suggest: bool = False, redirect: bool = False, limit: int = 50) -> List[ImageRecord]:
        """Fetch the next batch of images used on the page.

        Args:
            auto_suggest: Replace the title by the provider's search suggestion first.
            redirect: Follow redirects when resolving the title.
            limit: Maximum number of images in this batch.

        Returns:
            Image records of the batch; an empty list once the listing is exhausted.
        """
        if self._images_exhausted:
            logger.debug("Image listing for '%s' already exhausted.", self.title)
            return []

        title = await self._client._suggest(self.title) if auto_suggest else self.title
        params: Dict[str, Any] = {
            "generator": "images",
            "gimlimit": limit,
            "prop": "imageinfo",
            "iiprop": "url",
            "titles": title,
        }
        if redirect:
            params["redirects"] = "1"
        params.update(self._images_continue)

        data = await self._client._query(**params)

        cursor = data.get("continue")
        if isinstance(cursor, dict) and cursor:
            self._images_continue = dict(cursor)
        else:
            self._images_continue = {}
            self._images_exhausted = True

        # One record per listed file, so the batch length matches what was requested.
        # Files without a usable url (missing or deleted) keep an empty url and
        # are dropped by the collector's format filter.
        records = []
        for page in _pages(data):
            info = _field(page, "imageinfo", list, default=[])
            url = info[0].get("url") if info and isinstance(info[0], dict) else None
            if not isinstance(url, str):
                logger.debug("No image url for %r on %r.", page.get("title"), self.title)
                url = ""
            records.append(ImageRecord(url=url, title=str(page.get("title", ""))))
        return records


class WikipediaClient:
    """Async client bound to one Wikipedia edition.

    Use as an async context manager, or call :meth:`aclose` when done.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initializes the HTTP client.

        Args:
            settings: Language, user agent and timeout to use.
            transport: Optional custom httpx transport (used by tests).
        """
        self.settings = settings
        self._http = httpx.AsyncClient(
            base_url=settings.base_url,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            timeout=settings.timeout,
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "WikipediaClient":
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def search(self, query: str, limit: int = 10) -> SearchResult:
        """Search page titles and text.

        Args:
            query: Free-text search query.
            limit: Maximum number of hits.

        Returns:
            The hits plus the provider's spelling suggestion, if any.
        """
        data = await self._query(list="search", srsearch=query, srlimit=limit, srinfo="suggestion", srprop="")
        query_data = _field(data, "query", dict, default={})
        suggestion = _field(query_data, "searchinfo", dict, default={}).get("suggestion")
        if suggestion is not None and not isinstance(suggestion, str):
            raise ProviderError("Malformed search payload: 'suggestion' is not a string")
        return SearchResult(results=_field(query_data, "search", list, default=[]), suggestion=suggestion)

    async def page(self, title: str, *, auto_suggest: bool = False, redirect: bool = True) -> WikiPage:
        """Resolve a title to a page handle.

        Args:
            title: Page title.
            auto_suggest: Replace the title by the provider's search suggestion first.
            redirect: Follow redirects when resolving the title.

        Returns:
            A handle for the existing page.

        Raises:
            PageNotFoundError: If no such page exists.
            ProviderError: If the request fails.
        """
        if auto_suggest:
            title = await self._suggest(title)

        params: Dict[str, Any] = {"prop": "info", "inprop": "url", "titles": title}
        if redirect:
            params["redirects"] = "1"
        data = await self._query(**params)
        page = self._first_page(data, title)
        try:
            return WikiPage(self, pageid=int(page["pageid"]), title=str(page["title"]), fullurl=str(page["fullurl"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Incomplete page metadata for '{title}'") from e

    async def on_this_day(self, month: int, day: int, kind: str = "all") -> Dict[str, Any]:
        """Fetch events, births, deaths and holidays for a calendar day.

        Args:
            month: Month number (1-12).
            day: Day of month.
            kind: One of ``all``, ``selected``, ``births``, ``deaths``, ``events``, ``holidays``.

        Returns:
            The on-this-day feed object.
        """
        if kind not in ON_THIS_DAY_KINDS:
            raise ValueError(f"Unknown on-this-day kind: {kind}")
        path = f"{REST_API_PATH}/feed/onthisday/{kind}/{month:02d}/{day:02d}"
        data = await self._get_json(path)
        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected on-this-day payload for {month:02d}-{day:02d}")
        return data

    async def _suggest(self, title: str) -> str:
        result = await self.search(title, limit=1)
        if result.suggestion:
            return result.suggestion
        if result.results and isinstance(result.results[0], dict) and result.results[0].get("title"):
            return str(result.results[0]["title"])
        raise PageNotFoundError(title)

    async def _query(self, **params: Any) -> Dict[str, Any]:
        """Run an ``action=query`` request against the Action API."""
        data = await self._get_json(
            ACTION_API_PATH, params={"action": "query", "format": "json", "formatversion": "2", **params}
        )
        if not isinstance(data, dict):
            raise ProviderError("Unexpected response from the Action API")
        if "error" in data:
            error = data["error"] if isinstance(data["error"], dict) else {}
            raise ProviderError(f"{error.get('code', 'error')}: {error.get('info', 'unknown error')}")
        return data

    @staticmethod
    def _first_page(data: Dict[str, Any], title: str) -> Dict[str, Any]:
        pages = _pages(data)
        if not pages:
            raise PageNotFoundError(title)
        page = pages[0]
        if page.get("missing") or page.get("invalid"):
            raise PageNotFoundError(title)
        return page

    async def _get_json(
        self, path: str, params: Optional[Dict[str, Any]] = None, not_found_title: Optional[str] = None
    ) -> Any:
        logger.debug("GET %s %s", path, params or "")
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            msg = f"Request to {path} failed: {e}"
            logger.warning(msg)
            raise ProviderError(msg) from e

        if response.status_code == 404 and not_found_title is not None:
            raise PageNotFoundError(not_found_title)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"Request to {path} returned HTTP {response.status_code}"
            logger.warning(msg)
            raise ProviderError(msg) from e

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Response from {path} is not valid JSON") from e


def _field(container: Dict[str, Any], key: str, expected: Type[Any], default: Any) -> Any:
    """Read ``container[key]``, raising ``ProviderError`` when it has the wrong type."""
    value = container.get(key)
    if value is None:
        return default
    if not isinstance(value, expected):
        raise ProviderError(f"Malformed provider payload: '{key}' is not a {expected.__name__}")
    return value


def _pages(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """The ``query.pages`` list of an Action API response, each entry checked to be an object."""
    pages = _field(_field(data, "query", dict, default={}), "pages", list, default=[])
    if not all(isinstance(page, dict) for page in pages):
        raise ProviderError("Malformed provider payload: 'pages' holds a non-object entry")
    return pages
