from __future__ import annotations

from typing import Optional

import httpx

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(module="base_scraper_service")


class BaseScraperService:
    """
    Shared base class for HTTP scraping services.

    Owns the httpx client lifecycle. A failed request (transport error or
    non-2xx status) raises and is left to the caller; there is no retry.
    """

    def __init__(
        self,
        *,
        user_agent: Optional[str] = None,
        timeout_s: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize base scraper service.

        Args:
            user_agent: User-Agent string for HTTP requests (default: settings)
            timeout_s: Request timeout in seconds (default: settings)
            transport: Optional custom httpx transport
        """
        self.user_agent = user_agent or settings.HTTP_USER_AGENT
        self.timeout_s = timeout_s if timeout_s is not None else settings.HTTP_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "BaseScraperService":
        """Initialize HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            timeout=self.timeout_s,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Close HTTP client on context exit."""
        if self._client:
            await self._client.aclose()

    async def fetch(self, url: str) -> httpx.Response:
        """
        Fetch URL once.

        Raises:
            RuntimeError: If used outside ``async with``
            httpx.HTTPError: On transport errors or non-2xx responses
        """
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} HTTP client not initialized")

        response = await self._client.get(url)
        response.raise_for_status()
        logger.debug(
            "scraper_fetched",
            url=url,
            http_status=response.status_code,
            content_length=len(response.content),
        )
        return response

    async def fetch_html(self, url: str) -> str:
        """Fetch URL and return the decoded response body."""
        response = await self.fetch(url)
        return response.text
