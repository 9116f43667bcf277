from __future__ import annotations

import pytest

import httpx

from services.base_scraper_service import BaseScraperService


@pytest.mark.asyncio
async def test_base_scraper_context_manager():
    """Test that BaseScraperService works as async context manager."""
    async with BaseScraperService(user_agent="test-agent/1.0") as service:
        assert service._client is not None
        assert isinstance(service._client, httpx.AsyncClient)
        assert service._client.headers["User-Agent"] == "test-agent/1.0"

    # Client should be closed after context exit
    assert service._client is None or service._client.is_closed


@pytest.mark.asyncio
async def test_base_scraper_fetch_requires_context():
    """Test that fetch() raises error if client not initialized."""
    service = BaseScraperService(user_agent="test-agent/1.0")
    with pytest.raises(RuntimeError, match="not initialized"):
        await service.fetch("http://yz.neu.edu.cn/5932/list.htm")


@pytest.mark.asyncio
async def test_base_scraper_fetch_html(httpx_mock):
    """Test fetch_html convenience method."""
    httpx_mock.add_response(
        url="http://yz.neu.edu.cn/5932/list.htm",
        text="<html>Test</html>",
    )

    async with BaseScraperService(user_agent="test-agent/1.0") as service:
        html = await service.fetch_html("http://yz.neu.edu.cn/5932/list.htm")
        assert html == "<html>Test</html>"


@pytest.mark.asyncio
async def test_base_scraper_error_status_raises_without_retry(httpx_mock):
    """A non-2xx response raises on the first attempt."""
    httpx_mock.add_response(status_code=500)

    async with BaseScraperService(user_agent="test-agent/1.0") as service:
        with pytest.raises(httpx.HTTPStatusError):
            await service.fetch("http://yz.neu.edu.cn/5932/list.htm")

    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_base_scraper_transport_error_propagates(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))

    async with BaseScraperService(user_agent="test-agent/1.0") as service:
        with pytest.raises(httpx.ConnectError):
            await service.fetch("http://yz.neu.edu.cn/5932/list.htm")
