from __future__ import annotations

from typing import Literal

import httpx
from fastapi import APIRouter, HTTPException, Path, Query
from fastapi.responses import Response

from app.core.logging import get_logger
from app.models.feed_public import FeedResult
from app.models.neu_yz import CATEGORY_SECTION_CODES
from services.feed_render import RSS_MEDIA_TYPE, render_rss
from services.neu_yz_service import build_neu_yz_feed

logger = get_logger(module="neu_yz_router")

router = APIRouter(
    prefix="/neu/yz",
    tags=["neu-yz"],
)

_KNOWN_CATEGORIES = ", ".join(CATEGORY_SECTION_CODES)


@router.get("/{category}", response_model=FeedResult, response_model_exclude_none=True)
async def get_neu_yz_feed(
    category: str = Path(
        ...,
        description=f"Category name ({_KNOWN_CATEGORIES}) or a raw section code.",
    ),
    output_format: Literal["json", "rss"] = Query("json", alias="format", description="Output format."),
):
    normalized = category.strip()
    if not normalized:
        raise HTTPException(status_code=400, detail="Category parameter is required.")

    try:
        feed = await build_neu_yz_feed(normalized)
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "neu_yz_upstream_failed",
            category=normalized,
            url=str(exc.request.url),
            http_status=exc.response.status_code,
        )
        raise HTTPException(
            status_code=502,
            detail=f"Upstream returned HTTP {exc.response.status_code}.",
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning(
            "neu_yz_upstream_failed",
            category=normalized,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise HTTPException(status_code=502, detail="Upstream fetch failed.") from exc

    if output_format == "rss":
        return Response(content=render_rss(feed), media_type=RSS_MEDIA_TYPE)
    return feed
