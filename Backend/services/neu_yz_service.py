"""
Feed adapter for the NEU graduate admissions site (yz.neu.edu.cn).

One request = one listing page:
1. fetch ``/{section_code}/list.htm`` and read its article rows;
2. resolve every row concurrently (article page fetch through the shared
   content cache, or a canned description for download-center files);
3. return a FeedResult in listing order.

Fetch errors are not caught here: one failing article fails the whole feed.
Missing date/author/body on an article page degrade to empty values.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from html import escape
from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from app.config import get_base_url
from app.core.logging import get_logger
from app.models.feed_public import FeedItem, FeedResult
from app.models.neu_yz import (
    DOWNLOAD_AUTHOR,
    FEED_TITLE_SUFFIX,
    ArticleDetail,
    ArticleStub,
    absolute_url,
    is_download_section,
    resolve_section_code,
)
from services.base_scraper_service import BaseScraperService
from services.content_cache import ContentCache, get_content_cache
from services.feed_dates import parse_site_date
from services.neu_yz_sanitizer import render_tag, sanitize_entry

logger = get_logger(module="neu_yz_service")

LISTING_ROW_SELECTOR = "div.col_news_list ul.wp_article_list li"
ARTICLE_ANCHOR_SELECTOR = "span.Article_Title > a"
LISTING_DATE_SELECTOR = "span.Article_PublishDate"
ARTICLE_DATE_SELECTOR = ".arti_update"
ARTICLE_AUTHOR_SELECTOR = ".arti_publisher"

DOWNLOAD_LINK_TEXT = "点击进入下载地址传送门～"

_DOWNLOADABLE_RE = re.compile(r"\.(?:pdf|docx?|xlsx?|zip|rar|7z)$", re.IGNORECASE)
_DATE_RE = re.compile(r"(?P<date>\d{4}-\d{2}-\d{2})")
# optional "发布者：" style label up to the first colon, then the name
_AUTHOR_RE = re.compile(r"^(?:[^:：]*[:：])?\s*(?P<author>.*?)\s*$")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class ListingPage:
    title: str
    rows: List[Tag] = field(default_factory=list)


# -------- Field extraction ---------------------------------------------------

def extract_date(text: Optional[str]) -> Optional[str]:
    """First YYYY-MM-DD in ``text``, or None."""
    match = _DATE_RE.search(text or "")
    return match.group("date") if match else None


def extract_author(text: Optional[str]) -> Optional[str]:
    """Author name with any leading label (up to a ':' or '：') removed, or None."""
    collapsed = _WHITESPACE_RE.sub(" ", text or "").strip()
    if not collapsed:
        return None
    match = _AUTHOR_RE.match(collapsed)
    author = match.group("author") if match else ""
    return author or None


def is_downloadable_url(url: str) -> bool:
    """True when the URL path ends in a known document/archive extension."""
    return bool(_DOWNLOADABLE_RE.search(urlparse(url).path))


def build_download_description(title: str, url: str) -> str:
    return (
        render_tag("p", {}, escape(title, quote=False))
        + "<br />"
        + render_tag("a", {"href": url}, DOWNLOAD_LINK_TEXT)
    )


def _select_text(root: Tag, selector: str) -> str:
    node = root.select_one(selector)
    return node.get_text() if node is not None else ""


# -------- Service ------------------------------------------------------------

class NeuYzService(BaseScraperService):
    """Builds feeds for the yz.neu.edu.cn announcement sections."""

    def __init__(
        self,
        *,
        cache: Optional[ContentCache] = None,
        base_url: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or get_base_url()).rstrip("/")
        self.cache = cache if cache is not None else get_content_cache()

    async def __aenter__(self) -> "NeuYzService":
        await super().__aenter__()
        return self

    def listing_url(self, section_code: str) -> str:
        return f"{self.base_url}/{section_code}/list.htm"

    # ---- Listing ----

    @staticmethod
    def parse_listing(html_text: str) -> ListingPage:
        soup = BeautifulSoup(html_text, "html.parser")
        title = soup.title.get_text(strip=True) if soup.title else ""
        return ListingPage(title=title, rows=soup.select(LISTING_ROW_SELECTOR))

    async def fetch_listing(self, section_code: str) -> ListingPage:
        url = self.listing_url(section_code)
        html_text = await self.fetch_html(url)
        listing = self.parse_listing(html_text)
        logger.info(
            "neu_yz_listing_fetched",
            url=url,
            section_code=section_code,
            rows=len(listing.rows),
        )
        return listing

    def parse_stub(self, row: Tag, *, with_publish_date: bool = False) -> Optional[ArticleStub]:
        """Map one listing row to a stub; rows without a title or href are skipped."""
        anchor = row.select_one(ARTICLE_ANCHOR_SELECTOR)
        if anchor is None:
            logger.warning("neu_yz_row_skipped", reason="no_anchor")
            return None

        title = (anchor.get("title") or anchor.get_text()).strip()
        href = (anchor.get("href") or "").strip()
        if not title or not href:
            logger.warning(
                "neu_yz_row_skipped",
                reason="missing_title" if not title else "missing_href",
                title=title or None,
                href=href or None,
            )
            return None

        publish_date = None
        if with_publish_date:
            publish_date = _select_text(row, LISTING_DATE_SELECTOR).strip()

        return ArticleStub(
            title=title,
            url=absolute_url(href, self.base_url),
            publish_date=publish_date,
        )

    def parse_stubs(self, rows: List[Tag], *, with_publish_date: bool = False) -> List[ArticleStub]:
        stubs: List[ArticleStub] = []
        for row in rows:
            stub = self.parse_stub(row, with_publish_date=with_publish_date)
            if stub is not None:
                stubs.append(stub)
        return stubs

    # ---- Article pages ----

    def parse_article(self, html_text: str) -> ArticleDetail:
        soup = BeautifulSoup(html_text, "html.parser")
        date = extract_date(_select_text(soup, ARTICLE_DATE_SELECTOR))
        author = extract_author(_select_text(soup, ARTICLE_AUTHOR_SELECTOR))
        if date is None or author is None:
            logger.debug("neu_yz_article_metadata_missing", date=date, author=author)
        return ArticleDetail(
            description=sanitize_entry(soup, base_url=self.base_url),
            date=date or "",
            author=author or "",
        )

    async def load_article(self, url: str) -> ArticleDetail:
        """Article detail for ``url``, fetched at most once per cache lifetime."""

        async def _compute() -> ArticleDetail:
            html_text = await self.fetch_html(url)
            return self.parse_article(html_text)

        return await self.cache.try_get(url, _compute)

    # ---- Resolvers ----

    async def resolve_general(self, stubs: List[ArticleStub]) -> List[FeedItem]:
        async def _resolve(stub: ArticleStub) -> FeedItem:
            detail = await self.load_article(stub.url)
            return FeedItem(
                title=stub.title,
                link=stub.url,
                description=detail.description,
                pub_date=parse_site_date(detail.date),
                author=detail.author,
            )

        return list(await asyncio.gather(*(_resolve(stub) for stub in stubs)))

    async def resolve_download(self, stubs: List[ArticleStub]) -> List[FeedItem]:
        async def _resolve(stub: ArticleStub) -> FeedItem:
            if is_downloadable_url(stub.url):
                description = build_download_description(stub.title, stub.url)
            else:
                description = (await self.load_article(stub.url)).description
            return FeedItem(
                title=stub.title,
                link=stub.url,
                description=description,
                pub_date=parse_site_date(stub.publish_date),
                author=DOWNLOAD_AUTHOR,
            )

        return list(await asyncio.gather(*(_resolve(stub) for stub in stubs)))

    # ---- Dispatcher ----

    async def build_feed(self, category: str) -> FeedResult:
        section_code = resolve_section_code(category)
        download = is_download_section(section_code)

        listing = await self.fetch_listing(section_code)
        stubs = self.parse_stubs(listing.rows, with_publish_date=download)
        if download:
            items = await self.resolve_download(stubs)
        else:
            items = await self.resolve_general(stubs)

        logger.info(
            "neu_yz_feed_built",
            category=category,
            section_code=section_code,
            variant="download" if download else "general",
            items=len(items),
            skipped=len(listing.rows) - len(stubs),
        )
        return FeedResult(
            title=f"{listing.title}{FEED_TITLE_SUFFIX}",
            description=listing.title,
            link=self.base_url,
            item=items,
        )


async def build_neu_yz_feed(category: str) -> FeedResult:
    """Build one feed with a fresh HTTP client and the shared content cache."""
    async with NeuYzService() as service:
        return await service.build_feed(category)
