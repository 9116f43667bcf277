from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from feedgen.feed import FeedGenerator

from app.models.feed_public import FeedResult
from services.feed_dates import SITE_UTC_OFFSET_HOURS, apply_offset

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
GENERATOR = "neu-yz-feed"


def render_rss(feed: FeedResult, *, now: Optional[datetime] = None) -> str:
    """
    Render a FeedResult as an RSS 2.0 document.

    Items keep the feed's order. Authors are plain names, not e-mail
    addresses, so they go out as ``dc:creator``.
    """
    fg = FeedGenerator()
    fg.load_extension("dc")
    fg.title(feed.title)
    fg.link(href=feed.link, rel="alternate")
    fg.description(feed.description or feed.title)
    fg.generator(GENERATOR)
    fg.lastBuildDate(now or datetime.now(timezone.utc))

    for item in feed.item:
        fe = fg.add_entry(order="append")
        fe.title(item.title)
        fe.link(href=item.link)
        fe.guid(item.link, permalink=True)
        if item.description:
            fe.description(item.description)
        if item.pub_date is not None:
            fe.pubDate(apply_offset(item.pub_date, SITE_UTC_OFFSET_HOURS))
        if item.author:
            fe.dc.dc_creator(item.author)

    return fg.rss_str(pretty=False).decode("utf-8")
