from __future__ import annotations

from datetime import datetime, timedelta, timezone
from xml.etree import ElementTree as ET

from app.models.feed_public import FeedItem, FeedResult
from services.feed_render import render_rss

CST = timezone(timedelta(hours=8))
NOW = datetime(2024, 10, 11, 12, 0, tzinfo=timezone.utc)
DC_CREATOR = "{http://purl.org/dc/elements/1.1/}creator"


def _feed() -> FeedResult:
    return FeedResult(
        title="硕士公告-东北大学研究生招生信息网",
        description="硕士公告",
        link="http://yz.neu.edu.cn",
        item=[
            FeedItem(
                title="招生简章",
                link="http://yz.neu.edu.cn/2024/1010/c5932a1/page.htm",
                description="<p>欢迎 &amp; 报考</p>",
                pub_date=datetime(2024, 10, 10, tzinfo=CST),
                author="研招办",
            ),
            FeedItem(title="通知", link="http://yz.neu.edu.cn/2024/1009/c5932a2/page.htm"),
            FeedItem(title="复试名单", link="http://yz.neu.edu.cn/2024/1008/c5932a3/page.htm"),
        ],
    )


def _parse(body: str) -> ET.Element:
    return ET.fromstring(body.encode("utf-8"))


def test_render_rss_channel_and_items():
    body = render_rss(_feed(), now=NOW)
    assert body.startswith("<?xml")

    root = _parse(body)
    assert root.tag == "rss"
    assert root.get("version") == "2.0"

    channel = root.find("channel")
    assert channel.findtext("title") == "硕士公告-东北大学研究生招生信息网"
    assert channel.findtext("link") == "http://yz.neu.edu.cn"
    assert channel.findtext("description") == "硕士公告"
    assert channel.findtext("generator") == "neu-yz-feed"
    assert channel.findtext("lastBuildDate") == "Fri, 11 Oct 2024 12:00:00 +0000"

    first, second, third = channel.findall("item")
    assert first.findtext("title") == "招生简章"
    assert first.findtext("link") == "http://yz.neu.edu.cn/2024/1010/c5932a1/page.htm"
    assert first.findtext("guid") == "http://yz.neu.edu.cn/2024/1010/c5932a1/page.htm"
    assert first.find("guid").get("isPermaLink") == "true"
    # HTML body survives as escaped text
    assert first.findtext("description") == "<p>欢迎 &amp; 报考</p>"
    assert first.findtext("pubDate") == "Thu, 10 Oct 2024 00:00:00 +0800"

    assert second.findtext("title") == "通知"
    assert third.findtext("title") == "复试名单"
    assert second.find("pubDate") is None
    assert second.find("description") is None


def test_render_rss_author_is_dc_creator():
    channel = _parse(render_rss(_feed(), now=NOW)).find("channel")
    first, second, _ = channel.findall("item")

    assert first.find("author") is None
    assert first.findtext(DC_CREATOR) == "研招办"
    assert second.find(DC_CREATOR) is None


def test_render_rss_pins_naive_dates_to_site_offset():
    feed = FeedResult(
        title="下载中心-东北大学研究生招生信息网",
        description="下载中心",
        link="http://yz.neu.edu.cn",
        item=[FeedItem(title="表格", link="http://yz.neu.edu.cn/f.docx", pub_date=datetime(2024, 3, 1))],
    )
    item = _parse(render_rss(feed, now=NOW)).find("channel").find("item")
    assert item.findtext("pubDate") == "Fri, 01 Mar 2024 00:00:00 +0800"


def test_render_rss_empty_feed():
    feed = FeedResult(title="空-东北大学研究生招生信息网", description="", link="http://yz.neu.edu.cn")
    channel = _parse(render_rss(feed, now=NOW)).find("channel")
    assert channel.findall("item") == []
    assert channel.findtext("description") == "空-东北大学研究生招生信息网"
