"""
Article body sanitizer for yz.neu.edu.cn pages.

Renders the children of the ``.entry`` element into feed-safe HTML in one
recursive pass. Per element:

- ``.wp_pdf_player`` widget  -> paragraph linking to the PDF
- ``.wp_video_player`` widget -> ``<video>`` with the inline width/height
- ``span``                   -> its text content
- ``div``                    -> its rendered children (wrapper dropped)
- ``p``                      -> ``style``/``class`` removed
- ``img``                    -> ``src`` and ``alt`` only

Widgets are matched before the span/div rules because the site renders them
as ``div`` elements. Output of this module is a fixed point: sanitizing it
again yields the same string.
"""

from __future__ import annotations

import re
from html import escape
from typing import Mapping, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from app.core.logging import get_logger
from app.models.neu_yz import absolute_url

logger = get_logger(module="neu_yz_sanitizer")

ENTRY_SELECTOR = ".entry"

PDF_PLAYER_CLASS = "wp_pdf_player"
PDF_SOURCE_ATTR = "pdfsrc"
PDF_LINK_PREFIX = "点击进入文件传送门～："
PDF_LINK_TEXT = "查看文件"

VIDEO_PLAYER_CLASS = "wp_video_player"
VIDEO_SOURCE_ATTR = "sudy-wp-src"
DEFAULT_VIDEO_WIDTH = "600"
DEFAULT_VIDEO_HEIGHT = "400"
VIDEO_STYLE = "max-width: 100%;margin-left: auto;margin-right: auto;"
VIDEO_FALLBACK_TEXT = "您的浏览器不支持 video 标签。"

# "max-width: 100px" must not count as a width
_WIDTH_RE = re.compile(r"(?<![\w-])width\s*:\s*(?P<px>\d+)px", re.IGNORECASE)
_HEIGHT_RE = re.compile(r"(?<![\w-])height\s*:\s*(?P<px>\d+)px", re.IGNORECASE)

_PRESENTATIONAL_P_ATTRS = frozenset({"style", "class"})

VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)


def sanitize_entry(document: Union[BeautifulSoup, Tag], *, base_url: Optional[str] = None) -> str:
    """Sanitize the first ``.entry`` element of a parsed article page; "" if absent."""
    entry = document.select_one(ENTRY_SELECTOR)
    if entry is None:
        logger.debug("neu_yz_entry_missing")
        return ""
    return _render_children(entry, base_url)


def sanitize_html(fragment: str, *, base_url: Optional[str] = None) -> str:
    """Sanitize a raw HTML fragment (the inner HTML of an entry)."""
    if not fragment or not fragment.strip():
        return ""
    soup = BeautifulSoup(fragment, "html.parser")
    return _render_children(soup, base_url)


# -------- Rendering ----------------------------------------------------------

def _render_children(node: Tag, base_url: Optional[str]) -> str:
    return "".join(_render_node(child, base_url) for child in node.children)


def _render_node(node, base_url: Optional[str]) -> str:
    if isinstance(node, NavigableString):
        # text is escaped; comments/CDATA keep their own delimiters
        return node.output_ready(formatter="minimal")
    if not isinstance(node, Tag):
        return ""

    classes = node.get("class") or []
    if PDF_PLAYER_CLASS in classes:
        return _render_pdf_player(node, base_url)
    if VIDEO_PLAYER_CLASS in classes:
        return _render_video_player(node, base_url)

    if node.name == "span":
        return escape(node.get_text(), quote=False)
    if node.name == "div":
        return _render_children(node, base_url)
    if node.name == "img":
        return _render_image(node)

    attrs = node.attrs
    if node.name == "p":
        attrs = {k: v for k, v in attrs.items() if k not in _PRESENTATIONAL_P_ATTRS}
    return render_tag(node.name, attrs, _render_children(node, base_url))


def render_tag(name: str, attrs: Mapping[str, object], inner: str = "") -> str:
    """Serialize one element with double-quoted, escaped attribute values."""
    parts = [name]
    for key, value in attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        parts.append(f'{key}="{escape(str(value), quote=True)}"')
    opening = "<" + " ".join(parts)
    if name in VOID_ELEMENTS:
        return opening + " />"
    return f"{opening}>{inner}</{name}>"


def _render_image(node: Tag) -> str:
    src = node.get("src")
    if not src:
        logger.debug("neu_yz_image_without_src_dropped")
        return ""
    return render_tag("img", {"src": src, "alt": node.get("alt") or ""})


def _render_pdf_player(node: Tag, base_url: Optional[str]) -> str:
    src = node.get(PDF_SOURCE_ATTR)
    if not src:
        logger.debug("neu_yz_pdf_player_without_source")
        return str(node)
    link = render_tag("a", {"href": absolute_url(src, base_url)}, PDF_LINK_TEXT)
    return render_tag("p", {}, escape(PDF_LINK_PREFIX, quote=False) + link)


def _match_px(pattern: re.Pattern, style: str, default: str) -> str:
    match = pattern.search(style)
    return match.group("px") if match else default


def _render_video_player(node: Tag, base_url: Optional[str]) -> str:
    src = node.get(VIDEO_SOURCE_ATTR)
    if not src:
        logger.debug("neu_yz_video_player_without_source")
        return str(node)

    style = node.get("style") or ""
    width = _match_px(_WIDTH_RE, style, DEFAULT_VIDEO_WIDTH)
    height = _match_px(_HEIGHT_RE, style, DEFAULT_VIDEO_HEIGHT)
    source = render_tag("source", {"src": absolute_url(src, base_url), "type": "video/mp4"})
    return render_tag(
        "video",
        {"controls": "", "width": width, "height": height, "style": VIDEO_STYLE},
        source + escape(VIDEO_FALLBACK_TEXT, quote=False),
    )
