from __future__ import annotations

from bs4 import BeautifulSoup

from services.neu_yz_sanitizer import sanitize_entry, sanitize_html

BASE = "http://yz.neu.edu.cn"

VIDEO_320 = (
    '<video controls="" width="320" height="240" '
    'style="max-width: 100%;margin-left: auto;margin-right: auto;">'
    '<source src="http://yz.neu.edu.cn/_upload/v.mp4" type="video/mp4" />'
    "您的浏览器不支持 video 标签。</video>"
)


def _sanitize(fragment: str) -> str:
    return sanitize_html(fragment, base_url=BASE)


def test_image_keeps_only_src_and_alt():
    assert _sanitize('<img src="a.png" class="x" data-lazy="1">') == '<img src="a.png" alt="" />'
    assert (
        _sanitize('<img width="500" src="/_upload/b.jpg" alt="招生海报" style="float:left">')
        == '<img src="/_upload/b.jpg" alt="招生海报" />'
    )


def test_image_without_src_is_dropped():
    assert _sanitize('<p>a<img alt="x">b</p>') == "<p>ab</p>"


def test_span_is_replaced_by_its_text():
    assert _sanitize('<p><span style="font-size:16px">Hello <b>world</b></span></p>') == "<p>Hello world</p>"


def test_span_text_is_escaped():
    assert _sanitize("<span>a &lt; b &amp; c</span>") == "a &lt; b &amp; c"


def test_div_wrappers_are_removed_recursively():
    assert _sanitize('<div class="read"><div id="x"><p>a</p><ul><li>b</li></ul></div></div>') == "<p>a</p><ul><li>b</li></ul>"


def test_paragraph_presentational_attributes_are_stripped():
    assert _sanitize('<p style="text-indent:2em" class="p_text" id="intro" align="center">t</p>') == (
        '<p id="intro" align="center">t</p>'
    )


def test_other_elements_keep_their_attributes():
    assert _sanitize('<a href="/x.htm" target="_blank">x</a><br>') == '<a href="/x.htm" target="_blank">x</a><br />'


def test_pdf_player_becomes_link_paragraph():
    html = '<div class="wp_pdf_player" pdfsrc="/_upload/article/files/a.pdf" style="width:100%" sudyfile-attr="{}"></div>'
    assert _sanitize(html) == (
        '<p>点击进入文件传送门～：<a href="http://yz.neu.edu.cn/_upload/article/files/a.pdf">查看文件</a></p>'
    )


def test_video_player_uses_inline_dimensions():
    html = '<div class="wp_video_player" style="width: 320px; height: 240px" sudy-wp-src="/_upload/v.mp4"></div>'
    assert _sanitize(html) == VIDEO_320


def test_video_player_ignores_max_width():
    html = (
        '<div class="wp_video_player" style="max-width: 100px; width:320px;height:240px" '
        'sudy-wp-src="/_upload/v.mp4"></div>'
    )
    assert _sanitize(html) == VIDEO_320


def test_video_player_defaults_to_600_by_400():
    html = '<div class="wp_video_player" sudy-wp-src="/_upload/v.mp4"></div>'
    out = _sanitize(html)
    assert 'width="600"' in out
    assert 'height="400"' in out
    assert '<source src="http://yz.neu.edu.cn/_upload/v.mp4" type="video/mp4" />' in out


def test_video_player_without_source_is_untouched():
    html = '<div class="wp_video_player" style="width: 320px; height: 240px"></div>'
    assert _sanitize(html) == html


def test_sanitizer_is_idempotent():
    html = (
        '<div class="wp_articlecontent">'
        '<p style="text-align:center" class="p1"><span style="color:red">第一段 &amp; 说明</span></p>'
        '<div><img src="/_upload/a.png" data-layer="photo" width="600"></div>'
        '<div class="wp_pdf_player" pdfsrc="/_upload/a.pdf"></div>'
        '<div class="wp_video_player" style="width:320px;height:240px" sudy-wp-src="/_upload/v.mp4"></div>'
        '<div class="wp_video_player"></div>'
        "<!-- editor marker -->"
        "<table><tr><td>名额</td><td>30</td></tr></table>"
        "</div>"
    )
    once = _sanitize(html)
    assert "<span" not in once
    assert "wp_pdf_player" not in once
    assert _sanitize(once) == once


def test_sanitize_entry_uses_entry_children():
    soup = BeautifulSoup(
        '<html><body><div class="entry"><div class="read"><p class="x">正文</p></div></div></body></html>',
        "html.parser",
    )
    assert sanitize_entry(soup, base_url=BASE) == "<p>正文</p>"


def test_sanitize_entry_missing_or_empty():
    assert sanitize_entry(BeautifulSoup("<html><body><p>x</p></body></html>", "html.parser"), base_url=BASE) == ""
    assert sanitize_entry(BeautifulSoup('<div class="entry"></div>', "html.parser"), base_url=BASE) == ""
    assert _sanitize("") == ""
    assert _sanitize("   ") == ""
