"""
Static category table and intermediate records for the NEU graduate
admissions site (yz.neu.edu.cn).

A category name maps to the numeric section code the site uses in its
listing URLs (``/{code}/list.htm``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urljoin

from app.config import get_base_url

DOWNLOAD_SECTION_CODE = "5792"

# Author label for download-center items (the admissions office).
DOWNLOAD_AUTHOR = "研招办"

# Appended to the listing page title to form the feed title.
FEED_TITLE_SUFFIX = "-东北大学研究生招生信息网"

CATEGORY_SECTION_CODES: Mapping[str, str] = {
    "download": DOWNLOAD_SECTION_CODE,
    "master1": "5932",
    "master2": "5933",
    "phd1": "5945",
    "phd2": "5946",
}


def lookup_section_code(category: str) -> Optional[str]:
    """Return the section code for a known category name, or None."""
    return CATEGORY_SECTION_CODES.get(category)


def resolve_section_code(category: str) -> str:
    """
    Resolve a category parameter to a section code.

    Known names use the static table. Anything else is forwarded unchanged so
    sections missing from the table can still be requested by their raw code.
    """
    code = lookup_section_code(category)
    if code is None:
        return category
    return code


def is_download_section(section_code: str) -> bool:
    return section_code == DOWNLOAD_SECTION_CODE


def absolute_url(href: str, base_url: Optional[str] = None) -> str:
    """Join a page-relative href onto the site origin; absolute URLs pass through."""
    return urljoin((base_url or get_base_url()) + "/", href.strip())


@dataclass(frozen=True)
class ArticleStub:
    """One listing row: title and absolute article URL."""

    title: str
    url: str
    # Only set for download-center rows, taken from the listing itself.
    publish_date: Optional[str] = None


@dataclass(frozen=True)
class ArticleDetail:
    """Metadata and sanitized body of one article page; cached per URL."""

    description: str
    date: str
    author: str
