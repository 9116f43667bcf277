from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser

from app.core.logging import get_logger

logger = get_logger(module="feed_dates")

# yz.neu.edu.cn publishes China Standard Time wall-clock dates
SITE_UTC_OFFSET_HOURS = 8


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a free-form date string; None when empty or unparseable."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError) as exc:
        logger.debug("feed_date_unparseable", value=text, error=str(exc))
        return None


def apply_offset(value: datetime, hours: int) -> datetime:
    """
    Pin a naive wall-clock datetime to a fixed UTC offset.

    Aware datetimes are converted to that offset instead, so the instant
    they denote is kept.
    """
    tz = timezone(timedelta(hours=hours))
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def parse_site_date(value: Optional[str]) -> Optional[datetime]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return apply_offset(parsed, SITE_UTC_OFFSET_HOURS)
