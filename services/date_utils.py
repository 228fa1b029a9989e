"""
Date Utilities
Version: 1.0

Date parsing, sorting and formatting for tool records.
Records without a usable date sort after dated ones.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence

from services.tool_contracts import Tool

_MISSING = datetime.min.replace(tzinfo=timezone.utc)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string to an aware datetime (UTC if no offset)."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def is_new_this_week(date_added: Optional[str], now: Optional[datetime] = None) -> bool:
    added = parse_date(date_added)
    if added is None:
        return False
    return added >= _now(now) - timedelta(days=7)


def sort_by_date_added(tools: Sequence[Tool]) -> List[Tool]:
    """Newest first."""
    return sorted(tools, key=lambda t: parse_date(t.date_added) or _MISSING, reverse=True)


def sort_by_last_updated(tools: Sequence[Tool]) -> List[Tool]:
    """Newest modification (or creation) first."""
    return sorted(tools, key=lambda t: parse_date(t.last_updated) or _MISSING, reverse=True)


def get_top_tools_this_week(tools: Sequence[Tool], limit: int = 5, now: Optional[datetime] = None) -> List[Tool]:
    recent = [t for t in tools if is_new_this_week(t.date_added, now)]
    return sort_by_date_added(recent)[:limit]


def get_scheduled_tools(tools: Sequence[Tool]) -> List[Tool]:
    """Tools with a scheduled feature date, soonest first."""
    scheduled = [t for t in tools if parse_date(t.scheduled_feature_date) is not None]
    return sorted(scheduled, key=lambda t: parse_date(t.scheduled_feature_date))


def get_todays_featured_tools(tools: Sequence[Tool], today: Optional[date] = None) -> List[Tool]:
    today = today or datetime.now(timezone.utc).date()
    result = []
    for tool in tools:
        scheduled = parse_date(tool.scheduled_feature_date)
        if scheduled is not None and scheduled.astimezone(timezone.utc).date() == today:
            result.append(tool)
    return result


def display_date(tool: Tool, now: Optional[datetime] = None) -> str:
    """Last-updated date for display; records without one show 'now'."""
    return tool.last_updated or _now(now).isoformat()


def format_date(value: str) -> str:
    """'2024-01-28T11:00:00Z' -> 'Jan 28, 2024'. Unparseable input is returned as is."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_relative_time(value: str, now: Optional[datetime] = None) -> str:
    parsed = parse_date(value)
    if parsed is None:
        return value

    days = (_now(now) - parsed).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"
