"""
Feed Views

Renderers that turn records into cards and tables for the terminal. They
only format; every call to the backend happens before they run.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

import pandas as pd

from config import settings
from data.models import (
    Announcement, Comment, Event, EventResponse, FeedItem, LostFoundItem,
    LostFoundType, PostType, Priority, ReactionSummary
)
from services.api_check_service import CheckReport
from services.dashboard_service import DashboardData, ONLINE
from services.search_service import SearchResults
from utils.helpers import display_author, format_date, format_relative_time, truncate_text
from views.components import Badge, Button, Card, paint

PRIORITY_VARIANTS = {
    Priority.URGENT: "danger",
    Priority.HIGH: "danger",
    Priority.MEDIUM: "warning",
    Priority.LOW: "outline",
}

RESPONSE_LABELS = {
    EventResponse.GOING: "Going",
    EventResponse.INTERESTED: "Interested",
    EventResponse.NOT_GOING: "Not going",
}

TYPE_ICONS = {
    PostType.EVENT: "📅",
    PostType.LOST_FOUND: "🔍",
    PostType.ANNOUNCEMENT: "📢",
}


def lost_found_badge(item_type: LostFoundType) -> Badge:
    return Badge(item_type.value, "danger" if item_type == LostFoundType.LOST else "success")


def priority_badge(priority: Priority) -> Badge:
    return Badge(priority.value, PRIORITY_VARIANTS.get(priority, "default"))


def _byline(created_by: str, created_at: Optional[datetime], now: Optional[datetime],
            device_id: Optional[str]) -> str:
    author = display_author(created_by)
    if device_id and created_by == device_id:
        author += " (you)"
    when = format_relative_time(created_at, now=now)
    return f"{author} · {when}" if when else author


def render_reaction_bar(summary: Optional[ReactionSummary], limit: Optional[int] = None) -> str:
    """Total reactions followed by the most used types, e.g. ``5 reactions  👍 3  ❤️ 2``."""
    if summary is None or summary.total == 0:
        return "No reactions yet"
    limit = limit or settings.TOP_REACTIONS_LIMIT
    top = "  ".join(f"{reaction.emoji} {count}" for reaction, count in summary.most_popular(limit))
    noun = "reaction" if summary.total == 1 else "reactions"
    line = f"{summary.total} {noun}  {top}"
    if summary.user_reaction is not None:
        line += f"  (you: {summary.user_reaction.emoji})"
    return line


def render_event(event: Event, now: Optional[datetime] = None, device_id: Optional[str] = None,
                 reactions: Optional[ReactionSummary] = None) -> str:
    badges = [Badge("EVENT", "info").render()]
    if event.user_response is not None:
        badges.append(Badge(RESPONSE_LABELS[event.user_response], "success").render())
    body = [
        " ".join(badges),
        truncate_text(event.description, settings.DESCRIPTION_TRUNCATE_LENGTH),
        "",
        f"📍 {event.location}",
        f"🕒 {format_date(event.event_date)}",
        f"Going {event.going_count} · Interested {event.interested_count} · "
        f"Not going {event.not_going_count}",
    ]
    if reactions is not None:
        body.append(render_reaction_bar(reactions))
    footer = f"#{event.id} · {_byline(event.created_by, event.created_at, now, device_id)}"
    return Card(f"{TYPE_ICONS[PostType.EVENT]} {event.title}", body, footer).render()


def render_lost_found(item: LostFoundItem, now: Optional[datetime] = None,
                      device_id: Optional[str] = None,
                      reactions: Optional[ReactionSummary] = None) -> str:
    badges = [lost_found_badge(item.type).render()]
    if item.is_resolved:
        badges.append(Badge("RESOLVED", "success").render())
    body = [
        " ".join(badges),
        truncate_text(item.description, settings.DESCRIPTION_TRUNCATE_LENGTH),
        "",
        f"📍 {item.location}",
    ]
    if item.incident_date is not None:
        body.append(f"🕒 {format_date(item.incident_date)}")
    if item.contact_info:
        body.append(f"Contact: {item.contact_info}")
    if reactions is not None:
        body.append(render_reaction_bar(reactions))
    footer = f"#{item.id} · {_byline(item.created_by, item.created_at, now, device_id)}"
    return Card(f"{TYPE_ICONS[PostType.LOST_FOUND]} {item.item_name}", body, footer).render()


def render_announcement(announcement: Announcement, now: Optional[datetime] = None,
                        device_id: Optional[str] = None,
                        reactions: Optional[ReactionSummary] = None) -> str:
    badges = [Badge(announcement.type.value, "info").render(),
              priority_badge(announcement.priority).render()]
    if announcement.is_pinned:
        badges.append(Badge("📌 PINNED", "warning").render())
    if announcement.is_expired:
        badges.append(Badge("EXPIRED", "outline").render())
    body = [
        " ".join(badges),
        truncate_text(announcement.content, settings.DESCRIPTION_TRUNCATE_LENGTH),
        "",
        f"🏛 {announcement.department}",
    ]
    if announcement.expiry_date is not None:
        body.append(f"Expires {format_date(announcement.expiry_date)}")
    if announcement.attachment_url:
        body.append(f"📎 {announcement.attachment_name or announcement.attachment_url}")
    if reactions is not None:
        body.append(render_reaction_bar(reactions))
    footer = f"#{announcement.id} · {_byline(announcement.created_by, announcement.created_at, now, device_id)}"
    return Card(f"{TYPE_ICONS[PostType.ANNOUNCEMENT]} {announcement.title}", body, footer).render()


_RENDERERS = {
    PostType.EVENT: render_event,
    PostType.LOST_FOUND: render_lost_found,
    PostType.ANNOUNCEMENT: render_announcement,
}


def render_feed_item(item: FeedItem, now: Optional[datetime] = None,
                     device_id: Optional[str] = None,
                     reactions: Optional[ReactionSummary] = None) -> str:
    return _RENDERERS[item.post_type](item.record, now=now, device_id=device_id, reactions=reactions)


def render_filter_tabs(current: str, counts: Dict[str, int]) -> str:
    tabs = []
    for name in settings.FEED_FILTERS:
        label = f"{name} ({counts.get(name, 0)})"
        tabs.append(paint(f"[{label}]", "primary") if name == current else label)
    return "  ".join(tabs)


def render_feed(items: List[FeedItem], now: Optional[datetime] = None,
                device_id: Optional[str] = None) -> str:
    """Render a list of feed items, newest first as given."""
    if not items:
        return "No posts yet. Create one with: post event|lost|found|announcement"
    return "\n\n".join(render_feed_item(item, now=now, device_id=device_id) for item in items)


def _render_comment(comment: Comment, now: Optional[datetime], device_id: Optional[str],
                    indent: str = "") -> List[str]:
    header = f"{indent}#{comment.id} {_byline(comment.created_by, comment.created_at, now, device_id)}"
    if comment.is_toxic:
        header += " " + Badge("⚠ flagged", "warning").render()
    lines = [header]
    for text_line in comment.content.splitlines() or [""]:
        lines.append(f"{indent}  {text_line}")
    return lines


def render_comments(comments: List[Comment], now: Optional[datetime] = None,
                    device_id: Optional[str] = None) -> str:
    """Render a thread; replies are indented one level under their comment."""
    if not comments:
        return "No comments yet. Be the first to comment!"
    lines = []
    for comment in comments:
        lines.extend(_render_comment(comment, now, device_id))
        for reply in comment.replies:
            lines.extend(_render_comment(reply, now, device_id, indent="    "))
    return "\n".join(lines)


def render_dashboard(data: DashboardData, frame: pd.DataFrame,
                     now: Optional[datetime] = None) -> str:
    health = []
    for name, status in data.health.items():
        variant = "success" if status == ONLINE else "danger"
        health.append(f"{name}: {Badge(status.upper(), variant).render()}")

    sections = [Card("📊 Dashboard", ["  ".join(health) or "No health data"]).render()]
    sections.append(frame.to_string(index=False) if not frame.empty else "No statistics available")

    today = [f"{event.title} · {format_date(event.event_date)} · {event.location}"
             for event in data.today_events]
    sections.append(Card("📅 Today's events", today or ["No events today"]).render())

    recent = [f"{lost_found_badge(item.type).render()} {item.item_name} · "
              f"{format_relative_time(item.created_at, now=now)}"
              for item in data.recent_items]
    sections.append(Card("🔍 Recent lost & found", recent or ["Nothing reported recently"]).render())
    return "\n\n".join(sections)


def render_search_results(results: SearchResults, label: str = "Results",
                          now: Optional[datetime] = None) -> str:
    if results.is_empty:
        return f"{label}: nothing found"
    parts = [f"{label}: {len(results.events)} events, {len(results.items)} lost & found items"]
    parts.extend(render_event(event, now=now) for event in results.events)
    parts.extend(render_lost_found(item, now=now) for item in results.items)
    return "\n\n".join(parts)


def render_check_report(report: CheckReport) -> str:
    lines = []
    for result in report.results:
        status = Badge("PASS", "success") if result.passed else Badge("FAIL", "danger")
        detail = f"{result.result_size} items" if result.result_size is not None else ""
        if result.error:
            detail = result.error
        lines.append(f"{status.render()} {result.category:<10} {result.name:<26} "
                     f"{result.duration_ms:>5}ms  {detail}".rstrip())
    lines.append("")
    lines.append(report.summary())
    return "\n".join(lines)


def render_actions(actions: Iterable[str]) -> str:
    return " ".join(Button(action, "outline").render() for action in actions)
