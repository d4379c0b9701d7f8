"""
Data Models for the Campus Feed Client

This module contains data classes and enumerations for every record the
feed backend returns. Records are disposable, read-only copies of backend
state; ``from_dict`` tolerates missing keys and ignores unknown ones.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from utils.helpers import parse_timestamp


# =============================================================================
# Enumerations
# =============================================================================

class PostType(str, Enum):
    """Kinds of post; the value is the URL path segment the backend expects."""
    EVENT = "event"
    LOST_FOUND = "lost_found"
    ANNOUNCEMENT = "announcement"

    @classmethod
    def parse(cls, value: str) -> "PostType":
        normalized = value.strip().lower().replace("-", "_")
        aliases = {
            "events": cls.EVENT,
            "lostfound": cls.LOST_FOUND,
            "lost": cls.LOST_FOUND,
            "found": cls.LOST_FOUND,
            "announcements": cls.ANNOUNCEMENT,
        }
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class EventResponse(str, Enum):
    GOING = "GOING"
    INTERESTED = "INTERESTED"
    NOT_GOING = "NOT_GOING"


class LostFoundType(str, Enum):
    LOST = "LOST"
    FOUND = "FOUND"


class AnnouncementType(str, Enum):
    ACADEMIC = "ACADEMIC"
    ADMINISTRATIVE = "ADMINISTRATIVE"
    EVENT = "EVENT"
    NOTICE = "NOTICE"
    CIRCULAR = "CIRCULAR"
    EXAM = "EXAM"
    HOLIDAY = "HOLIDAY"
    GENERAL = "GENERAL"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ReactionType(str, Enum):
    """The six reactions a post or comment can receive."""
    LIKE = "LIKE"
    LOVE = "LOVE"
    LAUGH = "LAUGH"
    WOW = "WOW"
    SAD = "SAD"
    ANGRY = "ANGRY"

    @property
    def emoji(self) -> str:
        return REACTION_EMOJIS[self]


REACTION_EMOJIS = {
    ReactionType.LIKE: "👍",
    ReactionType.LOVE: "❤️",
    ReactionType.LAUGH: "😂",
    ReactionType.WOW: "😮",
    ReactionType.SAD: "😢",
    ReactionType.ANGRY: "😠",
}


def _enum_or_none(enum_cls, value):
    if value is None:
        return None
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        return None


# =============================================================================
# Posts
# =============================================================================

@dataclass
class Event:
    """An event post with attendance counts and the current device's response."""
    id: int
    title: str
    description: str = ""
    location: str = ""
    event_date: Optional[datetime] = None
    image_url: Optional[str] = None
    created_by: str = ""
    created_at: Optional[datetime] = None
    going_count: int = 0
    interested_count: int = 0
    not_going_count: int = 0
    user_response: Optional[EventResponse] = None

    @property
    def total_responses(self) -> int:
        return self.going_count + self.interested_count + self.not_going_count

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            description=data.get("description") or "",
            location=data.get("location") or "",
            event_date=parse_timestamp(data.get("eventDate")),
            image_url=data.get("imageUrl"),
            created_by=data.get("createdBy") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            going_count=int(data.get("goingCount") or 0),
            interested_count=int(data.get("interestedCount") or 0),
            not_going_count=int(data.get("notGoingCount") or 0),
            user_response=_enum_or_none(EventResponse, data.get("userResponse")),
        )


@dataclass
class LostFoundItem:
    """A lost or found item report."""
    id: int
    item_name: str
    type: LostFoundType = LostFoundType.LOST
    description: str = ""
    location: str = ""
    incident_date: Optional[datetime] = None
    image_url: Optional[str] = None
    contact_info: Optional[str] = None
    created_by: str = ""
    created_at: Optional[datetime] = None
    is_resolved: bool = False
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None

    @property
    def title(self) -> str:
        return self.item_name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LostFoundItem":
        return cls(
            id=data.get("id"),
            item_name=data.get("itemName") or "",
            type=_enum_or_none(LostFoundType, data.get("type")) or LostFoundType.LOST,
            description=data.get("description") or "",
            location=data.get("location") or "",
            incident_date=parse_timestamp(data.get("incidentDate")),
            image_url=data.get("imageUrl"),
            contact_info=data.get("contactInfo"),
            created_by=data.get("createdBy") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            is_resolved=bool(data.get("isResolved")),
            resolved_at=parse_timestamp(data.get("resolvedAt")),
            resolved_by=data.get("resolvedBy"),
        )


@dataclass
class Announcement:
    """A departmental announcement."""
    id: int
    title: str
    content: str = ""
    department: str = ""
    type: AnnouncementType = AnnouncementType.GENERAL
    priority: Priority = Priority.MEDIUM
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None
    created_by: str = ""
    created_at: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    is_active: bool = True
    is_pinned: bool = False
    is_expired: bool = False

    @property
    def description(self) -> str:
        return self.content

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Announcement":
        is_active = data.get("isActive")
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            content=data.get("content") or "",
            department=data.get("department") or "",
            type=_enum_or_none(AnnouncementType, data.get("type")) or AnnouncementType.GENERAL,
            priority=_enum_or_none(Priority, data.get("priority")) or Priority.MEDIUM,
            attachment_url=data.get("attachmentUrl"),
            attachment_name=data.get("attachmentName"),
            created_by=data.get("createdBy") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            expiry_date=parse_timestamp(data.get("expiryDate")),
            is_active=True if is_active is None else bool(is_active),
            is_pinned=bool(data.get("isPinned")),
            is_expired=bool(data.get("isExpired")),
        )


# =============================================================================
# Comments and Reactions
# =============================================================================

@dataclass
class Comment:
    """A comment; top-level comments carry their replies (one level deep)."""
    id: int
    content: str
    created_by: str = ""
    created_at: Optional[datetime] = None
    post_id: Optional[int] = None
    post_type: Optional[str] = None
    parent_id: Optional[int] = None
    replies: List["Comment"] = field(default_factory=list)
    is_toxic: bool = False
    toxicity_score: float = 0.0

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        parent_id = data.get("parentId")
        post_type = data.get("postType")
        return cls(
            id=data.get("id"),
            content=data.get("content") or "",
            created_by=data.get("createdBy") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            post_id=data.get("postId"),
            post_type=str(post_type).lower() if post_type else None,
            parent_id=int(parent_id) if parent_id not in (None, "") else None,
            # Replies of replies are not rendered
            replies=[cls.from_dict(reply) for reply in (data.get("replies") or [])
                     if isinstance(reply, dict)],
            is_toxic=bool(data.get("isToxic")),
            toxicity_score=float(data.get("toxicityScore") or 0.0),
        )


@dataclass
class ReactionSummary:
    """Per-type reaction counts for a post or comment, plus this device's reaction."""
    counts: Dict[ReactionType, int] = field(default_factory=dict)
    user_reaction: Optional[ReactionType] = None

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def most_popular(self, limit: int = 3) -> List[tuple]:
        """Return up to ``limit`` (type, count) pairs with a non-zero count, highest first."""
        ranked = sorted(self.counts.items(), key=lambda pair: pair[1], reverse=True)
        return [(reaction, count) for reaction, count in ranked if count > 0][:limit]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ReactionSummary":
        data = data if isinstance(data, dict) else {}
        counts = {}
        for name, count in (data.get("reactions") or {}).items():
            reaction = _enum_or_none(ReactionType, name)
            if reaction is not None:
                counts[reaction] = int(count or 0)
        return cls(counts=counts, user_reaction=_enum_or_none(ReactionType, data.get("userReaction")))


@dataclass
class ReactionResult:
    """Outcome of toggling a reaction: added, updated or removed."""
    action: str
    reaction_type: Optional[ReactionType]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ReactionResult":
        data = data if isinstance(data, dict) else {}
        return cls(
            action=data.get("action") or "unknown",
            reaction_type=_enum_or_none(ReactionType, data.get("reactionType")),
        )


# =============================================================================
# Feed
# =============================================================================

@dataclass
class FeedItem:
    """A post of any kind, wrapped for the merged feed."""
    post_type: PostType
    id: int
    record: Any
    created_at: Optional[datetime] = None

    @property
    def created_by(self) -> str:
        return getattr(self.record, "created_by", "")

    @property
    def title(self) -> str:
        return getattr(self.record, "title", "")

    @property
    def display_type(self) -> str:
        """``lost`` or ``found`` for lost & found items, otherwise the post type value."""
        if self.post_type == PostType.LOST_FOUND:
            return self.record.type.value.lower()
        return self.post_type.value

    @property
    def key(self) -> tuple:
        return (self.post_type, self.id)

    @classmethod
    def wrap(cls, post_type: PostType, record: Any) -> "FeedItem":
        return cls(post_type=post_type, id=record.id, record=record, created_at=record.created_at)


# =============================================================================
# Statistics
# =============================================================================

@dataclass
class EventStats:
    total: int = 0
    upcoming: int = 0
    past: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EventStats":
        data = data if isinstance(data, dict) else {}
        return cls(total=int(data.get("total") or 0),
                   upcoming=int(data.get("upcoming") or 0),
                   past=int(data.get("past") or 0))


@dataclass
class LostFoundStats:
    total: int = 0
    lost: int = 0
    found: int = 0
    resolved: int = 0
    unresolved: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LostFoundStats":
        data = data if isinstance(data, dict) else {}
        return cls(total=int(data.get("total") or 0),
                   lost=int(data.get("lost") or 0),
                   found=int(data.get("found") or 0),
                   resolved=int(data.get("resolved") or 0),
                   unresolved=int(data.get("unresolved") or 0))


@dataclass
class AnnouncementStats:
    total: int = 0
    pinned: int = 0
    expired: int = 0
    academic: int = 0
    administrative: int = 0
    events: int = 0
    urgent: int = 0
    high: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AnnouncementStats":
        data = data if isinstance(data, dict) else {}
        return cls(**{name: int(data.get(name) or 0) for name in cls.__dataclass_fields__})


# =============================================================================
# AI Endpoint Results
# =============================================================================

@dataclass
class ToxicityResult:
    is_toxic: bool = False
    toxicity_score: float = 0.0
    suggestion: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ToxicityResult":
        data = data if isinstance(data, dict) else {}
        return cls(is_toxic=bool(data.get("toxic", data.get("isToxic"))),
                   toxicity_score=float(data.get("toxicityScore") or 0.0),
                   suggestion=data.get("suggestion"))


@dataclass
class ClassificationResult:
    type: str
    confidence: float = 0.0
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    event_date: Optional[str] = None
    item_name: Optional[str] = None
    department: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ClassificationResult":
        data = data if isinstance(data, dict) else {}
        return cls(type=(data.get("type") or "").lower(),
                   confidence=float(data.get("confidence") or 0.0),
                   title=data.get("title"),
                   description=data.get("description"),
                   location=data.get("location"),
                   event_date=data.get("eventDate"),
                   item_name=data.get("itemName"),
                   department=data.get("department"))


@dataclass
class MemeResult:
    image_url: str
    prompt: str

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MemeResult":
        data = data if isinstance(data, dict) else {}
        return cls(image_url=data.get("imageUrl") or "", prompt=data.get("prompt") or "")
