"""
Post Creation Forms

One form per post type. A form holds what the user typed, checks it,
turns it into the backend's camelCase JSON and hands it to the matching
service. Forms can be filled from command-line flags, interactively, or
pre-filled from the backend's classification of a free-text prompt.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from data.models import AnnouncementType, ClassificationResult, LostFoundType, PostType, Priority
from utils.exceptions import ValidationError
from utils.helpers import format_timestamp, is_valid_url, parse_timestamp
from views.components import Input, Textarea

DateInput = Union[str, datetime, None]

DATE_FIELDS = ("event_date", "incident_date", "expiry_date")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class PostForm:
    """Shared validation and submission; subclasses list their fields."""

    post_type: ClassVar[PostType]
    required: ClassVar[Tuple[Tuple[str, str], ...]] = ()

    def collect_errors(self) -> List[str]:
        errors = []
        for name, label in self.required:
            if _blank(getattr(self, name)):
                errors.append(f"{label} is required")
        image_url = getattr(self, "image_url", None)
        if not _blank(image_url) and not is_valid_url(image_url.strip()):
            errors.append("Image URL must be a valid URL")
        return errors

    def validate(self) -> None:
        """
        Check every field.

        Raises:
            ValidationError: Listing every problem found, not just the first.
        """
        errors = self.collect_errors()
        if errors:
            raise ValidationError("; ".join(errors), errors=errors)

    def missing_fields(self) -> List[Tuple[str, str]]:
        """Required (field, label) pairs that are still blank."""
        return [(name, label) for name, label in self.required if _blank(getattr(self, name))]

    def prompt_missing(self, input_func: Callable[[str], str] = input) -> "PostForm":
        """Ask for each required field that is still blank, leaving filled ones alone."""
        for name, label in self.missing_fields():
            if name in DATE_FIELDS:
                label = f"{label} (YYYY-MM-DDTHH:MM)"
            setattr(self, name, Input(label, input_func=input_func).read())
        return self

    def to_payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def submit(self, services: Mapping[PostType, Any]) -> Any:
        """
        Validate the form and create the post.

        Args:
            services: The post service for each post type.

        Returns:
            The created record as returned by the backend.
        """
        self.validate()
        return services[self.post_type].create(self.to_payload())


def _check_date(value: DateInput, label: str, errors: List[str]) -> None:
    if not _blank(value) and parse_timestamp(value) is None:
        errors.append(f"{label} must look like YYYY-MM-DDTHH:MM")


@dataclass
class EventForm(PostForm):
    post_type: ClassVar[PostType] = PostType.EVENT
    required: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("title", "Title"),
        ("description", "Description"),
        ("location", "Location"),
        ("event_date", "Event date"),
    )

    title: str = ""
    description: str = ""
    location: str = ""
    event_date: DateInput = None
    image_url: Optional[str] = None

    def collect_errors(self) -> List[str]:
        errors = super().collect_errors()
        _check_date(self.event_date, "Event date", errors)
        return errors

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "title": self.title.strip(),
            "description": self.description.strip(),
            "location": self.location.strip(),
            "eventDate": format_timestamp(parse_timestamp(self.event_date)),
            "imageUrl": _clean(self.image_url),
        }
        return {key: value for key, value in payload.items() if value is not None}

    @classmethod
    def from_prompts(cls, input_func: Callable[[str], str] = input) -> "EventForm":
        return cls(
            title=Input("Title", input_func=input_func).read(),
            description=Textarea("Description", input_func=input_func).read(),
            location=Input("Location", input_func=input_func).read(),
            event_date=Input("Event date (YYYY-MM-DDTHH:MM)", input_func=input_func).read(),
            image_url=Input("Image URL (optional)", input_func=input_func).read() or None,
        )


@dataclass
class LostFoundForm(PostForm):
    post_type: ClassVar[PostType] = PostType.LOST_FOUND
    required: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("item_name", "Item name"),
        ("description", "Description"),
        ("location", "Location"),
    )

    item_name: str = ""
    description: str = ""
    location: str = ""
    type: Union[str, LostFoundType] = LostFoundType.LOST
    incident_date: DateInput = None
    contact_info: Optional[str] = None
    image_url: Optional[str] = None

    def collect_errors(self) -> List[str]:
        errors = super().collect_errors()
        try:
            LostFoundType(str(getattr(self.type, "value", self.type)).strip().upper())
        except ValueError:
            errors.append("Type must be LOST or FOUND")
        _check_date(self.incident_date, "Incident date", errors)
        return errors

    def to_payload(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        incident_date = parse_timestamp(self.incident_date) or now or datetime.now()
        payload = {
            "itemName": self.item_name.strip(),
            "description": self.description.strip(),
            "type": LostFoundType(str(getattr(self.type, "value", self.type)).strip().upper()).value,
            "location": self.location.strip(),
            "incidentDate": format_timestamp(incident_date.replace(microsecond=0)),
            "contactInfo": _clean(self.contact_info),
            "imageUrl": _clean(self.image_url),
        }
        return {key: value for key, value in payload.items() if value is not None}

    @classmethod
    def from_prompts(cls, item_type: str = "LOST",
                     input_func: Callable[[str], str] = input) -> "LostFoundForm":
        return cls(
            item_name=Input("Item name", input_func=input_func).read(),
            description=Textarea("Description", input_func=input_func).read(),
            location=Input("Location", input_func=input_func).read(),
            type=item_type,
            incident_date=Input("When (YYYY-MM-DDTHH:MM, empty for now)", input_func=input_func).read() or None,
            contact_info=Input("Contact info (optional)", input_func=input_func).read() or None,
            image_url=Input("Image URL (optional)", input_func=input_func).read() or None,
        )


@dataclass
class AnnouncementForm(PostForm):
    post_type: ClassVar[PostType] = PostType.ANNOUNCEMENT
    required: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("title", "Title"),
        ("content", "Content"),
        ("department", "Department"),
    )

    title: str = ""
    content: str = ""
    department: str = ""
    type: Union[str, AnnouncementType] = AnnouncementType.GENERAL
    priority: Union[str, Priority] = Priority.MEDIUM
    attachment_url: Optional[str] = None
    attachment_name: Optional[str] = None
    expiry_date: DateInput = None

    def _type(self) -> AnnouncementType:
        return AnnouncementType(str(getattr(self.type, "value", self.type)).strip().upper())

    def _priority(self) -> Priority:
        return Priority(str(getattr(self.priority, "value", self.priority)).strip().upper())

    def collect_errors(self) -> List[str]:
        errors = super().collect_errors()
        try:
            self._type()
        except ValueError:
            errors.append("Type must be one of " + ", ".join(t.value for t in AnnouncementType))
        try:
            self._priority()
        except ValueError:
            errors.append("Priority must be one of " + ", ".join(p.value for p in Priority))
        if not _blank(self.attachment_url) and not is_valid_url(self.attachment_url.strip()):
            errors.append("Attachment URL must be a valid URL")
        _check_date(self.expiry_date, "Expiry date", errors)
        return errors

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "title": self.title.strip(),
            "content": self.content.strip(),
            "department": self.department.strip(),
            "type": self._type().value,
            "priority": self._priority().value,
            "attachmentUrl": _clean(self.attachment_url),
            "attachmentName": _clean(self.attachment_name),
        }
        payload = {key: value for key, value in payload.items() if value is not None}
        # The backend treats a null expiry as "never expires"
        payload["expiryDate"] = format_timestamp(parse_timestamp(self.expiry_date))
        return payload

    @classmethod
    def from_prompts(cls, input_func: Callable[[str], str] = input) -> "AnnouncementForm":
        return cls(
            title=Input("Title", input_func=input_func).read(),
            content=Textarea("Content", input_func=input_func).read(),
            department=Input("Department", input_func=input_func).read(),
            type=Input("Type", default=AnnouncementType.GENERAL.value, input_func=input_func).read(),
            priority=Input("Priority", default=Priority.MEDIUM.value, input_func=input_func).read(),
            attachment_url=Input("Attachment URL (optional)", input_func=input_func).read() or None,
            expiry_date=Input("Expires (YYYY-MM-DDTHH:MM, optional)", input_func=input_func).read() or None,
        )


def form_from_classification(result: ClassificationResult, prompt: str,
                             kind: Optional[str] = None) -> PostForm:
    """
    Pre-fill a creation form from what the backend extracted out of a free-text prompt.

    Args:
        result: The backend's classification of the prompt.
        prompt: The text the user typed; used as the description when none was extracted.
        kind: event, lost, found or announcement, overriding the classified type.

    Returns:
        PostForm: A form that may still have blank required fields.

    Raises:
        ValidationError: If the post kind is neither given nor recognised.
    """
    kind = (kind or result.type or "").strip().lower()
    description = result.description or prompt.strip()
    event_date = result.event_date if parse_timestamp(result.event_date) else None

    if kind == "event":
        return EventForm(title=result.title or "", description=description,
                         location=result.location or "", event_date=event_date)
    if kind in ("lost", "found"):
        return LostFoundForm(item_name=result.item_name or result.title or "", description=description,
                             location=result.location or "", type=kind.upper())
    if kind == "announcement":
        return AnnouncementForm(title=result.title or "", content=description,
                                department=result.department or "")
    raise ValidationError(f"Could not tell what kind of post this is ('{result.type or 'unknown'}'). "
                          f"Pass the kind: event, lost, found or announcement")
