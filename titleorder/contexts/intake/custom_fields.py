"""
ClickUp custom field model.

ClickUp returns each task's custom fields as loosely typed JSON whose value
shape depends on the field's "type". parse_custom_field() turns one entry into
a dataclass per field kind, each exposing a typed ``value``, and find_field()
looks fields up by name fragment and kind.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from titleorder.utils.timestamp import ORDER_DATE_FORMAT

TEXT_TYPES = {"text", "short_text", "email", "url", "phone"}
NUMBER_TYPES = {"number", "currency"}
RELATIONSHIP_TYPES = {"tasks", "list_relationship"}


@dataclass
class CustomField:
    """Base for all custom field kinds."""

    id: str
    name: str
    type: str


@dataclass
class TextField(CustomField):
    value: Optional[str] = None


@dataclass
class NumberField(CustomField):
    value: Optional[float] = None


@dataclass
class DateField(CustomField):
    value: Optional[date] = None

    def formatted(self) -> Optional[str]:
        """MM/DD/YYYY, or None when unset."""
        return self.value.strftime(ORDER_DATE_FORMAT) if self.value else None


@dataclass
class DropDownField(CustomField):
    """Single choice; value is the selected option's name."""

    value: Optional[str] = None


@dataclass
class LabelsField(CustomField):
    """Multiple choice; value is the selected option labels in option order."""

    value: List[str] = field(default_factory=list)


@dataclass
class CheckboxField(CustomField):
    value: bool = False


@dataclass
class RelatedTask:
    id: str
    name: str


@dataclass
class RelationshipField(CustomField):
    """Links to other tasks."""

    value: List[RelatedTask] = field(default_factory=list)


@dataclass
class UnknownField(CustomField):
    """Field type this backend does not interpret; raw value kept as-is."""

    value: Any = None


F = TypeVar("F", bound=CustomField)


def _parse_date(raw: Any) -> Optional[date]:
    # ClickUp dates are millisecond Unix timestamps, sent as strings
    if raw in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc).date()
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_number(raw: Any) -> Optional[float]:
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _selected_option(raw: Any, options: List[Dict[str, Any]]) -> Optional[str]:
    # Older API versions send the option's orderindex, newer ones its id
    if raw in (None, ""):
        return None
    for option in options:
        if raw == option.get("id") or str(raw) == str(option.get("orderindex")):
            return option.get("name")
    return None


def _selected_labels(raw: Any, options: List[Dict[str, Any]]) -> List[str]:
    selected = set(raw or [])
    return [option.get("label", "") for option in options if option.get("id") in selected]


def parse_custom_field(data: Dict[str, Any]) -> CustomField:
    """
    Parse one entry of a task's ``custom_fields`` array.

    Args:
        data: Raw field JSON ({"id", "name", "type", "value", "type_config"})

    Returns:
        The matching CustomField subclass, UnknownField for unsupported types
    """
    base = {
        "id": str(data.get("id", "")),
        "name": data.get("name") or "",
        "type": data.get("type") or "",
    }
    raw = data.get("value")
    options = (data.get("type_config") or {}).get("options") or []
    field_type = base["type"]

    if field_type in TEXT_TYPES:
        return TextField(**base, value=None if raw in (None, "") else str(raw))
    if field_type in NUMBER_TYPES:
        return NumberField(**base, value=_parse_number(raw))
    if field_type == "date":
        return DateField(**base, value=_parse_date(raw))
    if field_type == "drop_down":
        return DropDownField(**base, value=_selected_option(raw, options))
    if field_type == "labels":
        return LabelsField(**base, value=_selected_labels(raw, options))
    if field_type == "checkbox":
        return CheckboxField(**base, value=raw is True or str(raw).lower() == "true")
    if field_type in RELATIONSHIP_TYPES:
        related = [
            RelatedTask(id=str(task.get("id", "")), name=task.get("name") or "")
            for task in raw or []
            if isinstance(task, dict)
        ]
        return RelationshipField(**base, value=related)
    return UnknownField(**base, value=raw)


def parse_custom_fields(task: Dict[str, Any]) -> List[CustomField]:
    """Parse all custom fields of a ClickUp task."""
    return [parse_custom_field(data) for data in task.get("custom_fields") or []]


def find_field(
    fields: Iterable[CustomField], name_fragment: str, kind: Type[F] = CustomField
) -> Optional[F]:
    """
    Find the first field whose name contains name_fragment and whose kind matches.

    Matching is a case-insensitive substring test, so a fragment shared by
    several field names picks whichever comes first.

    Args:
        fields: Parsed custom fields
        name_fragment: Substring of the field name
        kind: CustomField subclass to accept (default: any)

    Returns:
        Matching field, or None
    """
    fragment = name_fragment.lower()
    for candidate in fields:
        if fragment in candidate.name.lower() and isinstance(candidate, kind):
            return candidate
    return None
