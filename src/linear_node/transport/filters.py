"""Filter construction and small value helpers for Linear requests."""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Union

_ISSUE_IDENTIFIER = re.compile(r"^([A-Z]+)-(\d+)$")

# key -> (filter field, sub-field, comparator)
_SIMPLE_FILTERS = {
    "teamId": ("team", "id", "eq"),
    "teamIds": ("team", "id", "in"),
    "assigneeId": ("assignee", "id", "eq"),
    "creatorId": ("creator", "id", "eq"),
    "projectId": ("project", "id", "eq"),
    "cycleId": ("cycle", "id", "eq"),
    "stateId": ("state", "id", "eq"),
    "labelIds": ("labels", "id", "in"),
}

# key -> (filter field, comparator), merged into a shared sub-object
_RANGE_FILTERS = {
    "priorityGte": ("priority", "gte"),
    "priorityLte": ("priority", "lte"),
    "createdAfter": ("createdAt", "gt"),
    "createdBefore": ("createdAt", "lt"),
    "updatedAfter": ("updatedAt", "gt"),
    "updatedBefore": ("updatedAt", "lt"),
}


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def build_filter(params: Dict[str, Any]) -> Dict[str, Any]:
    """Translate flat user parameters into a Linear GraphQL filter object.

    Keys are processed in insertion order, so a later ``priority`` overwrites
    earlier ``priorityGte``/``priorityLte`` bounds and vice versa.
    """
    result: Dict[str, Any] = {}

    for key, value in params.items():
        if _is_blank(value) or key == "includeArchived":
            continue

        if key in _SIMPLE_FILTERS:
            field, sub, op = _SIMPLE_FILTERS[key]
            result[field] = {sub: {op: value}}
        elif key == "priority":
            result["priority"] = {"eq": value}
        elif key in _RANGE_FILTERS:
            field, op = _RANGE_FILTERS[key]
            result[field] = {**(result.get(field) or {}), op: value}
        elif key == "searchQuery":
            result["searchableContent"] = {"contains": value}
        elif key == "titleContains":
            result["title"] = {"containsIgnoreCase": value}
        elif isinstance(value, dict):
            result[key] = value
        else:
            result[key] = {"eq": value}

    return result


def clean_object(obj: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` and empty-string values. ``0``, ``False`` and ``[]`` are kept."""
    return {k: v for k, v in obj.items() if not _is_blank(v)}


def parse_issue_identifier(identifier: str) -> Optional[Dict[str, Any]]:
    """Split ``ENG-123`` into team key and number; ``None`` for anything else."""
    match = _ISSUE_IDENTIFIER.match(identifier)
    if not match:
        return None
    return {"teamKey": match.group(1), "issueNumber": int(match.group(2))}


def format_date_for_linear(value: Union[str, int, float, datetime]) -> str:
    """Render a date as ISO-8601 UTC with millisecond precision, e.g.
    ``2024-01-02T03:04:05.000Z``.

    Accepts datetimes (naive ones are taken as UTC), ISO strings and epoch
    milliseconds.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def build_notification_filter(
    types: Optional[Iterable[str]] = None,
    read_status: Optional[str] = None,
    archived_status: Optional[str] = None,
    snoozed_status: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a ``NotificationFilter`` value.

    Args:
        types: Notification types to include.
        read_status: "read", "unread" or "all"/None.
        archived_status: "archived", "active" or "all"/None.
        snoozed_status: "snoozed", "notSnoozed" or "all"/None.
    """
    result: Dict[str, Any] = {}
    types = list(types or [])
    if types:
        result["type"] = {"in": types}
    if read_status == "read":
        result["readAt"] = {"null": False}
    elif read_status == "unread":
        result["readAt"] = {"null": True}
    if archived_status == "archived":
        result["archivedAt"] = {"null": False}
    elif archived_status == "active":
        result["archivedAt"] = {"null": True}
    if snoozed_status == "snoozed":
        result["snoozedUntilAt"] = {"null": False}
    elif snoozed_status == "notSnoozed":
        result["snoozedUntilAt"] = {"null": True}
    return result
