"""Notification inbox operations.

List filters are sent as a ``NotificationFilter`` variable; read/snooze times
are sent as ``DateTime`` variables rather than inlined into the document.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from ..transport.filters import build_notification_filter, format_date_for_linear
from ..transport.graphql import LinearGraphQLClient
from .base import (
    BaseResource,
    Operation,
    Parameters,
    entity_or_success,
    fields_schema,
    id_schema,
    list_schema,
    object_schema,
    payload_success,
)
from .fields import NOTIFICATION_FIELDS, PAGE_INFO
from .registry import register_resource

_LIST_NOTIFICATIONS_QUERY = f"""
query Notifications($first: Int, $after: String, $filter: NotificationFilter) {{
  notifications(first: $first, after: $after, filter: $filter) {{
    nodes {{ {NOTIFICATION_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_UPDATE_NOTIFICATION_MUTATION = f"""
mutation NotificationUpdate($id: String!, $input: NotificationUpdateInput!) {{
  notificationUpdate(id: $id, input: $input) {{
    success
    notification {{ {NOTIFICATION_FIELDS} }}
  }}
}}
"""

_MARK_ALL_READ_MUTATION = """
mutation NotificationUpdateAll($readAt: DateTime!) {
  notificationUpdateAll(input: { readAt: $readAt }) { success }
}
"""

_ARCHIVE_NOTIFICATION_MUTATION = f"""
mutation NotificationArchive($id: String!) {{
  notificationArchive(id: $id) {{
    success
    notification {{ {NOTIFICATION_FIELDS} }}
  }}
}}
"""

_UNARCHIVE_NOTIFICATION_MUTATION = f"""
mutation NotificationUnarchive($id: String!) {{
  notificationUnarchive(id: $id) {{
    success
    notification {{ {NOTIFICATION_FIELDS} }}
  }}
}}
"""


def _now() -> str:
    return format_date_for_linear(datetime.now(timezone.utc))


@register_resource
class NotificationsResource(BaseResource):

    @property
    def name(self) -> str:
        return "notifications"

    @property
    def display_name(self) -> str:
        return "Notifications"

    def get_operations(self) -> List[Operation]:
        notification_only = object_schema({"notificationId": id_schema("Notification ID")}, ["notificationId"])
        return [
            Operation(
                "listNotifications", "List Notifications", "List inbox notifications",
                self._list_notifications,
                list_schema({
                    "filters": fields_schema(
                        "type (list), readAt (read/unread/all), archivedAt (active/archived/all), "
                        "snoozedUntilAt (snoozed/notSnoozed/all)"
                    ),
                }),
            ),
            Operation(
                "markNotificationRead", "Mark as Read", "Mark a notification as read",
                self._mark_read, notification_only,
            ),
            Operation(
                "markAllNotificationsRead", "Mark All as Read", "Mark every notification as read",
                self._mark_all_read,
            ),
            Operation(
                "archiveNotification", "Archive", "Archive a notification",
                self._archive, notification_only,
            ),
            Operation(
                "unarchiveNotification", "Unarchive", "Unarchive a notification",
                self._unarchive, notification_only,
            ),
            Operation(
                "snoozeNotification", "Snooze", "Snooze a notification until a given time",
                self._snooze,
                object_schema(
                    {
                        "notificationId": id_schema("Notification ID"),
                        "snoozedUntilAt": {"type": "string", "format": "date-time"},
                    },
                    ["notificationId", "snoozedUntilAt"],
                ),
            ),
            Operation(
                "unsnoozeNotification", "Unsnooze", "Clear the snooze of a notification",
                self._unsnooze, notification_only,
            ),
        ]

    async def _update(self, client: LinearGraphQLClient, notification_id: str, input_data: Dict[str, Any]):
        data = await client.execute(
            _UPDATE_NOTIFICATION_MUTATION, {"id": notification_id, "input": input_data}
        )
        return entity_or_success(data, "notificationUpdate", "notification")

    async def _list_notifications(self, client: LinearGraphQLClient, params: Parameters) -> List[Dict[str, Any]]:
        filters = params.collection("filters")
        notification_filter = build_notification_filter(
            types=filters.get("type"),
            read_status=filters.get("readAt"),
            archived_status=filters.get("archivedAt"),
            snoozed_status=filters.get("snoozedUntilAt"),
        )
        return await client.paginate(
            _LIST_NOTIFICATIONS_QUERY,
            {"filter": notification_filter or None},
            "notifications",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )

    async def _mark_read(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("notificationId"), {"readAt": _now()})

    async def _mark_all_read(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_MARK_ALL_READ_MUTATION, {"readAt": _now()})
        return payload_success(data, "notificationUpdateAll")

    async def _archive(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_ARCHIVE_NOTIFICATION_MUTATION, {"id": params.require("notificationId")})
        return entity_or_success(data, "notificationArchive", "notification")

    async def _unarchive(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_UNARCHIVE_NOTIFICATION_MUTATION, {"id": params.require("notificationId")})
        return entity_or_success(data, "notificationUnarchive", "notification")

    async def _snooze(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        until = format_date_for_linear(params.require("snoozedUntilAt"))
        return await self._update(client, params.require("notificationId"), {"snoozedUntilAt": until})

    async def _unsnooze(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("notificationId"), {"snoozedUntilAt": None})
