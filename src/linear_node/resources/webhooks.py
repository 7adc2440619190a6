"""Webhook management operations."""

from typing import Any, Dict, List

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
)
from .fields import PAGE_INFO, WEBHOOK_FIELDS
from .registry import register_resource

WEBHOOK_RESOURCE_TYPES = [
    "Issue",
    "Comment",
    "IssueLabel",
    "Project",
    "ProjectUpdate",
    "Cycle",
    "Reaction",
    "Attachment",
    "Document",
]

_LIST_WEBHOOKS_QUERY = f"""
query Webhooks($first: Int, $after: String) {{
  webhooks(first: $first, after: $after) {{
    nodes {{ {WEBHOOK_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_WEBHOOK_QUERY = f"""
query Webhook($id: String!) {{
  webhook(id: $id) {{ {WEBHOOK_FIELDS} }}
}}
"""

_CREATE_WEBHOOK_MUTATION = f"""
mutation WebhookCreate($input: WebhookCreateInput!) {{
  webhookCreate(input: $input) {{
    success
    webhook {{ {WEBHOOK_FIELDS} }}
  }}
}}
"""

_UPDATE_WEBHOOK_MUTATION = f"""
mutation WebhookUpdate($id: String!, $input: WebhookUpdateInput!) {{
  webhookUpdate(id: $id, input: $input) {{
    success
    webhook {{ {WEBHOOK_FIELDS} }}
  }}
}}
"""

_DELETE_WEBHOOK_MUTATION = """
mutation WebhookDelete($id: String!) {
  webhookDelete(id: $id) { success }
}
"""

_RESOURCE_TYPES = {"type": "array", "items": {"type": "string", "enum": WEBHOOK_RESOURCE_TYPES}}


@register_resource
class WebhooksResource(BaseResource):

    @property
    def name(self) -> str:
        return "webhooks"

    @property
    def display_name(self) -> str:
        return "Webhooks"

    def get_operations(self) -> List[Operation]:
        webhook_only = object_schema({"webhookId": id_schema("Webhook ID")}, ["webhookId"])
        return [
            Operation("listWebhooks", "List Webhooks", "List webhooks", self._list_webhooks, list_schema()),
            Operation("getWebhook", "Get Webhook", "Get a webhook", self._get_webhook, webhook_only),
            Operation(
                "createWebhook", "Create Webhook", "Register a webhook for a team or all public teams",
                self._create_webhook,
                object_schema(
                    {
                        "url": {"type": "string", "description": "Delivery URL"},
                        "resourceTypes": _RESOURCE_TYPES,
                        "teamId": id_schema("Team ID (omit for all public teams)"),
                        "label": {"type": "string"},
                        "secret": {"type": "string", "description": "Signing secret"},
                        "enabled": {"type": "boolean", "default": True},
                    },
                    ["url", "resourceTypes"],
                ),
            ),
            Operation(
                "updateWebhook", "Update Webhook", "Update a webhook",
                self._update_webhook,
                object_schema(
                    {
                        "webhookId": id_schema("Webhook ID"),
                        "updateFields": fields_schema("url, label, secret, enabled, resourceTypes"),
                    },
                    ["webhookId"],
                ),
            ),
            Operation("deleteWebhook", "Delete Webhook", "Delete a webhook", self._delete_webhook, webhook_only),
        ]

    async def _list_webhooks(self, client: LinearGraphQLClient, params: Parameters) -> List[Dict[str, Any]]:
        return await client.paginate(
            _LIST_WEBHOOKS_QUERY,
            {},
            "webhooks",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )

    async def _get_webhook(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_WEBHOOK_QUERY, {"id": params.require("webhookId")})
        return data.get("webhook") or {}

    async def _create_webhook(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data: Dict[str, Any] = {
            "url": params.require("url"),
            "resourceTypes": params.require("resourceTypes"),
            "enabled": params.get("enabled", True),
        }
        team_id = params.get("teamId")
        if team_id:
            input_data["teamId"] = team_id
        else:
            input_data["allPublicTeams"] = True
        for key in ("label", "secret"):
            if params.get(key):
                input_data[key] = params.get(key)

        data = await client.execute(_CREATE_WEBHOOK_MUTATION, {"input": input_data})
        return entity_or_success(data, "webhookCreate", "webhook")

    async def _update_webhook(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        """Send only the fields the caller provided."""
        fields = params.collection("updateFields")
        input_data: Dict[str, Any] = {}
        if fields.get("url"):
            input_data["url"] = fields["url"]
        if "label" in fields:
            input_data["label"] = fields["label"]
        if fields.get("secret"):
            input_data["secret"] = fields["secret"]
        if "enabled" in fields:
            input_data["enabled"] = fields["enabled"]
        if fields.get("resourceTypes"):
            input_data["resourceTypes"] = fields["resourceTypes"]

        data = await client.execute(
            _UPDATE_WEBHOOK_MUTATION, {"id": params.require("webhookId"), "input": input_data}
        )
        return entity_or_success(data, "webhookUpdate", "webhook")

    async def _delete_webhook(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        webhook_id = params.require("webhookId")
        data = await client.execute(_DELETE_WEBHOOK_MUTATION, {"id": webhook_id})
        return {"success": bool((data.get("webhookDelete") or {}).get("success")), "id": webhook_id}
