"""Linear webhook trigger.

Manages the lifecycle of the Linear webhook backing a trigger (check, create,
delete) and turns incoming deliveries into trigger events.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from pydantic import BaseModel

from .observability.logging import clear_log_context, set_log_context
from .transport.exceptions import ApiError, ValidationError
from .transport.graphql import LinearGraphQLClient
from .transport.signature import verify_webhook_signature

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "linear-signature"

# "<type>:<action>" of a delivery -> trigger event name
EVENT_MAP: Dict[str, str] = {
    "Issue:create": "issueCreated",
    "Issue:update": "issueUpdated",
    "Issue:remove": "issueRemoved",
    "Comment:create": "commentCreated",
    "Comment:update": "commentUpdated",
    "Comment:remove": "commentRemoved",
    "Project:create": "projectCreated",
    "Project:update": "projectUpdated",
    "Project:remove": "projectRemoved",
    "ProjectUpdate:create": "projectUpdateCreated",
    "ProjectUpdate:update": "projectUpdateUpdated",
    "ProjectUpdate:remove": "projectUpdateRemoved",
    "Cycle:create": "cycleCreated",
    "Cycle:update": "cycleUpdated",
    "Cycle:remove": "cycleRemoved",
    "IssueLabel:create": "issueLabelCreated",
    "IssueLabel:remove": "issueLabelRemoved",
    "Reaction:create": "reactionCreated",
    "Reaction:remove": "reactionRemoved",
    "Attachment:create": "attachmentCreated",
    "Attachment:update": "attachmentUpdated",
    "Attachment:remove": "attachmentRemoved",
    "Document:create": "documentCreated",
    "Document:update": "documentUpdated",
    "Document:remove": "documentRemoved",
}

# Trigger event name -> webhook resource type
EVENT_RESOURCE_TYPES: Dict[str, str] = {
    event: key.split(":", 1)[0] for key, event in EVENT_MAP.items()
}

_GET_WEBHOOK_QUERY = """
query Webhook($id: String!) {
  webhook(id: $id) { id url enabled }
}
"""

_LIST_WEBHOOKS_QUERY = """
query Webhooks {
  webhooks { nodes { id url enabled } }
}
"""

_CREATE_WEBHOOK_MUTATION = """
mutation WebhookCreate($input: WebhookCreateInput!) {
  webhookCreate(input: $input) {
    success
    webhook { id url enabled }
  }
}
"""

_DELETE_WEBHOOK_MUTATION = """
mutation WebhookDelete($id: String!) {
  webhookDelete(id: $id) { success }
}
"""


class TriggerConfig(BaseModel):
    """Static configuration of one trigger."""

    event: str
    webhook_url: str
    team_id: Optional[str] = None
    secret: Optional[str] = None
    verify_signature: bool = True
    label: Optional[str] = None


class WebhookStore(Protocol):
    """Persistent per-trigger storage for the registered webhook id."""

    def get_webhook_id(self) -> Optional[str]:
        ...

    def set_webhook_id(self, webhook_id: str):
        ...

    def clear_webhook_id(self):
        ...


class InMemoryWebhookStore:
    """Process-local webhook id storage."""

    def __init__(self, webhook_id: Optional[str] = None):
        self.webhook_id = webhook_id

    def get_webhook_id(self) -> Optional[str]:
        return self.webhook_id

    def set_webhook_id(self, webhook_id: str):
        self.webhook_id = webhook_id

    def clear_webhook_id(self):
        self.webhook_id = None


@dataclass
class WebhookResponse:
    """HTTP response for a delivery plus the event to emit, if any."""

    status: int
    body: Optional[Union[str, Dict[str, Any]]] = None
    event: Optional[Dict[str, Any]] = None


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


class LinearTrigger:
    """Webhook-backed trigger for one configured Linear event."""

    def __init__(
        self,
        client: LinearGraphQLClient,
        config: TriggerConfig,
        store: Optional[WebhookStore] = None,
    ):
        self.client = client
        self.config = config
        self.store = store if store is not None else InMemoryWebhookStore()

    @property
    def resource_type(self) -> str:
        resource_type = EVENT_RESOURCE_TYPES.get(self.config.event)
        if resource_type is None:
            raise ValidationError(f"Unknown event type: {self.config.event}")
        return resource_type

    async def check_exists(self) -> bool:
        """Whether a webhook for this trigger's URL is registered.

        The stored id is checked first; a failed lookup falls through to a
        search by URL, which re-adopts a matching webhook's id.
        """
        webhook_id = self.store.get_webhook_id()
        if webhook_id:
            try:
                data = await self.client.execute(_GET_WEBHOOK_QUERY, {"id": webhook_id})
                webhook = data.get("webhook") or {}
                if webhook.get("url") == self.config.webhook_url:
                    return True
            except Exception as e:
                logger.info("Stored webhook %s not found: %s", webhook_id, e)

        data = await self.client.execute(_LIST_WEBHOOKS_QUERY, {})
        webhooks = (data.get("webhooks") or {}).get("nodes") or []
        for webhook in webhooks:
            if webhook.get("url") == self.config.webhook_url:
                self.store.set_webhook_id(webhook["id"])
                return True
        return False

    async def create(self) -> bool:
        """Register a webhook for the configured event and store its id.

        Raises:
            ValidationError: If the configured event is unknown.
            ApiError: If Linear reports the creation as unsuccessful.
        """
        input_data: Dict[str, Any] = {
            "url": self.config.webhook_url,
            "resourceTypes": [self.resource_type],
            "enabled": True,
        }
        if self.config.team_id:
            input_data["teamId"] = self.config.team_id
        else:
            input_data["allPublicTeams"] = True
        if self.config.secret:
            input_data["secret"] = self.config.secret
        if self.config.label:
            input_data["label"] = self.config.label

        data = await self.client.execute(_CREATE_WEBHOOK_MUTATION, {"input": input_data})
        payload = data.get("webhookCreate") or {}
        if not payload.get("success"):
            raise ApiError("Failed to create webhook in Linear")

        webhook_id = (payload.get("webhook") or {}).get("id")
        if not webhook_id:
            raise ApiError("Failed to create webhook in Linear")
        self.store.set_webhook_id(webhook_id)
        logger.info("Created Linear webhook %s for %s", webhook_id, self.config.event)
        return True

    async def delete(self) -> bool:
        """Delete the stored webhook. Remote failures are logged, not raised."""
        webhook_id = self.store.get_webhook_id()
        if not webhook_id:
            return True

        try:
            await self.client.execute(_DELETE_WEBHOOK_MUTATION, {"id": webhook_id})
        except Exception as e:
            logger.warning("Failed to delete Linear webhook %s: %s", webhook_id, e)

        self.store.clear_webhook_id()
        return True

    def handle_delivery(self, raw_body: Union[str, bytes], headers: Mapping[str, str]) -> WebhookResponse:
        """Turn one webhook delivery into a response and an optional event."""
        if self.config.secret and self.config.verify_signature:
            signature = _header(headers, SIGNATURE_HEADER)
            if not verify_webhook_signature(raw_body, signature, self.config.secret):
                logger.warning("Rejected webhook delivery with invalid signature")
                return WebhookResponse(status=401, body="Invalid signature")

        try:
            body = json.loads(raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return WebhookResponse(status=400, body="Invalid JSON body")
        if not isinstance(body, dict):
            return WebhookResponse(status=400, body="Invalid JSON body")

        if body.get("type") == "UrlVerification":
            return WebhookResponse(status=200, body={"success": True})

        if body.get("webhookId"):
            set_log_context(webhook_id=body["webhookId"])
        try:
            return self._match_event(body)
        finally:
            clear_log_context()

    def _match_event(self, body: Dict[str, Any]) -> WebhookResponse:
        event_type = body.get("type")
        action = body.get("action")
        event_name = EVENT_MAP.get(f"{event_type}:{action}")
        if event_name != self.config.event:
            logger.debug("Ignoring %s:%s delivery", event_type, action)
            return WebhookResponse(status=204)

        event = {
            "event": event_name,
            "type": event_type,
            "action": action,
            "data": body.get("data"),
            "createdAt": body.get("createdAt"),
            "organizationId": body.get("organizationId"),
            "webhookId": body.get("webhookId"),
            "webhookTimestamp": body.get("webhookTimestamp"),
            "url": body.get("url"),
        }
        return WebhookResponse(status=200, body={"received": True}, event=event)
