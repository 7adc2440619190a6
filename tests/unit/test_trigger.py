"""Tests for the Linear webhook trigger."""

import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest

from linear_node.observability.logging import StructuredFormatter, clear_log_context
from linear_node.transport.exceptions import ApiError, ValidationError
from linear_node.transport.signature import compute_webhook_signature
from linear_node.trigger import (
    EVENT_MAP,
    EVENT_RESOURCE_TYPES,
    InMemoryWebhookStore,
    LinearTrigger,
    TriggerConfig,
)

pytestmark = pytest.mark.asyncio

WEBHOOK_URL = "https://n8n.example.com/webhook/abc"


def _trigger(client, store=None, **config):
    settings = {"event": "issueCreated", "webhook_url": WEBHOOK_URL}
    settings.update(config)
    return LinearTrigger(client, TriggerConfig(**settings), store or InMemoryWebhookStore())


def _delivery(**overrides):
    body = {
        "type": "Issue",
        "action": "create",
        "data": {"id": "i1", "title": "Crash"},
        "createdAt": "2024-01-01T00:00:00.000Z",
        "organizationId": "org1",
        "webhookId": "w1",
        "webhookTimestamp": 1704067200000,
        "url": "https://linear.app/acme/issue/ENG-1",
    }
    body.update(overrides)
    return json.dumps(body)


def _response(body):
    resp = MagicMock()
    resp.json.return_value = body
    return resp


def _logged_fields():
    record = logging.LogRecord("linear_node.test", logging.INFO, __file__, 1, "x", None, None)
    return json.loads(StructuredFormatter().format(record))


class TestEventTables:
    async def test_resource_types(self):
        assert EVENT_RESOURCE_TYPES["issueCreated"] == "Issue"
        assert EVENT_RESOURCE_TYPES["projectUpdateRemoved"] == "ProjectUpdate"
        assert EVENT_RESOURCE_TYPES["issueLabelCreated"] == "IssueLabel"

    async def test_label_and_reaction_have_no_update(self):
        assert "IssueLabel:update" not in EVENT_MAP
        assert "Reaction:update" not in EVENT_MAP
        assert len(EVENT_MAP) == 25


class TestCheckExists:
    async def test_stored_webhook_matches(self, graphql, linear_client):
        graphql.data({"webhook": {"id": "w1", "url": WEBHOOK_URL, "enabled": True}})

        assert await _trigger(linear_client, InMemoryWebhookStore("w1")).check_exists() is True
        assert len(graphql.payloads) == 1

    async def test_stored_lookup_fails_then_found_by_url(self, graphql, linear_client):
        graphql.respond(
            {"errors": [{"message": "Entity not found"}]},
            {"data": {"webhooks": {"nodes": [
                {"id": "w0", "url": "https://other.example.com"},
                {"id": "w2", "url": WEBHOOK_URL},
            ]}}},
        )
        store = InMemoryWebhookStore("gone")

        assert await _trigger(linear_client, store).check_exists() is True
        assert store.get_webhook_id() == "w2"

    async def test_no_webhook(self, graphql, linear_client):
        graphql.data({"webhooks": {"nodes": []}})
        store = InMemoryWebhookStore()

        assert await _trigger(linear_client, store).check_exists() is False
        assert store.get_webhook_id() is None


class TestCreate:
    async def test_create_for_team_with_secret_and_label(self, graphql, linear_client):
        graphql.data({"webhookCreate": {"success": True, "webhook": {"id": "w9"}}})
        store = InMemoryWebhookStore()

        created = await _trigger(
            linear_client, store, event="commentUpdated", team_id="t1", secret="s", label="n8n",
        ).create()

        assert created is True
        assert store.get_webhook_id() == "w9"
        assert graphql.last_variables == {"input": {
            "url": WEBHOOK_URL,
            "resourceTypes": ["Comment"],
            "enabled": True,
            "teamId": "t1",
            "secret": "s",
            "label": "n8n",
        }}

    async def test_create_for_all_public_teams(self, graphql, linear_client):
        graphql.data({"webhookCreate": {"success": True, "webhook": {"id": "w9"}}})

        await _trigger(linear_client).create()

        variables = graphql.last_variables["input"]
        assert variables["allPublicTeams"] is True
        assert "teamId" not in variables
        assert "secret" not in variables

    async def test_unsuccessful_create(self, graphql, linear_client):
        graphql.data({"webhookCreate": {"success": False, "webhook": None}})
        store = InMemoryWebhookStore()

        with pytest.raises(ApiError, match="Failed to create webhook in Linear"):
            await _trigger(linear_client, store).create()

        assert store.get_webhook_id() is None

    async def test_unknown_event(self, graphql, linear_client):
        with pytest.raises(ValidationError, match="Unknown event type: issueExploded"):
            await _trigger(linear_client, event="issueExploded").create()

        assert graphql.payloads == []


class TestDelete:
    async def test_nothing_stored(self, graphql, linear_client):
        assert await _trigger(linear_client).delete() is True
        assert graphql.payloads == []

    async def test_delete_clears_id(self, graphql, linear_client):
        graphql.data({"webhookDelete": {"success": True}})
        store = InMemoryWebhookStore("w1")

        assert await _trigger(linear_client, store).delete() is True
        assert graphql.last_variables == {"id": "w1"}
        assert store.get_webhook_id() is None

    async def test_remote_failure_still_clears_id(self, graphql, linear_client):
        graphql.respond({"errors": [{"message": "Entity not found"}]})
        store = InMemoryWebhookStore("w1")

        assert await _trigger(linear_client, store).delete() is True
        assert store.get_webhook_id() is None


class TestHandleDelivery:
    async def test_matching_event(self, linear_client):
        result = _trigger(linear_client).handle_delivery(_delivery(), {})

        assert result.status == 200
        assert result.event == {
            "event": "issueCreated",
            "type": "Issue",
            "action": "create",
            "data": {"id": "i1", "title": "Crash"},
            "createdAt": "2024-01-01T00:00:00.000Z",
            "organizationId": "org1",
            "webhookId": "w1",
            "webhookTimestamp": 1704067200000,
            "url": "https://linear.app/acme/issue/ENG-1",
        }

    async def test_other_event_suppressed(self, linear_client):
        result = _trigger(linear_client).handle_delivery(_delivery(action="update"), {})

        assert result.status == 204
        assert result.event is None

    async def test_unmapped_event_suppressed(self, linear_client):
        result = _trigger(linear_client).handle_delivery(_delivery(type="Roadmap"), {})

        assert result.status == 204

    async def test_url_verification(self, linear_client):
        body = json.dumps({"type": "UrlVerification"})

        result = _trigger(linear_client).handle_delivery(body, {})

        assert result.status == 200
        assert result.body == {"success": True}
        assert result.event is None

    async def test_malformed_json(self, linear_client):
        result = _trigger(linear_client).handle_delivery(b"{not json", {})

        assert result.status == 400

    async def test_valid_signature(self, linear_client):
        raw = _delivery().encode()
        headers = {"Linear-Signature": compute_webhook_signature(raw, "s3cret")}

        result = _trigger(linear_client, secret="s3cret").handle_delivery(raw, headers)

        assert result.status == 200
        assert result.event["event"] == "issueCreated"

    async def test_invalid_signature(self, linear_client):
        result = _trigger(linear_client, secret="s3cret").handle_delivery(
            _delivery(), {"linear-signature": "0" * 64},
        )

        assert result.status == 401
        assert result.body == "Invalid signature"
        assert result.event is None

    async def test_missing_signature(self, linear_client):
        result = _trigger(linear_client, secret="s3cret").handle_delivery(_delivery(), {})

        assert result.status == 401

    async def test_verification_disabled(self, linear_client):
        result = _trigger(linear_client, secret="s3cret", verify_signature=False).handle_delivery(_delivery(), {})

        assert result.status == 200

    async def test_signature_checked_before_url_verification(self, linear_client):
        body = json.dumps({"type": "UrlVerification"})

        result = _trigger(linear_client, secret="s3cret").handle_delivery(body, {})

        assert result.status == 401


class TestUnexpectedFailures:
    """Errors outside the client's own hierarchy."""

    async def test_delete_clears_id_on_invalid_url(self, mock_http, linear_client):
        mock_http.post.side_effect = httpx.InvalidURL("bad url")
        store = InMemoryWebhookStore("wh_1")

        assert await _trigger(linear_client, store).delete() is True
        assert store.get_webhook_id() is None

    async def test_delete_clears_id_on_any_exception(self, mock_http, linear_client):
        mock_http.post.side_effect = RuntimeError("socket closed")
        store = InMemoryWebhookStore("wh_1")

        assert await _trigger(linear_client, store).delete() is True
        assert store.get_webhook_id() is None

    async def test_check_exists_falls_back_to_url_search(self, mock_http, linear_client):
        mock_http.post.side_effect = [
            RuntimeError("socket closed"),
            _response({"data": {"webhooks": {"nodes": [{"id": "w2", "url": WEBHOOK_URL}]}}}),
        ]
        store = InMemoryWebhookStore("w1")

        assert await _trigger(linear_client, store).check_exists() is True
        assert store.get_webhook_id() == "w2"


class TestDeliveryLogContext:
    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    async def test_webhook_id_cleared_after_matching_delivery(self, linear_client):
        _trigger(linear_client).handle_delivery(_delivery(), {})

        assert "webhook_id" not in _logged_fields()

    async def test_webhook_id_cleared_after_suppressed_delivery(self, linear_client):
        _trigger(linear_client).handle_delivery(_delivery(action="remove"), {})

        assert "webhook_id" not in _logged_fields()
