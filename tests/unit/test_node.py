"""Tests for LinearNode batch execution."""

import pytest

from linear_node.node import LinearNode
from linear_node.transport.credentials import Credentials
from linear_node.transport.exceptions import ApiError, ValidationError

pytestmark = pytest.mark.asyncio


@pytest.fixture
def node(linear_client):
    return LinearNode(client=linear_client)


class TestExecute:
    """Tests for LinearNode.execute()."""

    async def test_dict_result_is_one_item_per_input(self, graphql, node):
        graphql.data(
            {"team": {"id": "t1"}},
            {"team": {"id": "t2"}},
        )

        output = await node.execute("teams", "getTeam", [{"teamId": "t1"}, {"teamId": "t2"}])

        assert output == [
            {"json": {"id": "t1"}, "pairedItem": {"item": 0}},
            {"json": {"id": "t2"}, "pairedItem": {"item": 1}},
        ]

    async def test_list_result_is_expanded(self, graphql, node):
        graphql.data({"webhooks": {"nodes": [{"id": "w1"}, {"id": "w2"}], "pageInfo": {"hasNextPage": False}}})

        output = await node.execute("webhooks", "listWebhooks", [{}])

        assert output == [
            {"json": {"id": "w1"}, "pairedItem": {"item": 0}},
            {"json": {"id": "w2"}, "pairedItem": {"item": 0}},
        ]

    async def test_failure_raises_by_default(self, graphql, node):
        graphql.respond({"errors": [{"message": "Entity not found"}]})

        with pytest.raises(ApiError, match="Entity not found"):
            await node.execute("teams", "getTeam", [{"teamId": "nope"}])

    async def test_continue_on_fail(self, graphql, node):
        """A failed item yields an error item and later items still run."""
        graphql.respond(
            {"errors": [{"message": "Entity not found"}]},
            {"data": {"team": {"id": "t2"}}},
        )

        output = await node.execute(
            "teams", "getTeam", [{"teamId": "nope"}, {"teamId": "t2"}], continue_on_fail=True,
        )

        assert output == [
            {"json": {"error": "Linear API Error: Entity not found"}, "pairedItem": {"item": 0}},
            {"json": {"id": "t2"}, "pairedItem": {"item": 1}},
        ]

    async def test_validation_error_with_continue_on_fail(self, graphql, node):
        output = await node.execute("teams", "getTeam", [{}], continue_on_fail=True)

        assert output == [
            {"json": {"error": "Missing required parameter: teamId"}, "pairedItem": {"item": 0}},
        ]
        assert graphql.payloads == []

    async def test_unknown_resource(self, node):
        with pytest.raises(ValidationError, match="Unknown resource: widgets"):
            await node.execute("widgets", "list", [{}])

    async def test_no_items(self, node):
        assert await node.execute("teams", "listTeams", []) == []

    async def test_client_from_credentials(self):
        node = LinearNode(credentials=Credentials(api_key="k"))

        assert node.client.credentials.api_key == "k"


class TestDescribeAndLoadOptions:
    async def test_describe(self, node):
        values = [entry["value"] for entry in node.describe()]

        assert "issues" in values
        assert "webhooks" in values

    async def test_load_options(self, graphql, node):
        graphql.data({"teams": {"nodes": [{"id": "t1", "name": "Eng", "key": "ENG"}]}})

        assert await node.load_options("getTeams") == [{"name": "Eng (ENG)", "value": "t1"}]

    async def test_team_scoped_load_options(self, graphql, node):
        graphql.data({"team": {"cycles": {"nodes": [{"id": "c1", "name": None, "number": 3}]}}})

        result = await node.load_options("getTeamCycles", team_id="t1")

        assert result == [{"name": "Cycle 3", "value": "c1"}]
        assert graphql.last_variables == {"teamId": "t1"}

    async def test_unknown_load_options_method(self, node):
        with pytest.raises(ValidationError):
            await node.load_options("getRoadmaps")
