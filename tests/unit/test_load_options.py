"""Tests for dropdown option loaders."""

import pytest

from linear_node.resources.load_options import (
    LOAD_OPTIONS,
    get_cycles,
    get_issues,
    get_labels,
    get_team_labels,
    get_team_workflow_states,
    get_teams,
    get_users,
    get_workflow_states,
)

pytestmark = pytest.mark.asyncio


class TestOrganizationLoaders:
    async def test_teams(self, graphql, linear_client):
        graphql.data({"teams": {"nodes": [{"id": "t1", "name": "Engineering", "key": "ENG"}]}})

        assert await get_teams(linear_client) == [{"name": "Engineering (ENG)", "value": "t1"}]

    async def test_users_active_only(self, graphql, linear_client):
        graphql.data({"users": {"nodes": [
            {"id": "u1", "name": "Ada", "email": "ada@example.com", "active": True},
            {"id": "u2", "name": "Bob", "email": "bob@example.com", "active": False},
        ]}})

        assert await get_users(linear_client) == [{"name": "Ada (ada@example.com)", "value": "u1"}]

    async def test_cycles_fall_back_to_number(self, graphql, linear_client):
        graphql.data({"cycles": {"nodes": [
            {"id": "c1", "name": None, "number": 7, "team": {"key": "ENG"}},
            {"id": "c2", "name": "Sprint", "number": 8, "team": None},
        ]}})

        assert await get_cycles(linear_client) == [
            {"name": "ENG - Cycle 7", "value": "c1"},
            {"name": "Unknown - Sprint", "value": "c2"},
        ]

    async def test_labels_prefixed_with_team_key(self, graphql, linear_client):
        graphql.data({"issueLabels": {"nodes": [
            {"id": "l1", "name": "bug", "team": {"key": "ENG"}},
            {"id": "l2", "name": "urgent", "team": None},
        ]}})

        assert await get_labels(linear_client) == [
            {"name": "ENG - bug", "value": "l1"},
            {"name": "urgent", "value": "l2"},
        ]

    async def test_workflow_states(self, graphql, linear_client):
        graphql.data({"workflowStates": {"nodes": [
            {"id": "s1", "name": "Todo", "type": "unstarted", "team": {"key": "ENG"}},
        ]}})

        assert await get_workflow_states(linear_client) == [{"name": "ENG - Todo (unstarted)", "value": "s1"}]

    async def test_issues(self, graphql, linear_client):
        graphql.data({"issues": {"nodes": [{"id": "i1", "identifier": "ENG-1", "title": "Crash"}]}})

        assert await get_issues(linear_client) == [{"name": "ENG-1: Crash", "value": "i1"}]
        assert "first: 100" in graphql.last_query


class TestTeamScopedLoaders:
    async def test_team_states(self, graphql, linear_client):
        graphql.data({"team": {"states": {"nodes": [{"id": "s1", "name": "Done", "type": "completed"}]}}})

        result = await get_team_workflow_states(linear_client, "t1")

        assert result == [{"name": "Done (completed)", "value": "s1"}]
        assert graphql.last_variables == {"teamId": "t1"}

    async def test_team_labels_without_team_falls_back(self, graphql, linear_client):
        graphql.data({"issueLabels": {"nodes": [{"id": "l1", "name": "bug", "team": None}]}})

        result = await get_team_labels(linear_client)

        assert result == [{"name": "bug", "value": "l1"}]
        assert "issueLabels" in graphql.last_query

    async def test_registry_names(self):
        assert set(LOAD_OPTIONS) == {
            "getTeams", "getUsers", "getProjects", "getCycles", "getLabels", "getWorkflowStates",
            "getIssues", "getTeamWorkflowStates", "getTeamLabels", "getTeamCycles",
        }
