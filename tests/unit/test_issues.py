"""Tests for the issues resource."""

import pytest

from linear_node.resources import Parameters, resource_registry
from linear_node.transport.exceptions import NotFoundError, ValidationError

pytestmark = pytest.mark.asyncio


async def _run(client, operation, **params):
    resource = resource_registry.require_resource("issues")
    return await resource.execute(client, operation, Parameters(params))


def _connection(*nodes, has_next=False):
    return {"nodes": list(nodes), "pageInfo": {"hasNextPage": has_next, "endCursor": None}}


class TestListIssues:
    async def test_filters_become_issue_filter(self, graphql, linear_client):
        graphql.data({"issues": _connection({"id": "i1"})})

        result = await _run(
            linear_client, "listIssues",
            limit=10,
            filters={"teamId": "t1", "priorityGte": 2, "includeArchived": True},
        )

        assert result == {"issues": [{"id": "i1"}]}
        assert graphql.last_variables == {
            "filter": {"team": {"id": {"eq": "t1"}}, "priority": {"gte": 2}},
            "includeArchived": True,
            "first": 10,
            "after": None,
        }

    async def test_no_filters_sends_null_filter(self, graphql, linear_client):
        graphql.data({"issues": _connection()})

        result = await _run(linear_client, "listIssues")

        assert result == {"issues": []}
        assert graphql.last_variables["filter"] is None
        assert graphql.last_variables["includeArchived"] is False
        assert graphql.last_variables["first"] == 50


class TestGetIssue:
    async def test_by_identifier(self, graphql, linear_client):
        """TEAM-123 is resolved through a team key + number filter."""
        graphql.data({"issues": {"nodes": [{"id": "i1", "identifier": "ENG-123"}]}})

        result = await _run(linear_client, "getIssue", issueId="ENG-123")

        assert result == {"id": "i1", "identifier": "ENG-123"}
        assert graphql.last_variables == {
            "filter": {"team": {"key": {"eq": "ENG"}}, "number": {"eq": 123}},
        }

    async def test_identifier_not_found(self, graphql, linear_client):
        graphql.data({"issues": {"nodes": []}})

        with pytest.raises(NotFoundError, match="Issue ENG-999 not found"):
            await _run(linear_client, "getIssue", issueId="ENG-999")

    async def test_by_uuid(self, graphql, linear_client):
        graphql.data({"issue": {"id": "uuid-1", "title": "Bug"}})

        result = await _run(linear_client, "getIssue", issueId="uuid-1")

        assert result == {"id": "uuid-1", "title": "Bug"}
        assert graphql.last_variables == {"id": "uuid-1"}
        assert "issue(id: $id)" in graphql.last_query

    async def test_uuid_not_found(self, graphql, linear_client):
        graphql.data({"issue": None})

        with pytest.raises(NotFoundError):
            await _run(linear_client, "getIssue", issueId="uuid-1")


class TestIssueMutations:
    async def test_create_issue(self, graphql, linear_client):
        graphql.data({"issueCreate": {"success": True, "issue": {"id": "i1"}}})

        result = await _run(
            linear_client, "createIssue",
            teamId="t1", title="Bug",
            additionalFields={"description": "Steps", "priority": 0, "assigneeId": ""},
        )

        assert result == {"id": "i1"}
        assert graphql.last_variables == {
            "input": {"teamId": "t1", "title": "Bug", "description": "Steps", "priority": 0},
        }

    async def test_create_issue_requires_title(self, graphql, linear_client):
        with pytest.raises(ValidationError, match="title"):
            await _run(linear_client, "createIssue", teamId="t1")

        assert graphql.payloads == []

    async def test_update_issue(self, graphql, linear_client):
        graphql.data({"issueUpdate": {"success": True, "issue": {"id": "i1", "title": "New"}}})

        result = await _run(linear_client, "updateIssue", issueId="i1", updateFields={"title": "New"})

        assert result["title"] == "New"
        assert graphql.last_variables == {"id": "i1", "input": {"title": "New"}}

    async def test_delete_issue(self, graphql, linear_client):
        graphql.data({"issueDelete": {"success": True}})

        assert await _run(linear_client, "deleteIssue", issueId="i1") == {"success": True}

    async def test_archive_issue_returns_entity(self, graphql, linear_client):
        graphql.data({"issueArchive": {"success": True, "entity": {"id": "i1", "archivedAt": "2024-01-01"}}})

        result = await _run(linear_client, "archiveIssue", issueId="i1")

        assert result == {"id": "i1", "archivedAt": "2024-01-01"}

    async def test_add_label(self, graphql, linear_client):
        graphql.data({"issueAddLabel": {"success": True, "issue": {"id": "i1"}}})

        await _run(linear_client, "addIssueLabel", issueId="i1", labelId="l1")

        assert graphql.last_variables == {"id": "i1", "labelId": "l1"}
        assert "issueAddLabel" in graphql.last_query

    async def test_add_subscriber(self, graphql, linear_client):
        graphql.data({"issueSubscribe": {"success": True, "issue": {"id": "i1"}}})

        await _run(linear_client, "addIssueSubscriber", issueId="i1", userId="u1")

        assert graphql.last_variables == {"id": "i1", "userId": "u1"}


class TestIssueShortcuts:
    """Shortcut operations update a single issue field."""

    @pytest.mark.parametrize("operation, params, expected_input", [
        ("setIssuePriority", {"priority": 0}, {"priority": 0}),
        ("setIssueState", {"stateId": "s1"}, {"stateId": "s1"}),
        ("assignIssue", {"userId": "u1"}, {"assigneeId": "u1"}),
        ("unassignIssue", {}, {"assigneeId": None}),
        ("moveIssueToProject", {"projectId": "p1"}, {"projectId": "p1"}),
        ("moveIssueToTeam", {"teamId": "t2"}, {"teamId": "t2"}),
        ("setIssueParent", {"parentId": "i0"}, {"parentId": "i0"}),
    ])
    async def test_shortcut(self, graphql, linear_client, operation, params, expected_input):
        graphql.data({"issueUpdate": {"success": True, "issue": {"id": "i1"}}})

        result = await _run(linear_client, operation, issueId="i1", **params)

        assert result == {"id": "i1"}
        assert graphql.last_variables == {"id": "i1", "input": expected_input}


class TestIssueRelations:
    async def test_add_relation(self, graphql, linear_client):
        graphql.data({"issueRelationCreate": {"success": True, "issueRelation": {"id": "r1", "type": "blocks"}}})

        result = await _run(
            linear_client, "addIssueRelation", issueId="i1", relatedIssueId="i2", relationType="blocks",
        )

        assert result == {"id": "r1", "type": "blocks"}
        assert graphql.last_variables == {"input": {"issueId": "i1", "relatedIssueId": "i2", "type": "blocks"}}

    async def test_remove_relation(self, graphql, linear_client):
        graphql.data(
            {"issue": {"relations": {"nodes": [
                {"id": "r0", "relatedIssue": {"id": "i9"}},
                {"id": "r1", "relatedIssue": {"id": "i2"}},
            ]}}},
            {"issueRelationDelete": {"success": True}},
        )

        result = await _run(linear_client, "removeIssueRelation", issueId="i1", relatedIssueId="i2")

        assert result == {"success": True}
        assert graphql.last_variables == {"id": "r1"}

    async def test_remove_missing_relation(self, graphql, linear_client):
        graphql.data({"issue": {"relations": {"nodes": []}}})

        result = await _run(linear_client, "removeIssueRelation", issueId="i1", relatedIssueId="i2")

        assert result == {"success": False, "message": "Relation not found"}
        assert len(graphql.payloads) == 1
