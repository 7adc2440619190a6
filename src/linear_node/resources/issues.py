"""Issue operations.

Linear priority values: 0=No priority, 1=Urgent, 2=High, 3=Medium, 4=Low.
Single-field shortcuts (priority, state, assignee, project, team, parent) all
go through ``issueUpdate``.
"""

import logging
from typing import Any, Dict, List

from ..transport.exceptions import NotFoundError
from ..transport.filters import build_filter, clean_object, parse_issue_identifier
from ..transport.graphql import LinearGraphQLClient
from .base import (
    PRIORITY_SCHEMA,
    RELATION_TYPES,
    BaseResource,
    Operation,
    Parameters,
    archive_entity,
    fields_schema,
    id_schema,
    list_schema,
    nodes_of,
    object_schema,
    payload_entity,
    payload_success,
)
from .fields import ISSUE_FIELDS, PAGE_INFO
from .registry import register_resource

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

_LIST_ISSUES_QUERY = f"""
query Issues($first: Int, $after: String, $filter: IssueFilter, $includeArchived: Boolean) {{
  issues(first: $first, after: $after, filter: $filter, includeArchived: $includeArchived) {{
    nodes {{ {ISSUE_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_ISSUE_QUERY = f"""
query Issue($id: String!) {{
  issue(id: $id) {{ {ISSUE_FIELDS} }}
}}
"""

_FIND_ISSUE_BY_IDENTIFIER_QUERY = f"""
query IssueByIdentifier($filter: IssueFilter) {{
  issues(first: 1, filter: $filter) {{
    nodes {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_ISSUE_RELATIONS_QUERY = """
query IssueRelations($id: String!) {
  issue(id: $id) {
    relations {
      nodes {
        id
        relatedIssue { id }
      }
    }
  }
}
"""

# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

_CREATE_ISSUE_MUTATION = f"""
mutation IssueCreate($input: IssueCreateInput!) {{
  issueCreate(input: $input) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_UPDATE_ISSUE_MUTATION = f"""
mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) {{
  issueUpdate(id: $id, input: $input) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_DELETE_ISSUE_MUTATION = """
mutation IssueDelete($id: String!) {
  issueDelete(id: $id) { success }
}
"""

_ARCHIVE_ISSUE_MUTATION = f"""
mutation IssueArchive($id: String!) {{
  issueArchive(id: $id) {{
    success
    entity {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_UNARCHIVE_ISSUE_MUTATION = f"""
mutation IssueUnarchive($id: String!) {{
  issueUnarchive(id: $id) {{
    success
    entity {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_ADD_LABEL_MUTATION = f"""
mutation IssueAddLabel($id: String!, $labelId: String!) {{
  issueAddLabel(id: $id, labelId: $labelId) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_REMOVE_LABEL_MUTATION = f"""
mutation IssueRemoveLabel($id: String!, $labelId: String!) {{
  issueRemoveLabel(id: $id, labelId: $labelId) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_SUBSCRIBE_MUTATION = f"""
mutation IssueSubscribe($id: String!, $userId: String!) {{
  issueSubscribe(id: $id, userId: $userId) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_UNSUBSCRIBE_MUTATION = f"""
mutation IssueUnsubscribe($id: String!, $userId: String!) {{
  issueUnsubscribe(id: $id, userId: $userId) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_CREATE_RELATION_MUTATION = """
mutation IssueRelationCreate($input: IssueRelationCreateInput!) {
  issueRelationCreate(input: $input) {
    success
    issueRelation {
      id
      type
      issue { id identifier }
      relatedIssue { id identifier }
    }
  }
}
"""

_DELETE_RELATION_MUTATION = """
mutation IssueRelationDelete($id: String!) {
  issueRelationDelete(id: $id) { success }
}
"""

_ISSUE_ID = id_schema("Issue ID or identifier (e.g. ENG-123)")


@register_resource
class IssuesResource(BaseResource):
    """Create, query and modify Linear issues."""

    @property
    def name(self) -> str:
        return "issues"

    @property
    def display_name(self) -> str:
        return "Issues"

    def get_operations(self) -> List[Operation]:
        issue_only = object_schema({"issueId": _ISSUE_ID}, ["issueId"])
        issue_label = object_schema(
            {"issueId": _ISSUE_ID, "labelId": id_schema("Label ID")},
            ["issueId", "labelId"],
        )
        issue_user = object_schema(
            {"issueId": _ISSUE_ID, "userId": id_schema("User ID")},
            ["issueId", "userId"],
        )
        return [
            Operation(
                "listIssues", "List Issues", "List issues with optional filters",
                self._list_issues,
                list_schema({"filters": fields_schema("Filter parameters (teamId, assigneeId, priorityGte, ...)")}),
            ),
            Operation(
                "getIssue", "Get Issue", "Get an issue by ID or identifier",
                self._get_issue, issue_only,
            ),
            Operation(
                "createIssue", "Create Issue", "Create a new issue",
                self._create_issue,
                object_schema(
                    {
                        "teamId": id_schema("Team to create the issue in"),
                        "title": {"type": "string", "description": "Issue title"},
                        "additionalFields": fields_schema(),
                    },
                    ["teamId", "title"],
                ),
            ),
            Operation(
                "updateIssue", "Update Issue", "Update an existing issue",
                self._update_issue,
                object_schema({"issueId": _ISSUE_ID, "updateFields": fields_schema("Fields to update")}, ["issueId"]),
            ),
            Operation("deleteIssue", "Delete Issue", "Delete an issue", self._delete_issue, issue_only),
            Operation("archiveIssue", "Archive Issue", "Archive an issue", self._archive_issue, issue_only),
            Operation("unarchiveIssue", "Unarchive Issue", "Unarchive an issue", self._unarchive_issue, issue_only),
            Operation("addIssueLabel", "Add Issue Label", "Add a label to an issue", self._add_label, issue_label),
            Operation(
                "removeIssueLabel", "Remove Issue Label", "Remove a label from an issue",
                self._remove_label, issue_label,
            ),
            Operation(
                "addIssueSubscriber", "Add Issue Subscriber", "Subscribe a user to an issue",
                self._add_subscriber, issue_user,
            ),
            Operation(
                "removeIssueSubscriber", "Remove Issue Subscriber", "Unsubscribe a user from an issue",
                self._remove_subscriber, issue_user,
            ),
            Operation(
                "setIssuePriority", "Set Issue Priority", "Set the priority of an issue",
                self._set_priority,
                object_schema({"issueId": _ISSUE_ID, "priority": PRIORITY_SCHEMA}, ["issueId", "priority"]),
            ),
            Operation(
                "setIssueState", "Set Issue State", "Move an issue to a workflow state",
                self._set_state,
                object_schema({"issueId": _ISSUE_ID, "stateId": id_schema("Workflow state ID")}, ["issueId", "stateId"]),
            ),
            Operation("assignIssue", "Assign Issue", "Assign an issue to a user", self._assign, issue_user),
            Operation("unassignIssue", "Unassign Issue", "Remove the assignee of an issue", self._unassign, issue_only),
            Operation(
                "moveIssueToProject", "Move Issue to Project", "Move an issue to a project",
                self._move_to_project,
                object_schema({"issueId": _ISSUE_ID, "projectId": id_schema("Project ID")}, ["issueId", "projectId"]),
            ),
            Operation(
                "moveIssueToTeam", "Move Issue to Team", "Move an issue to another team",
                self._move_to_team,
                object_schema({"issueId": _ISSUE_ID, "teamId": id_schema("Team ID")}, ["issueId", "teamId"]),
            ),
            Operation(
                "setIssueParent", "Set Issue Parent", "Make an issue a sub-issue of another",
                self._set_parent,
                object_schema({"issueId": _ISSUE_ID, "parentId": id_schema("Parent issue ID")}, ["issueId", "parentId"]),
            ),
            Operation(
                "addIssueRelation", "Add Issue Relation", "Relate two issues",
                self._add_relation,
                object_schema(
                    {
                        "issueId": _ISSUE_ID,
                        "relatedIssueId": id_schema("Related issue ID"),
                        "relationType": {"type": "string", "enum": RELATION_TYPES},
                    },
                    ["issueId", "relatedIssueId", "relationType"],
                ),
            ),
            Operation(
                "removeIssueRelation", "Remove Issue Relation", "Remove the relation between two issues",
                self._remove_relation,
                object_schema(
                    {"issueId": _ISSUE_ID, "relatedIssueId": id_schema("Related issue ID")},
                    ["issueId", "relatedIssueId"],
                ),
            ),
        ]

    # -- helpers -----------------------------------------------------------

    async def _update(
        self, client: LinearGraphQLClient, issue_id: str, input_data: Dict[str, Any]
    ) -> Dict[str, Any]:
        data = await client.execute(_UPDATE_ISSUE_MUTATION, {"id": issue_id, "input": input_data})
        return payload_entity(data, "issueUpdate", "issue")

    # -- Operation handlers -------------------------------------------------

    async def _list_issues(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        filters = params.collection("filters")
        issue_filter = build_filter(filters)
        issues = await client.paginate(
            _LIST_ISSUES_QUERY,
            {
                "filter": issue_filter or None,
                "includeArchived": filters.get("includeArchived") is True,
            },
            "issues",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"issues": issues}

    async def _get_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        """Fetch by UUID, or resolve a ``TEAM-123`` identifier via team key + number."""
        issue_id = params.require("issueId")
        parsed = parse_issue_identifier(issue_id)

        if parsed:
            data = await client.execute(
                _FIND_ISSUE_BY_IDENTIFIER_QUERY,
                {
                    "filter": {
                        "team": {"key": {"eq": parsed["teamKey"]}},
                        "number": {"eq": parsed["issueNumber"]},
                    }
                },
            )
            matches = nodes_of(data, "issues")
            if not matches:
                raise NotFoundError(f"Issue {issue_id} not found")
            return matches[0]

        data = await client.execute(_GET_ISSUE_QUERY, {"id": issue_id})
        issue = data.get("issue")
        if not issue:
            raise NotFoundError(f"Issue {issue_id} not found")
        return issue

    async def _create_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "teamId": params.require("teamId"),
            "title": params.require("title"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_ISSUE_MUTATION, {"input": input_data})
        return payload_entity(data, "issueCreate", "issue")

    async def _update_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(
            client, params.require("issueId"), clean_object(params.collection("updateFields"))
        )

    async def _delete_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_ISSUE_MUTATION, {"id": params.require("issueId")})
        return payload_success(data, "issueDelete")

    async def _archive_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_ARCHIVE_ISSUE_MUTATION, {"id": params.require("issueId")})
        return archive_entity(data, "issueArchive")

    async def _unarchive_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_UNARCHIVE_ISSUE_MUTATION, {"id": params.require("issueId")})
        return archive_entity(data, "issueUnarchive")

    async def _add_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _ADD_LABEL_MUTATION,
            {"id": params.require("issueId"), "labelId": params.require("labelId")},
        )
        return payload_entity(data, "issueAddLabel", "issue")

    async def _remove_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _REMOVE_LABEL_MUTATION,
            {"id": params.require("issueId"), "labelId": params.require("labelId")},
        )
        return payload_entity(data, "issueRemoveLabel", "issue")

    async def _add_subscriber(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _SUBSCRIBE_MUTATION,
            {"id": params.require("issueId"), "userId": params.require("userId")},
        )
        return payload_entity(data, "issueSubscribe", "issue")

    async def _remove_subscriber(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UNSUBSCRIBE_MUTATION,
            {"id": params.require("issueId"), "userId": params.require("userId")},
        )
        return payload_entity(data, "issueUnsubscribe", "issue")

    async def _set_priority(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"priority": params.require("priority")})

    async def _set_state(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"stateId": params.require("stateId")})

    async def _assign(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"assigneeId": params.require("userId")})

    async def _unassign(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"assigneeId": None})

    async def _move_to_project(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"projectId": params.require("projectId")})

    async def _move_to_team(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"teamId": params.require("teamId")})

    async def _set_parent(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return await self._update(client, params.require("issueId"), {"parentId": params.require("parentId")})

    async def _add_relation(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _CREATE_RELATION_MUTATION,
            {
                "input": {
                    "issueId": params.require("issueId"),
                    "relatedIssueId": params.require("relatedIssueId"),
                    "type": params.require("relationType"),
                }
            },
        )
        return payload_entity(data, "issueRelationCreate", "issueRelation")

    async def _remove_relation(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        """Look up the relation to ``relatedIssueId`` and delete it."""
        issue_id = params.require("issueId")
        related_id = params.require("relatedIssueId")

        data = await client.execute(_ISSUE_RELATIONS_QUERY, {"id": issue_id})
        relation = next(
            (r for r in nodes_of(data.get("issue"), "relations")
             if (r.get("relatedIssue") or {}).get("id") == related_id),
            None,
        )
        if relation is None:
            return {"success": False, "message": "Relation not found"}

        data = await client.execute(_DELETE_RELATION_MUTATION, {"id": relation["id"]})
        return payload_success(data, "issueRelationDelete")
