"""User operations."""

from typing import Any, Dict, List

from ..transport.filters import clean_object
from ..transport.graphql import LinearGraphQLClient
from .base import (
    BaseResource,
    Operation,
    Parameters,
    fields_schema,
    id_schema,
    list_schema,
    object_schema,
    payload_entity,
    payload_success,
)
from .fields import ISSUE_FIELDS, PAGE_INFO, USER_FIELDS
from .registry import register_resource

_USER_PROFILE = """
  description
  statusLabel
  statusEmoji
  statusUntilAt
  teams { nodes { id name key } }
"""

_LIST_USERS_QUERY = f"""
query Users($first: Int, $after: String, $includeArchived: Boolean) {{
  users(first: $first, after: $after, includeArchived: $includeArchived) {{
    nodes {{ {USER_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_USER_QUERY = f"""
query User($id: String!) {{
  user(id: $id) {{
    {USER_FIELDS}
    {_USER_PROFILE}
    organization {{ id name }}
  }}
}}
"""

_VIEWER_QUERY = f"""
query Viewer {{
  viewer {{
    {USER_FIELDS}
    {_USER_PROFILE}
    organization {{ id name urlKey }}
  }}
}}
"""

_UPDATE_USER_MUTATION = f"""
mutation UserUpdate($id: String!, $input: UserUpdateInput!) {{
  userUpdate(id: $id, input: $input) {{
    success
    user {{ {USER_FIELDS} }}
  }}
}}
"""

_SUSPEND_USER_MUTATION = """
mutation UserSuspend($id: String!) {
  userSuspend(id: $id) { success }
}
"""

_UNSUSPEND_USER_MUTATION = """
mutation UserUnsuspend($id: String!) {
  userUnsuspend(id: $id) { success }
}
"""

_ASSIGNED_ISSUES_QUERY = f"""
query UserAssignedIssues($id: String!, $first: Int, $after: String) {{
  user(id: $id) {{
    assignedIssues(first: $first, after: $after) {{
      nodes {{ {ISSUE_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_USER_ID = id_schema("User ID")


@register_resource
class UsersResource(BaseResource):

    @property
    def name(self) -> str:
        return "users"

    @property
    def display_name(self) -> str:
        return "Users"

    def get_operations(self) -> List[Operation]:
        user_only = object_schema({"userId": _USER_ID}, ["userId"])
        return [
            Operation(
                "listUsers", "List Users", "List users of the organization",
                self._list_users,
                list_schema({"filters": fields_schema("Supports includeArchived and activeOnly")}),
            ),
            Operation("getUser", "Get User", "Get a user by ID", self._get_user, user_only),
            Operation("getCurrentUser", "Get Current User", "Get the authenticated user", self._get_current_user),
            Operation(
                "updateUser", "Update User", "Update a user",
                self._update_user,
                object_schema({"userId": _USER_ID, "updateFields": fields_schema("Fields to update")}, ["userId"]),
            ),
            Operation("suspendUser", "Suspend User", "Suspend a user", self._suspend_user, user_only),
            Operation("unsuspendUser", "Unsuspend User", "Reinstate a suspended user", self._unsuspend_user, user_only),
            Operation(
                "getUserAssignedIssues", "Get User Assigned Issues", "List the issues assigned to a user",
                self._assigned_issues,
                list_schema({"userId": _USER_ID}, ["userId"]),
            ),
        ]

    async def _list_users(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        filters = params.collection("filters")
        users = await client.paginate(
            _LIST_USERS_QUERY,
            {"includeArchived": filters.get("includeArchived") is True},
            "users",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        if filters.get("activeOnly") is True:
            users = [u for u in users if u.get("active") is True]
        return {"users": users}

    async def _get_user(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_USER_QUERY, {"id": params.require("userId")})
        return data.get("user") or {}

    async def _get_current_user(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_VIEWER_QUERY)
        return data.get("viewer") or {}

    async def _update_user(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_USER_MUTATION,
            {"id": params.require("userId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "userUpdate", "user")

    async def _suspend_user(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_SUSPEND_USER_MUTATION, {"id": params.require("userId")})
        return payload_success(data, "userSuspend")

    async def _unsuspend_user(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_UNSUSPEND_USER_MUTATION, {"id": params.require("userId")})
        return payload_success(data, "userUnsuspend")

    async def _assigned_issues(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        issues = await client.paginate(
            _ASSIGNED_ISSUES_QUERY,
            {"id": params.require("userId")},
            "user.assignedIssues",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"issues": issues}
