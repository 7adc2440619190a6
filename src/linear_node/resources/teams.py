"""Team operations, including memberships and team-scoped listings."""

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
    nodes_of,
    object_schema,
    payload_entity,
    payload_success,
)
from .fields import LABEL_FIELDS, PAGE_INFO, TEAM_FIELDS, USER_FIELDS, WORKFLOW_STATE_FIELDS
from .registry import register_resource

# -- Teams -------------------------------------------------------------------

_LIST_TEAMS_QUERY = f"""
query Teams($first: Int, $after: String) {{
  teams(first: $first, after: $after) {{
    nodes {{ {TEAM_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_TEAM_QUERY = f"""
query Team($id: String!) {{
  team(id: $id) {{
    {TEAM_FIELDS}
    issueCount
    activeCycle {{ id number name }}
  }}
}}
"""

_CREATE_TEAM_MUTATION = f"""
mutation TeamCreate($input: TeamCreateInput!) {{
  teamCreate(input: $input) {{
    success
    team {{ {TEAM_FIELDS} }}
  }}
}}
"""

_UPDATE_TEAM_MUTATION = f"""
mutation TeamUpdate($id: String!, $input: TeamUpdateInput!) {{
  teamUpdate(id: $id, input: $input) {{
    success
    team {{ {TEAM_FIELDS} }}
  }}
}}
"""

_DELETE_TEAM_MUTATION = """
mutation TeamDelete($id: String!) {
  teamDelete(id: $id) { success }
}
"""

# -- Team-scoped connections -------------------------------------------------

_TEAM_MEMBERS_QUERY = f"""
query TeamMembers($id: String!, $first: Int, $after: String) {{
  team(id: $id) {{
    members(first: $first, after: $after) {{
      nodes {{ {USER_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_TEAM_LABELS_QUERY = f"""
query TeamLabels($id: String!, $first: Int, $after: String) {{
  team(id: $id) {{
    labels(first: $first, after: $after) {{
      nodes {{ {LABEL_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_TEAM_STATES_QUERY = f"""
query TeamStates($id: String!, $first: Int, $after: String) {{
  team(id: $id) {{
    states(first: $first, after: $after) {{
      nodes {{ {WORKFLOW_STATE_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_TEAM_TEMPLATES_QUERY = """
query TeamTemplates($id: String!) {
  team(id: $id) {
    templates {
      nodes { id name description type createdAt updatedAt }
    }
  }
}
"""

# -- Memberships -------------------------------------------------------------

_CREATE_MEMBERSHIP_MUTATION = f"""
mutation TeamMembershipCreate($input: TeamMembershipCreateInput!) {{
  teamMembershipCreate(input: $input) {{
    success
    teamMembership {{
      id
      user {{ {USER_FIELDS} }}
      team {{ id name }}
    }}
  }}
}}
"""

_FIND_MEMBERSHIP_QUERY = """
query FindMembership($filter: TeamMembershipFilter) {
  teamMemberships(filter: $filter) {
    nodes { id }
  }
}
"""

_DELETE_MEMBERSHIP_MUTATION = """
mutation TeamMembershipDelete($id: String!) {
  teamMembershipDelete(id: $id) { success }
}
"""

_TEAM_ID = id_schema("Team ID")


@register_resource
class TeamsResource(BaseResource):

    @property
    def name(self) -> str:
        return "teams"

    @property
    def display_name(self) -> str:
        return "Teams"

    def get_operations(self) -> List[Operation]:
        team_only = object_schema({"teamId": _TEAM_ID}, ["teamId"])
        team_list = list_schema({"teamId": _TEAM_ID}, ["teamId"])
        team_user = object_schema({"teamId": _TEAM_ID, "userId": id_schema("User ID")}, ["teamId", "userId"])
        return [
            Operation("listTeams", "List Teams", "List teams", self._list_teams, list_schema()),
            Operation("getTeam", "Get Team", "Get a team by ID", self._get_team, team_only),
            Operation(
                "createTeam", "Create Team", "Create a team",
                self._create_team,
                object_schema(
                    {
                        "name": {"type": "string", "description": "Team name"},
                        "key": {"type": "string", "description": "Team key used in issue identifiers"},
                        "additionalFields": fields_schema(),
                    },
                    ["name", "key"],
                ),
            ),
            Operation(
                "updateTeam", "Update Team", "Update a team",
                self._update_team,
                object_schema({"teamId": _TEAM_ID, "updateFields": fields_schema("Fields to update")}, ["teamId"]),
            ),
            Operation("deleteTeam", "Delete Team", "Delete a team", self._delete_team, team_only),
            Operation("getTeamMembers", "Get Team Members", "List the members of a team", self._get_members, team_list),
            Operation("addTeamMember", "Add Team Member", "Add a user to a team", self._add_member, team_user),
            Operation(
                "removeTeamMember", "Remove Team Member", "Remove a user from a team",
                self._remove_member, team_user,
            ),
            Operation("getTeamLabels", "Get Team Labels", "List the labels of a team", self._get_labels, team_list),
            Operation(
                "getTeamStates", "Get Team States", "List the workflow states of a team",
                self._get_states, team_list,
            ),
            Operation(
                "getTeamTemplates", "Get Team Templates", "List the issue templates of a team",
                self._get_templates, team_only,
            ),
        ]

    async def _paginate_team(
        self,
        client: LinearGraphQLClient,
        params: Parameters,
        query: str,
        connection: str,
    ) -> List[Dict[str, Any]]:
        return await client.paginate(
            query,
            {"id": params.require("teamId")},
            f"team.{connection}",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )

    async def _list_teams(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        teams = await client.paginate(
            _LIST_TEAMS_QUERY,
            {},
            "teams",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"teams": teams}

    async def _get_team(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_TEAM_QUERY, {"id": params.require("teamId")})
        return data.get("team") or {}

    async def _create_team(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "name": params.require("name"),
            "key": params.require("key"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_TEAM_MUTATION, {"input": input_data})
        return payload_entity(data, "teamCreate", "team")

    async def _update_team(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_TEAM_MUTATION,
            {"id": params.require("teamId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "teamUpdate", "team")

    async def _delete_team(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_TEAM_MUTATION, {"id": params.require("teamId")})
        return payload_success(data, "teamDelete")

    async def _get_members(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return {"members": await self._paginate_team(client, params, _TEAM_MEMBERS_QUERY, "members")}

    async def _add_member(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _CREATE_MEMBERSHIP_MUTATION,
            {"input": {"teamId": params.require("teamId"), "userId": params.require("userId")}},
        )
        return payload_entity(data, "teamMembershipCreate", "teamMembership")

    async def _remove_member(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        """Find the user's membership in the team and delete it."""
        membership_filter = {
            "team": {"id": {"eq": params.require("teamId")}},
            "user": {"id": {"eq": params.require("userId")}},
        }
        data = await client.execute(_FIND_MEMBERSHIP_QUERY, {"filter": membership_filter})
        memberships = nodes_of(data, "teamMemberships")
        if not memberships:
            return {"success": False, "message": "Membership not found"}

        data = await client.execute(_DELETE_MEMBERSHIP_MUTATION, {"id": memberships[0]["id"]})
        return payload_success(data, "teamMembershipDelete")

    async def _get_labels(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return {"labels": await self._paginate_team(client, params, _TEAM_LABELS_QUERY, "labels")}

    async def _get_states(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        return {"states": await self._paginate_team(client, params, _TEAM_STATES_QUERY, "states")}

    async def _get_templates(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_TEAM_TEMPLATES_QUERY, {"id": params.require("teamId")})
        return {"templates": nodes_of(data.get("team"), "templates")}
