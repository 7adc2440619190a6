"""Cycle operations."""

import logging
from typing import Any, Dict, List

from ..transport.filters import clean_object
from ..transport.graphql import LinearGraphQLClient
from .base import (
    BaseResource,
    Operation,
    Parameters,
    archive_entity,
    fields_schema,
    id_schema,
    list_schema,
    object_schema,
    payload_entity,
)
from .fields import CYCLE_FIELDS, ISSUE_FIELDS, PAGE_INFO
from .registry import register_resource

logger = logging.getLogger(__name__)

_CYCLE_ISSUES = "issues { nodes { id identifier title state { name } } }"

_LIST_CYCLES_QUERY = f"""
query Cycles($teamId: String!, $first: Int, $after: String, $includeArchived: Boolean) {{
  team(id: $teamId) {{
    cycles(first: $first, after: $after, includeArchived: $includeArchived) {{
      nodes {{ {CYCLE_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_GET_CYCLE_QUERY = f"""
query Cycle($id: String!) {{
  cycle(id: $id) {{
    {CYCLE_FIELDS}
    {_CYCLE_ISSUES}
  }}
}}
"""

_CURRENT_CYCLE_QUERY = f"""
query CurrentCycle($teamId: String!) {{
  team(id: $teamId) {{
    activeCycle {{
      {CYCLE_FIELDS}
      {_CYCLE_ISSUES}
    }}
  }}
}}
"""

_CREATE_CYCLE_MUTATION = f"""
mutation CycleCreate($input: CycleCreateInput!) {{
  cycleCreate(input: $input) {{
    success
    cycle {{ {CYCLE_FIELDS} }}
  }}
}}
"""

_UPDATE_CYCLE_MUTATION = f"""
mutation CycleUpdate($id: String!, $input: CycleUpdateInput!) {{
  cycleUpdate(id: $id, input: $input) {{
    success
    cycle {{ {CYCLE_FIELDS} }}
  }}
}}
"""

_ARCHIVE_CYCLE_MUTATION = f"""
mutation CycleArchive($id: String!) {{
  cycleArchive(id: $id) {{
    success
    entity {{ {CYCLE_FIELDS} }}
  }}
}}
"""

_SET_ISSUE_CYCLE_MUTATION = f"""
mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) {{
  issueUpdate(id: $id, input: $input) {{
    success
    issue {{ {ISSUE_FIELDS} }}
  }}
}}
"""

_DATE = {"type": "string", "format": "date-time"}


@register_resource
class CyclesResource(BaseResource):

    @property
    def name(self) -> str:
        return "cycles"

    @property
    def display_name(self) -> str:
        return "Cycles"

    def get_operations(self) -> List[Operation]:
        cycle_only = object_schema({"cycleId": id_schema("Cycle ID")}, ["cycleId"])
        return [
            Operation(
                "listCycles", "List Cycles", "List the cycles of a team",
                self._list_cycles,
                list_schema(
                    {"teamId": id_schema("Team ID"), "filters": fields_schema("Supports includeArchived")},
                    ["teamId"],
                ),
            ),
            Operation("getCycle", "Get Cycle", "Get a cycle with its issues", self._get_cycle, cycle_only),
            Operation(
                "createCycle", "Create Cycle", "Create a cycle for a team",
                self._create_cycle,
                object_schema(
                    {
                        "teamId": id_schema("Team ID"),
                        "startsAt": _DATE,
                        "endsAt": _DATE,
                        "additionalFields": fields_schema(),
                    },
                    ["teamId", "startsAt", "endsAt"],
                ),
            ),
            Operation(
                "updateCycle", "Update Cycle", "Update a cycle",
                self._update_cycle,
                object_schema({"cycleId": id_schema("Cycle ID"), "updateFields": fields_schema("Fields to update")}, ["cycleId"]),
            ),
            Operation("archiveCycle", "Archive Cycle", "Archive a cycle", self._archive_cycle, cycle_only),
            Operation(
                "getCurrentCycle", "Get Current Cycle", "Get the active cycle of a team",
                self._get_current_cycle,
                object_schema({"teamId": id_schema("Team ID")}, ["teamId"]),
            ),
            Operation(
                "addIssueToCycle", "Add Issue to Cycle", "Move an issue into a cycle",
                self._add_issue,
                object_schema(
                    {"cycleId": id_schema("Cycle ID"), "issueId": id_schema("Issue ID")},
                    ["cycleId", "issueId"],
                ),
            ),
            Operation(
                "removeIssueFromCycle", "Remove Issue from Cycle", "Take an issue out of its cycle",
                self._remove_issue,
                object_schema({"issueId": id_schema("Issue ID")}, ["issueId"]),
            ),
        ]

    async def _list_cycles(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        filters = params.collection("filters")
        cycles = await client.paginate(
            _LIST_CYCLES_QUERY,
            {
                "teamId": params.require("teamId"),
                "includeArchived": filters.get("includeArchived") is True,
            },
            "team.cycles",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"cycles": cycles}

    async def _get_cycle(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_CYCLE_QUERY, {"id": params.require("cycleId")})
        return data.get("cycle") or {}

    async def _create_cycle(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "teamId": params.require("teamId"),
            "startsAt": params.require("startsAt"),
            "endsAt": params.require("endsAt"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_CYCLE_MUTATION, {"input": input_data})
        return payload_entity(data, "cycleCreate", "cycle")

    async def _update_cycle(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_CYCLE_MUTATION,
            {"id": params.require("cycleId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "cycleUpdate", "cycle")

    async def _archive_cycle(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_ARCHIVE_CYCLE_MUTATION, {"id": params.require("cycleId")})
        return archive_entity(data, "cycleArchive")

    async def _get_current_cycle(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_CURRENT_CYCLE_QUERY, {"teamId": params.require("teamId")})
        cycle = (data.get("team") or {}).get("activeCycle")
        return cycle or {"message": "No active cycle found"}

    async def _add_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _SET_ISSUE_CYCLE_MUTATION,
            {"id": params.require("issueId"), "input": {"cycleId": params.require("cycleId")}},
        )
        return payload_entity(data, "issueUpdate", "issue")

    async def _remove_issue(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _SET_ISSUE_CYCLE_MUTATION,
            {"id": params.require("issueId"), "input": {"cycleId": None}},
        )
        return payload_entity(data, "issueUpdate", "issue")
