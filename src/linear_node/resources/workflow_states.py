"""Workflow state operations."""

from typing import Any, Dict, List

from ..transport.filters import clean_object
from ..transport.graphql import LinearGraphQLClient
from .base import (
    WORKFLOW_STATE_TYPES,
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
from .fields import PAGE_INFO, WORKFLOW_STATE_FIELDS
from .registry import register_resource

_LIST_STATES_QUERY = f"""
query TeamStates($id: String!, $first: Int, $after: String, $includeArchived: Boolean) {{
  team(id: $id) {{
    states(first: $first, after: $after, includeArchived: $includeArchived) {{
      nodes {{ {WORKFLOW_STATE_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_GET_STATE_QUERY = f"""
query WorkflowState($id: String!) {{
  workflowState(id: $id) {{ {WORKFLOW_STATE_FIELDS} }}
}}
"""

_CREATE_STATE_MUTATION = f"""
mutation WorkflowStateCreate($input: WorkflowStateCreateInput!) {{
  workflowStateCreate(input: $input) {{
    success
    workflowState {{ {WORKFLOW_STATE_FIELDS} }}
  }}
}}
"""

_UPDATE_STATE_MUTATION = f"""
mutation WorkflowStateUpdate($id: String!, $input: WorkflowStateUpdateInput!) {{
  workflowStateUpdate(id: $id, input: $input) {{
    success
    workflowState {{ {WORKFLOW_STATE_FIELDS} }}
  }}
}}
"""

_ARCHIVE_STATE_MUTATION = f"""
mutation WorkflowStateArchive($id: String!) {{
  workflowStateArchive(id: $id) {{
    success
    entity {{ {WORKFLOW_STATE_FIELDS} }}
  }}
}}
"""

_STATE_TYPE = {"type": "string", "enum": WORKFLOW_STATE_TYPES}


@register_resource
class WorkflowStatesResource(BaseResource):

    @property
    def name(self) -> str:
        return "workflowStates"

    @property
    def display_name(self) -> str:
        return "Workflow States"

    def get_operations(self) -> List[Operation]:
        state_only = object_schema({"stateId": id_schema("Workflow state ID")}, ["stateId"])
        return [
            Operation(
                "listWorkflowStates", "List Workflow States", "List the workflow states of a team",
                self._list_states,
                list_schema(
                    {"teamId": id_schema("Team ID"), "filters": fields_schema("Supports includeArchived and type")},
                    ["teamId"],
                ),
            ),
            Operation("getWorkflowState", "Get Workflow State", "Get a workflow state", self._get_state, state_only),
            Operation(
                "createWorkflowState", "Create Workflow State", "Add a workflow state to a team",
                self._create_state,
                object_schema(
                    {
                        "teamId": id_schema("Team ID"),
                        "name": {"type": "string", "description": "State name"},
                        "type": _STATE_TYPE,
                        "additionalFields": fields_schema("Optional color, description, position"),
                    },
                    ["teamId", "name", "type"],
                ),
            ),
            Operation(
                "updateWorkflowState", "Update Workflow State", "Update a workflow state",
                self._update_state,
                object_schema(
                    {"stateId": id_schema("Workflow state ID"), "updateFields": fields_schema("Fields to update")},
                    ["stateId"],
                ),
            ),
            Operation(
                "archiveWorkflowState", "Archive Workflow State", "Archive a workflow state",
                self._archive_state, state_only,
            ),
        ]

    async def _list_states(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        filters = params.collection("filters")
        states = await client.paginate(
            _LIST_STATES_QUERY,
            {"id": params.require("teamId"), "includeArchived": filters.get("includeArchived") is True},
            "team.states",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        # filtered after pagination, so fewer than ``limit`` may be returned
        state_type = filters.get("type")
        if state_type:
            states = [s for s in states if s.get("type") == state_type]
        return {"states": states}

    async def _get_state(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_STATE_QUERY, {"id": params.require("stateId")})
        return data.get("workflowState") or {}

    async def _create_state(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "teamId": params.require("teamId"),
            "name": params.require("name"),
            "type": params.require("type"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_STATE_MUTATION, {"input": input_data})
        return payload_entity(data, "workflowStateCreate", "workflowState")

    async def _update_state(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_STATE_MUTATION,
            {"id": params.require("stateId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "workflowStateUpdate", "workflowState")

    async def _archive_state(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_ARCHIVE_STATE_MUTATION, {"id": params.require("stateId")})
        return archive_entity(data, "workflowStateArchive")
