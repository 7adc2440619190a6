"""Project update (status post) operations."""

from typing import Any, Dict, List

from ..transport.filters import clean_object
from ..transport.graphql import LinearGraphQLClient
from .base import (
    HEALTH_VALUES,
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
from .fields import PAGE_INFO, PROJECT_UPDATE_FIELDS
from .registry import register_resource

_LIST_PROJECT_UPDATES_QUERY = f"""
query ProjectUpdates($projectId: String!, $first: Int, $after: String) {{
  project(id: $projectId) {{
    projectUpdates(first: $first, after: $after) {{
      nodes {{ {PROJECT_UPDATE_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_CREATE_PROJECT_UPDATE_MUTATION = f"""
mutation ProjectUpdateCreate($input: ProjectUpdateCreateInput!) {{
  projectUpdateCreate(input: $input) {{
    success
    projectUpdate {{ {PROJECT_UPDATE_FIELDS} }}
  }}
}}
"""

_UPDATE_PROJECT_UPDATE_MUTATION = f"""
mutation ProjectUpdateUpdate($id: String!, $input: ProjectUpdateUpdateInput!) {{
  projectUpdateUpdate(id: $id, input: $input) {{
    success
    projectUpdate {{ {PROJECT_UPDATE_FIELDS} }}
  }}
}}
"""

_DELETE_PROJECT_UPDATE_MUTATION = """
mutation ProjectUpdateDelete($id: String!) {
  projectUpdateDelete(id: $id) { success }
}
"""


@register_resource
class ProjectUpdatesResource(BaseResource):

    @property
    def name(self) -> str:
        return "projectUpdates"

    @property
    def display_name(self) -> str:
        return "Project Updates"

    def get_operations(self) -> List[Operation]:
        extra = fields_schema(f"Optional health ({', '.join(HEALTH_VALUES)})")
        return [
            Operation(
                "listProjectUpdates", "List Project Updates", "List the status updates of a project",
                self._list_updates,
                list_schema({"projectId": id_schema("Project ID")}, ["projectId"]),
            ),
            Operation(
                "createProjectUpdate", "Create Project Update", "Post a status update on a project",
                self._create_update,
                object_schema(
                    {
                        "projectId": id_schema("Project ID"),
                        "body": {"type": "string", "description": "Update body (Markdown)"},
                        "additionalFields": extra,
                    },
                    ["projectId", "body"],
                ),
            ),
            Operation(
                "updateProjectUpdate", "Update Project Update", "Edit a status update",
                self._update_update,
                object_schema(
                    {"updateId": id_schema("Project update ID"), "updateFields": fields_schema("Fields to update")},
                    ["updateId"],
                ),
            ),
            Operation(
                "deleteProjectUpdate", "Delete Project Update", "Delete a status update",
                self._delete_update,
                object_schema({"updateId": id_schema("Project update ID")}, ["updateId"]),
            ),
        ]

    async def _list_updates(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        updates = await client.paginate(
            _LIST_PROJECT_UPDATES_QUERY,
            {"projectId": params.require("projectId")},
            "project.projectUpdates",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"projectUpdates": updates}

    async def _create_update(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "projectId": params.require("projectId"),
            "body": params.require("body"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_PROJECT_UPDATE_MUTATION, {"input": input_data})
        return payload_entity(data, "projectUpdateCreate", "projectUpdate")

    async def _update_update(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_PROJECT_UPDATE_MUTATION,
            {"id": params.require("updateId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "projectUpdateUpdate", "projectUpdate")

    async def _delete_update(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_PROJECT_UPDATE_MUTATION, {"id": params.require("updateId")})
        return payload_success(data, "projectUpdateDelete")
