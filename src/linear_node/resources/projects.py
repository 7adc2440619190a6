"""Project and project milestone operations.

Membership changes are read-modify-write: the current ``members`` are fetched,
edited locally and written back as ``memberIds`` through ``projectUpdate``.
"""

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
    nodes_of,
    object_schema,
    payload_entity,
    payload_success,
)
from .fields import PAGE_INFO, PROJECT_FIELDS, PROJECT_MILESTONE_FIELDS
from .registry import register_resource

logger = logging.getLogger(__name__)

_MEMBER_FIELDS = "members { nodes { id name email } }"

# -- Projects ----------------------------------------------------------------

_LIST_PROJECTS_QUERY = f"""
query Projects($first: Int, $after: String, $includeArchived: Boolean) {{
  projects(first: $first, after: $after, includeArchived: $includeArchived) {{
    nodes {{ {PROJECT_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_PROJECT_QUERY = f"""
query Project($id: String!) {{
  project(id: $id) {{
    {PROJECT_FIELDS}
    {_MEMBER_FIELDS}
  }}
}}
"""

_PROJECT_MEMBERS_QUERY = """
query ProjectMembers($id: String!) {
  project(id: $id) {
    members { nodes { id } }
  }
}
"""

_CREATE_PROJECT_MUTATION = f"""
mutation ProjectCreate($input: ProjectCreateInput!) {{
  projectCreate(input: $input) {{
    success
    project {{ {PROJECT_FIELDS} }}
  }}
}}
"""

_UPDATE_PROJECT_MUTATION = f"""
mutation ProjectUpdate($id: String!, $input: ProjectUpdateInput!) {{
  projectUpdate(id: $id, input: $input) {{
    success
    project {{
      {PROJECT_FIELDS}
      {_MEMBER_FIELDS}
    }}
  }}
}}
"""

_DELETE_PROJECT_MUTATION = """
mutation ProjectDelete($id: String!) {
  projectDelete(id: $id) { success }
}
"""

_ARCHIVE_PROJECT_MUTATION = f"""
mutation ProjectArchive($id: String!) {{
  projectArchive(id: $id) {{
    success
    entity {{ {PROJECT_FIELDS} }}
  }}
}}
"""

# -- Milestones --------------------------------------------------------------

_LIST_MILESTONES_QUERY = f"""
query ProjectMilestones($projectId: String!, $first: Int, $after: String) {{
  project(id: $projectId) {{
    projectMilestones(first: $first, after: $after) {{
      nodes {{ {PROJECT_MILESTONE_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_CREATE_MILESTONE_MUTATION = f"""
mutation ProjectMilestoneCreate($input: ProjectMilestoneCreateInput!) {{
  projectMilestoneCreate(input: $input) {{
    success
    projectMilestone {{ {PROJECT_MILESTONE_FIELDS} }}
  }}
}}
"""

_PROJECT_ID = id_schema("Project ID")


@register_resource
class ProjectsResource(BaseResource):
    """Projects, their members and milestones."""

    @property
    def name(self) -> str:
        return "projects"

    @property
    def display_name(self) -> str:
        return "Projects"

    def get_operations(self) -> List[Operation]:
        project_only = object_schema({"projectId": _PROJECT_ID}, ["projectId"])
        project_user = object_schema(
            {"projectId": _PROJECT_ID, "userId": id_schema("User ID")},
            ["projectId", "userId"],
        )
        return [
            Operation(
                "listProjects", "List Projects", "List projects",
                self._list_projects,
                list_schema({"filters": fields_schema("Supports includeArchived")}),
            ),
            Operation("getProject", "Get Project", "Get a project with its members", self._get_project, project_only),
            Operation(
                "createProject", "Create Project", "Create a project",
                self._create_project,
                object_schema(
                    {
                        "teamIds": {"type": "array", "items": {"type": "string"}, "description": "Team IDs"},
                        "name": {"type": "string", "description": "Project name"},
                        "additionalFields": fields_schema(),
                    },
                    ["teamIds", "name"],
                ),
            ),
            Operation(
                "updateProject", "Update Project", "Update a project",
                self._update_project,
                object_schema({"projectId": _PROJECT_ID, "updateFields": fields_schema("Fields to update")}, ["projectId"]),
            ),
            Operation("deleteProject", "Delete Project", "Delete a project", self._delete_project, project_only),
            Operation("archiveProject", "Archive Project", "Archive a project", self._archive_project, project_only),
            Operation(
                "addProjectMember", "Add Project Member", "Add a user to a project",
                self._add_member, project_user,
            ),
            Operation(
                "removeProjectMember", "Remove Project Member", "Remove a user from a project",
                self._remove_member, project_user,
            ),
            Operation(
                "listProjectMilestones", "List Project Milestones", "List the milestones of a project",
                self._list_milestones,
                list_schema({"projectId": _PROJECT_ID}, ["projectId"]),
            ),
            Operation(
                "createProjectMilestone", "Create Project Milestone", "Add a milestone to a project",
                self._create_milestone,
                object_schema(
                    {
                        "projectId": _PROJECT_ID,
                        "milestoneName": {"type": "string", "description": "Milestone name"},
                        "milestoneFields": fields_schema("Optional description, targetDate, sortOrder"),
                    },
                    ["projectId", "milestoneName"],
                ),
            ),
        ]

    # -- helpers -----------------------------------------------------------

    async def _member_ids(self, client: LinearGraphQLClient, project_id: str) -> List[str]:
        data = await client.execute(_PROJECT_MEMBERS_QUERY, {"id": project_id})
        return [m["id"] for m in nodes_of(data.get("project"), "members")]

    async def _set_members(
        self, client: LinearGraphQLClient, project_id: str, member_ids: List[str]
    ) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_PROJECT_MUTATION, {"id": project_id, "input": {"memberIds": member_ids}}
        )
        return payload_entity(data, "projectUpdate", "project")

    # -- Operation handlers -------------------------------------------------

    async def _list_projects(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        filters = params.collection("filters")
        projects = await client.paginate(
            _LIST_PROJECTS_QUERY,
            {"includeArchived": filters.get("includeArchived") is True},
            "projects",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"projects": projects}

    async def _get_project(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_PROJECT_QUERY, {"id": params.require("projectId")})
        return data.get("project") or {}

    async def _create_project(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "teamIds": params.require("teamIds"),
            "name": params.require("name"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_PROJECT_MUTATION, {"input": input_data})
        return payload_entity(data, "projectCreate", "project")

    async def _update_project(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_PROJECT_MUTATION,
            {"id": params.require("projectId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "projectUpdate", "project")

    async def _delete_project(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_PROJECT_MUTATION, {"id": params.require("projectId")})
        return payload_success(data, "projectDelete")

    async def _archive_project(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_ARCHIVE_PROJECT_MUTATION, {"id": params.require("projectId")})
        return archive_entity(data, "projectArchive")

    async def _add_member(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        project_id = params.require("projectId")
        user_id = params.require("userId")
        member_ids = await self._member_ids(client, project_id)
        if user_id not in member_ids:
            member_ids.append(user_id)
        return await self._set_members(client, project_id, member_ids)

    async def _remove_member(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        project_id = params.require("projectId")
        user_id = params.require("userId")
        member_ids = [m for m in await self._member_ids(client, project_id) if m != user_id]
        return await self._set_members(client, project_id, member_ids)

    async def _list_milestones(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        milestones = await client.paginate(
            _LIST_MILESTONES_QUERY,
            {"projectId": params.require("projectId")},
            "project.projectMilestones",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"milestones": milestones}

    async def _create_milestone(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "projectId": params.require("projectId"),
            "name": params.require("milestoneName"),
            **params.collection("milestoneFields"),
        })
        data = await client.execute(_CREATE_MILESTONE_MUTATION, {"input": input_data})
        return payload_entity(data, "projectMilestoneCreate", "projectMilestone")
