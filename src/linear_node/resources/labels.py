"""Issue label operations. Labels are team-scoped or organization-wide."""

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
    payload_success,
)
from .fields import LABEL_FIELDS, PAGE_INFO
from .registry import register_resource

_LIST_TEAM_LABELS_QUERY = f"""
query TeamLabels($id: String!, $first: Int, $after: String, $includeArchived: Boolean) {{
  team(id: $id) {{
    labels(first: $first, after: $after, includeArchived: $includeArchived) {{
      nodes {{ {LABEL_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_LIST_LABELS_QUERY = f"""
query Labels($first: Int, $after: String, $includeArchived: Boolean) {{
  issueLabels(first: $first, after: $after, includeArchived: $includeArchived) {{
    nodes {{ {LABEL_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_LABEL_QUERY = f"""
query IssueLabel($id: String!) {{
  issueLabel(id: $id) {{ {LABEL_FIELDS} }}
}}
"""

_CREATE_LABEL_MUTATION = f"""
mutation IssueLabelCreate($input: IssueLabelCreateInput!) {{
  issueLabelCreate(input: $input) {{
    success
    issueLabel {{ {LABEL_FIELDS} }}
  }}
}}
"""

_UPDATE_LABEL_MUTATION = f"""
mutation IssueLabelUpdate($id: String!, $input: IssueLabelUpdateInput!) {{
  issueLabelUpdate(id: $id, input: $input) {{
    success
    issueLabel {{ {LABEL_FIELDS} }}
  }}
}}
"""

_DELETE_LABEL_MUTATION = """
mutation IssueLabelDelete($id: String!) {
  issueLabelDelete(id: $id) { success }
}
"""

_ARCHIVE_LABEL_MUTATION = f"""
mutation IssueLabelArchive($id: String!) {{
  issueLabelArchive(id: $id) {{
    success
    entity {{ {LABEL_FIELDS} }}
  }}
}}
"""


@register_resource
class LabelsResource(BaseResource):

    @property
    def name(self) -> str:
        return "labels"

    @property
    def display_name(self) -> str:
        return "Labels"

    def get_operations(self) -> List[Operation]:
        label_only = object_schema({"labelId": id_schema("Label ID")}, ["labelId"])
        return [
            Operation(
                "listLabels", "List Labels", "List labels of a team, or of the whole organization",
                self._list_labels,
                list_schema({
                    "teamId": id_schema("Team ID (omit for organization-wide labels)"),
                    "filters": fields_schema("Supports includeArchived"),
                }),
            ),
            Operation("getLabel", "Get Label", "Get a label by ID", self._get_label, label_only),
            Operation(
                "createLabel", "Create Label", "Create a label",
                self._create_label,
                object_schema(
                    {
                        "name": {"type": "string", "description": "Label name"},
                        "teamId": id_schema("Team ID (omit for an organization label)"),
                        "additionalFields": fields_schema(),
                    },
                    ["name"],
                ),
            ),
            Operation(
                "updateLabel", "Update Label", "Update a label",
                self._update_label,
                object_schema({"labelId": id_schema("Label ID"), "updateFields": fields_schema("Fields to update")}, ["labelId"]),
            ),
            Operation("deleteLabel", "Delete Label", "Delete a label", self._delete_label, label_only),
            Operation("archiveLabel", "Archive Label", "Archive a label", self._archive_label, label_only),
        ]

    async def _list_labels(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        team_id = params.get("teamId")
        include_archived = params.collection("filters").get("includeArchived") is True
        if team_id:
            query, variables, path = (
                _LIST_TEAM_LABELS_QUERY,
                {"id": team_id, "includeArchived": include_archived},
                "team.labels",
            )
        else:
            query, variables, path = _LIST_LABELS_QUERY, {"includeArchived": include_archived}, "issueLabels"

        labels = await client.paginate(
            query,
            variables,
            path,
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"labels": labels}

    async def _get_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_LABEL_QUERY, {"id": params.require("labelId")})
        return data.get("issueLabel") or {}

    async def _create_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "name": params.require("name"),
            "teamId": params.get("teamId"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_LABEL_MUTATION, {"input": input_data})
        return payload_entity(data, "issueLabelCreate", "issueLabel")

    async def _update_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_LABEL_MUTATION,
            {"id": params.require("labelId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "issueLabelUpdate", "issueLabel")

    async def _delete_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_LABEL_MUTATION, {"id": params.require("labelId")})
        return payload_success(data, "issueLabelDelete")

    async def _archive_label(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_ARCHIVE_LABEL_MUTATION, {"id": params.require("labelId")})
        return archive_entity(data, "issueLabelArchive")
