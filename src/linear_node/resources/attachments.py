"""Attachment operations.

``metadata`` supplied as a string is decoded as JSON when it parses, and sent
unchanged otherwise.
"""

import json
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
from .fields import ATTACHMENT_FIELDS, PAGE_INFO
from .registry import register_resource

_LIST_ATTACHMENTS_QUERY = f"""
query IssueAttachments($id: String!, $first: Int, $after: String) {{
  issue(id: $id) {{
    attachments(first: $first, after: $after) {{
      nodes {{ {ATTACHMENT_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_GET_ATTACHMENT_QUERY = f"""
query Attachment($id: String!) {{
  attachment(id: $id) {{ {ATTACHMENT_FIELDS} }}
}}
"""

_CREATE_ATTACHMENT_MUTATION = f"""
mutation AttachmentCreate($input: AttachmentCreateInput!) {{
  attachmentCreate(input: $input) {{
    success
    attachment {{ {ATTACHMENT_FIELDS} }}
  }}
}}
"""

_UPDATE_ATTACHMENT_MUTATION = f"""
mutation AttachmentUpdate($id: String!, $input: AttachmentUpdateInput!) {{
  attachmentUpdate(id: $id, input: $input) {{
    success
    attachment {{ {ATTACHMENT_FIELDS} }}
  }}
}}
"""

_DELETE_ATTACHMENT_MUTATION = """
mutation AttachmentDelete($id: String!) {
  attachmentDelete(id: $id) { success }
}
"""


def _decode_metadata(fields: Dict[str, Any]) -> Dict[str, Any]:
    metadata = fields.get("metadata")
    if metadata and isinstance(metadata, str):
        try:
            fields["metadata"] = json.loads(metadata)
        except json.JSONDecodeError:
            pass
    return fields


@register_resource
class AttachmentsResource(BaseResource):

    @property
    def name(self) -> str:
        return "attachments"

    @property
    def display_name(self) -> str:
        return "Attachments"

    def get_operations(self) -> List[Operation]:
        attachment_only = object_schema({"attachmentId": id_schema("Attachment ID")}, ["attachmentId"])
        return [
            Operation(
                "listAttachments", "List Attachments", "List the attachments of an issue",
                self._list_attachments,
                list_schema({"issueId": id_schema("Issue ID")}, ["issueId"]),
            ),
            Operation("getAttachment", "Get Attachment", "Get an attachment", self._get_attachment, attachment_only),
            Operation(
                "createAttachment", "Create Attachment", "Attach a link to an issue",
                self._create_attachment,
                object_schema(
                    {
                        "issueId": id_schema("Issue ID"),
                        "url": {"type": "string", "description": "Attachment URL"},
                        "title": {"type": "string", "description": "Attachment title"},
                        "additionalFields": fields_schema("Optional subtitle, iconUrl, metadata (object or JSON string)"),
                    },
                    ["issueId", "url", "title"],
                ),
            ),
            Operation(
                "updateAttachment", "Update Attachment", "Update an attachment",
                self._update_attachment,
                object_schema(
                    {"attachmentId": id_schema("Attachment ID"), "updateFields": fields_schema("Fields to update")},
                    ["attachmentId"],
                ),
            ),
            Operation(
                "deleteAttachment", "Delete Attachment", "Delete an attachment",
                self._delete_attachment, attachment_only,
            ),
        ]

    async def _list_attachments(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        attachments = await client.paginate(
            _LIST_ATTACHMENTS_QUERY,
            {"id": params.require("issueId")},
            "issue.attachments",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"attachments": attachments}

    async def _get_attachment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_ATTACHMENT_QUERY, {"id": params.require("attachmentId")})
        return data.get("attachment") or {}

    async def _create_attachment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "issueId": params.require("issueId"),
            "url": params.require("url"),
            "title": params.require("title"),
            **_decode_metadata(params.collection("additionalFields")),
        })
        data = await client.execute(_CREATE_ATTACHMENT_MUTATION, {"input": input_data})
        return payload_entity(data, "attachmentCreate", "attachment")

    async def _update_attachment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object(_decode_metadata(params.collection("updateFields")))
        data = await client.execute(
            _UPDATE_ATTACHMENT_MUTATION,
            {"id": params.require("attachmentId"), "input": input_data},
        )
        return payload_entity(data, "attachmentUpdate", "attachment")

    async def _delete_attachment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_ATTACHMENT_MUTATION, {"id": params.require("attachmentId")})
        return payload_success(data, "attachmentDelete")
