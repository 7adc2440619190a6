"""Document operations."""

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
from .fields import DOCUMENT_FIELDS, PAGE_INFO
from .registry import register_resource

_LIST_PROJECT_DOCUMENTS_QUERY = f"""
query ProjectDocuments($id: String!, $first: Int, $after: String) {{
  project(id: $id) {{
    documents(first: $first, after: $after) {{
      nodes {{ {DOCUMENT_FIELDS} }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_LIST_DOCUMENTS_QUERY = f"""
query Documents($first: Int, $after: String) {{
  documents(first: $first, after: $after) {{
    nodes {{ {DOCUMENT_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_DOCUMENT_QUERY = f"""
query Document($id: String!) {{
  document(id: $id) {{ {DOCUMENT_FIELDS} }}
}}
"""

_CREATE_DOCUMENT_MUTATION = f"""
mutation DocumentCreate($input: DocumentCreateInput!) {{
  documentCreate(input: $input) {{
    success
    document {{ {DOCUMENT_FIELDS} }}
  }}
}}
"""

_UPDATE_DOCUMENT_MUTATION = f"""
mutation DocumentUpdate($id: String!, $input: DocumentUpdateInput!) {{
  documentUpdate(id: $id, input: $input) {{
    success
    document {{ {DOCUMENT_FIELDS} }}
  }}
}}
"""

_DELETE_DOCUMENT_MUTATION = """
mutation DocumentDelete($id: String!) {
  documentDelete(id: $id) { success }
}
"""


@register_resource
class DocumentsResource(BaseResource):

    @property
    def name(self) -> str:
        return "documents"

    @property
    def display_name(self) -> str:
        return "Documents"

    def get_operations(self) -> List[Operation]:
        document_only = object_schema({"documentId": id_schema("Document ID")}, ["documentId"])
        return [
            Operation(
                "listDocuments", "List Documents", "List documents, optionally for one project",
                self._list_documents,
                list_schema({"projectId": id_schema("Project ID (omit for all documents)")}),
            ),
            Operation("getDocument", "Get Document", "Get a document by ID", self._get_document, document_only),
            Operation(
                "createDocument", "Create Document", "Create a project document",
                self._create_document,
                object_schema(
                    {
                        "projectId": id_schema("Project ID"),
                        "title": {"type": "string", "description": "Document title"},
                        "additionalFields": fields_schema("Optional content, icon, color"),
                    },
                    ["projectId", "title"],
                ),
            ),
            Operation(
                "updateDocument", "Update Document", "Update a document",
                self._update_document,
                object_schema(
                    {"documentId": id_schema("Document ID"), "updateFields": fields_schema("Fields to update")},
                    ["documentId"],
                ),
            ),
            Operation("deleteDocument", "Delete Document", "Delete a document", self._delete_document, document_only),
        ]

    async def _list_documents(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        project_id = params.get("projectId")
        if project_id:
            query, variables, path = _LIST_PROJECT_DOCUMENTS_QUERY, {"id": project_id}, "project.documents"
        else:
            query, variables, path = _LIST_DOCUMENTS_QUERY, {}, "documents"

        documents = await client.paginate(
            query,
            variables,
            path,
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"documents": documents}

    async def _get_document(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_DOCUMENT_QUERY, {"id": params.require("documentId")})
        return data.get("document") or {}

    async def _create_document(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        input_data = clean_object({
            "projectId": params.require("projectId"),
            "title": params.require("title"),
            **params.collection("additionalFields"),
        })
        data = await client.execute(_CREATE_DOCUMENT_MUTATION, {"input": input_data})
        return payload_entity(data, "documentCreate", "document")

    async def _update_document(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_DOCUMENT_MUTATION,
            {"id": params.require("documentId"), "input": clean_object(params.collection("updateFields"))},
        )
        return payload_entity(data, "documentUpdate", "document")

    async def _delete_document(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_DOCUMENT_MUTATION, {"id": params.require("documentId")})
        return payload_success(data, "documentDelete")
