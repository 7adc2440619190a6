"""Integration operations."""

from typing import Any, Dict, List

from ..transport.graphql import LinearGraphQLClient
from .base import (
    BaseResource,
    Operation,
    Parameters,
    id_schema,
    list_schema,
    object_schema,
    payload_success,
)
from .fields import INTEGRATION_FIELDS, PAGE_INFO
from .registry import register_resource

_LIST_INTEGRATIONS_QUERY = f"""
query Integrations($first: Int, $after: String) {{
  integrations(first: $first, after: $after) {{
    nodes {{ {INTEGRATION_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_GET_INTEGRATION_QUERY = f"""
query Integration($id: String!) {{
  integration(id: $id) {{ {INTEGRATION_FIELDS} }}
}}
"""

_DELETE_INTEGRATION_MUTATION = """
mutation IntegrationDelete($id: String!) {
  integrationDelete(id: $id) { success }
}
"""

_LIST_TEMPLATES_QUERY = f"""
query IntegrationTemplates($first: Int, $after: String) {{
  integrationTemplates(first: $first, after: $after) {{
    nodes {{
      id
      name
      description
      logoUrl
      service
      templateUrl
      createdAt
      updatedAt
    }}
    {PAGE_INFO}
  }}
}}
"""


@register_resource
class IntegrationsResource(BaseResource):

    @property
    def name(self) -> str:
        return "integrations"

    @property
    def display_name(self) -> str:
        return "Integrations"

    def get_operations(self) -> List[Operation]:
        integration_only = object_schema({"integrationId": id_schema("Integration ID")}, ["integrationId"])
        return [
            Operation(
                "listIntegrations", "List Integrations", "List installed integrations",
                self._list_integrations, list_schema(),
            ),
            Operation(
                "getIntegration", "Get Integration", "Get an integration",
                self._get_integration, integration_only,
            ),
            Operation(
                "deleteIntegration", "Delete Integration", "Remove an integration",
                self._delete_integration, integration_only,
            ),
            Operation(
                "listIntegrationTemplates", "List Integration Templates", "List available integration templates",
                self._list_templates, list_schema(),
            ),
        ]

    async def _list_integrations(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        integrations = await client.paginate(
            _LIST_INTEGRATIONS_QUERY,
            {},
            "integrations",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"integrations": integrations}

    async def _get_integration(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_INTEGRATION_QUERY, {"id": params.require("integrationId")})
        return data.get("integration") or {}

    async def _delete_integration(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_INTEGRATION_MUTATION, {"id": params.require("integrationId")})
        return payload_success(data, "integrationDelete")

    async def _list_templates(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        templates = await client.paginate(
            _LIST_TEMPLATES_QUERY,
            {},
            "integrationTemplates",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"templates": templates}
