"""Favorite (sidebar shortcut) operations."""

from typing import Any, Dict, List

from ..transport.exceptions import ValidationError
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
from .fields import FAVORITE_FIELDS, PAGE_INFO
from .registry import register_resource

# favoriteType -> input field carrying the target's id
FAVORITE_TARGETS = {
    "issue": "issueId",
    "project": "projectId",
    "cycle": "cycleId",
    "label": "labelId",
    "user": "userId",
}

_LIST_FAVORITES_QUERY = f"""
query Favorites($first: Int, $after: String) {{
  favorites(first: $first, after: $after) {{
    nodes {{ {FAVORITE_FIELDS} }}
    {PAGE_INFO}
  }}
}}
"""

_CREATE_FAVORITE_MUTATION = f"""
mutation FavoriteCreate($input: FavoriteCreateInput!) {{
  favoriteCreate(input: $input) {{
    success
    favorite {{ {FAVORITE_FIELDS} }}
  }}
}}
"""

_DELETE_FAVORITE_MUTATION = """
mutation FavoriteDelete($id: String!) {
  favoriteDelete(id: $id) { success }
}
"""


@register_resource
class FavoritesResource(BaseResource):

    @property
    def name(self) -> str:
        return "favorites"

    @property
    def display_name(self) -> str:
        return "Favorites"

    def get_operations(self) -> List[Operation]:
        target_ids = {field: id_schema(f"{kind.capitalize()} ID") for kind, field in FAVORITE_TARGETS.items()}
        return [
            Operation("listFavorites", "List Favorites", "List the user's favorites", self._list_favorites, list_schema()),
            Operation(
                "createFavorite", "Create Favorite", "Favorite an issue, project, cycle, label or user",
                self._create_favorite,
                object_schema(
                    {
                        "favoriteType": {"type": "string", "enum": list(FAVORITE_TARGETS)},
                        **target_ids,
                        "additionalFields": fields_schema("Optional folderName, sortOrder"),
                    },
                    ["favoriteType"],
                ),
            ),
            Operation(
                "deleteFavorite", "Delete Favorite", "Remove a favorite",
                self._delete_favorite,
                object_schema({"favoriteId": id_schema("Favorite ID")}, ["favoriteId"]),
            ),
        ]

    async def _list_favorites(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        favorites = await client.paginate(
            _LIST_FAVORITES_QUERY,
            {},
            "favorites",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"favorites": favorites}

    async def _create_favorite(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        favorite_type = params.require("favoriteType")
        target = FAVORITE_TARGETS.get(favorite_type)
        if target is None:
            raise ValidationError(f"Unknown favorite type: {favorite_type}")

        input_data = clean_object(params.collection("additionalFields"))
        input_data[target] = params.require(target)

        data = await client.execute(_CREATE_FAVORITE_MUTATION, {"input": input_data})
        return payload_entity(data, "favoriteCreate", "favorite")

    async def _delete_favorite(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_FAVORITE_MUTATION, {"id": params.require("favoriteId")})
        return payload_success(data, "favoriteDelete")
