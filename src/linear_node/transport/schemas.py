"""Pydantic models for the GraphQL envelope and common payload shapes."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvariantError


class GraphQLErrorDetail(BaseModel):
    """One entry of the ``errors`` array."""

    model_config = ConfigDict(extra="allow")

    message: str = "Unknown error"
    extensions: Optional[Dict[str, Any]] = None

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value):
        return "Unknown error" if value is None else value

    @property
    def code(self) -> Optional[str]:
        return (self.extensions or {}).get("code")

    @property
    def user_presentable_message(self) -> Optional[str]:
        return (self.extensions or {}).get("userPresentableMessage")


class GraphQLResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLErrorDetail]] = None


class PageInfo(BaseModel):
    hasNextPage: bool = False
    endCursor: Optional[str] = None


class Connection(BaseModel):
    """Relay connection: ``nodes`` plus ``pageInfo``."""

    model_config = ConfigDict(extra="allow")

    nodes: List[Dict[str, Any]] = Field(default_factory=list)
    pageInfo: PageInfo = Field(default_factory=PageInfo)


class MutationPayload(BaseModel):
    """``{success, <entity>}`` returned by create/update/delete mutations."""

    model_config = ConfigDict(extra="allow")

    success: Optional[bool] = None


class ArchivePayload(BaseModel):
    success: Optional[bool] = None
    entity: Optional[Dict[str, Any]] = None


def require_path(data: Dict[str, Any], path: str) -> Dict[str, Any]:
    """Walk a dot path and return the object at its end.

    Raises:
        InvariantError: If a segment is missing, null or not an object.
    """
    current: Any = data
    for key in path.split("."):
        if not isinstance(current, dict) or not isinstance(current.get(key), dict):
            raise InvariantError(f"Expected object at '{path}' in Linear API response")
        current = current[key]
    return current
