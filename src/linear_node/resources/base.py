"""Base resource interface and operation declarations."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from ..transport.exceptions import InvariantError, ValidationError
from ..transport.graphql import LinearGraphQLClient
from ..transport.schemas import ArchivePayload, MutationPayload, require_path

logger = logging.getLogger(__name__)

Result = Union[Dict[str, Any], List[Dict[str, Any]]]
Handler = Callable[[LinearGraphQLClient, "Parameters"], Awaitable[Result]]

# Shared input-schema fragments
PRIORITY_SCHEMA = {
    "type": "integer",
    "minimum": 0,
    "maximum": 4,
    "description": "Priority: 0=None, 1=Urgent, 2=High, 3=Medium, 4=Low",
}
RETURN_ALL_SCHEMA = {
    "type": "boolean",
    "default": False,
    "description": "Whether to return all results or only up to a given limit",
}
LIMIT_SCHEMA = {
    "type": "integer",
    "minimum": 1,
    "default": 50,
    "description": "Max number of results to return",
}
WORKFLOW_STATE_TYPES = ["backlog", "unstarted", "started", "completed", "canceled"]
PROJECT_STATES = ["planned", "backlog", "started", "paused", "completed", "canceled"]
HEALTH_VALUES = ["onTrack", "atRisk", "offTrack"]
RELATION_TYPES = ["blocks", "blocked", "related", "duplicate"]


def id_schema(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def fields_schema(description: str = "Additional fields") -> Dict[str, Any]:
    return {"type": "object", "description": description}


def object_schema(
    properties: Dict[str, Any],
    required: Optional[List[str]] = None,
) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def list_schema(extra: Optional[Dict[str, Any]] = None, required: Optional[List[str]] = None) -> Dict[str, Any]:
    """Schema for a paginated list operation: returnAll + limit + extras."""
    properties = {"returnAll": RETURN_ALL_SCHEMA, "limit": LIMIT_SCHEMA}
    properties.update(extra or {})
    return object_schema(properties, required)


class Parameters:
    """Read-only view over one input item's parameters."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def get(self, name: str, default: Any = None) -> Any:
        value = self._values.get(name)
        return default if value is None else value

    def require(self, name: str) -> Any:
        value = self._values.get(name)
        if value is None or value == "":
            raise ValidationError(f"Missing required parameter: {name}")
        return value

    def collection(self, name: str) -> Dict[str, Any]:
        """Return a nested options object (e.g. ``additionalFields``), or ``{}``."""
        value = self._values.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValidationError(f"Parameter '{name}' must be an object")
        return dict(value)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)


@dataclass
class Operation:
    """One user-selectable operation of a resource."""

    name: str
    display_name: str
    description: str
    handler: Handler
    input_schema: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    @property
    def required(self) -> List[str]:
        return list(self.input_schema.get("required", []))

    def validate(self, params: Parameters):
        """Enforce the schema's required parameters."""
        for name in self.required:
            params.require(name)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.display_name,
            "value": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class BaseResource(ABC):
    """Base class for Linear resources (issues, comments, ...)."""

    def __init__(self):
        self._operations: Dict[str, Operation] = {op.name: op for op in self.get_operations()}

    @property
    @abstractmethod
    def name(self) -> str:
        """Resource value used for dispatch, e.g. ``issues``."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        pass

    @abstractmethod
    def get_operations(self) -> List[Operation]:
        """Declare the operations this resource supports."""
        pass

    @property
    def operations(self) -> Dict[str, Operation]:
        return self._operations

    def get_operation(self, operation: str) -> Operation:
        op = self._operations.get(operation)
        if op is None:
            raise ValidationError(
                f"The operation \"{operation}\" is not supported for resource \"{self.name}\""
            )
        return op

    async def execute(
        self,
        client: LinearGraphQLClient,
        operation: str,
        params: Parameters,
    ) -> Result:
        """Validate parameters and run the operation's handler."""
        op = self.get_operation(operation)
        op.validate(params)
        logger.debug("Executing %s.%s", self.name, operation)
        return await op.handler(client, params)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.display_name,
            "value": self.name,
            "operations": [op.describe() for op in self._operations.values()],
        }


# -- shared reshaping helpers ----------------------------------------------


def nodes_of(entity: Optional[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    """Flatten ``entity[key].nodes`` into a list."""
    if not entity:
        return []
    return list((entity.get(key) or {}).get("nodes") or [])


def payload_entity(data: Dict[str, Any], mutation: str, entity: str) -> Dict[str, Any]:
    """Return ``data[mutation][entity]`` from a create/update payload.

    Raises:
        InvariantError: If the mutation payload or its entity is missing.
    """
    return require_path(data, f"{mutation}.{entity}")


def payload_success(data: Dict[str, Any], mutation: str) -> Dict[str, Any]:
    """``{"success": bool}`` for delete-style mutations."""
    payload = MutationPayload.model_validate(data.get(mutation) or {})
    return {"success": bool(payload.success)}


def entity_or_success(data: Dict[str, Any], mutation: str, entity: str) -> Dict[str, Any]:
    """``data[mutation][entity]`` if present, else ``{"success": ...}``."""
    payload = data.get(mutation) or {}
    return payload.get(entity) or {"success": payload.get("success")}


def archive_entity(data: Dict[str, Any], mutation: str) -> Dict[str, Any]:
    """Return the archived ``entity`` of an archive/unarchive payload.

    Raises:
        InvariantError: If the payload carries no entity.
    """
    payload = ArchivePayload.model_validate(data.get(mutation) or {})
    if payload.entity is None:
        raise InvariantError(f"Expected '{mutation}.entity' in Linear API response")
    return payload.entity
