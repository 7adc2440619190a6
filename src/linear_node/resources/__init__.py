"""Linear resource dispatchers.

Importing this package registers every resource in ``resource_registry``.
"""

from .base import BaseResource, Operation, Parameters
from .registry import ResourceRegistry, register_resource, resource_registry

# Import resources to register them
from . import (  # noqa: F401
    attachments,
    comments,
    cycles,
    documents,
    favorites,
    integrations,
    issues,
    labels,
    notifications,
    project_updates,
    projects,
    teams,
    users,
    webhooks,
    workflow_states,
)

__all__ = [
    "BaseResource",
    "Operation",
    "Parameters",
    "ResourceRegistry",
    "register_resource",
    "resource_registry",
]
