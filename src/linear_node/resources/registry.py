"""Resource registry for dispatching resource/operation pairs."""

import logging
from typing import Any, Dict, List, Optional, Type

from ..transport.exceptions import ValidationError
from .base import BaseResource

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """Registry of resource dispatchers keyed by resource value."""

    def __init__(self):
        self._resources: Dict[str, BaseResource] = {}

    def register(self, resource_class: Type[BaseResource]):
        """Instantiate and register a resource class."""
        resource = resource_class()
        self._resources[resource.name] = resource
        logger.debug(
            "Registered resource: %s (%d operations)",
            resource.name, len(resource.operations),
        )

    def get_resource(self, name: str) -> Optional[BaseResource]:
        return self._resources.get(name)

    def require_resource(self, name: str) -> BaseResource:
        resource = self._resources.get(name)
        if resource is None:
            raise ValidationError(f"Unknown resource: {name}")
        return resource

    def list_resources(self) -> List[str]:
        return sorted(self._resources.keys())

    def describe(self) -> List[Dict[str, Any]]:
        """Resource/operation table, ordered by resource value."""
        return [self._resources[name].describe() for name in self.list_resources()]


# Global resource registry instance
resource_registry = ResourceRegistry()


def register_resource(resource_class: Type[BaseResource]) -> Type[BaseResource]:
    """Class decorator registering a resource in the global registry."""
    resource_registry.register(resource_class)
    return resource_class
