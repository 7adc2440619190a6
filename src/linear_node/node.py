"""Linear node entry point.

Dispatches (resource, operation) pairs over a batch of input items and turns
handler results into output items.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import Settings, get_settings
from .observability.logging import clear_log_context, set_log_context
from .resources import Parameters, resource_registry
from .resources.load_options import LOAD_OPTIONS, TEAM_SCOPED_LOAD_OPTIONS
from .transport.credentials import Credentials
from .transport.exceptions import ValidationError
from .transport.graphql import LinearGraphQLClient

logger = logging.getLogger(__name__)

OutputItem = Dict[str, Any]


class LinearNode:
    """Runs Linear resource operations for a batch of items."""

    def __init__(
        self,
        client: Optional[LinearGraphQLClient] = None,
        credentials: Optional[Credentials] = None,
        settings: Optional[Settings] = None,
    ):
        if client is None:
            settings = settings or get_settings()
            client = LinearGraphQLClient(credentials or Credentials.from_settings(settings))
        self.client = client

    async def execute(
        self,
        resource: str,
        operation: str,
        items: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> List[OutputItem]:
        """Run ``resource.operation`` once per input item.

        A dict result becomes one output item and a list result becomes one
        output item per element. Every output item is paired with the index of
        the input item that produced it.

        Args:
            resource: Resource value, e.g. ``issues``.
            operation: Operation value, e.g. ``createIssue``.
            items: Parameter mappings, one per input item.
            continue_on_fail: Emit ``{"error": ...}`` items instead of raising.

        Returns:
            Output items of the form ``{"json": ..., "pairedItem": {"item": i}}``.
        """
        returned: List[OutputItem] = []

        for i, item in enumerate(items):
            set_log_context(resource=resource, operation=operation, item_index=i)
            try:
                handler = resource_registry.require_resource(resource)
                result = await handler.execute(self.client, operation, Parameters(item))
            except Exception as e:
                if not continue_on_fail:
                    raise
                logger.warning("Item %d failed: %s", i, e)
                returned.append({"json": {"error": str(e)}, "pairedItem": {"item": i}})
                continue
            finally:
                clear_log_context()

            if isinstance(result, list):
                returned.extend({"json": entry, "pairedItem": {"item": i}} for entry in result)
            else:
                returned.append({"json": result, "pairedItem": {"item": i}})

        return returned

    def describe(self) -> List[Dict[str, Any]]:
        """Declarative resource/operation table."""
        return resource_registry.describe()

    async def load_options(self, method: str, team_id: Optional[str] = None) -> List[Dict[str, str]]:
        """Run a named dropdown option loader, e.g. ``getTeams``."""
        loader = LOAD_OPTIONS.get(method)
        if loader is None:
            raise ValidationError(f"Unknown load options method: {method}")
        if method in TEAM_SCOPED_LOAD_OPTIONS:
            return await loader(self.client, team_id)
        return await loader(self.client)
