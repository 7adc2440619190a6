"""Linear GraphQL node and webhook trigger."""

__version__ = "0.1.0"

from .node import LinearNode
from .trigger import InMemoryWebhookStore, LinearTrigger, TriggerConfig, WebhookResponse

__all__ = [
    "InMemoryWebhookStore",
    "LinearNode",
    "LinearTrigger",
    "TriggerConfig",
    "WebhookResponse",
]
