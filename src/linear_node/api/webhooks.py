"""Webhook delivery route for the Linear trigger."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import get_settings
from ..observability.logging import clear_log_context
from ..trigger import LinearTrigger

logger = logging.getLogger(__name__)

EventHandler = Callable[[Dict[str, Any]], Awaitable[None]]


def create_webhook_router(
    trigger: LinearTrigger,
    on_event: Optional[EventHandler] = None,
    path: Optional[str] = None,
) -> APIRouter:
    """Build a router that feeds Linear deliveries into ``trigger``."""
    router = APIRouter()
    route_path = path or get_settings().webhook_path

    @router.post(route_path)
    async def receive_webhook(request: Request):
        """Receive one Linear webhook delivery."""
        raw_body = await request.body()
        try:
            result = trigger.handle_delivery(raw_body, request.headers)
            if result.event is not None and on_event is not None:
                await on_event(result.event)
        finally:
            clear_log_context()

        if result.status == 204:
            return Response(status_code=204)
        if isinstance(result.body, dict):
            return JSONResponse(result.body, status_code=result.status)
        return PlainTextResponse(result.body or "", status_code=result.status)

    return router
