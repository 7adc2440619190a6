"""Async GraphQL client for the Linear API.

Handles single authenticated requests, error-envelope translation and
Relay-style cursor pagination.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import get_settings
from .credentials import Credentials
from .exceptions import ApiError, ApiRequestError, InvariantError
from .schemas import Connection, GraphQLResponse

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50

LICENSE_NOTICE = (
    "linear-node is licensed under the Business Source License 1.1 (BSL 1.1). "
    "Use by for-profit organizations in production environments requires a "
    "commercial license."
)


class LicenseNotice:
    """Tracks whether the licensing notice has been emitted.

    One instance is shared per process; clients call ``emit()`` before every
    request and only the first call logs.
    """

    def __init__(self):
        self.emitted = False

    def emit(self):
        if not self.emitted:
            logger.warning(LICENSE_NOTICE)
            self.emitted = True


_default_notice: Optional[LicenseNotice] = None


def default_license_notice() -> LicenseNotice:
    """Return the process-wide notice state, creating it on first use."""
    global _default_notice
    if _default_notice is None:
        _default_notice = LicenseNotice()
    return _default_notice


def _get_nested(data: Dict[str, Any], path: str) -> Any:
    current: Any = data
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


class LinearGraphQLClient:
    """Async GraphQL client that uses the shared HTTP client."""

    def __init__(
        self,
        credentials: Credentials,
        endpoint: Optional[str] = None,
        notice: Optional[LicenseNotice] = None,
        max_pages: Optional[int] = None,
    ):
        settings = get_settings()
        self.credentials = credentials
        self.endpoint = endpoint or settings.linear_api_url
        self.notice = notice or default_license_notice()
        self.max_pages = settings.pagination_max_pages if max_pages is None else max_pages

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Execute a single GraphQL query or mutation.

        Args:
            query: GraphQL document.
            variables: Query variables (an empty object is sent when omitted).

        Returns:
            The "data" portion of the response.

        Raises:
            AuthenticationError: If no credential is configured.
            ApiRequestError: On network failures and non-2xx responses.
            ApiError: If the response carries GraphQL errors or no data.
            InvariantError: If the body is not a GraphQL envelope.
        """
        from .http_client import get_http_client

        self.notice.emit()

        headers = {
            "Authorization": self.credentials.authorization_header(),
            "Content-Type": "application/json",
        }
        payload = {"query": query, "variables": variables or {}}

        try:
            client = get_http_client()
            response = await client.post(self.endpoint, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise ApiRequestError(
                f"Linear API request failed: {e}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, ValueError) as e:
            raise ApiRequestError(f"Linear API request failed: {e}") from e

        if not isinstance(body, dict):
            raise InvariantError("Linear API returned a non-object response body")

        try:
            envelope = GraphQLResponse.model_validate(body)
        except PydanticValidationError as e:
            raise InvariantError(f"Malformed GraphQL response: {e}") from e

        if envelope.errors:
            primary = envelope.errors[0]
            message = primary.user_presentable_message or primary.message
            raise ApiError(
                f"Linear API Error: {message}",
                code=primary.code or "GRAPHQL_ERROR",
                description="; ".join(e.message for e in envelope.errors),
            )

        if envelope.data is None:
            raise ApiError("No data returned from Linear API")

        return envelope.data

    async def paginate(
        self,
        query: str,
        variables: Optional[Dict[str, Any]],
        path: str,
        return_all: bool = False,
        limit: int = 50,
        max_pages: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Collect nodes from a Relay connection.

        Expects the query to accept $first (Int) and $after (String) variables
        and the connection at ``path`` to have the shape
        ``{ nodes: [...], pageInfo: { hasNextPage, endCursor } }``.

        Args:
            query: GraphQL query with $first and $after variables.
            variables: Base variables (first/after are injected per page).
            path: Dot-separated path to the connection, e.g. "issues" or
                  "team.members".
            return_all: Follow every page instead of stopping at ``limit``.
            limit: Maximum number of nodes returned when not ``return_all``.
            max_pages: Safety limit on pages fetched (0 disables it). Defaults
                       to the client's configured limit.

        Returns:
            Nodes in server order; exactly ``limit`` of them when bounded and
            the server has at least that many.
        """
        page_size = MAX_PAGE_SIZE if return_all else min(limit, MAX_PAGE_SIZE)
        page_cap = self.max_pages if max_pages is None else max_pages

        results: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        pages = 0

        while True:
            page_vars = dict(variables or {})
            page_vars["first"] = page_size
            page_vars["after"] = cursor

            data = await self.execute(query, page_vars)
            pages += 1

            raw = _get_nested(data, path)
            try:
                connection = Connection.model_validate(raw) if raw is not None else Connection()
            except PydanticValidationError as e:
                raise InvariantError(f"Expected connection at '{path}': {e}") from e

            results.extend(connection.nodes)

            if not return_all and len(results) >= limit:
                return results[:limit]

            if not connection.pageInfo.hasNextPage:
                break
            cursor = connection.pageInfo.endCursor

            if page_cap and pages >= page_cap:
                logger.warning(
                    "Pagination of '%s' stopped at max_pages=%d with %d nodes",
                    path, page_cap, len(results),
                )
                break

        return results
