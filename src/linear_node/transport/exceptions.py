"""Exception types raised by the Linear transport and resource handlers.

Handlers never catch these; they surface to ``LinearNode.execute`` which either
records them against the failing item (continue-on-fail) or re-raises.
"""

from typing import Optional


class LinearNodeError(Exception):
    """Base exception for all linear-node errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(LinearNodeError):
    """No usable credential (neither API key nor OAuth2 token) is configured."""

    pass


class ApiRequestError(LinearNodeError):
    """Transport-level failure: network error or non-2xx HTTP response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ApiError(LinearNodeError):
    """Linear answered with a well-formed GraphQL error envelope."""

    def __init__(
        self,
        message: str,
        code: str = "GRAPHQL_ERROR",
        description: str = "",
    ):
        self.code = code
        self.description = description
        super().__init__(message)


class NotFoundError(ApiError):
    """An identifier lookup matched no entity."""

    def __init__(self, message: str):
        super().__init__(message, code="NOT_FOUND")


class InvariantError(LinearNodeError):
    """The response did not have the shape the API contract promises."""

    pass


class ValidationError(LinearNodeError):
    """Invalid input: unknown resource/operation, missing parameter, bad payload."""

    pass
