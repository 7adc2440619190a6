"""Linear GraphQL transport: client, errors, filters and signature checks."""

from .credentials import Credentials
from .exceptions import (
    ApiError,
    ApiRequestError,
    AuthenticationError,
    InvariantError,
    LinearNodeError,
    NotFoundError,
    ValidationError,
)
from .filters import (
    build_filter,
    build_notification_filter,
    clean_object,
    format_date_for_linear,
    parse_issue_identifier,
)
from .graphql import LicenseNotice, LinearGraphQLClient, default_license_notice
from .signature import compute_webhook_signature, verify_webhook_signature

__all__ = [
    "ApiError",
    "ApiRequestError",
    "AuthenticationError",
    "Credentials",
    "InvariantError",
    "LicenseNotice",
    "LinearGraphQLClient",
    "LinearNodeError",
    "NotFoundError",
    "ValidationError",
    "build_filter",
    "build_notification_filter",
    "clean_object",
    "compute_webhook_signature",
    "default_license_notice",
    "format_date_for_linear",
    "parse_issue_identifier",
    "verify_webhook_signature",
]
