"""Test configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Set test environment variables BEFORE importing the package
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("LINEAR_API_KEY", None)
os.environ.pop("LINEAR_OAUTH_ACCESS_TOKEN", None)
os.environ.pop("LINEAR_WEBHOOK_SECRET", None)

from linear_node.config import get_settings  # noqa: E402
from linear_node.transport.credentials import Credentials  # noqa: E402
from linear_node.transport.graphql import LicenseNotice, LinearGraphQLClient  # noqa: E402

TEST_ENDPOINT = "https://api.linear.app/graphql"


def make_response(json_data, status_code=200):
    """Build a mock httpx.Response-like object.

    The mock has .json(), .status_code, and .raise_for_status() (no-op).
    """
    resp = MagicMock()
    resp.json.return_value = json_data
    resp.status_code = status_code
    resp.raise_for_status = MagicMock()
    return resp


class GraphQLStub:
    """Scripted responses for the shared HTTP client, plus request inspection."""

    def __init__(self, http):
        self.http = http

    def respond(self, *bodies):
        """Queue raw response bodies, one per request."""
        self.http.post.side_effect = [make_response(body) for body in bodies]

    def data(self, *datas):
        """Queue successful responses carrying the given ``data`` objects."""
        self.respond(*({"data": d} for d in datas))

    @property
    def payloads(self):
        return [c.kwargs["json"] for c in self.http.post.call_args_list]

    @property
    def last_query(self):
        return self.payloads[-1]["query"]

    @property
    def last_variables(self):
        return self.payloads[-1]["variables"]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_http():
    """Patch the shared HTTP client with an AsyncMock."""
    with patch("linear_node.transport.http_client.get_http_client") as mock_get_client:
        mock_client = AsyncMock()
        mock_get_client.return_value = mock_client
        yield mock_client


@pytest.fixture
def graphql(mock_http):
    return GraphQLStub(mock_http)


@pytest.fixture
def linear_client():
    """GraphQL client with an API key and a private license notice."""
    return LinearGraphQLClient(
        Credentials(api_key="lin_api_test"),
        endpoint=TEST_ENDPOINT,
        notice=LicenseNotice(),
    )
