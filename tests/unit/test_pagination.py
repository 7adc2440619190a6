"""Tests for LinearGraphQLClient.paginate() (Relay cursor pagination)."""

import logging

import pytest

from linear_node.transport.credentials import Credentials
from linear_node.transport.exceptions import InvariantError
from linear_node.transport.graphql import LicenseNotice, LinearGraphQLClient

pytestmark = pytest.mark.asyncio

QUERY = (
    "query($first: Int, $after: String) { issues(first: $first, after: $after) "
    "{ nodes { id } pageInfo { hasNextPage endCursor } } }"
)


def _page(ids, has_next=False, cursor=None, path="issues"):
    connection = {
        "nodes": [{"id": str(i)} for i in ids],
        "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
    }
    data = connection
    for key in reversed(path.split(".")):
        data = {key: data}
    return data


class TestBoundedPagination:
    """Pagination with returnAll disabled."""

    async def test_single_page(self, graphql, linear_client):
        """hasNextPage=False returns all nodes after one request."""
        graphql.data(_page([1, 2]))

        nodes = await linear_client.paginate(QUERY, {}, "issues", limit=10)

        assert nodes == [{"id": "1"}, {"id": "2"}]
        assert len(graphql.payloads) == 1

    async def test_first_page_variables(self, graphql, linear_client):
        """First request asks for min(limit, 50) with no cursor."""
        graphql.data(_page([1]))

        await linear_client.paginate(QUERY, {"filter": {"x": 1}}, "issues", limit=20)

        assert graphql.payloads[0]["variables"] == {"filter": {"x": 1}, "first": 20, "after": None}

    async def test_page_size_capped_at_50(self, graphql, linear_client):
        graphql.data(_page([1]))

        await linear_client.paginate(QUERY, {}, "issues", limit=500)

        assert graphql.payloads[0]["variables"]["first"] == 50

    async def test_truncates_to_limit(self, graphql, linear_client):
        """More nodes than the limit are truncated and no further page is fetched."""
        graphql.data(_page(range(5), has_next=True, cursor="c1"))

        nodes = await linear_client.paginate(QUERY, {}, "issues", limit=3)

        assert [n["id"] for n in nodes] == ["0", "1", "2"]
        assert len(graphql.payloads) == 1

    async def test_follows_cursor_until_limit(self, graphql, linear_client):
        graphql.data(
            _page(range(0, 50), has_next=True, cursor="c1"),
            _page(range(50, 100), has_next=True, cursor="c2"),
        )

        nodes = await linear_client.paginate(QUERY, {}, "issues", limit=60)

        assert len(nodes) == 60
        assert graphql.payloads[1]["variables"]["after"] == "c1"
        assert len(graphql.payloads) == 2

    async def test_missing_connection_is_empty(self, graphql, linear_client):
        graphql.data({"issues": None})

        nodes = await linear_client.paginate(QUERY, {}, "issues", limit=10)

        assert nodes == []

    async def test_malformed_connection(self, graphql, linear_client):
        graphql.data({"issues": {"nodes": "nope"}})

        with pytest.raises(InvariantError):
            await linear_client.paginate(QUERY, {}, "issues")


class TestReturnAllPagination:
    """Pagination with returnAll enabled."""

    async def test_multiple_pages(self, graphql, linear_client):
        """Pages are concatenated in server order."""
        graphql.data(
            _page([1], has_next=True, cursor="cursor_after_1"),
            _page([2], has_next=False, cursor="cursor_after_2"),
        )

        nodes = await linear_client.paginate(QUERY, {}, "issues", return_all=True)

        assert nodes == [{"id": "1"}, {"id": "2"}]
        assert graphql.payloads[0]["variables"]["first"] == 50
        assert graphql.payloads[1]["variables"]["after"] == "cursor_after_1"

    async def test_nested_path(self, graphql, linear_client):
        """Dot-separated paths navigate nested data."""
        graphql.data(_page(["deep"], path="team.members"))

        nodes = await linear_client.paginate(QUERY, {"teamId": "t1"}, "team.members", return_all=True)

        assert nodes == [{"id": "deep"}]

    async def test_max_pages_stops_and_warns(self, graphql, linear_client, caplog):
        graphql.data(
            _page([1], has_next=True, cursor="a"),
            _page([2], has_next=True, cursor="b"),
            _page([3], has_next=True, cursor="c"),
        )

        with caplog.at_level(logging.WARNING, logger="linear_node.transport.graphql"):
            nodes = await linear_client.paginate(QUERY, {}, "issues", return_all=True, max_pages=2)

        assert [n["id"] for n in nodes] == ["1", "2"]
        assert len(graphql.payloads) == 2
        assert any("max_pages=2" in r.getMessage() for r in caplog.records)

    async def test_zero_max_pages_is_unbounded(self, graphql):
        client = LinearGraphQLClient(
            Credentials(api_key="k"),
            endpoint="https://api.linear.app/graphql",
            notice=LicenseNotice(),
            max_pages=0,
        )
        graphql.data(
            _page([1], has_next=True, cursor="a"),
            _page([2], has_next=True, cursor="b"),
            _page([3]),
        )

        nodes = await client.paginate(QUERY, {}, "issues", return_all=True)

        assert len(nodes) == 3


class TestFivePageConnection:
    """Five full pages of 50 nodes, 250 in total."""

    @staticmethod
    def _pages():
        return [
            _page(
                range(p * 50, (p + 1) * 50),
                has_next=p < 4,
                cursor=f"c{p}" if p < 4 else None,
            )
            for p in range(5)
        ]

    async def test_limit_120_returns_exactly_120(self, graphql, linear_client):
        graphql.data(*self._pages())

        nodes = await linear_client.paginate(QUERY, {}, "issues", limit=120)

        assert [n["id"] for n in nodes] == [str(i) for i in range(120)]
        assert len(graphql.payloads) == 3

    async def test_return_all_returns_all_250_in_order(self, graphql, linear_client):
        graphql.data(*self._pages())

        nodes = await linear_client.paginate(QUERY, {}, "issues", return_all=True)

        assert [n["id"] for n in nodes] == [str(i) for i in range(250)]
        assert [p["variables"]["after"] for p in graphql.payloads] == [None, "c0", "c1", "c2", "c3"]
