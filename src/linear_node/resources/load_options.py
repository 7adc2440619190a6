"""Dropdown option loaders.

Each loader returns ``[{"name": <label>, "value": <id>}]`` built from a single
unpaginated query (Linear's default page size applies). Team-scoped loaders
fall back to the organization-wide variant when no team id is given.
"""

from typing import Any, Dict, List, Optional

from ..transport.graphql import LinearGraphQLClient
from .base import nodes_of

Option = Dict[str, str]

_TEAMS_QUERY = "query { teams { nodes { id name key } } }"
_USERS_QUERY = "query { users { nodes { id name email active } } }"
_PROJECTS_QUERY = "query { projects { nodes { id name state } } }"
_CYCLES_QUERY = "query { cycles { nodes { id name number startsAt endsAt team { key } } } }"
_LABELS_QUERY = "query { issueLabels { nodes { id name color team { key } } } }"
_STATES_QUERY = "query { workflowStates { nodes { id name type team { key } } } }"
_ISSUES_QUERY = "query { issues(first: 100) { nodes { id identifier title } } }"

_TEAM_STATES_QUERY = """
query TeamStates($teamId: String!) {
  team(id: $teamId) { states { nodes { id name type } } }
}
"""

_TEAM_LABELS_QUERY = """
query TeamLabels($teamId: String!) {
  team(id: $teamId) { labels { nodes { id name color } } }
}
"""

_TEAM_CYCLES_QUERY = """
query TeamCycles($teamId: String!) {
  team(id: $teamId) { cycles { nodes { id name number startsAt endsAt } } }
}
"""


def _cycle_name(cycle: Dict[str, Any]) -> str:
    return str(cycle.get("name") or f"Cycle {cycle.get('number')}")


def _team_key(entity: Dict[str, Any]) -> Optional[str]:
    return (entity.get("team") or {}).get("key")


async def get_teams(client: LinearGraphQLClient) -> List[Option]:
    data = await client.execute(_TEAMS_QUERY)
    return [
        {"name": f"{t['name']} ({t['key']})", "value": t["id"]}
        for t in nodes_of(data, "teams")
    ]


async def get_users(client: LinearGraphQLClient) -> List[Option]:
    """Active users only."""
    data = await client.execute(_USERS_QUERY)
    return [
        {"name": f"{u['name']} ({u['email']})", "value": u["id"]}
        for u in nodes_of(data, "users")
        if u.get("active")
    ]


async def get_projects(client: LinearGraphQLClient) -> List[Option]:
    data = await client.execute(_PROJECTS_QUERY)
    return [
        {"name": f"{p['name']} ({p['state']})", "value": p["id"]}
        for p in nodes_of(data, "projects")
    ]


async def get_cycles(client: LinearGraphQLClient) -> List[Option]:
    data = await client.execute(_CYCLES_QUERY)
    return [
        {"name": f"{_team_key(c) or 'Unknown'} - {_cycle_name(c)}", "value": c["id"]}
        for c in nodes_of(data, "cycles")
    ]


async def get_labels(client: LinearGraphQLClient) -> List[Option]:
    data = await client.execute(_LABELS_QUERY)
    options = []
    for label in nodes_of(data, "issueLabels"):
        key = _team_key(label)
        prefix = f"{key} - " if key else ""
        options.append({"name": f"{prefix}{label['name']}", "value": label["id"]})
    return options


async def get_workflow_states(client: LinearGraphQLClient) -> List[Option]:
    data = await client.execute(_STATES_QUERY)
    return [
        {"name": f"{_team_key(s) or 'Unknown'} - {s['name']} ({s['type']})", "value": s["id"]}
        for s in nodes_of(data, "workflowStates")
    ]


async def get_issues(client: LinearGraphQLClient) -> List[Option]:
    """The 100 most recent issues."""
    data = await client.execute(_ISSUES_QUERY)
    return [
        {"name": f"{i['identifier']}: {i['title']}", "value": i["id"]}
        for i in nodes_of(data, "issues")
    ]


async def get_team_workflow_states(client: LinearGraphQLClient, team_id: Optional[str] = None) -> List[Option]:
    if not team_id:
        return await get_workflow_states(client)
    data = await client.execute(_TEAM_STATES_QUERY, {"teamId": team_id})
    return [
        {"name": f"{s['name']} ({s['type']})", "value": s["id"]}
        for s in nodes_of(data.get("team"), "states")
    ]


async def get_team_labels(client: LinearGraphQLClient, team_id: Optional[str] = None) -> List[Option]:
    if not team_id:
        return await get_labels(client)
    data = await client.execute(_TEAM_LABELS_QUERY, {"teamId": team_id})
    return [{"name": lb["name"], "value": lb["id"]} for lb in nodes_of(data.get("team"), "labels")]


async def get_team_cycles(client: LinearGraphQLClient, team_id: Optional[str] = None) -> List[Option]:
    if not team_id:
        return await get_cycles(client)
    data = await client.execute(_TEAM_CYCLES_QUERY, {"teamId": team_id})
    return [{"name": _cycle_name(c), "value": c["id"]} for c in nodes_of(data.get("team"), "cycles")]


LOAD_OPTIONS = {
    "getTeams": get_teams,
    "getUsers": get_users,
    "getProjects": get_projects,
    "getCycles": get_cycles,
    "getLabels": get_labels,
    "getWorkflowStates": get_workflow_states,
    "getIssues": get_issues,
    "getTeamWorkflowStates": get_team_workflow_states,
    "getTeamLabels": get_team_labels,
    "getTeamCycles": get_team_cycles,
}

# Loaders that accept an optional team id
TEAM_SCOPED_LOAD_OPTIONS = frozenset({"getTeamWorkflowStates", "getTeamLabels", "getTeamCycles"})
