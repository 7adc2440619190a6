"""Comment and reaction operations."""

from typing import Any, Dict, List

from ..transport.filters import clean_object
from ..transport.graphql import LinearGraphQLClient
from .base import (
    BaseResource,
    Operation,
    Parameters,
    fields_schema,
    id_schema,
    list_schema,
    object_schema,
    payload_entity,
    payload_success,
)
from .fields import COMMENT_FIELDS, PAGE_INFO, REACTION_FIELDS
from .registry import register_resource

_LIST_COMMENTS_QUERY = f"""
query IssueComments($issueId: String!, $first: Int, $after: String) {{
  issue(id: $issueId) {{
    comments(first: $first, after: $after) {{
      nodes {{
        {COMMENT_FIELDS}
        reactions {{ nodes {{ {REACTION_FIELDS} }} }}
      }}
      {PAGE_INFO}
    }}
  }}
}}
"""

_GET_COMMENT_QUERY = f"""
query Comment($id: String!) {{
  comment(id: $id) {{
    {COMMENT_FIELDS}
    reactions {{ nodes {{ {REACTION_FIELDS} }} }}
  }}
}}
"""

_CREATE_COMMENT_MUTATION = f"""
mutation CommentCreate($input: CommentCreateInput!) {{
  commentCreate(input: $input) {{
    success
    comment {{ {COMMENT_FIELDS} }}
  }}
}}
"""

_UPDATE_COMMENT_MUTATION = f"""
mutation CommentUpdate($id: String!, $input: CommentUpdateInput!) {{
  commentUpdate(id: $id, input: $input) {{
    success
    comment {{ {COMMENT_FIELDS} }}
  }}
}}
"""

_DELETE_COMMENT_MUTATION = """
mutation CommentDelete($id: String!) {
  commentDelete(id: $id) { success }
}
"""

_CREATE_REACTION_MUTATION = f"""
mutation ReactionCreate($input: ReactionCreateInput!) {{
  reactionCreate(input: $input) {{
    success
    reaction {{ {REACTION_FIELDS} }}
  }}
}}
"""

_DELETE_REACTION_MUTATION = """
mutation ReactionDelete($id: String!) {
  reactionDelete(id: $id) { success }
}
"""

_BODY = {"type": "string", "description": "Comment body (Markdown)"}


@register_resource
class CommentsResource(BaseResource):

    @property
    def name(self) -> str:
        return "comments"

    @property
    def display_name(self) -> str:
        return "Comments"

    def get_operations(self) -> List[Operation]:
        comment_only = object_schema({"commentId": id_schema("Comment ID")}, ["commentId"])
        return [
            Operation(
                "listComments", "List Comments", "List the comments of an issue",
                self._list_comments,
                list_schema({"issueId": id_schema("Issue ID")}, ["issueId"]),
            ),
            Operation("getComment", "Get Comment", "Get a comment by ID", self._get_comment, comment_only),
            Operation(
                "createComment", "Create Comment", "Comment on an issue",
                self._create_comment,
                object_schema(
                    {
                        "issueId": id_schema("Issue ID"),
                        "body": _BODY,
                        "additionalFields": fields_schema("Optional parentId to reply in a thread"),
                    },
                    ["issueId", "body"],
                ),
            ),
            Operation(
                "updateComment", "Update Comment", "Replace the body of a comment",
                self._update_comment,
                object_schema({"commentId": id_schema("Comment ID"), "body": _BODY}, ["commentId", "body"]),
            ),
            Operation("deleteComment", "Delete Comment", "Delete a comment", self._delete_comment, comment_only),
            Operation(
                "createReaction", "Create Reaction", "React to a comment with an emoji",
                self._create_reaction,
                object_schema(
                    {"commentId": id_schema("Comment ID"), "emoji": {"type": "string", "description": "Emoji name"}},
                    ["commentId", "emoji"],
                ),
            ),
            Operation(
                "deleteReaction", "Delete Reaction", "Remove a reaction",
                self._delete_reaction,
                object_schema({"reactionId": id_schema("Reaction ID")}, ["reactionId"]),
            ),
        ]

    async def _list_comments(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        comments = await client.paginate(
            _LIST_COMMENTS_QUERY,
            {"issueId": params.require("issueId")},
            "issue.comments",
            return_all=params.get("returnAll", False),
            limit=params.get("limit", 50),
        )
        return {"comments": comments}

    async def _get_comment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_GET_COMMENT_QUERY, {"id": params.require("commentId")})
        return data.get("comment") or {}

    async def _create_comment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        additional = params.collection("additionalFields")
        input_data = clean_object({
            "issueId": params.require("issueId"),
            "body": params.require("body"),
            "parentId": additional.get("parentId"),
        })
        data = await client.execute(_CREATE_COMMENT_MUTATION, {"input": input_data})
        return payload_entity(data, "commentCreate", "comment")

    async def _update_comment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _UPDATE_COMMENT_MUTATION,
            {"id": params.require("commentId"), "input": {"body": params.require("body")}},
        )
        return payload_entity(data, "commentUpdate", "comment")

    async def _delete_comment(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_COMMENT_MUTATION, {"id": params.require("commentId")})
        return payload_success(data, "commentDelete")

    async def _create_reaction(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(
            _CREATE_REACTION_MUTATION,
            {"input": {"commentId": params.require("commentId"), "emoji": params.require("emoji")}},
        )
        return payload_entity(data, "reactionCreate", "reaction")

    async def _delete_reaction(self, client: LinearGraphQLClient, params: Parameters) -> Dict[str, Any]:
        data = await client.execute(_DELETE_REACTION_MUTATION, {"id": params.require("reactionId")})
        return payload_success(data, "reactionDelete")
