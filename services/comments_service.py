"""
Comments Service Module

This module handles the ``/comments`` endpoints. Comments hang off a post
(identified by post type and id); replies hang off a top-level comment and
are never nested further.
"""

from typing import Optional, List

from data.device import DeviceIdStore
from data.models import Comment, PostType
from services.api_client import ApiClient, parse_list, parse_one
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def _require_content(content: str) -> str:
    if content is None or not content.strip():
        raise ValidationError("Comment text cannot be empty")
    return content.strip()


class CommentsService:
    """Service for comments and replies."""

    resource = "/comments"

    def __init__(self, client: ApiClient, device: DeviceIdStore):
        self.client = client
        self.device = device

    @property
    def user_id(self) -> str:
        return self.device.get_device_id()

    def get_for_post(self, post_type: PostType, post_id: int) -> List[Comment]:
        """
        Fetch the top-level comments of a post, oldest first, each with its replies.

        Args:
            post_type: The kind of post.
            post_id: The post's id.

        Returns:
            List[Comment]: The comment thread.
        """
        data = self.client.get(f"{self.resource}/{PostType(post_type).value}/{post_id}")
        return parse_list(data, Comment.from_dict, "comments")

    def add(self, post_type: PostType, post_id: int, content: str,
            parent_id: Optional[int] = None) -> Comment:
        """
        Add a comment, or a reply when ``parent_id`` is given.

        Raises:
            ValidationError: If content is blank.
        """
        body = {'content': _require_content(content)}
        if parent_id:
            # The backend reads every body field as a string
            body['parentId'] = str(parent_id)
        data = self.client.post(f"{self.resource}/{PostType(post_type).value}/{post_id}",
                                params={'userId': self.user_id}, json_body=body)
        comment = parse_one(data, Comment.from_dict, "comment")
        if comment.is_toxic:
            logger.warning(f"Comment {comment.id} was flagged as potentially toxic "
                           f"(score {comment.toxicity_score:.2f})")
        return comment

    def add_reply(self, comment_id: int, content: str) -> Comment:
        """Reply to an existing comment."""
        data = self.client.post(f"{self.resource}/{comment_id}/reply",
                                params={'userId': self.user_id},
                                json_body={'content': _require_content(content)})
        return parse_one(data, Comment.from_dict, "comment")

    def update(self, comment_id: int, content: str) -> Comment:
        data = self.client.put(f"{self.resource}/{comment_id}", params={'userId': self.user_id},
                               json_body={'content': _require_content(content)})
        return parse_one(data, Comment.from_dict, "comment")

    def delete(self, comment_id: int) -> None:
        self.client.delete(f"{self.resource}/{comment_id}", params={'userId': self.user_id})

    def get_count(self, post_type: PostType, post_id: int) -> int:
        data = self.client.get(f"{self.resource}/{PostType(post_type).value}/{post_id}/count")
        if not isinstance(data, dict):
            return 0
        return int(data.get('count') or 0)
