"""
Reactions Service Module

This module handles the ``/reactions`` endpoints. Each device holds at most one
reaction per post or comment: reacting again with the same type removes it,
reacting with a different type replaces it. The backend applies that rule;
the client only reports the resulting action.
"""

from typing import Union

from data.device import DeviceIdStore
from data.models import PostType, ReactionType, ReactionSummary, ReactionResult
from services.api_client import ApiClient, parse_one
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_reaction(value: Union[str, ReactionType]) -> ReactionType:
    """
    Accept a reaction by name (``like``) or emoji.

    Raises:
        ValidationError: If the value is not one of the six reactions.
    """
    if isinstance(value, ReactionType):
        return value
    text = str(value).strip()
    for reaction in ReactionType:
        if text.upper() == reaction.value or text == reaction.emoji:
            return reaction
    allowed = ", ".join(r.value.lower() for r in ReactionType)
    raise ValidationError(f"Unknown reaction '{value}'. Use one of: {allowed}")


class ReactionsService:
    """Service for post and comment reactions."""

    resource = "/reactions"

    def __init__(self, client: ApiClient, device: DeviceIdStore):
        self.client = client
        self.device = device

    @property
    def user_id(self) -> str:
        return self.device.get_device_id()

    def _post_path(self, post_type: PostType, post_id: int) -> str:
        return f"{self.resource}/{PostType(post_type).value}/{post_id}"

    def toggle_post_reaction(self, post_type: PostType, post_id: int,
                             reaction: Union[str, ReactionType]) -> ReactionResult:
        """
        Add, change or remove this device's reaction on a post.

        Returns:
            ReactionResult: Which action the backend took.
        """
        reaction_type = parse_reaction(reaction)
        data = self.client.post(self._post_path(post_type, post_id),
                                params={'userId': self.user_id, 'reactionType': reaction_type.value})
        result = parse_one(data, ReactionResult.from_dict, "reaction result")
        logger.debug(f"Reaction {reaction_type.value} on {post_type}/{post_id}: {result.action}")
        return result

    def toggle_comment_reaction(self, post_type: PostType, post_id: int, comment_id: int,
                                reaction: Union[str, ReactionType]) -> ReactionResult:
        reaction_type = parse_reaction(reaction)
        data = self.client.post(f"{self._post_path(post_type, post_id)}/comment/{comment_id}",
                                params={'userId': self.user_id, 'reactionType': reaction_type.value})
        return parse_one(data, ReactionResult.from_dict, "reaction result")

    def get_post_reactions(self, post_type: PostType, post_id: int) -> ReactionSummary:
        data = self.client.get(self._post_path(post_type, post_id), params={'userId': self.user_id})
        return parse_one(data, ReactionSummary.from_dict, "reaction summary")

    def get_comment_reactions(self, post_type: PostType, post_id: int, comment_id: int) -> ReactionSummary:
        data = self.client.get(f"{self._post_path(post_type, post_id)}/comment/{comment_id}",
                               params={'userId': self.user_id})
        return parse_one(data, ReactionSummary.from_dict, "reaction summary")
