"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the services the feed
depends on. The feed, search and dashboard layers are written against these
protocols so tests can hand them simple fakes.

Protocols defined:
- PostSource: Interface shared by the events, lost & found and announcements services
"""

from typing import Protocol, List, Any


class PostSource(Protocol):
    """Protocol for a service that supplies one kind of post to the feed.

    Implementations should provide methods for:
    - Listing every post of their kind
    - Listing the posts created by one device
    - Deleting a post owned by the current device
    """

    def list_for_feed(self) -> List[Any]:
        """Fetch every post of this kind.

        Returns:
            List of post records (Event, LostFoundItem or Announcement).
        """
        ...

    def list_for_user(self, user_id: str) -> List[Any]:
        """Fetch the posts created by one device.

        Args:
            user_id: The device identifier of the author.

        Returns:
            List of post records.
        """
        ...

    def delete(self, post_id: int) -> None:
        """Delete a post created by the current device.

        Args:
            post_id: The id of the post.
        """
        ...
