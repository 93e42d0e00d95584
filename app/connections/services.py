"""
Connection service layer.

Services:
    ConnectionService: Follow/unfollow and the messaging permission check

Usage:
    from connections.services import ConnectionService

    if not ConnectionService.can_message(sender.id, receiver_id):
        return ServiceResult.failure(..., error_code="NOT_CONNECTED")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Q

from core.services import BaseService, ServiceResult
from connections.models import Follow

if TYPE_CHECKING:
    from authentication.models import User


class ConnectionService(BaseService):
    """
    Service for the follow graph.

    Methods:
        can_message: Symmetric connection predicate used to gate chat
        follow: Create a follow edge
        unfollow: Remove a follow edge
        connected_user_ids: Ids of everyone a user is connected to
    """

    @classmethod
    def can_message(cls, user_a_id, user_b_id) -> bool:
        """
        Check whether two users may message each other.

        True iff a Follow exists from a to b or from b to a. The result is
        the same for (a, b) and (b, a). Missing ids and self-pairs are
        never connected.

        Args:
            user_a_id: First user id
            user_b_id: Second user id

        Returns:
            True if the users are connected
        """
        if not user_a_id or not user_b_id:
            return False
        if str(user_a_id) == str(user_b_id):
            return False

        return Follow.objects.filter(
            Q(follower_id=user_a_id, following_id=user_b_id)
            | Q(follower_id=user_b_id, following_id=user_a_id)
        ).exists()

    @classmethod
    def follow(cls, follower: User, following: User) -> ServiceResult[Follow]:
        """
        Make ``follower`` follow ``following``.

        Following someone twice returns the existing edge.

        Error codes:
            SELF_FOLLOW: Users cannot follow themselves
        """
        if follower.id == following.id:
            return ServiceResult.failure(
                "You cannot follow yourself",
                error_code="SELF_FOLLOW",
            )

        try:
            with cls.atomic():
                edge, created = Follow.objects.get_or_create(
                    follower=follower,
                    following=following,
                )
        except IntegrityError:
            # Lost a race with a concurrent follow of the same edge
            edge = Follow.objects.get(follower=follower, following=following)
            created = False

        if created:
            cls.get_logger().info(f"User {follower.id} followed user {following.id}")
        return ServiceResult.success(edge)

    @classmethod
    def unfollow(cls, follower: User, following: User) -> ServiceResult[bool]:
        """
        Remove the follow edge, if any.

        Returns:
            ServiceResult with True if an edge was removed
        """
        deleted, _ = Follow.objects.filter(
            follower=follower,
            following=following,
        ).delete()

        if deleted:
            cls.get_logger().info(
                f"User {follower.id} unfollowed user {following.id}"
            )
        return ServiceResult.success(bool(deleted))

    @classmethod
    def connected_user_ids(cls, user_id) -> set:
        """Ids of users that follow, or are followed by, ``user_id``."""
        edges = Follow.objects.filter(
            Q(follower_id=user_id) | Q(following_id=user_id)
        ).values_list("follower_id", "following_id")

        ids = set()
        for follower_id, following_id in edges:
            ids.add(following_id if str(follower_id) == str(user_id) else follower_id)
        return ids
