"""
Connection models.

Models:
    Follow: Directed "follower follows following" edge

Design Decisions:
    - Edges are stored directed, as the follow feature creates them
    - Messaging permission reads them undirected: one edge in either
      direction is enough (see ConnectionService.can_message)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q

from core.models import BaseModel


class Follow(BaseModel):
    """
    A user following another user.

    Fields:
        follower: User who follows
        following: User being followed

    Constraints:
        - UniqueConstraint(follower, following): One edge per direction
        - CheckConstraint(follower != following): No self-follows
    """

    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="following_edges",
        help_text="User who follows",
    )

    following = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="follower_edges",
        help_text="User being followed",
    )

    class Meta:
        db_table = "connections_follow"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["follower", "following"],
                name="unique_follow_edge",
            ),
            models.CheckConstraint(
                condition=~Q(follower=F("following")),
                name="follow_not_self",
            ),
        ]
        indexes = [
            models.Index(
                fields=["following", "follower"],
                name="conn_follow_reverse_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Follow({self.follower_id} -> {self.following_id})"
