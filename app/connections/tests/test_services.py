"""
Tests for ConnectionService.

Verifies:
- The messaging gate is symmetric and boolean
- follow/unfollow keep one edge per direction
- connected_user_ids merges both directions
"""

import pytest
from django.db import IntegrityError

from authentication.tests.factories import UserFactory
from connections.models import Follow
from connections.services import ConnectionService
from connections.tests.factories import FollowFactory


class TestCanMessage:
    """Tests for ConnectionService.can_message()."""

    def test_true_when_a_follows_b(self, db):
        edge = FollowFactory()

        assert ConnectionService.can_message(edge.follower_id, edge.following_id)

    def test_symmetric_for_reverse_query(self, db):
        """A single A->B edge also satisfies a B->A query."""
        edge = FollowFactory()

        assert ConnectionService.can_message(edge.following_id, edge.follower_id)

    def test_false_without_edge(self, db):
        alice = UserFactory()
        bob = UserFactory()

        assert ConnectionService.can_message(alice.id, bob.id) is False
        assert ConnectionService.can_message(bob.id, alice.id) is False

    def test_false_for_missing_ids(self, db):
        alice = UserFactory()

        assert ConnectionService.can_message(alice.id, None) is False
        assert ConnectionService.can_message("", alice.id) is False

    def test_false_for_self(self, db):
        alice = UserFactory()

        assert ConnectionService.can_message(alice.id, alice.id) is False

    def test_unrelated_edges_do_not_connect(self, db):
        alice = UserFactory()
        bob = UserFactory()
        carol = UserFactory()
        FollowFactory(follower=alice, following=carol)
        FollowFactory(follower=carol, following=bob)

        assert ConnectionService.can_message(alice.id, bob.id) is False


class TestFollow:
    """Tests for follow/unfollow."""

    def test_follow_creates_edge(self, db):
        alice = UserFactory()
        bob = UserFactory()

        result = ConnectionService.follow(alice, bob)

        assert result.success is True
        assert Follow.objects.filter(follower=alice, following=bob).count() == 1

    def test_follow_twice_keeps_one_edge(self, db):
        alice = UserFactory()
        bob = UserFactory()

        first = ConnectionService.follow(alice, bob)
        second = ConnectionService.follow(alice, bob)

        assert first.data.id == second.data.id
        assert Follow.objects.count() == 1

    def test_follow_self_fails(self, db):
        alice = UserFactory()

        result = ConnectionService.follow(alice, alice)

        assert result.success is False
        assert result.error_code == "SELF_FOLLOW"

    def test_self_follow_rejected_by_database(self, db):
        alice = UserFactory()

        with pytest.raises(IntegrityError):
            Follow.objects.create(follower=alice, following=alice)

    def test_unfollow_removes_only_that_direction(self, db):
        alice = UserFactory()
        bob = UserFactory()
        FollowFactory(follower=alice, following=bob)
        FollowFactory(follower=bob, following=alice)

        result = ConnectionService.unfollow(alice, bob)

        assert result.data is True
        assert ConnectionService.can_message(alice.id, bob.id) is True

    def test_unfollow_without_edge_returns_false(self, db):
        result = ConnectionService.unfollow(UserFactory(), UserFactory())

        assert result.success is True
        assert result.data is False


class TestConnectedUserIds:
    def test_merges_both_directions(self, db):
        alice = UserFactory()
        bob = UserFactory()
        carol = UserFactory()
        FollowFactory(follower=alice, following=bob)
        FollowFactory(follower=carol, following=alice)
        FollowFactory(follower=bob, following=carol)

        assert ConnectionService.connected_user_ids(alice.id) == {bob.id, carol.id}
