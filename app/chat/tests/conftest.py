"""
Test configuration and fixtures for chat tests.

This module provides:
- Connected and unconnected user fixtures
- A recording publisher that captures realtime publications
- API client helpers for authenticated requests

Usage:
    def test_example(alice, bob, alice_client, recording_publisher):
        alice_client.post("/api/v1/messages/send/", {...})
        assert recording_publisher.events(event="chat:message")
"""

import pytest

from authentication.tests.factories import UserFactory
from chat.realtime import InMemoryPublisher
from connections.tests.factories import FollowFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    """A user with a full profile."""
    return UserFactory(
        profile__username="alice",
        profile__display_name="Alice Liddell",
        profile__avatar="https://cdn.example.com/alice.png",
    )


@pytest.fixture
def bob(db):
    """A user whose profile has no display name."""
    return UserFactory(profile__username="bob")


@pytest.fixture
def carol(db):
    """Another user, connected to alice in some tests."""
    return UserFactory(profile__username="carol", profile__display_name="Carol")


@pytest.fixture
def stranger(db):
    """A user with no connections."""
    return UserFactory(profile__username="stranger")


@pytest.fixture
def connected(alice, bob):
    """alice follows bob, which lets both message each other."""
    return FollowFactory(follower=alice, following=bob)


@pytest.fixture
def alice_carol_connected(alice, carol):
    """carol follows alice."""
    return FollowFactory(follower=carol, following=alice)


# =============================================================================
# Realtime Fixtures
# =============================================================================


@pytest.fixture
def recording_publisher(monkeypatch):
    """
    Capture every realtime publication in one InMemoryPublisher.

    Both the synchronous publication in the service and the Celery
    fan-out (eager in tests) go through chat.fanout.get_publisher.
    """
    publisher = InMemoryPublisher()
    monkeypatch.setattr("chat.fanout.get_publisher", lambda: publisher)
    return publisher


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def alice_client(alice, auth_client_for):
    return auth_client_for(alice)


@pytest.fixture
def bob_client(bob, auth_client_for):
    return auth_client_for(bob)
