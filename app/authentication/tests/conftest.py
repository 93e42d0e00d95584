"""
Test configuration and fixtures for authentication tests.
"""

import pytest

from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create a user with a filled-in profile."""
    return UserFactory(
        profile__display_name="Ada Lovelace",
        profile__avatar="https://cdn.example.com/ada.png",
        profile__bio="Analyst",
    )
