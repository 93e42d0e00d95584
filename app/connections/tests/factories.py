"""
Factory Boy factories for connection models.

Usage:
    from connections.tests.factories import FollowFactory

    FollowFactory(follower=alice, following=bob)
"""

import factory

from authentication.tests.factories import UserFactory
from connections.models import Follow


class FollowFactory(factory.django.DjangoModelFactory):
    """Factory for a directed follow edge between two fresh users."""

    class Meta:
        model = Follow
        django_get_or_create = ("follower", "following")

    follower = factory.SubFactory(UserFactory)
    following = factory.SubFactory(UserFactory)
