"""
Tests for the Message model and its queryset.
"""

from datetime import timedelta

from django.utils import timezone

from authentication.tests.factories import UserFactory
from chat.models import Message
from chat.tests.factories import MessageFactory


class TestMessageDefaults:
    """Tests for Message field defaults and ordering."""

    def test_new_message_is_unread(self, db):
        message = MessageFactory()

        assert message.read is False
        assert message.created_at is not None

    def test_default_ordering_is_oldest_first_then_id(self, db):
        alice = UserFactory()
        bob = UserFactory()
        now = timezone.now()
        later = MessageFactory(sender=alice, receiver=bob, created_at=now)
        tied = MessageFactory(sender=bob, receiver=alice, created_at=now)
        earlier = MessageFactory(
            sender=alice, receiver=bob, created_at=now - timedelta(minutes=1)
        )

        assert list(Message.objects.all()) == [earlier, later, tied]

    def test_is_inbound_for(self, db):
        message = MessageFactory()

        assert message.is_inbound_for(message.receiver_id)
        assert message.is_inbound_for(str(message.receiver_id))
        assert not message.is_inbound_for(message.sender_id)


class TestMessageQuerySet:
    """Tests for MessageQuerySet filters."""

    def test_between_matches_both_directions_only(self, db):
        alice, bob, carol = UserFactory(), UserFactory(), UserFactory()
        outbound = MessageFactory(sender=alice, receiver=bob)
        inbound = MessageFactory(sender=bob, receiver=alice)
        MessageFactory(sender=alice, receiver=carol)

        assert set(Message.objects.between(alice.id, bob.id)) == {outbound, inbound}
        assert set(Message.objects.between(bob.id, alice.id)) == {outbound, inbound}

    def test_involving(self, db):
        alice, bob, carol = UserFactory(), UserFactory(), UserFactory()
        sent = MessageFactory(sender=alice, receiver=bob)
        received = MessageFactory(sender=carol, receiver=alice)
        MessageFactory(sender=bob, receiver=carol)

        assert set(Message.objects.involving(alice.id)) == {sent, received}

    def test_unread_for_counts_every_sender(self, db):
        alice, bob, carol = UserFactory(), UserFactory(), UserFactory()
        MessageFactory(sender=bob, receiver=alice)
        MessageFactory(sender=carol, receiver=alice)
        MessageFactory(sender=carol, receiver=alice, read=True)
        MessageFactory(sender=alice, receiver=bob)

        assert Message.objects.unread_for(alice.id).count() == 2

    def test_unread_from_is_directional(self, db):
        alice, bob = UserFactory(), UserFactory()
        MessageFactory(sender=bob, receiver=alice)
        MessageFactory(sender=alice, receiver=bob)

        assert Message.objects.unread_from(bob.id, alice.id).count() == 1
        assert Message.objects.unread_from(alice.id, bob.id).count() == 1

    def test_newest_first_breaks_ties_by_id(self, db):
        alice, bob = UserFactory(), UserFactory()
        now = timezone.now()
        first = MessageFactory(sender=alice, receiver=bob, created_at=now)
        second = MessageFactory(sender=bob, receiver=alice, created_at=now)

        assert Message.objects.between(alice.id, bob.id).newest_first().first() == second
        assert list(Message.objects.newest_first()) == [second, first]
