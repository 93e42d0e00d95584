"""
Tests for realtime channel addressing.
"""

import pytest

from chat.rooms import pair_channel, parse_pair_channel, user_channel
from core.exceptions import ValidationError


class TestPairChannel:
    """Tests for pair_channel()."""

    @pytest.mark.parametrize(
        "a,b",
        [(1, 2), (2, 1), (10, 9), ("7", 7), (123, 45)],
    )
    def test_symmetric(self, a, b):
        assert pair_channel(a, b) == pair_channel(b, a)

    def test_orders_ids_as_strings(self):
        """'10' sorts before '9' lexicographically."""
        assert pair_channel(9, 10) == "10_9"

    def test_same_result_for_int_and_str_ids(self):
        assert pair_channel(3, 12) == pair_channel("3", "12") == "12_3"

    @pytest.mark.parametrize("a,b", [(None, 1), (1, None), ("", 1), (1, "  ")])
    def test_missing_id_raises(self, a, b):
        with pytest.raises(ValidationError) as exc_info:
            pair_channel(a, b)

        assert exc_info.value.error_code == "MISSING_USER_ID"

    def test_is_a_valid_group_name(self):
        """Channel-layer group names allow only [A-Za-z0-9._-]."""
        channel = pair_channel(41, 7)

        assert all(ch.isalnum() or ch in "._-" for ch in channel)


class TestUserChannel:
    """Tests for user_channel()."""

    def test_namespaced_by_prefix(self):
        assert user_channel(7) == "user.7"

    def test_distinct_from_pair_channels(self):
        assert user_channel(7) != pair_channel(7, 7)

    @pytest.mark.parametrize("user_id", [None, ""])
    def test_missing_id_raises(self, user_id):
        with pytest.raises(ValidationError) as exc_info:
            user_channel(user_id)

        assert exc_info.value.error_code == "MISSING_USER_ID"


class TestParsePairChannel:
    """Tests for parse_pair_channel()."""

    def test_inverse_of_pair_channel(self):
        assert parse_pair_channel(pair_channel(5, 31)) == ("31", "5")

    @pytest.mark.parametrize(
        "room_id",
        [None, "", "user.7", "1_2_3", "_2", "1_", "9_10"],
    )
    def test_rejects_non_canonical_rooms(self, room_id):
        with pytest.raises(ValidationError) as exc_info:
            parse_pair_channel(room_id)

        assert exc_info.value.error_code == "INVALID_ROOM"
