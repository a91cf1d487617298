"""Unit tests for follow list mutations."""

import pytest

from socialchain.core import profile_store
from socialchain.exceptions import CapacityExceededError
from socialchain.models.profile import Profile

from conftest import make_identity


class TestFollow:
    """Test following."""

    def test_appends_in_order(self, alice, bob):
        profile = Profile()
        profile_store.follow(profile, alice, capacity=10)
        profile_store.follow(profile, bob, capacity=10)
        assert profile.follows == [alice, bob]
        assert profile.follow_count == 2

    def test_duplicates_kept(self, alice):
        profile = Profile()
        profile_store.follow(profile, alice, capacity=10)
        profile_store.follow(profile, alice, capacity=10)
        assert profile.follows == [alice, alice]

    def test_full_profile_rejected_unchanged(self, alice, bob):
        profile = Profile(follows=[alice, bob])
        with pytest.raises(CapacityExceededError):
            profile_store.follow(profile, make_identity("carol"), capacity=2)
        assert profile.follows == [alice, bob]

    def test_zero_capacity(self, alice):
        with pytest.raises(CapacityExceededError):
            profile_store.follow(Profile(), alice, capacity=0)

    def test_count_field_limit(self, alice):
        profile = Profile(follows=[alice] * profile_store.U16_MAX)
        with pytest.raises(CapacityExceededError):
            profile_store.follow(profile, alice, capacity=profile_store.U16_MAX + 10)


class TestUnfollow:
    """Test unfollowing."""

    def test_removes_single(self, alice, bob):
        profile = Profile(follows=[alice, bob])
        assert profile_store.unfollow(profile, alice) == 1
        assert profile.follows == [bob]

    def test_removes_all_occurrences(self, alice, bob):
        profile = Profile(follows=[alice, bob, alice])
        assert profile_store.unfollow(profile, alice) == 2
        assert profile.follows == [bob]
        assert profile.follow_count == 1

    def test_absent_is_noop(self, alice, bob):
        profile = Profile(follows=[bob])
        assert profile_store.unfollow(profile, alice) == 0
        assert profile.follows == [bob]

    def test_preserves_order_of_rest(self, alice, bob):
        carol = make_identity("carol")
        profile = Profile(follows=[carol, alice, bob, carol])
        profile_store.unfollow(profile, alice)
        assert profile.follows == [carol, bob, carol]
