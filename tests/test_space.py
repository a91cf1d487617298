"""Unit tests for record size calculation."""

import pytest

from socialchain.config import ContentLayout
from socialchain.core.codec import encode_post, encode_post_log, encode_profile
from socialchain.core.space import (
    HEADER_POSTLOG,
    HEADER_PROFILE,
    ContentPolicy,
    post_space,
    postlog_capacity,
    postlog_space,
    profile_capacity,
    profile_space,
)
from socialchain.exceptions import ArgumentError
from socialchain.models.post import Post, PostLog
from socialchain.models.profile import Profile

from conftest import make_identity

FIXED_20 = ContentPolicy(ContentLayout.FIXED, 20)
VARIABLE_280 = ContentPolicy(ContentLayout.VARIABLE, 280)


class TestProfileSpace:
    """Test profile sizing."""

    def test_empty_profile_is_header_only(self):
        assert profile_space(0) == HEADER_PROFILE == 6

    def test_matches_encoded_length(self):
        follows = [make_identity(f"user{i}") for i in range(5)]
        for count in range(len(follows) + 1):
            encoded = encode_profile(Profile(follows=follows[:count]))
            assert profile_space(count) == len(encoded)

    def test_matches_encoded_length_at_ceiling(self):
        follows = [make_identity(f"f{i}") for i in range(200)]
        for count in (199, 200):
            encoded = encode_profile(Profile(follows=follows[:count]))
            assert profile_space(count) == len(encoded)

    def test_default_ceiling(self):
        assert profile_space(200) == 6 + 200 * 32

    def test_monotonic(self):
        sizes = [profile_space(n) for n in range(50)]
        assert sizes == sorted(sizes)

    def test_negative_rejected(self):
        with pytest.raises(ArgumentError):
            profile_space(-1)

    def test_capacity_inverts_space(self):
        assert profile_capacity(profile_space(200)) == 200
        assert profile_capacity(profile_space(3) + 31) == 3
        assert profile_capacity(2) == 0


class TestPostLogSpace:
    """Test post log sizing."""

    def test_empty_log_is_header_only(self):
        assert postlog_space(0, FIXED_20) == HEADER_POSTLOG == 12

    def test_fixed_matches_encoded_length(self):
        posts = [Post(content="x" * 20, timestamp=i) for i in range(4)]
        for count in range(len(posts) + 1):
            encoded = encode_post_log(PostLog(posts=posts[:count]))
            assert postlog_space(count, FIXED_20) == len(encoded)

    def test_fixed_matches_full_log(self):
        log = PostLog(posts=[Post(content="x" * 20, timestamp=i) for i in range(100)])
        assert postlog_space(100, FIXED_20) == len(encode_post_log(log))

    def test_variable_is_upper_bound(self):
        log = PostLog(posts=[Post(content="short", timestamp=1), Post(content="y" * 280, timestamp=2)])
        assert len(encode_post_log(log)) <= postlog_space(2, VARIABLE_280)

    def test_monotonic(self):
        sizes = [postlog_space(n, VARIABLE_280) for n in range(20)]
        assert sizes == sorted(sizes)

    def test_negative_rejected(self):
        with pytest.raises(ArgumentError):
            postlog_space(-3, FIXED_20)

    def test_capacity_inverts_space(self):
        assert postlog_capacity(postlog_space(100, FIXED_20), FIXED_20) == 100


class TestPostSpace:
    """Test single post sizing."""

    def test_matches_encoded_post(self):
        post = Post(content="héllo", timestamp=42)
        assert post_space(post.content) == len(encode_post(post))

    def test_counts_utf8_bytes(self):
        assert post_space("é") == 4 + 2 + 8


class TestContentPolicy:
    """Test content length policy."""

    def test_fixed_accepts_exact_length(self):
        assert FIXED_20.check("hello world 1234567.") == 20

    @pytest.mark.parametrize("content", ["hello world 1234567", "hello world 1234567.."])
    def test_fixed_rejects_other_lengths(self, content):
        with pytest.raises(ArgumentError):
            FIXED_20.check(content)

    def test_variable_accepts_any_length(self):
        assert VARIABLE_280.check("") == 0
        assert VARIABLE_280.check("z" * 280) == 280
        # content_size is a reservation, not a cap
        assert VARIABLE_280.check("z" * 1000) == 1000

    def test_post_size(self):
        assert FIXED_20.post_size == 4 + 20 + 8
