"""Unit tests for post log mutations."""

import pytest

from socialchain.config import ContentLayout
from socialchain.core import postlog_store
from socialchain.core.codec import encode_post_log
from socialchain.core.space import ContentPolicy, postlog_space
from socialchain.exceptions import ArgumentError, CapacityExceededError
from socialchain.models.post import Post, PostLog

FIXED_20 = ContentPolicy(ContentLayout.FIXED, 20)
VARIABLE_16 = ContentPolicy(ContentLayout.VARIABLE, 16)


class TestAppend:
    """Test appending posts."""

    def test_fixed_exact_length(self):
        log = PostLog()
        post = postlog_store.append(log, "hello world 1234567.", 100, FIXED_20)
        assert post == Post(content="hello world 1234567.", timestamp=100)
        assert log.posts == [post]
        assert log.post_count == 1

    def test_fixed_short_content_rejected(self):
        log = PostLog()
        with pytest.raises(ArgumentError):
            postlog_store.append(log, "hello world 1234567", 100, FIXED_20)
        assert log.post_count == 0

    def test_variable_content(self):
        log = PostLog()
        postlog_store.append(log, "", 1, VARIABLE_16)
        postlog_store.append(log, "sixteen bytes!!!", 2, VARIABLE_16)
        assert [p.content for p in log.posts] == ["", "sixteen bytes!!!"]

    def test_variable_longer_than_reservation(self):
        log = PostLog()
        capacity = postlog_space(4, VARIABLE_16)
        post = postlog_store.append(log, "seventeen bytes!!", 1, VARIABLE_16, capacity_bytes=capacity)
        assert post.content == "seventeen bytes!!"
        assert log.post_count == 1

    def test_variable_bounded_by_capacity(self):
        log = PostLog()
        capacity = postlog_space(1, VARIABLE_16)
        with pytest.raises(CapacityExceededError):
            postlog_store.append(log, "seventeen bytes!!", 1, VARIABLE_16, capacity_bytes=capacity)
        assert log.post_count == 0

    def test_order_preserved(self):
        log = PostLog()
        for i in range(5):
            postlog_store.append(log, f"post {i}", i, VARIABLE_16)
        assert [p.timestamp for p in log.posts] == [0, 1, 2, 3, 4]

    def test_fills_to_capacity(self):
        capacity = postlog_space(2, FIXED_20)
        log = PostLog()
        postlog_store.append(log, "a" * 20, 1, FIXED_20, capacity_bytes=capacity)
        postlog_store.append(log, "b" * 20, 2, FIXED_20, capacity_bytes=capacity)
        assert len(encode_post_log(log)) == capacity

        with pytest.raises(CapacityExceededError):
            postlog_store.append(log, "c" * 20, 3, FIXED_20, capacity_bytes=capacity)
        assert log.post_count == 2

    def test_variable_capacity_uses_actual_size(self):
        # Two reserved-size slots hold more than two short posts
        capacity = postlog_space(2, VARIABLE_16)
        log = PostLog()
        for i in range(4):
            postlog_store.append(log, "hi", i, VARIABLE_16, capacity_bytes=capacity)
        assert log.post_count == 4


class TestNextIndex:
    """Test per-post sequence indexes."""

    def test_first_index_is_one(self):
        assert postlog_store.next_index(0) == 1

    def test_increments(self):
        assert postlog_store.next_index(41) == 42
