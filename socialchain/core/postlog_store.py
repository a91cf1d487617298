"""Post log mutations."""

from socialchain.core.codec import encode_post_log
from socialchain.core.space import ContentPolicy
from socialchain.exceptions import CapacityExceededError
from socialchain.models.post import Post, PostLog


def append(
    log: PostLog,
    content: str,
    timestamp: int,
    policy: ContentPolicy,
    capacity_bytes: int | None = None,
) -> Post:
    """
    Append a post to the log.

    The content and the grown log size are checked before the log is touched,
    so a rejected append leaves it unchanged.

    Args:
        log: Log to mutate
        content: Post body
        timestamp: Unix timestamp from the host clock
        policy: Content length policy
        capacity_bytes: Physical size of the log account, unchecked if None

    Returns:
        The appended post

    Raises:
        ArgumentError: If content violates the policy
        CapacityExceededError: If the grown log no longer fits its account
    """
    policy.check(content)
    post = Post(content=content, timestamp=timestamp)

    if capacity_bytes is not None:
        needed = len(encode_post_log(PostLog(posts=[*log.posts, post])))
        if needed > capacity_bytes:
            raise CapacityExceededError(
                f"Post log needs {needed} bytes after append but account holds {capacity_bytes}"
            )

    log.posts.append(post)
    return post


def next_index(post_count: int) -> int:
    """Sequence index of the next post in the per-post layout (1-based)."""
    return post_count + 1
