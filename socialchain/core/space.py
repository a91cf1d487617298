"""Exact byte sizes of stored records."""

from dataclasses import dataclass

from socialchain.config import ContentLayout, SocialConfig
from socialchain.exceptions import ArgumentError

ADDRESS_SIZE = 32
TIMESTAMP_SIZE = 8
STRING_PREFIX_SIZE = 4
SEQUENCE_PREFIX_SIZE = 4

# u16 follow_count + u32 sequence length
HEADER_PROFILE = 2 + SEQUENCE_PREFIX_SIZE
# u64 post_count + u32 sequence length
HEADER_POSTLOG = 8 + SEQUENCE_PREFIX_SIZE
POST_COUNTER_SIZE = 8


@dataclass(frozen=True)
class ContentPolicy:
    """
    Post content length policy.

    Fixed layouts require every post to be exactly ``content_size`` bytes of
    UTF-8. Variable layouts accept any length; ``content_size`` is only the
    per-post reservation used when sizing a log, and the account capacity
    is what bounds an append.
    """

    layout: ContentLayout
    content_size: int

    @classmethod
    def from_config(cls, config: SocialConfig) -> "ContentPolicy":
        return cls(config.content_layout, config.content_size)

    @property
    def per_post_overhead(self) -> int:
        return STRING_PREFIX_SIZE

    @property
    def post_size(self) -> int:
        """Bytes reserved for one post."""
        return self.per_post_overhead + self.content_size + TIMESTAMP_SIZE

    def check(self, content: str) -> int:
        """
        Validate content against the policy.

        Returns:
            UTF-8 length of content

        Raises:
            ArgumentError: If content violates the policy
        """
        length = len(content.encode("utf-8"))
        if self.layout == ContentLayout.FIXED and length != self.content_size:
            raise ArgumentError(
                f"Content must be exactly {self.content_size} bytes, got {length}"
            )
        return length


def _require_cardinality(count: int) -> None:
    if count < 0:
        raise ArgumentError(f"Cardinality must not be negative: {count}")


def profile_space(follow_count: int) -> int:
    """Bytes needed for a profile holding follow_count addresses."""
    _require_cardinality(follow_count)
    return HEADER_PROFILE + follow_count * ADDRESS_SIZE


def postlog_space(post_count: int, policy: ContentPolicy) -> int:
    """Bytes needed (reserved, for variable content) for a log of post_count posts."""
    _require_cardinality(post_count)
    return HEADER_POSTLOG + post_count * policy.post_size


def post_space(content: str) -> int:
    """Exact bytes of one encoded post."""
    return STRING_PREFIX_SIZE + len(content.encode("utf-8")) + TIMESTAMP_SIZE


def profile_capacity(buffer_len: int) -> int:
    """How many follows fit in a buffer of buffer_len bytes."""
    return max(0, (buffer_len - HEADER_PROFILE) // ADDRESS_SIZE)


def postlog_capacity(buffer_len: int, policy: ContentPolicy) -> int:
    """How many reserved-size posts fit in a buffer of buffer_len bytes."""
    return max(0, (buffer_len - HEADER_POSTLOG) // policy.post_size)
