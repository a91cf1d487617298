"""Post and post log record models."""

from pydantic import BaseModel, Field, computed_field

U64_MAX = 2**64 - 1


class Post(BaseModel):
    """A single timestamped post."""

    content: str
    timestamp: int = Field(ge=0, le=U64_MAX)


class PostLog(BaseModel):
    """Append-only post log embedded in one account."""

    posts: list[Post] = Field(default_factory=list)

    @computed_field
    @property
    def post_count(self) -> int:
        return len(self.posts)


class PostCounter(BaseModel):
    """Sequence counter kept in the log account when each post has its own account."""

    post_count: int = Field(default=0, ge=0, le=U64_MAX)
