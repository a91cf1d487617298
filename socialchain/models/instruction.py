"""Instruction models."""

from enum import IntEnum
from typing import ClassVar, Union

from pydantic import BaseModel

from socialchain.models.address import Address


class InstructionKind(IntEnum):
    """Wire discriminant of each instruction."""
    INITIALIZE_USER = 0
    FOLLOW_USER = 1
    UNFOLLOW_USER = 2
    QUERY_FOLLOWER = 3
    POST_CONTENT = 4
    QUERY_POSTS = 5


class InitializeUser(BaseModel):
    kind: ClassVar[InstructionKind] = InstructionKind.INITIALIZE_USER

    seed_type: str


class FollowUser(BaseModel):
    kind: ClassVar[InstructionKind] = InstructionKind.FOLLOW_USER

    user_to_follow: Address


class UnfollowUser(BaseModel):
    kind: ClassVar[InstructionKind] = InstructionKind.UNFOLLOW_USER

    user_to_unfollow: Address


class QueryFollower(BaseModel):
    kind: ClassVar[InstructionKind] = InstructionKind.QUERY_FOLLOWER


class PostContent(BaseModel):
    kind: ClassVar[InstructionKind] = InstructionKind.POST_CONTENT

    content: str


class QueryPosts(BaseModel):
    kind: ClassVar[InstructionKind] = InstructionKind.QUERY_POSTS


SocialInstruction = Union[
    InitializeUser,
    FollowUser,
    UnfollowUser,
    QueryFollower,
    PostContent,
    QueryPosts,
]

INSTRUCTION_TYPES: dict[InstructionKind, type[BaseModel]] = {
    InstructionKind.INITIALIZE_USER: InitializeUser,
    InstructionKind.FOLLOW_USER: FollowUser,
    InstructionKind.UNFOLLOW_USER: UnfollowUser,
    InstructionKind.QUERY_FOLLOWER: QueryFollower,
    InstructionKind.POST_CONTENT: PostContent,
    InstructionKind.QUERY_POSTS: QueryPosts,
}
