"""Pydantic models for socialchain."""

from socialchain.models.address import Address
from socialchain.models.account import AccountState
from socialchain.models.profile import Profile
from socialchain.models.post import Post, PostLog, PostCounter
from socialchain.models.instruction import (
    InstructionKind,
    InitializeUser,
    FollowUser,
    UnfollowUser,
    QueryFollower,
    PostContent,
    QueryPosts,
    SocialInstruction,
)
from socialchain.models.result import InstructionResult

__all__ = [
    "Address",
    "AccountState",
    "Profile",
    "Post",
    "PostLog",
    "PostCounter",
    "InstructionKind",
    "InitializeUser",
    "FollowUser",
    "UnfollowUser",
    "QueryFollower",
    "PostContent",
    "QueryPosts",
    "SocialInstruction",
    "InstructionResult",
]
