"""Instruction builders.

Each builder derives the accounts an instruction needs and encodes its payload,
producing an ``Instruction`` the runtime can execute.
"""

from dataclasses import dataclass, field

from socialchain.core.codec import encode_instruction
from socialchain.core.derivation import Role, derive, parse_role
from socialchain.core.host import SYSTEM_PROGRAM_ID
from socialchain.models.address import Address
from socialchain.models.instruction import (
    FollowUser,
    InitializeUser,
    PostContent,
    QueryFollower,
    QueryPosts,
    UnfollowUser,
)


@dataclass
class AccountMeta:
    """Account reference in an instruction."""

    address: Address
    is_signer: bool = False
    is_writable: bool = False


@dataclass
class Instruction:
    """Program id, ordered account references and encoded payload."""

    program_id: Address
    accounts: list[AccountMeta] = field(default_factory=list)
    data: bytes = b""

    @property
    def signers(self) -> list[Address]:
        return [meta.address for meta in self.accounts if meta.is_signer]


def profile_address(program_id: Address, owner: Address) -> Address:
    return derive(owner, Role.PROFILE, program_id)[0]


def post_log_address(program_id: Address, owner: Address) -> Address:
    return derive(owner, Role.POST, program_id)[0]


def post_address(program_id: Address, owner: Address, index: int) -> Address:
    return derive(owner, Role.POST, program_id, index=index)[0]


def initialize_user(program_id: Address, owner: Address, role: Role | str) -> Instruction:
    """Create the profile or post log account of owner."""
    role = parse_role(role) if not isinstance(role, Role) else role
    target, _ = derive(owner, role, program_id)
    return Instruction(
        program_id=program_id,
        accounts=[
            AccountMeta(owner, is_signer=True, is_writable=True),
            AccountMeta(target, is_writable=True),
            AccountMeta(SYSTEM_PROGRAM_ID),
        ],
        data=encode_instruction(InitializeUser(seed_type=role.value)),
    )


def follow_user(program_id: Address, owner: Address, user_to_follow: Address) -> Instruction:
    return Instruction(
        program_id=program_id,
        accounts=[AccountMeta(profile_address(program_id, owner), is_writable=True)],
        data=encode_instruction(FollowUser(user_to_follow=user_to_follow)),
    )


def unfollow_user(program_id: Address, owner: Address, user_to_unfollow: Address) -> Instruction:
    return Instruction(
        program_id=program_id,
        accounts=[AccountMeta(profile_address(program_id, owner), is_writable=True)],
        data=encode_instruction(UnfollowUser(user_to_unfollow=user_to_unfollow)),
    )


def query_followers(program_id: Address, owner: Address) -> Instruction:
    return Instruction(
        program_id=program_id,
        accounts=[AccountMeta(profile_address(program_id, owner))],
        data=encode_instruction(QueryFollower()),
    )


def post_content(
    program_id: Address,
    owner: Address,
    content: str,
    next_index: int | None = None,
) -> Instruction:
    """
    Append a post for owner.

    Args:
        program_id: Program id
        owner: Posting identity
        content: Post body
        next_index: Sequence index of the new post account; None for the embedded log
    """
    accounts = [
        AccountMeta(owner, is_signer=True, is_writable=True),
        AccountMeta(post_log_address(program_id, owner), is_writable=True),
    ]
    if next_index is not None:
        accounts += [
            AccountMeta(post_address(program_id, owner, next_index), is_writable=True),
            AccountMeta(SYSTEM_PROGRAM_ID),
        ]
    return Instruction(
        program_id=program_id,
        accounts=accounts,
        data=encode_instruction(PostContent(content=content)),
    )


def query_posts(program_id: Address, owner: Address, index: int | None = None) -> Instruction:
    """Read owner's post log, or a single post account when index is given."""
    if index is None:
        address = post_log_address(program_id, owner)
    else:
        address = post_address(program_id, owner, index)
    return Instruction(
        program_id=program_id,
        accounts=[AccountMeta(address)],
        data=encode_instruction(QueryPosts()),
    )
