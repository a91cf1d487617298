"""Instruction processor - decodes, validates accounts, mutates and re-persists records."""

from typing import Sequence

from socialchain.config import PostLayout, SocialConfig
from socialchain.core import postlog_store, profile_store
from socialchain.core.codec import (
    decode_instruction,
    encode_post,
    encode_post_counter,
    encode_post_log,
    encode_profile,
    read_post,
    read_post_counter,
    read_post_log,
    read_profile,
    write_record,
)
from socialchain.core.derivation import (
    Role,
    parse_role,
    require_derived,
    signer_seeds,
)
from socialchain.core.host import (
    SYSTEM_PROGRAM_ID,
    AccountInfo,
    Allocator,
    Clock,
    next_account,
)
from socialchain.core.space import (
    POST_COUNTER_SIZE,
    ContentPolicy,
    post_space,
    postlog_space,
    profile_capacity,
    profile_space,
)
from socialchain.exceptions import ArgumentError, AuthorizationError
from socialchain.logging import get_logger
from socialchain.models.address import Address
from socialchain.models.instruction import (
    FollowUser,
    InitializeUser,
    PostContent,
    QueryFollower,
    QueryPosts,
    UnfollowUser,
)
from socialchain.models.post import Post, PostCounter, PostLog
from socialchain.models.profile import Profile

Record = Profile | PostLog | Post | PostCounter


class Processor:
    """
    Executes one instruction against the accounts handed in by the host.

    Every handler decodes what it needs, mutates the in-memory record,
    validates the result and only then writes each buffer once, so a failing
    instruction never leaves a partial write behind.

    Example:
        processor = Processor(program_id, allocator, SystemClock(), config)
        profile = processor.process_instruction(accounts, instruction_data)
    """

    def __init__(
        self,
        program_id: Address,
        allocator: Allocator,
        clock: Clock,
        config: SocialConfig | None = None,
    ):
        self.program_id = program_id
        self.allocator = allocator
        self.clock = clock
        self.config = config or SocialConfig()
        self.policy = ContentPolicy.from_config(self.config)
        self._log = get_logger("processor")

    def process_instruction(
        self, accounts: Sequence[AccountInfo], instruction_data: bytes
    ) -> Record | None:
        """
        Decode and dispatch one instruction.

        Returns:
            The record written or read by the instruction

        Raises:
            SocialChainError: Any decode, argument, authorization or allocation failure
        """
        instruction = decode_instruction(instruction_data)
        self._log.debug("instruction_decoded", kind=instruction.kind.name)

        if isinstance(instruction, InitializeUser):
            return self.initialize_user(accounts, instruction.seed_type)
        if isinstance(instruction, FollowUser):
            return self.follow_user(accounts, instruction.user_to_follow)
        if isinstance(instruction, UnfollowUser):
            return self.unfollow_user(accounts, instruction.user_to_unfollow)
        if isinstance(instruction, QueryFollower):
            return self.query_followers(accounts)
        if isinstance(instruction, PostContent):
            return self.post_content(accounts, instruction.content)
        if isinstance(instruction, QueryPosts):
            return self.query_posts(accounts)
        raise ArgumentError(f"Unhandled instruction: {instruction!r}")

    def _require_owned(self, account: AccountInfo) -> None:
        if account.owner != self.program_id:
            raise AuthorizationError(
                f"Account {account.address} is owned by {account.owner}, not this program"
            )

    def _require_system_program(self, account: AccountInfo) -> None:
        if account.address != SYSTEM_PROGRAM_ID:
            raise ArgumentError(f"Expected system program account, got {account.address}")

    def initialize_user(self, accounts: Sequence[AccountInfo], seed_type: str) -> Record:
        it = iter(accounts)
        user = next_account(it)
        target = next_account(it)
        self._require_system_program(next_account(it))

        role = parse_role(seed_type)
        nonce = require_derived(target.address, user.address, role, self.program_id)

        if role == Role.PROFILE:
            record: Record = Profile()
            space = profile_space(self.config.max_follower_count)
            payload = encode_profile(record)
        elif self.config.post_layout == PostLayout.EMBEDDED:
            record = PostLog()
            space = postlog_space(self.config.max_post_count, self.policy)
            payload = encode_post_log(record)
        else:
            record = PostCounter()
            space = POST_COUNTER_SIZE
            payload = encode_post_counter(record)

        self._log.info(
            "initialize_user",
            owner=str(user.address),
            role=role.value,
            address=str(target.address),
            space=space,
        )
        account = self.allocator.allocate(
            target.address,
            space,
            self.program_id,
            user.address,
            signer_seeds(user.address, role, nonce),
        )
        write_record(account.data, payload)
        return record

    def follow_user(self, accounts: Sequence[AccountInfo], user_to_follow: Address) -> Profile:
        account = next_account(iter(accounts))
        self._require_owned(account)

        profile = read_profile(account.data)
        capacity = profile_capacity(len(account.data))
        profile_store.follow(profile, user_to_follow, capacity)
        write_record(account.data, encode_profile(profile))

        self._log.info(
            "profile_followed",
            profile=str(account.address),
            followed=str(user_to_follow),
            follow_count=profile.follow_count,
        )
        return profile

    def unfollow_user(self, accounts: Sequence[AccountInfo], user_to_unfollow: Address) -> Profile:
        account = next_account(iter(accounts))
        self._require_owned(account)

        profile = read_profile(account.data)
        removed = profile_store.unfollow(profile, user_to_unfollow)
        write_record(account.data, encode_profile(profile))

        self._log.info(
            "profile_unfollowed",
            profile=str(account.address),
            unfollowed=str(user_to_unfollow),
            removed=removed,
            follow_count=profile.follow_count,
        )
        return profile

    def query_followers(self, accounts: Sequence[AccountInfo]) -> Profile:
        account = next_account(iter(accounts))
        self._require_owned(account)

        profile = read_profile(account.data)
        self._log.info(
            "profile_queried",
            profile=str(account.address),
            follow_count=profile.follow_count,
            follows=[str(a) for a in profile.follows],
        )
        return profile

    def post_content(self, accounts: Sequence[AccountInfo], content: str) -> Record:
        if self.config.post_layout == PostLayout.PER_POST:
            return self._post_to_own_account(accounts, content)
        return self._post_to_log(accounts, content)

    def _post_to_log(self, accounts: Sequence[AccountInfo], content: str) -> PostLog:
        it = iter(accounts)
        user = next_account(it)
        log_account = next_account(it)

        require_derived(log_account.address, user.address, Role.POST, self.program_id)
        self._require_owned(log_account)

        log = read_post_log(log_account.data, self.policy)
        post = postlog_store.append(
            log,
            content,
            self.clock.current_time(),
            self.policy,
            capacity_bytes=len(log_account.data),
        )
        write_record(log_account.data, encode_post_log(log))

        self._log.info(
            "post_appended",
            owner=str(user.address),
            post_count=log.post_count,
            timestamp=post.timestamp,
        )
        return log

    def _post_to_own_account(self, accounts: Sequence[AccountInfo], content: str) -> Post:
        it = iter(accounts)
        user = next_account(it)
        counter_account = next_account(it)
        post_account = next_account(it)
        self._require_system_program(next_account(it))

        require_derived(counter_account.address, user.address, Role.POST, self.program_id)
        self._require_owned(counter_account)

        counter = read_post_counter(counter_account.data)
        index = postlog_store.next_index(counter.post_count)
        nonce = require_derived(
            post_account.address, user.address, Role.POST, self.program_id, index=index
        )

        self.policy.check(content)
        post = Post(content=content, timestamp=self.clock.current_time())
        payload = encode_post(post)
        counter = PostCounter(post_count=index)

        allocated = self.allocator.allocate(
            post_account.address,
            post_space(content),
            self.program_id,
            user.address,
            signer_seeds(user.address, Role.POST, nonce, index=index),
        )
        write_record(allocated.data, payload)
        write_record(counter_account.data, encode_post_counter(counter))

        self._log.info(
            "post_created",
            owner=str(user.address),
            index=index,
            address=str(post_account.address),
            timestamp=post.timestamp,
        )
        return post

    def query_posts(self, accounts: Sequence[AccountInfo]) -> Record:
        account = next_account(iter(accounts))
        self._require_owned(account)

        if self.config.post_layout == PostLayout.PER_POST:
            # no encoded post is as short as the counter
            if len(account.data) == POST_COUNTER_SIZE:
                counter = read_post_counter(account.data)
                self._log.info(
                    "post_counter_queried",
                    address=str(account.address),
                    post_count=counter.post_count,
                )
                return counter
            post = read_post(account.data)
            self._log.info("post_queried", address=str(account.address), post=post.model_dump())
            return post

        log = read_post_log(account.data, self.policy)
        self._log.info("posts_queried", address=str(account.address), post_count=log.post_count)
        return log
