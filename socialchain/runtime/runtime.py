"""Host runtime - loads accounts, runs the processor, commits writes."""

from datetime import datetime

from socialchain import client
from socialchain.client import Instruction
from socialchain.config import PostLayout, SocialConfig, StoreBackend
from socialchain.core.codec import decode_instruction, read_post_counter
from socialchain.core.derivation import DEFAULT_PROGRAM_ID, Role
from socialchain.core.host import SYSTEM_PROGRAM_ID, AccountInfo, Clock, SystemClock
from socialchain.core.postlog_store import next_index
from socialchain.core.processor import Processor
from socialchain.exceptions import ArgumentError, ConfigError, DecodeError, SocialChainError
from socialchain.logging import configure_logging, get_logger, instruction_context
from socialchain.models.account import AccountState
from socialchain.models.address import Address
from socialchain.models.post import Post, PostCounter, PostLog
from socialchain.models.profile import Profile
from socialchain.models.result import InstructionResult
from socialchain.runtime.allocator import Rent, SystemAllocator
from socialchain.store.base import AccountStore
from socialchain.store.memory_store import MemoryAccountStore
from socialchain.store.redis_store import RedisAccountStore
from socialchain.store.sqlite_store import SQLiteAccountStore


class Runtime:
    """
    Executes socialchain instructions against an account store.

    Each instruction runs to completion on copies of its accounts. Writes are
    committed to the store in one batch only when the instruction succeeds;
    a failed instruction leaves the store untouched and is reported in the
    returned InstructionResult.

    Example:
        async with Runtime() as runtime:
            await runtime.fund(owner)
            await runtime.initialize_user(owner, "profile")
            result = await runtime.follow(owner, friend)
            print(result.profile.follow_count)
    """

    def __init__(
        self,
        config: SocialConfig | None = None,
        store: AccountStore | None = None,
        clock: Clock | None = None,
    ):
        """
        Initialize runtime with optional configuration.

        Args:
            config: SocialConfig instance, uses defaults if None
            store: Account store, built from config.store_backend if None
            clock: Timestamp source, wall clock if None
        """
        self.config = config or SocialConfig()
        try:
            self.program_id = (
                Address(self.config.program_id) if self.config.program_id else DEFAULT_PROGRAM_ID
            )
        except ValueError as e:
            raise ConfigError(f"Invalid program id: {e}") from e
        self.clock = clock or SystemClock()
        self.rent = Rent.from_config(self.config)
        self._store = store
        self._owns_store = store is None
        self._log = get_logger("runtime", program_id=str(self.program_id))

    async def __aenter__(self) -> "Runtime":
        """Async context manager entry - initialize resources."""
        configure_logging(self.config)

        if self._store is None:
            if self.config.store_backend == StoreBackend.SQLITE:
                self._store = SQLiteAccountStore(self.config.sqlite_path)
            elif self.config.store_backend == StoreBackend.REDIS:
                self._store = RedisAccountStore(self.config.redis_url)
            else:
                self._store = MemoryAccountStore()

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup resources."""
        if self._store and self._owns_store:
            await self._store.close()
            self._store = None

    @property
    def store(self) -> AccountStore:
        if self._store is None:
            raise RuntimeError("Runtime is not open; use 'async with Runtime() as runtime'")
        return self._store

    async def _load_accounts(self, instruction: Instruction) -> dict[Address, AccountInfo]:
        """Build one AccountInfo per distinct address in the instruction."""
        loaded: dict[Address, AccountInfo] = {}
        for meta in instruction.accounts:
            info = loaded.get(meta.address)
            if info is None:
                state = await self.store.get(meta.address)
                info = AccountInfo(address=meta.address)
                if state is not None:
                    info.owner = state.owner
                    info.lamports = state.lamports
                    info.data = bytearray(state.data)
                loaded[meta.address] = info
            info.is_signer = info.is_signer or meta.is_signer
            info.is_writable = info.is_writable or meta.is_writable
        return loaded

    async def execute(self, instruction: Instruction) -> InstructionResult:
        """
        Execute one instruction.

        Args:
            instruction: Instruction built with socialchain.client

        Returns:
            InstructionResult with the record read or written, or error details
        """
        start = datetime.now()
        try:
            kind = decode_instruction(instruction.data).kind.name.lower()
        except SocialChainError:
            kind = "unknown"
        signer = instruction.signers[0] if instruction.signers else None
        with instruction_context(kind, signer):
            return await self._execute(instruction, kind, signer, start)

    async def _execute(
        self, instruction: Instruction, kind: str, signer: Address | None, start: datetime
    ) -> InstructionResult:
        self._log.info("instruction_start", accounts=len(instruction.accounts))

        try:
            if instruction.program_id != self.program_id:
                raise ArgumentError(f"Unknown program id {instruction.program_id}")

            accounts = await self._load_accounts(instruction)
            before = {
                address: (info.owner, info.lamports, bytes(info.data))
                for address, info in accounts.items()
            }

            processor = Processor(
                self.program_id,
                SystemAllocator(accounts, self.rent),
                self.clock,
                self.config,
            )
            ordered = [accounts[meta.address] for meta in instruction.accounts]
            record = processor.process_instruction(ordered, instruction.data)

            changed = [
                info for address, info in accounts.items()
                if before[address] != (info.owner, info.lamports, bytes(info.data))
            ]
            for info in changed:
                if not info.is_writable:
                    raise ArgumentError(f"Instruction modified read-only account {info.address}")

            if changed:
                await self.store.put_many([
                    AccountState(
                        address=info.address,
                        owner=info.owner,
                        lamports=info.lamports,
                        data=bytes(info.data),
                    )
                    for info in changed
                ])
        except SocialChainError as e:
            duration_ms = (datetime.now() - start).total_seconds() * 1000
            self._log.error(
                "instruction_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return InstructionResult(
                success=False,
                instruction=kind,
                owner=signer,
                error_type=type(e).__name__,
                error_message=str(e),
                executed_at=start,
                duration_ms=duration_ms,
            )

        duration_ms = (datetime.now() - start).total_seconds() * 1000
        self._log.info(
            "instruction_complete",
            accounts_written=len(changed),
            duration_ms=duration_ms,
        )
        return InstructionResult(
            success=True,
            instruction=kind,
            owner=signer,
            profile=record if isinstance(record, Profile) else None,
            post_log=record if isinstance(record, PostLog) else None,
            post=record if isinstance(record, Post) else None,
            post_counter=record if isinstance(record, PostCounter) else None,
            accounts_written=[info.address for info in changed],
            executed_at=start,
            duration_ms=duration_ms,
        )

    async def fund(self, identity: Address, lamports: int | None = None) -> AccountState:
        """
        Credit lamports to an identity account outside of any instruction.

        Args:
            identity: Account to credit
            lamports: Amount, config.airdrop_lamports if None

        Returns:
            The updated account state
        """
        amount = lamports if lamports is not None else self.config.airdrop_lamports
        if amount < 0:
            raise ArgumentError(f"Cannot fund a negative amount: {amount}")

        state = await self.store.get(identity)
        if state is None:
            state = AccountState(address=identity, owner=SYSTEM_PROGRAM_ID)
        state.lamports += amount
        await self.store.put(state)

        self._log.info("account_funded", address=str(identity), lamports=state.lamports)
        return state

    async def get_account(self, address: Address) -> AccountState | None:
        """Read the stored state of any account."""
        return await self.store.get(address)

    async def initialize_user(self, owner: Address, role: Role | str) -> InstructionResult:
        return await self.execute(client.initialize_user(self.program_id, owner, role))

    async def follow(self, owner: Address, user_to_follow: Address) -> InstructionResult:
        return await self.execute(client.follow_user(self.program_id, owner, user_to_follow))

    async def unfollow(self, owner: Address, user_to_unfollow: Address) -> InstructionResult:
        return await self.execute(client.unfollow_user(self.program_id, owner, user_to_unfollow))

    async def query_followers(self, owner: Address) -> InstructionResult:
        return await self.execute(client.query_followers(self.program_id, owner))

    async def post(self, owner: Address, content: str) -> InstructionResult:
        """Append a post, resolving the next post account in the per-post layout."""
        index = None
        if self.config.post_layout == PostLayout.PER_POST:
            counter_state = await self.store.get(client.post_log_address(self.program_id, owner))
            count = 0
            if counter_state is not None:
                try:
                    count = read_post_counter(counter_state.data).post_count
                except DecodeError:
                    # the processor reports the malformed counter
                    pass
            index = next_index(count)
        return await self.execute(client.post_content(self.program_id, owner, content, index))

    async def query_posts(self, owner: Address, index: int | None = None) -> InstructionResult:
        return await self.execute(client.query_posts(self.program_id, owner, index))
