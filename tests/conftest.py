"""Shared fixtures - deterministic identities and an in-memory processor harness."""

import hashlib

import pytest
from nacl.signing import SigningKey

from socialchain.client import Instruction
from socialchain.config import ContentLayout, SocialConfig, StoreBackend
from socialchain.core.derivation import DEFAULT_PROGRAM_ID
from socialchain.core.host import AccountInfo, FixedClock
from socialchain.core.processor import Processor
from socialchain.models.address import Address
from socialchain.runtime.allocator import Rent, SystemAllocator


def make_identity(label: str) -> Address:
    """ed25519 public key derived from a fixed label."""
    seed = hashlib.sha256(label.encode("utf-8")).digest()
    return Address(bytes(SigningKey(seed).verify_key))


class ProcessorHarness:
    """
    Runs instructions straight through the Processor against a dict of accounts.

    Accounts are copied before each instruction and committed back only when it
    succeeds, the same way the runtime treats its store.
    """

    def __init__(self, config: SocialConfig, clock: FixedClock):
        self.config = config
        self.clock = clock
        self.program_id = DEFAULT_PROGRAM_ID
        self.accounts: dict[Address, AccountInfo] = {}

    def fund(self, address: Address, lamports: int = 1_000_000_000) -> None:
        self.accounts[address] = AccountInfo(address=address, lamports=lamports)

    def run(self, instruction: Instruction):
        infos: dict[Address, AccountInfo] = {}
        for meta in instruction.accounts:
            if meta.address not in infos:
                info = AccountInfo(address=meta.address)
                stored = self.accounts.get(meta.address)
                if stored is not None:
                    info.owner = stored.owner
                    info.lamports = stored.lamports
                    info.data = bytearray(stored.data)
                infos[meta.address] = info
            info = infos[meta.address]
            info.is_signer = info.is_signer or meta.is_signer
            info.is_writable = info.is_writable or meta.is_writable

        processor = Processor(
            self.program_id, SystemAllocator(infos, Rent()), self.clock, self.config
        )
        record = processor.process_instruction(
            [infos[meta.address] for meta in instruction.accounts], instruction.data
        )
        self.accounts.update(infos)
        return record

    def data(self, address: Address) -> bytes:
        return bytes(self.accounts[address].data)


@pytest.fixture
def program_id() -> Address:
    return DEFAULT_PROGRAM_ID


@pytest.fixture
def owner() -> Address:
    return make_identity("owner")


@pytest.fixture
def alice() -> Address:
    return make_identity("alice")


@pytest.fixture
def bob() -> Address:
    return make_identity("bob")


@pytest.fixture
def config() -> SocialConfig:
    """Embedded post log with the default variable-length content policy."""
    return SocialConfig(store_backend=StoreBackend.MEMORY, log_level="WARNING")


@pytest.fixture
def fixed_config() -> SocialConfig:
    """Embedded post log requiring exactly 20-byte posts."""
    return SocialConfig(
        store_backend=StoreBackend.MEMORY,
        content_layout=ContentLayout.FIXED,
        content_size=20,
        log_level="WARNING",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(100)


@pytest.fixture
def harness(config, clock) -> ProcessorHarness:
    return ProcessorHarness(config, clock)
