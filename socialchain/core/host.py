"""Interfaces to the host that runs the program."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from socialchain.exceptions import ArgumentError
from socialchain.models.address import Address

SYSTEM_PROGRAM_ID = Address(bytes(32))


@dataclass
class AccountInfo:
    """An account handed to the program for the duration of one instruction."""

    address: Address
    owner: Address = SYSTEM_PROGRAM_ID
    lamports: int = 0
    data: bytearray = field(default_factory=bytearray)
    is_signer: bool = False
    is_writable: bool = False

    @property
    def is_allocated(self) -> bool:
        return self.owner != SYSTEM_PROGRAM_ID or self.lamports > 0 or len(self.data) > 0


def next_account(accounts: Iterator[AccountInfo]) -> AccountInfo:
    """Take the next account from an account iterator."""
    try:
        return next(accounts)
    except StopIteration:
        raise ArgumentError("Not enough account keys given to the instruction") from None


class Allocator(ABC):
    """Creates and funds account storage on behalf of the program."""

    @abstractmethod
    def allocate(
        self,
        address: Address,
        size: int,
        owner_program: Address,
        funding_source: Address,
        signer_seeds: Sequence[bytes],
    ) -> AccountInfo:
        """
        Create a zeroed buffer of size bytes at address, owned by owner_program.

        Args:
            address: Target account, must be unallocated
            size: Exact buffer size in bytes
            owner_program: Program that will own the account
            funding_source: Signing account that pays for the storage
            signer_seeds: Seeds, nonce included, that derive address under owner_program

        Returns:
            The allocated account

        Raises:
            AllocationError: If the account cannot be created or funded
        """
        ...


class Clock(ABC):
    """Source of the current unix timestamp."""

    @abstractmethod
    def current_time(self) -> int:
        ...


class SystemClock(Clock):
    def current_time(self) -> int:
        return int(time.time())


class FixedClock(Clock):
    """Clock pinned to a settable value."""

    def __init__(self, value: int = 0):
        self.value = value

    def current_time(self) -> int:
        return self.value
