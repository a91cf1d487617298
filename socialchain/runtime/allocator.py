"""Host-side account allocation."""

from dataclasses import dataclass
from typing import Sequence

from socialchain.config import SocialConfig
from socialchain.core.derivation import create_program_address
from socialchain.core.host import AccountInfo, Allocator
from socialchain.exceptions import AllocationError, ArgumentError
from socialchain.logging import get_logger
from socialchain.models.address import Address

ACCOUNT_STORAGE_OVERHEAD = 128
MAX_PERMITTED_DATA_LENGTH = 10 * 1024 * 1024


@dataclass(frozen=True)
class Rent:
    """Rent-exemption schedule for allocated storage."""

    lamports_per_byte_year: int = 3480
    exemption_threshold_years: float = 2.0

    @classmethod
    def from_config(cls, config: SocialConfig) -> "Rent":
        return cls(config.lamports_per_byte_year, config.exemption_threshold_years)

    def minimum_balance(self, size: int) -> int:
        """Lamports an account of size bytes must hold to be exempt from rent."""
        return int(
            (ACCOUNT_STORAGE_OVERHEAD + size)
            * self.lamports_per_byte_year
            * self.exemption_threshold_years
        )


class SystemAllocator(Allocator):
    """
    Allocates accounts within one instruction's account set.

    Allocation mutates the AccountInfo objects the program was handed; nothing
    reaches the store until the runtime commits the instruction.
    """

    def __init__(self, accounts: dict[Address, AccountInfo], rent: Rent):
        self.accounts = accounts
        self.rent = rent
        self._log = get_logger("allocator")

    def _account(self, address: Address, role: str) -> AccountInfo:
        account = self.accounts.get(address)
        if account is None:
            raise AllocationError(f"{role} account {address} was not passed to the instruction")
        return account

    def allocate(
        self,
        address: Address,
        size: int,
        owner_program: Address,
        funding_source: Address,
        signer_seeds: Sequence[bytes],
    ) -> AccountInfo:
        target = self._account(address, "Target")
        payer = self._account(funding_source, "Funding")

        if not payer.is_signer:
            raise AllocationError(f"Funding account {funding_source} did not sign")
        if not payer.is_writable or not target.is_writable:
            raise AllocationError("Funding and target accounts must be writable")
        if target.is_allocated:
            raise AllocationError(f"Account {address} already in use")
        if not 0 <= size <= MAX_PERMITTED_DATA_LENGTH:
            raise AllocationError(f"Invalid account size: {size}")

        try:
            signed_for = create_program_address(signer_seeds, owner_program)
        except ArgumentError as e:
            raise AllocationError(f"Invalid signer seeds: {e}") from e
        if signed_for != address:
            raise AllocationError(f"Signer seeds do not authorize account {address}")

        lamports = self.rent.minimum_balance(size)
        if payer.lamports < lamports:
            raise AllocationError(
                f"Funding account {funding_source} holds {payer.lamports} lamports, "
                f"{lamports} required"
            )

        payer.lamports -= lamports
        target.lamports = lamports
        target.owner = owner_program
        target.data = bytearray(size)

        self._log.debug(
            "account_allocated",
            address=str(address),
            size=size,
            lamports=lamports,
            payer=str(funding_source),
        )
        return target
