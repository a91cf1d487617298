"""Abstract account store interface."""

from abc import ABC, abstractmethod
from typing import Iterable

from socialchain.models.account import AccountState
from socialchain.models.address import Address


class AccountStore(ABC):
    """Abstract base class for account store implementations."""

    @abstractmethod
    async def get(self, address: Address) -> AccountState | None:
        """
        Retrieve the stored state of an account.

        Args:
            address: Account address

        Returns:
            AccountState or None if the account was never written
        """
        ...

    async def get_many(self, addresses: Iterable[Address]) -> dict[Address, AccountState]:
        """Retrieve several accounts, omitting those never written."""
        found = {}
        for address in addresses:
            state = await self.get(address)
            if state is not None:
                found[address] = state
        return found

    @abstractmethod
    async def put_many(self, states: list[AccountState]) -> None:
        """
        Store several accounts atomically.

        Args:
            states: Account states to write; either all are stored or none
        """
        ...

    async def put(self, state: AccountState) -> None:
        """Store one account."""
        await self.put_many([state])

    @abstractmethod
    async def delete(self, address: Address) -> None:
        """
        Remove an account.

        Args:
            address: Account address to remove
        """
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove all accounts."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections and resources."""
        ...

    async def __aenter__(self) -> "AccountStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup."""
        await self.close()
