"""In-process account store."""

from socialchain.models.account import AccountState
from socialchain.models.address import Address
from socialchain.store.base import AccountStore


class MemoryAccountStore(AccountStore):
    """Dictionary-backed store; contents are lost when the process exits."""

    def __init__(self):
        self._accounts: dict[Address, AccountState] = {}

    async def get(self, address: Address) -> AccountState | None:
        state = self._accounts.get(address)
        return state.model_copy() if state is not None else None

    async def put_many(self, states: list[AccountState]) -> None:
        self._accounts.update({s.address: s.model_copy() for s in states})

    async def delete(self, address: Address) -> None:
        self._accounts.pop(address, None)

    async def clear(self) -> None:
        self._accounts.clear()

    async def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._accounts)
