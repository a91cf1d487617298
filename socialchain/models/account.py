"""Persisted account state model."""

from pydantic import BaseModel, ConfigDict, Field

from socialchain.models.address import Address


class AccountState(BaseModel):
    """Snapshot of one account as held by an account store."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    address: Address
    owner: Address
    lamports: int = Field(default=0, ge=0)
    data: bytes = b""
