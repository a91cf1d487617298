"""Instruction result wrapper model."""

from datetime import datetime

from pydantic import BaseModel

from socialchain.models.address import Address
from socialchain.models.post import Post, PostCounter, PostLog
from socialchain.models.profile import Profile


class InstructionResult(BaseModel):
    """Outcome of executing one instruction against the ledger."""

    success: bool
    instruction: str
    owner: Address | None = None
    profile: Profile | None = None
    post_log: PostLog | None = None
    post: Post | None = None
    post_counter: PostCounter | None = None
    accounts_written: list[Address] = []
    error_type: str | None = None
    error_message: str | None = None
    executed_at: datetime
    duration_ms: float
