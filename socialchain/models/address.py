"""Address type."""

from typing import Any

import base58
from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


class Address(bytes):
    """
    A 32-byte account address.

    Behaves as ``bytes`` for hashing, comparison and seeding, and renders as
    base58 text.

    Example:
        owner = Address("4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T")
        str(owner)    # base58 form
        bytes(owner)  # raw 32 bytes
    """

    SIZE = 32

    def __new__(cls, value: "bytes | bytearray | memoryview | str") -> "Address":
        if isinstance(value, str):
            try:
                raw = base58.b58decode(value)
            except ValueError as e:
                raise ValueError(f"Invalid base58 address: {value!r}") from e
        else:
            raw = bytes(value)
        if len(raw) != cls.SIZE:
            raise ValueError(f"Address must be {cls.SIZE} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    def __str__(self) -> str:
        return base58.b58encode(bytes(self)).decode("ascii")

    def __repr__(self) -> str:
        return f"Address('{self}')"

    @classmethod
    def _validate(cls, value: Any) -> "Address":
        if isinstance(value, Address):
            return value
        if isinstance(value, (str, bytes, bytearray, memoryview)):
            return cls(value)
        raise ValueError(f"Cannot interpret {type(value).__name__} as an address")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )
