"""Deterministic program address derivation.

A program address is the SHA-256 digest of a list of seeds, the owning
program id and a fixed marker. The digest is only accepted when it does not
decode to a point on the ed25519 curve, so no private key can exist for it and
only the program itself can authorize writes to the account.
``find_program_address`` searches a one-byte nonce, from 255 downwards, until
the digest falls off the curve.
"""

import hashlib
from enum import Enum
from typing import Sequence

from socialchain.exceptions import ArgumentError, AuthorizationError, InvalidSeedsError
from socialchain.models.address import Address

MAX_SEEDS = 16
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"

# ed25519 field prime and twisted Edwards curve constant d = -121665/121666
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


class Role(str, Enum):
    """Role label seeding an identity's derived accounts."""
    PROFILE = "profile"
    POST = "post"


def parse_role(label: str) -> Role:
    """Map a role label to a Role, raising ArgumentError for unknown labels."""
    try:
        return Role(label)
    except ValueError:
        raise ArgumentError(f"Unknown seed type: {label!r}") from None


def is_on_curve(data: bytes) -> bool:
    """
    Check whether 32 bytes decompress to an ed25519 point.

    The encoding is a little-endian y coordinate with the sign of x in the top
    bit. A point exists iff x^2 = (y^2 - 1) / (d*y^2 + 1) has a solution mod p.
    """
    if len(data) != 32:
        return False
    y = (int.from_bytes(data, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    x2 = u * pow(v, _P - 2, _P) % _P
    return x2 == 0 or pow(x2, (_P - 1) // 2, _P) == 1


def create_program_address(seeds: Sequence[bytes], program_id: Address) -> Address:
    """
    Hash seeds into a program address.

    Raises:
        ArgumentError: Too many seeds or a seed longer than 32 bytes
        InvalidSeedsError: The digest lands on the curve
    """
    if len(seeds) > MAX_SEEDS:
        raise ArgumentError(f"At most {MAX_SEEDS} seeds allowed, got {len(seeds)}")

    digest = hashlib.sha256()
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise ArgumentError(f"Seed exceeds {MAX_SEED_LEN} bytes: {len(seed)}")
        digest.update(seed)
    digest.update(bytes(program_id))
    digest.update(PDA_MARKER)

    candidate = digest.digest()
    if is_on_curve(candidate):
        raise InvalidSeedsError("Provided seeds do not result in a valid address")
    return Address(candidate)


def find_program_address(seeds: Sequence[bytes], program_id: Address) -> tuple[Address, int]:
    """
    Find the first off-curve address for seeds, searching the nonce from 255 down.

    Returns:
        (address, nonce) where nonce is the final one-byte seed used
    """
    for nonce in range(255, -1, -1):
        try:
            address = create_program_address([*seeds, bytes([nonce])], program_id)
        except InvalidSeedsError:
            continue
        return address, nonce
    raise ArgumentError("Unable to find a viable program address nonce")


def role_seeds(owner: Address, role: Role | str, index: int | None = None) -> list[bytes]:
    """Seeds for an identity's account of the given role."""
    role = parse_role(role) if not isinstance(role, Role) else role
    seeds = [bytes(owner), role.value.encode("utf-8")]
    if index is not None:
        if not 0 <= index < 2**64:
            raise ArgumentError(f"Sequence index out of range: {index}")
        seeds.append(index.to_bytes(8, "little"))
    return seeds


def derive(
    owner: Address,
    role: Role | str,
    program_id: Address,
    index: int | None = None,
) -> tuple[Address, int]:
    """Derive the (address, nonce) of an identity's profile, post log or post."""
    return find_program_address(role_seeds(owner, role, index), program_id)


def validate(
    candidate: Address,
    owner: Address,
    role: Role | str,
    program_id: Address,
    index: int | None = None,
) -> bool:
    """Recompute the derived address and compare it to candidate."""
    address, _ = derive(owner, role, program_id, index)
    return address == candidate


def require_derived(
    candidate: Address,
    owner: Address,
    role: Role | str,
    program_id: Address,
    index: int | None = None,
) -> int:
    """
    Ensure candidate is the derived address for (owner, role, index).

    Returns:
        The nonce used for the derivation

    Raises:
        AuthorizationError: If candidate is not the derived address
    """
    address, nonce = derive(owner, role, program_id, index)
    if address != candidate:
        raise AuthorizationError(
            f"Account {candidate} is not the {Role(role).value} address for {owner}"
            f" (expected {address})"
        )
    return nonce


def signer_seeds(
    owner: Address, role: Role | str, nonce: int, index: int | None = None
) -> list[bytes]:
    """Full seed list, nonce included, that authorizes writes to a derived account."""
    return [*role_seeds(owner, role, index), bytes([nonce])]


DEFAULT_PROGRAM_ID = Address(hashlib.sha256(b"socialchain:program").digest())
