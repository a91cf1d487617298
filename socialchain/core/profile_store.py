"""Follow list mutations."""

from socialchain.exceptions import CapacityExceededError
from socialchain.models.address import Address
from socialchain.models.profile import Profile

U16_MAX = 0xFFFF


def follow(profile: Profile, address: Address, capacity: int) -> None:
    """
    Append address to the follow list.

    Duplicates are kept; following the same address twice stores it twice.

    Args:
        profile: Profile to mutate
        address: Address to follow
        capacity: Most follows the profile account can hold

    Raises:
        CapacityExceededError: If the profile is already full
    """
    limit = min(capacity, U16_MAX)
    if profile.follow_count >= limit:
        raise CapacityExceededError(
            f"Profile already follows {profile.follow_count} of at most {limit} accounts"
        )
    profile.follows.append(address)


def unfollow(profile: Profile, address: Address) -> int:
    """
    Remove every occurrence of address from the follow list.

    Unfollowing an address that is not followed is a no-op.

    Returns:
        Number of entries removed
    """
    before = profile.follow_count
    profile.follows = [a for a in profile.follows if a != address]
    return before - profile.follow_count
