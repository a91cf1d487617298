"""Custom exception hierarchy for socialchain."""


class SocialChainError(Exception):
    """Base exception for all socialchain errors."""


class DecodeError(SocialChainError):
    """Malformed instruction payload or stored record."""


class ArgumentError(SocialChainError):
    """Invalid instruction argument or account list."""


class CapacityExceededError(ArgumentError):
    """Record would outgrow the space allocated for its account."""


class InvalidSeedsError(ArgumentError):
    """Seeds hash to an on-curve point and cannot name a program address."""


class AuthorizationError(SocialChainError):
    """Supplied account does not match the derived or expected account."""


class AllocationError(SocialChainError):
    """Host failed to create or fund an account."""


class StoreError(SocialChainError):
    """Account store operation failed."""


class ConfigError(SocialChainError):
    """Invalid configuration."""
