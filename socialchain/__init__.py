"""socialchain - social graph program over derived-address ledger accounts."""

from socialchain.models.address import Address
from socialchain.models.profile import Profile
from socialchain.models.post import Post, PostLog, PostCounter
from socialchain.models.result import InstructionResult
from socialchain.config import SocialConfig
from socialchain.core.derivation import Role, derive, find_program_address
from socialchain.core.processor import Processor
from socialchain.runtime.runtime import Runtime
from socialchain.core.exporter import to_json, to_dict, save_json, load_json

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "Runtime",
    "Processor",
    "SocialConfig",
    # Derivation
    "Role",
    "derive",
    "find_program_address",
    # Models
    "Address",
    "Profile",
    "Post",
    "PostLog",
    "PostCounter",
    "InstructionResult",
    # Export utilities
    "to_json",
    "to_dict",
    "save_json",
    "load_json",
    "__version__",
]
