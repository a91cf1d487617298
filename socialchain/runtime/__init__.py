"""Host runtime that executes socialchain instructions."""

from socialchain.runtime.allocator import Rent, SystemAllocator
from socialchain.runtime.runtime import Runtime

__all__ = ["Rent", "SystemAllocator", "Runtime"]
