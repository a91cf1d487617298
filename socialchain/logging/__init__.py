"""Logging helpers."""

from socialchain.logging.setup import configure_logging, get_logger, instruction_context

__all__ = ["configure_logging", "get_logger", "instruction_context"]
