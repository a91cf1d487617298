"""Structlog configuration for the runtime and its instruction context."""

import logging
import sys
from contextlib import contextmanager
from typing import IO, Iterator

import structlog

from socialchain.config import SocialConfig, LogFormat
from socialchain.models.address import Address


def _render_addresses(logger, method_name: str, event_dict: dict) -> dict:
    """Show addresses as base58 rather than raw bytes."""
    for key, value in event_dict.items():
        if isinstance(value, Address):
            event_dict[key] = str(value)
    return event_dict


def _renderer(log_format: LogFormat) -> list:
    if log_format == LogFormat.JSON:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(config: SocialConfig | None = None, stream: IO[str] | None = None) -> None:
    """
    Configure structlog for runtime, processor and allocator events.

    Events go to stderr so command output on stdout stays clean. Fields bound
    with instruction_context() are merged into every event logged while an
    instruction runs.

    Args:
        config: SocialConfig instance, uses defaults if None
        stream: Output stream, stderr if None
    """
    if config is None:
        config = SocialConfig()

    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _render_addresses,
            *_renderer(config.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str, **context) -> structlog.BoundLogger:
    """
    Get a logger for one runtime component.

    Args:
        component: Component name, e.g. "runtime" or "allocator"
        **context: Extra fields bound to every event, e.g. program_id

    Returns:
        Configured structlog BoundLogger
    """
    return structlog.get_logger(component=component, **context)


@contextmanager
def instruction_context(instruction: str, signer: Address | None = None) -> Iterator[None]:
    """Bind the executing instruction and its signer to all events logged inside the block."""
    fields = {"instruction": instruction}
    if signer is not None:
        fields["signer"] = str(signer)
    with structlog.contextvars.bound_contextvars(**fields):
        yield
