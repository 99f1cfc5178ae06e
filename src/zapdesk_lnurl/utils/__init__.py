"""Cancellation and logging helpers."""

from .cancellation import CancellationToken, ResolutionOutcome, ResolutionSlot
from .logging_config import configure_logging

__all__ = [
    "CancellationToken",
    "ResolutionOutcome",
    "ResolutionSlot",
    "configure_logging",
]
