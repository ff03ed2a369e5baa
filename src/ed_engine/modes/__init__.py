"""Command and text-entry modes plus the shared mode plumbing."""

from .base_mode import Mode, ModeBus, ModeContext, ModeResult
from .command_mode import CommandMode
from .insert_mode import InsertMode

__all__ = [
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "CommandMode",
    "InsertMode",
]
