"""Command variants and the registry the dispatcher looks them up in.

The built-in table lives in ``ed_engine.commands.defaults``.
"""

from .models import AddressArity, CommandSpec, Invocation
from .registry import CommandConflictError, CommandRegistry, RegistryStats

__all__ = [
    "AddressArity",
    "CommandConflictError",
    "CommandRegistry",
    "CommandSpec",
    "Invocation",
    "RegistryStats",
]
