"""Error kinds raised by the interpreter core.

Every handler and resolver failure is an ``EdError``. The mode manager
catches them at a single boundary and turns them into the ``?`` marker.
"""

from __future__ import annotations

UNDEFINED_ERROR = "Undefined error"


class EdError(RuntimeError):
    """Base class for recoverable interpreter errors."""

    default_message = UNDEFINED_ERROR
    expected = True

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class RangeError(EdError):
    """An address lies outside ``[1, last]`` or the range is reversed."""


class AddressResolutionError(EdError):
    """A search found nothing, a mark is unset, or a token is malformed."""

    default_message = "invalid address"


class ArgumentError(EdError):
    """A command received arguments or addresses it does not accept."""

    default_message = "invalid command suffix"


class ModifiedBufferWarning(EdError):
    """Quit was refused because the buffer has unsaved changes."""

    default_message = "buffer modified"


class CommandIOError(EdError):
    """A file or shell operation failed."""

    default_message = "cannot open file"


__all__ = [
    "UNDEFINED_ERROR",
    "EdError",
    "RangeError",
    "AddressResolutionError",
    "ArgumentError",
    "ModifiedBufferWarning",
    "CommandIOError",
]
