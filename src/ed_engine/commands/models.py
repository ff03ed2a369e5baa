"""Dataclasses describing command variants and their invocations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class AddressArity(str, Enum):
    """How a command treats the addresses in front of it.

    ``NONE`` rejects any address, ``SINGLE`` rejects a second address,
    ``LINE`` only reads the first, ``RANGE`` defaults the end to the start,
    ``IGNORED`` validates addresses but never reads them.
    """

    NONE = "none"
    SINGLE = "single"
    LINE = "line"
    RANGE = "range"
    IGNORED = "ignored"


@dataclass(frozen=True, slots=True)
class Invocation:
    """Resolved addresses and arguments handed to a command handler."""

    letter: str
    args: str
    start: int
    end: Optional[int] = None
    addressed: bool = False

    @property
    def stop(self) -> int:
        return self.end if self.end is not None else self.start


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """One command letter, its handler, and its argument contract."""

    letter: str
    handler: Callable[..., object]
    arity: AddressArity = AddressArity.RANGE
    mutates: bool = False
    description: str = ""
    telemetry_name: str | None = None

    def __post_init__(self) -> None:
        if len(self.letter) != 1:
            raise ValueError("command letter must be a single character")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", f"command.{self.letter}")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


__all__ = ["AddressArity", "CommandSpec", "Invocation"]
