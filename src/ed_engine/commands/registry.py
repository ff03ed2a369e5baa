"""Command registry mapping letters to command variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from ed_engine.runtime.telemetry import span

from .models import CommandSpec

@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    command_count: int
    letters: tuple[str, ...]
    mutating: tuple[str, ...]

class CommandConflictError(RuntimeError):
    """Raised when a letter is registered twice without ``replace``."""

    def __init__(self, spec: CommandSpec, existing: CommandSpec) -> None:
        super().__init__(
            f"Command '{spec.letter}' is already bound to {existing.handler!r}"
        )
        self.spec = spec
        self.existing = existing

class CommandRegistry:
    """Owns the letter -> ``CommandSpec`` table the dispatcher consults."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._commands: Dict[str, CommandSpec] = {}
        self._logger_name = logger_name

    def register(self, spec: CommandSpec, *, replace: bool = False) -> CommandSpec:
        with span(
            "commands::register",
            logger_name=self._logger_name,
            component="commands",
            metadata={"letter": spec.letter, "arity": spec.arity.value},
        ) as handle:
            existing = self._commands.get(spec.letter)
            if existing is not None and not replace:
                handle.add_metadata("conflict", existing.letter)
                raise CommandConflictError(spec, existing)
            self._commands[spec.letter] = spec
            return spec

    def get(self, letter: str) -> Optional[CommandSpec]:
        return self._commands.get(letter)

    def __contains__(self, letter: object) -> bool:
        return letter in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def stats(self) -> RegistryStats:
        return RegistryStats(
            command_count=len(self._commands),
            letters=tuple(sorted(self._commands)),
            mutating=tuple(
                sorted(letter for letter, spec in self._commands.items() if spec.mutates)
            ),
        )

__all__ = ["CommandConflictError", "CommandRegistry", "RegistryStats"]
