"""Finite-state scanner splitting a command line into addresses and a command."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

ADDRESS_CHARS = frozenset("0123456789.$+-^")
SEARCH_DELIMITERS = frozenset("/?")
MARK_PREFIX = "'"


class Phase(Enum):
    FIRST_ADDRESS = "first"
    SECOND_ADDRESS = "second"
    REST = "rest"


@dataclass(frozen=True, slots=True)
class CommandLine:
    """Scanner output: two raw address tokens and the command remainder."""

    first: str = ""
    second: str = ""
    rest: str = ""
    explicit_range: bool = False

    @property
    def letter(self) -> str:
        return self.rest[:1]

    @property
    def args(self) -> str:
        return self.rest[1:]

    @property
    def addressed(self) -> bool:
        return bool(self.first or self.second)


@dataclass(slots=True)
class ScanState:
    """Mutable cursor of one scan; exposed so transitions can be tested."""

    phase: Phase = Phase.FIRST_ADDRESS
    first: List[str] = field(default_factory=list)
    second: List[str] = field(default_factory=list)
    rest: List[str] = field(default_factory=list)
    search_delimiter: Optional[str] = None
    in_mark: bool = False
    gap: bool = False
    explicit_range: bool = False

    @property
    def token(self) -> List[str]:
        return self.second if self.phase is Phase.SECOND_ADDRESS else self.first

    def jump_to_rest(self) -> None:
        self.phase = Phase.REST
        self.search_delimiter = None
        self.in_mark = False

    def set_range(self, first: str, second: str) -> None:
        self.first[:] = list(first)
        self.second[:] = list(second)
        self.explicit_range = True
        self.jump_to_rest()


Transition = Callable[[ScanState, str], None]


def _whole_buffer(state: ScanState, char: str) -> None:
    state.set_range("1", "$")


def _current_to_end(state: ScanState, char: str) -> None:
    state.set_range(".", "$")


def _open_search(state: ScanState, char: str) -> None:
    state.token.append(char)
    state.search_delimiter = char


def _open_mark(state: ScanState, char: str) -> None:
    state.token.append(char)
    state.in_mark = True


def _separator(state: ScanState, char: str) -> None:
    if state.phase is Phase.SECOND_ADDRESS:
        _start_rest(state, char)
    elif not state.first:
        _whole_buffer(state, char)
    else:
        state.phase = Phase.SECOND_ADDRESS
        state.explicit_range = True


def _address_char(state: ScanState, char: str) -> None:
    token = state.token
    if state.gap and char.isdigit() and token and token[-1] not in "+-^":
        # "3 4" reads as "3+4"
        token.append("+")
    token.append(char)


def _start_rest(state: ScanState, char: str) -> None:
    state.jump_to_rest()
    state.rest.append(char)


class CommandLineScanner:
    """Table-driven scanner for ``[addr[,addr]]cmd[args]`` lines.

    Transitions only fire in the address phases. Inside a search token every
    character is literal until the opening delimiter repeats; a mark prefix
    consumes exactly one following character as the mark name.
    """

    def __init__(self) -> None:
        self.transitions: Dict[str, Transition] = {
            "%": _whole_buffer,
            ";": _current_to_end,
            ",": _separator,
            "/": _open_search,
            "?": _open_search,
            MARK_PREFIX: _open_mark,
        }

    def scan(self, raw: str) -> CommandLine:
        state = ScanState()
        for char in raw:
            self.step(state, char)
        return self.finish(state)

    def step(self, state: ScanState, char: str) -> None:
        if state.phase is Phase.REST:
            state.rest.append(char)
            return

        if state.search_delimiter is not None:
            state.token.append(char)
            if char == state.search_delimiter:
                state.search_delimiter = None
            return

        if state.in_mark:
            state.token.append(char)
            state.in_mark = False
            return

        if char.isspace():
            state.gap = bool(state.token)
            return
        transition = self.transitions.get(char)
        if transition is not None:
            transition(state, char)
        elif char in ADDRESS_CHARS:
            _address_char(state, char)
        else:
            _start_rest(state, char)
        state.gap = False

    def finish(self, state: ScanState) -> CommandLine:
        first = "".join(state.first)
        second = "".join(state.second)
        rest = "".join(state.rest)
        if (
            first
            and not second
            and not rest
            and not state.explicit_range
            and (first[0] in SEARCH_DELIMITERS or first[0] == MARK_PREFIX)
        ):
            # a lone /re/ or 'x addresses exactly one line
            second = first
        return CommandLine(
            first=first,
            second=second,
            rest=rest,
            explicit_range=state.explicit_range,
        )


def scan_command_line(raw: str) -> CommandLine:
    return CommandLineScanner().scan(raw)


__all__ = [
    "ADDRESS_CHARS",
    "CommandLine",
    "CommandLineScanner",
    "Phase",
    "ScanState",
    "scan_command_line",
]
