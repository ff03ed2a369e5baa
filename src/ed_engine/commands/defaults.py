"""Built-in command table covering every supported letter."""

from __future__ import annotations

from typing import Iterable

from ed_engine.actions import core as core_actions
from ed_engine.actions import edit as edit_actions
from ed_engine.actions import external as external_actions
from ed_engine.actions import session as session_actions

from .models import AddressArity, CommandSpec
from .registry import CommandRegistry

NONE = AddressArity.NONE
SINGLE = AddressArity.SINGLE
LINE = AddressArity.LINE
RANGE = AddressArity.RANGE
IGNORED = AddressArity.IGNORED

DEFAULT_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("=", core_actions.line_number, LINE, description="Print line number"),
    CommandSpec("!", external_actions.run_shell, NONE, description="Run shell command"),
    CommandSpec(
        "a", edit_actions.append_text, LINE, mutates=True, description="Append text"
    ),
    CommandSpec(
        "c", edit_actions.change_lines, RANGE, mutates=True, description="Change lines"
    ),
    CommandSpec(
        "d", edit_actions.delete_lines, RANGE, mutates=True, description="Delete lines"
    ),
    CommandSpec("f", session_actions.show_filename, IGNORED, description="Show file name"),
    CommandSpec("h", session_actions.show_error, IGNORED, description="Explain last error"),
    CommandSpec(
        "H", session_actions.toggle_verbose, IGNORED, description="Toggle verbose errors"
    ),
    CommandSpec(
        "i", edit_actions.insert_text, LINE, mutates=True, description="Insert text"
    ),
    CommandSpec(
        "j", edit_actions.join_lines, RANGE, mutates=True, description="Join lines"
    ),
    CommandSpec("k", session_actions.set_mark, LINE, description="Mark line"),
    CommandSpec("l", core_actions.list_lines, RANGE, description="List unambiguously"),
    CommandSpec(
        "m", edit_actions.move_lines, RANGE, mutates=True, description="Move lines"
    ),
    CommandSpec("n", core_actions.number_lines, RANGE, description="Print numbered"),
    CommandSpec("p", core_actions.print_lines, RANGE, description="Print lines"),
    CommandSpec("P", session_actions.toggle_prompt, IGNORED, description="Toggle prompt"),
    CommandSpec("q", session_actions.quit_session, IGNORED, description="Quit"),
    CommandSpec(
        "Q", session_actions.quit_unconditionally, IGNORED, description="Quit without checks"
    ),
    CommandSpec(
        "r", external_actions.read_file, SINGLE, mutates=True, description="Read file"
    ),
    CommandSpec(
        "s", edit_actions.substitute, RANGE, mutates=True, description="Substitute"
    ),
    CommandSpec(
        "t", edit_actions.transfer_lines, RANGE, mutates=True, description="Copy lines"
    ),
    CommandSpec("u", edit_actions.undo, IGNORED, description="Undo last change"),
    CommandSpec("w", external_actions.write_file, IGNORED, description="Write buffer"),
    CommandSpec("#", core_actions.comment, IGNORED, description="Comment"),
)


def load_default_commands(
    registry: CommandRegistry,
    *,
    commands: Iterable[CommandSpec] = DEFAULT_COMMANDS,
    replace: bool = False,
) -> CommandRegistry:
    for spec in commands:
        registry.register(spec, replace=replace)
    return registry


__all__ = ["DEFAULT_COMMANDS", "load_default_commands"]
