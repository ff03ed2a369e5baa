"""Command handler implementations, one function per command letter."""

from .core import comment, escape_line, line_number, list_lines, number_lines, print_lines
from .edit import (
    append_text,
    change_lines,
    delete_lines,
    insert_text,
    join_lines,
    move_lines,
    substitute,
    transfer_lines,
    undo,
)
from .external import read_file, run_shell, write_file
from .session import (
    quit_session,
    quit_unconditionally,
    set_mark,
    show_error,
    show_filename,
    toggle_prompt,
    toggle_verbose,
)

__all__ = [
    "append_text",
    "change_lines",
    "comment",
    "delete_lines",
    "escape_line",
    "insert_text",
    "join_lines",
    "line_number",
    "list_lines",
    "move_lines",
    "number_lines",
    "print_lines",
    "quit_session",
    "quit_unconditionally",
    "read_file",
    "run_shell",
    "set_mark",
    "show_error",
    "show_filename",
    "substitute",
    "toggle_prompt",
    "toggle_verbose",
    "transfer_lines",
    "undo",
    "write_file",
]
