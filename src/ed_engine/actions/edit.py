"""Commands that change buffer content."""

from __future__ import annotations

import re

from ed_engine.buffer.protocol import TextBuffer
from ed_engine.commands.models import Invocation
from ed_engine.errors import AddressResolutionError, ArgumentError, EdError, RangeError
from ed_engine.modes.base_mode import ModeContext, ModeResult
from ed_engine.modes.command_mode import require_resolver
from ed_engine.parsing.addresses import last_line
from ed_engine.session import SessionState, Substitution


def _enter_text(context: ModeContext, after: int) -> ModeResult:
    buffer = context.buffer
    context.session.insert_after = max(0, min(after, buffer.line_count()))
    return ModeResult(status="insert", switch_to="text")


def _delete(buffer: TextBuffer, start: int, stop: int) -> None:
    if buffer.line_count() == 0:
        return
    buffer.delete_range(start, stop)


def _destination(context: ModeContext, args: str) -> int:
    token = args.strip() or "."
    buffer = context.buffer
    target = require_resolver(context).resolve(token, buffer)
    if not 0 <= target <= last_line(buffer):
        raise RangeError()
    return min(target, buffer.line_count())


def append_text(context: ModeContext, invocation: Invocation) -> ModeResult:
    return _enter_text(context, invocation.start)


def insert_text(context: ModeContext, invocation: Invocation) -> ModeResult:
    return _enter_text(context, invocation.start - 1)


def change_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    _delete(context.buffer, invocation.start, invocation.stop)
    return _enter_text(context, invocation.start - 1)


def delete_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    buffer = context.buffer
    _delete(buffer, invocation.start, invocation.stop)
    buffer.set_current_line(max(1, min(invocation.start, buffer.line_count())))
    return ModeResult(status="delete")


def join_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    buffer = context.buffer
    start, stop = invocation.start, invocation.stop
    if not invocation.addressed:
        stop = start + 1
        if stop > buffer.line_count():
            raise RangeError()
    if stop <= start or buffer.line_count() == 0:
        return ModeResult(status="join")

    merged = "".join(buffer.read_range(start, stop))
    buffer.delete_range(start, stop)
    buffer.insert_lines(start - 1, [merged])
    buffer.set_current_line(start)
    return ModeResult(status="join")


def move_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    buffer = context.buffer
    start, stop = invocation.start, invocation.stop
    target = _destination(context, invocation.args)
    if start <= target < stop:
        raise AddressResolutionError("invalid destination")
    if buffer.line_count() == 0:
        return ModeResult(status="move")

    moved = list(buffer.read_range(start, stop))
    buffer.delete_range(start, stop)
    if target >= stop:
        target -= len(moved)
    buffer.insert_lines(target, moved)
    buffer.set_current_line(target + len(moved))
    return ModeResult(status="move")


def transfer_lines(context: ModeContext, invocation: Invocation) -> ModeResult:
    buffer = context.buffer
    target = _destination(context, invocation.args)
    if buffer.line_count() == 0:
        return ModeResult(status="transfer")

    copied = list(buffer.read_range(invocation.start, invocation.stop))
    buffer.insert_lines(target, copied)
    buffer.set_current_line(target + len(copied))
    return ModeResult(status="transfer")


def parse_substitution(args: str, session: SessionState) -> Substitution:
    """Parse ``/from/to/`` or ``/from/to/g``; empty ``args`` repeats the last one."""

    if not args:
        if session.last_substitution is None:
            raise ArgumentError("no previous substitution")
        return session.last_substitution

    fields = args.split("/")
    if fields[0] != "" or len(fields) - 1 not in (2, 3):
        raise ArgumentError("invalid pattern delimiter")
    pattern, replacement = fields[1], fields[2]
    flag = fields[3] if len(fields) == 4 else ""
    if flag not in ("", "g"):
        raise ArgumentError("invalid command suffix")
    if not pattern:
        if session.last_search is None:
            raise ArgumentError("no previous pattern")
        pattern = session.last_search
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ArgumentError("invalid pattern") from exc
    return Substitution(pattern=pattern, replacement=replacement, replace_all=flag == "g")


def expand_template(replacement: str) -> str:
    """Translate ``&`` and ``\\N`` into a ``re.sub`` template."""

    parts = []
    chars = iter(replacement)
    for char in chars:
        if char == "&":
            parts.append(r"\g<0>")
        elif char == "\\":
            following = next(chars, "")
            if following.isdigit():
                parts.append("\\" + following)
            else:
                parts.append(following.replace("\\", "\\\\"))
        else:
            parts.append(char)
    return "".join(parts)


def substitute(context: ModeContext, invocation: Invocation) -> ModeResult:
    buffer = context.buffer
    session = context.session
    substitution = parse_substitution(invocation.args, session)
    regex = re.compile(substitution.pattern)
    template = expand_template(substitution.replacement)
    count = 0 if substitution.replace_all else 1

    changes = []
    lines = buffer.read_range(invocation.start, invocation.stop)
    for number, line in enumerate(lines, start=invocation.start):
        try:
            updated, hits = regex.subn(template, line, count=count)
        except (re.error, IndexError) as exc:
            raise ArgumentError("invalid replacement") from exc
        if hits:
            changes.append((number, updated))
    if not changes:
        raise AddressResolutionError("no match")

    for number, updated in changes:
        buffer.delete_range(number, number)
        buffer.insert_lines(number - 1, [updated])
    buffer.set_current_line(changes[-1][0])
    session.last_substitution = substitution
    session.last_search = substitution.pattern
    return ModeResult(status="substitute")


def undo(context: ModeContext, invocation: Invocation) -> ModeResult:
    del invocation
    if not context.buffer.undo():
        raise EdError("nothing to undo")
    return ModeResult(status="undo")


__all__ = [
    "append_text",
    "change_lines",
    "delete_lines",
    "expand_template",
    "insert_text",
    "join_lines",
    "move_lines",
    "parse_substitution",
    "substitute",
    "transfer_lines",
    "undo",
]
