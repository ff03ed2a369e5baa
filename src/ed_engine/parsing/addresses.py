"""Address token resolution against live buffer state."""

from __future__ import annotations

import re
from typing import Tuple

from ed_engine.buffer.protocol import TextBuffer
from ed_engine.errors import AddressResolutionError
from ed_engine.session import SessionState

_DIGITS = re.compile(r"\d+")
_OFFSETS = re.compile(r"(?:[+\-^]\d*)*")
_OFFSET = re.compile(r"([+\-^])(\d*)")


def last_line(buffer: TextBuffer) -> int:
    """Highest addressable line; an empty buffer counts as one line."""

    return max(buffer.line_count(), 1)


def split_address(token: str) -> Tuple[str, str]:
    """Split ``token`` into its base address and trailing offsets.

    >>> split_address("/foo/+2")
    ('/foo/', '+2')
    >>> split_address("-3")
    ('', '-3')
    """

    if not token:
        return "", ""
    head = token[0]
    if head in "/?":
        close = token.find(head, 1)
        if close == -1:
            return token, ""
        return token[: close + 1], token[close + 1 :]
    if head == "'":
        return token[:2], token[2:]
    if head in ".$":
        return head, token[1:]
    match = _DIGITS.match(token)
    if match:
        return match.group(), token[match.end() :]
    return "", token


class AddressResolver:
    """Turns address tokens into 1-based line numbers.

    Nothing is cached between calls: searches and ``$`` always look at the
    buffer as it is now, marks return whatever line was stored by ``k``.
    Results are not range-checked here; the dispatcher does that.
    """

    def __init__(self, session: SessionState) -> None:
        self.session = session

    def resolve(self, token: str, buffer: TextBuffer) -> int:
        base, offsets = split_address(token)
        line = self._resolve_base(base, buffer)
        return line + self._offset(offsets, token)

    def _resolve_base(self, base: str, buffer: TextBuffer) -> int:
        if base in ("", "."):
            return buffer.current_line()
        head = base[0]
        if head in "/?":
            return self._search(base, buffer)
        if head == "$":
            return last_line(buffer)
        if head == "'":
            return self._mark(base[1:])
        return int(base)

    def _search(self, base: str, buffer: TextBuffer) -> int:
        body = self._pattern_body(base)
        try:
            regex = re.compile(body)
        except re.error as exc:
            raise AddressResolutionError("invalid pattern") from exc
        if base[0] == "/":
            found = buffer.search_forward(regex, buffer.current_line())
        else:
            found = buffer.search_backward(regex, buffer.current_line())
        line = self._found(found)
        # only a successful search becomes the remembered pattern
        self.session.last_search = body
        return line

    def _pattern_body(self, base: str) -> str:
        delimiter = base[0]
        body = base[1:]
        if body.endswith(delimiter):
            body = body[:-1]
        if body:
            return body
        if self.session.last_search is None:
            raise AddressResolutionError("no previous pattern")
        return self.session.last_search

    def _found(self, line: int | None) -> int:
        if line is None:
            raise AddressResolutionError("no match")
        return line

    def _mark(self, name: str) -> int:
        if len(name) != 1:
            raise AddressResolutionError("invalid mark character")
        line = self.session.mark(name)
        if line is None:
            raise AddressResolutionError("undefined mark")
        return line

    def _offset(self, offsets: str, token: str) -> int:
        if not _OFFSETS.fullmatch(offsets):
            raise AddressResolutionError(f"invalid address '{token}'")
        total = 0
        for sign, digits in _OFFSET.findall(offsets):
            amount = int(digits) if digits else 1
            total += amount if sign == "+" else -amount
        return total


__all__ = ["AddressResolver", "last_line", "split_address"]
