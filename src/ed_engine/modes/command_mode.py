"""Command mode: scan, resolve, validate, and dispatch one command line."""

from __future__ import annotations

from contextlib import ExitStack
from typing import Optional

from ed_engine.commands.models import AddressArity, CommandSpec, Invocation
from ed_engine.commands.registry import CommandRegistry
from ed_engine.errors import ArgumentError, EdError, RangeError
from ed_engine.parsing.addresses import AddressResolver, last_line
from ed_engine.parsing.scanner import CommandLine, CommandLineScanner
from ed_engine.runtime import telemetry

from .base_mode import Mode, ModeContext, ModeResult

OPEN_TRANSACTION = "open_transaction"


def require_registry(context: ModeContext) -> CommandRegistry:
    registry = context.extras.get("command_registry")
    if not isinstance(registry, CommandRegistry):
        raise RuntimeError("ModeContext.extras missing 'command_registry'")
    return registry


def require_resolver(context: ModeContext) -> AddressResolver:
    resolver = context.extras.get("address_resolver")
    if not isinstance(resolver, AddressResolver):
        resolver = AddressResolver(context.session)
        context.extras["address_resolver"] = resolver
    return resolver


class CommandMode(Mode):
    name = "command"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("ed_engine.modes.command")
        self._registry = require_registry(context)
        self._resolver = require_resolver(context)
        self._scanner = CommandLineScanner()

    def handle_line(self, line: str) -> ModeResult:
        self.context.bus.emit("command.submit", line)
        parsed = self._scanner.scan(line)
        remembered = self.session.last_search
        with telemetry.span(
            "commands::dispatch",
            component="commands",
            metadata={"letter": parsed.letter or "<none>"},
        ):
            try:
                return self.dispatch(parsed)
            except EdError:
                # a failed command leaves the remembered pattern as it was
                self.session.last_search = remembered
                raise

    def dispatch(self, parsed: CommandLine) -> ModeResult:
        start = self._resolve(parsed.first)
        end = self._resolve(parsed.second)
        self._validate(start, end)

        spec = self._registry.get(parsed.letter) if parsed.letter else None
        if spec is None:
            return self._navigate(parsed, start, end)
        return self._invoke(spec, self._bind(spec, parsed, start, end))

    def _resolve(self, token: str) -> Optional[int]:
        if not token:
            return None
        return self._resolver.resolve(token, self.context.buffer)

    def _validate(self, start: Optional[int], end: Optional[int]) -> None:
        highest = last_line(self.context.buffer)
        for value in (start, end):
            if value is not None and not 1 <= value <= highest:
                raise RangeError()
        if start is not None and end is not None and end < start:
            raise RangeError()

    def _navigate(
        self, parsed: CommandLine, start: Optional[int], end: Optional[int]
    ) -> ModeResult:
        buffer = self.context.buffer
        if end is not None:
            target = end
        elif start is not None:
            target = start
        elif parsed.letter:
            raise ArgumentError("unknown command")
        else:
            target = buffer.current_line() + 1
            if target > buffer.line_count():
                raise RangeError()
        buffer.set_current_line(target)
        return ModeResult(status="navigate", output=tuple(buffer.read_range(target, target)))

    def _bind(
        self,
        spec: CommandSpec,
        parsed: CommandLine,
        start: Optional[int],
        end: Optional[int],
    ) -> Invocation:
        addressed = start is not None or end is not None
        if spec.arity is AddressArity.NONE and addressed:
            raise ArgumentError("unexpected address")
        if spec.arity is AddressArity.SINGLE and end is not None:
            raise ArgumentError("unexpected address")

        first = start if start is not None else self.context.buffer.current_line()
        if spec.arity is AddressArity.RANGE and end is None:
            end = first
        return Invocation(
            letter=spec.letter,
            args=parsed.args,
            start=first,
            end=end,
            addressed=addressed,
        )

    def _invoke(self, spec: CommandSpec, invocation: Invocation) -> ModeResult:
        if not spec.mutates:
            return self._call(spec, invocation)

        with ExitStack() as stack:
            stack.enter_context(self.context.buffer.transaction(spec.letter))
            result = self._call(spec, invocation)
            if result.switch_to == "text":
                # text entry keeps the transaction open until the closing "."
                self.context.extras[OPEN_TRANSACTION] = stack.pop_all()
        return result

    def _call(self, spec: CommandSpec, invocation: Invocation) -> ModeResult:
        with telemetry.span(
            spec.telemetry_name or f"command.{spec.letter}",
            metadata={"start": invocation.start, "end": invocation.stop},
        ):
            outcome = spec(self.context, invocation)
        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult()
