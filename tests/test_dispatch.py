from __future__ import annotations

from pathlib import Path
from typing import Optional

from ed_engine.buffer import Buffer
from ed_engine.commands import AddressArity, CommandRegistry, CommandSpec
from ed_engine.commands.defaults import load_default_commands
from ed_engine.errors import EdError
from ed_engine.interpreter import Interpreter
from ed_engine.modes import ModeContext, ModeResult
from ed_engine.runtime import InterpreterConfig


def make_interpreter(
    *lines: str,
    verbose: bool = False,
    registry: Optional[CommandRegistry] = None,
) -> Interpreter:
    buffer = Buffer.from_lines(lines or ("alpha", "beta", "gamma"))
    return Interpreter(
        buffer,
        config=InterpreterConfig(verbose_errors=verbose),
        registry=registry,
    )


def test_print_single_line_moves_current() -> None:
    interp = make_interpreter()

    output = interp.submit_line("2p")

    assert output.kind == "text"
    assert output.lines == ("beta",)
    assert interp.buffer.current_line() == 2


def test_numbered_range() -> None:
    interp = make_interpreter()

    assert interp.submit_line("1,2n").lines == ("1\talpha", "2\tbeta")
    assert interp.buffer.current_line() == 2


def test_delete_then_last_line_number() -> None:
    interp = make_interpreter()

    assert interp.submit_line("3d").kind == "none"
    assert interp.buffer.lines() == ("alpha", "beta")
    assert interp.buffer.current_line() == 2
    assert interp.submit_line("$=").lines == ("2",)


def test_equals_defaults_to_current_line() -> None:
    interp = make_interpreter()
    interp.submit_line("2")

    assert interp.submit_line("=").lines == ("2",)


def test_out_of_range_address_leaves_state_unchanged() -> None:
    interp = make_interpreter()
    interp.submit_line("2")

    for line in ("5p", "0p", "3,1p", "1,4d"):
        output = interp.submit_line(line)
        assert output.kind == "error"
        assert output.lines == ("?",)

    assert interp.buffer.current_line() == 2
    assert interp.buffer.lines() == ("alpha", "beta", "gamma")
    assert interp.session.last_error == "Undefined error"


def test_verbose_errors_carry_message() -> None:
    interp = make_interpreter(verbose=True)

    assert interp.submit_line("9p").lines == ("?", "Undefined error")


def test_whole_buffer_shorthands() -> None:
    interp = make_interpreter()

    assert interp.submit_line("%p").lines == ("alpha", "beta", "gamma")
    assert interp.submit_line(",n").lines[0] == "1\talpha"
    interp.submit_line("2")
    assert interp.submit_line(";p").lines == ("beta", "gamma")


def test_whole_buffer_on_empty_buffer_is_silent() -> None:
    interp = Interpreter(config=InterpreterConfig())

    output = interp.submit_line("%p")

    assert output.kind == "none"
    assert interp.buffer.current_line() == 1


def test_bare_address_navigates_and_echoes() -> None:
    interp = make_interpreter()

    assert interp.submit_line("3").lines == ("gamma",)
    assert interp.submit_line("-").lines == ("beta",)
    assert interp.submit_line("$-2").lines == ("alpha",)


def test_empty_line_advances_until_end() -> None:
    interp = make_interpreter()

    assert interp.submit_line("").lines == ("beta",)
    assert interp.submit_line("\n").lines == ("gamma",)
    assert interp.submit_line("").kind == "error"
    assert interp.buffer.current_line() == 3


def test_search_addresses_move_to_match() -> None:
    interp = make_interpreter()

    assert interp.submit_line("/gam/").lines == ("gamma",)
    assert interp.submit_line("?alp?").lines == ("alpha",)
    assert interp.submit_line("/zzz/").kind == "error"
    assert interp.buffer.current_line() == 1


def test_search_then_command() -> None:
    interp = make_interpreter()

    assert interp.submit_line("/be/,$p").lines == ("beta", "gamma")


def test_unknown_letter() -> None:
    interp = make_interpreter()

    assert interp.submit_line("z").kind == "error"
    assert interp.submit_line("2z").lines == ("beta",)


def test_address_rejected_by_addressless_command() -> None:
    interp = make_interpreter()

    assert interp.submit_line("1!echo hi").kind == "error"
    assert interp.submit_line("1,2r /nonexistent").kind == "error"


def test_failed_mutation_is_rolled_back() -> None:
    def delete_then_fail(context: ModeContext, invocation) -> ModeResult:
        context.buffer.delete_range(invocation.start, invocation.stop)
        raise EdError("boom")

    registry = load_default_commands(CommandRegistry())
    registry.register(
        CommandSpec("x", delete_then_fail, AddressArity.RANGE, mutates=True)
    )
    interp = make_interpreter(verbose=True, registry=registry)

    output = interp.submit_line("1,2x")

    assert output.lines == ("?", "boom")
    assert interp.buffer.lines() == ("alpha", "beta", "gamma")
    assert interp.buffer.is_modified() is False
    assert interp.submit_line("u").kind == "error"


def test_bus_reports_submitted_lines_and_errors() -> None:
    interp = make_interpreter()
    seen: list[tuple[str, object]] = []
    interp.bus.subscribe("command.submit", lambda payload: seen.append(("submit", payload)))
    interp.bus.subscribe("command.error", lambda payload: seen.append(("error", payload)))

    interp.submit_line("9p")

    assert seen[0] == ("submit", "9p")
    assert seen[1][0] == "error"
    assert isinstance(seen[1][1], EdError)


def test_run_script_stops_after_quit() -> None:
    interp = make_interpreter()

    results = interp.run_script(["1p", "q", "2p"])

    assert [result.kind for result in results] == ["text", "ended"]
    assert interp.ended is True


def test_print_commands_emit_one_line_per_address_and_do_not_mutate() -> None:
    interp = make_interpreter()

    for letter in ("p", "n", "l"):
        for start in range(1, 4):
            for end in range(start, 4):
                output = interp.submit_line(f"{start},{end}{letter}")
                assert len(output.lines) == end - start + 1
                assert interp.buffer.current_line() == end

    assert interp.buffer.lines() == ("alpha", "beta", "gamma")
    assert interp.buffer.is_modified() is False


def test_open_binds_buffer_to_file(tmp_path: Path) -> None:
    source = tmp_path / "doc.txt"
    source.write_text("one\ntwo\n")

    interp = Interpreter.open(str(source), config=InterpreterConfig())

    assert interp.buffer.file_path() == str(source)
    assert interp.submit_line(".").lines == ("two",)


def test_unsubscribed_callbacks_stop_receiving_events() -> None:
    interp = make_interpreter()
    seen: list[object] = []

    def collect(payload: object) -> None:
        seen.append(payload)

    interp.bus.subscribe("command.submit", collect)
    interp.submit_line("1p")
    interp.bus.unsubscribe("command.submit", collect)
    interp.submit_line("2p")

    assert seen == ["1p"]


def test_every_error_kind_becomes_a_marker() -> None:
    interp = make_interpreter()

    for line in ("9p", "/zzz/", "'qp", "k", "s/zzz/y/", "r", "!", "1,2m1", "z"):
        output = interp.submit_line(line)
        assert output.kind == "error", line
        assert output.lines == ("?",)

    assert interp.submit_line("2p").lines == ("beta",)


def test_failed_search_keeps_remembered_pattern() -> None:
    interp = make_interpreter()
    interp.submit_line("/gam/")

    assert interp.submit_line("/zzz/").kind == "error"
    assert interp.session.last_search == "gam"

    interp.submit_line("1")
    assert interp.submit_line("/beta/,9p").kind == "error"
    assert interp.session.last_search == "gam"


def test_space_between_address_parts_adds() -> None:
    interp = make_interpreter()

    assert interp.submit_line("1 1p").lines == ("beta",)
    assert interp.submit_line("$ -1p").lines == ("beta",)
