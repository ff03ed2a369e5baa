from __future__ import annotations

import io
from pathlib import Path
from typing import List

import pytest

from ed_engine.adapters.console import ConsoleHooks, ConsoleHost, main
from ed_engine.buffer import Buffer
from ed_engine.interpreter import Interpreter
from ed_engine.runtime import InterpreterConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PROMPT", "VERBOSE", "SHOW_PROMPT", "SHELL", "SHELL_TIMEOUT"):
        monkeypatch.delenv(f"ED_ENGINE_{name}", raising=False)


def make_host(stdin: str, *lines: str, **config: object) -> tuple[ConsoleHost, io.StringIO]:
    interp = Interpreter(
        Buffer.from_lines(lines or ("alpha", "beta", "gamma")),
        config=InterpreterConfig(**config),  # type: ignore[arg-type]
    )
    stdout = io.StringIO()
    return ConsoleHost.from_streams(interp, io.StringIO(stdin), stdout), stdout


def test_host_writes_command_output() -> None:
    host, stdout = make_host("2p\n1,2n\nq\n")

    assert host.run() == 0
    assert stdout.getvalue() == "beta\n1\talpha\n2\tbeta\n"


def test_end_of_input_acts_like_quit() -> None:
    host, stdout = make_host("1d\n")

    assert host.run() == 0
    assert stdout.getvalue() == "?\n"
    assert host.interpreter.ended is True


def test_prompt_is_written_before_commands_only() -> None:
    host, stdout = make_host("a\nx\n.\nQ\n", prompt="> ", prompt_visible=True)

    host.run()

    assert stdout.getvalue() == "> > "


def test_hooks_receive_events() -> None:
    interp = Interpreter(Buffer.from_lines(["alpha"]), config=InterpreterConfig())
    pending: List[str] = ["9p\n", "q\n"]
    written: List[str] = []
    events: List[str] = []
    hooks = ConsoleHooks(
        read_line=lambda: pending.pop(0) if pending else "",
        write=written.append,
        handle_event=lambda name, payload: events.append(name),
    )

    ConsoleHost(interp, hooks).run()

    assert written == ["?\n"]
    assert events == [
        "command.submit",
        "command.error",
        "command.submit",
        "session.end",
    ]


def test_main_loads_file_and_reports_size(tmp_path: Path) -> None:
    source = tmp_path / "doc.txt"
    source.write_text("a\nb\n")
    stdout = io.StringIO()

    code = main([str(source)], stdin=io.StringIO("p\nq\n"), stdout=stdout)

    assert code == 0
    assert stdout.getvalue() == "4\nb\n"


def test_main_flags(tmp_path: Path) -> None:
    stdout = io.StringIO()

    main(["-v", "-p", "* "], stdin=io.StringIO("9p\nq\n"), stdout=stdout)

    assert stdout.getvalue() == "* ?\nUndefined error\n* "


def test_end_of_input_closes_text_entry_then_quits() -> None:
    interp = Interpreter(Buffer.from_lines(["alpha"]), config=InterpreterConfig())
    pending: List[str] = ["a\n", "new\n"]
    written: List[str] = []
    reads = 0

    def read_line() -> str:
        nonlocal reads
        reads += 1
        assert reads < 10, "host kept reading after end of input"
        return pending.pop(0) if pending else ""

    ConsoleHost(interp, ConsoleHooks(read_line=read_line, write=written.append)).run()

    assert interp.ended is True
    assert tuple(interp.buffer.read_range(1, 2)) == ("alpha", "new")
    assert written == ["?\n"]
    assert reads == 5


def test_end_of_input_in_text_entry_with_clean_buffer() -> None:
    host, stdout = make_host("a\n")

    assert host.run() == 0
    assert stdout.getvalue() == ""
    assert host.interpreter.ended is True
