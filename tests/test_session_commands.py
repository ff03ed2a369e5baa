from __future__ import annotations

from ed_engine.actions.core import escape_line
from ed_engine.buffer import Buffer
from ed_engine.interpreter import Interpreter
from ed_engine.runtime import InterpreterConfig
from ed_engine.session import QuitState, SessionMode


def make_interpreter(*lines: str, path: str | None = None) -> Interpreter:
    buffer = Buffer.from_lines(lines or ("alpha", "beta", "gamma"), path=path)
    return Interpreter(buffer, config=InterpreterConfig())


def test_quit_clean_buffer_ends_session() -> None:
    interp = make_interpreter()

    output = interp.submit_line("q")

    assert output.kind == "ended"
    assert interp.ended is True
    assert interp.submit_line("1p").kind == "ended"


def test_quit_modified_buffer_warns_once() -> None:
    interp = make_interpreter()
    interp.submit_line("1d")

    first = interp.submit_line("q")
    assert first.kind == "error"
    assert first.lines == ("?",)
    assert interp.session.quit_state is QuitState.PENDING_QUIT
    assert interp.session.last_error == "buffer modified"

    assert interp.submit_line("q").kind == "ended"


def test_pending_quit_survives_other_commands() -> None:
    interp = make_interpreter()
    interp.submit_line("1d")
    interp.submit_line("q")

    interp.submit_line("1p")

    assert interp.submit_line("q").kind == "ended"


def test_unconditional_quit() -> None:
    interp = make_interpreter()
    interp.submit_line("1d")

    assert interp.submit_line("Q").kind == "ended"


def test_help_is_terse_until_verbose() -> None:
    interp = make_interpreter()
    interp.submit_line("9p")

    assert interp.submit_line("h").lines == ("?",)
    assert interp.submit_line("H").lines == ("Undefined error",)
    assert interp.submit_line("9p").lines == ("?", "Undefined error")
    assert interp.submit_line("H").lines == ("?",)
    assert interp.submit_line("9p").lines == ("?",)


def test_verbose_toggle_without_error_is_silent() -> None:
    interp = make_interpreter()

    assert interp.submit_line("H").kind == "none"
    assert interp.session.verbose_errors is True


def test_prompt_toggle() -> None:
    interp = make_interpreter()
    assert interp.prompt == ""

    interp.submit_line("P")
    assert interp.prompt == "*"

    interp.submit_line("a")
    assert interp.mode is SessionMode.AWAITING_TEXT
    assert interp.prompt == ""


def test_marks_store_line_numbers() -> None:
    interp = make_interpreter()

    interp.submit_line("2ka")

    assert interp.session.mark("a") == 2
    assert interp.submit_line("'ap").lines == ("beta",)
    assert interp.submit_line("'a,$p").lines == ("beta", "gamma")


def test_marks_do_not_follow_edits() -> None:
    interp = make_interpreter()
    interp.submit_line("2ka")

    interp.submit_line("1d")

    assert interp.submit_line("'ap").lines == ("gamma",)


def test_mark_requires_one_character() -> None:
    interp = make_interpreter()

    assert interp.submit_line("k").kind == "error"
    assert interp.submit_line("kab").kind == "error"
    assert interp.submit_line("'zp").kind == "error"


def test_filename_reports_path() -> None:
    assert make_interpreter(path="notes.txt").submit_line("f").lines == ("notes.txt",)
    assert make_interpreter().submit_line("f").kind == "none"


def test_comment_does_nothing() -> None:
    interp = make_interpreter()

    assert interp.submit_line("# a note").kind == "none"
    assert interp.buffer.current_line() == 1


def test_list_escapes_lines() -> None:
    interp = make_interpreter("a\tb$", "plain")

    assert interp.submit_line("%l").lines == ("a\\tb\\$$", "plain$")


def test_escape_line_octal_for_control_characters() -> None:
    assert escape_line("\x01x\\") == "\\001x\\\\$"
