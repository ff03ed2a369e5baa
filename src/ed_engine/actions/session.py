"""Commands that only touch session state: errors, prompt, marks, quitting."""

from __future__ import annotations

from ed_engine.commands.models import Invocation
from ed_engine.errors import UNDEFINED_ERROR, ArgumentError, ModifiedBufferWarning
from ed_engine.modes.base_mode import ModeContext, ModeResult
from ed_engine.session import QuitState


def show_error(context: ModeContext, invocation: Invocation) -> ModeResult:
    del invocation
    session = context.session
    if not session.verbose_errors:
        return ModeResult(status="help", output=("?",))
    output = (session.last_error,) if session.last_error else ()
    return ModeResult(status="help", output=output)


def toggle_verbose(context: ModeContext, invocation: Invocation) -> ModeResult:
    context.session.verbose_errors = not context.session.verbose_errors
    return show_error(context, invocation)


def toggle_prompt(context: ModeContext, invocation: Invocation) -> ModeResult:
    del invocation
    context.session.prompt_visible = not context.session.prompt_visible
    return ModeResult(status="prompt")


def set_mark(context: ModeContext, invocation: Invocation) -> ModeResult:
    if len(invocation.args) != 1:
        raise ArgumentError(UNDEFINED_ERROR)
    context.session.set_mark(invocation.args, invocation.start)
    return ModeResult(status="mark")


def show_filename(context: ModeContext, invocation: Invocation) -> ModeResult:
    del invocation
    path = context.buffer.file_path()
    return ModeResult(status="filename", output=(path,) if path else ())


def quit_session(context: ModeContext, invocation: Invocation) -> ModeResult:
    """Quit unless unsaved changes exist and no quit was refused yet."""

    del invocation
    session = context.session
    if session.quit_state is QuitState.PENDING_QUIT or not context.buffer.is_modified():
        session.quit_state = QuitState.CLEAN
        return ModeResult(status="quit", ended=True)
    session.quit_state = QuitState.PENDING_QUIT
    raise ModifiedBufferWarning()


def quit_unconditionally(context: ModeContext, invocation: Invocation) -> ModeResult:
    del invocation
    context.session.quit_state = QuitState.CLEAN
    return ModeResult(status="quit_force", ended=True)


__all__ = [
    "quit_session",
    "quit_unconditionally",
    "set_mark",
    "show_error",
    "show_filename",
    "toggle_prompt",
    "toggle_verbose",
]
