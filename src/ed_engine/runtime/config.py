"""Interpreter configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .telemetry import env_flag, env_value


@dataclass(slots=True)
class InterpreterConfig:
    """Session defaults a host can override.

    ``from_env`` reads the same ``ED_ENGINE_*`` namespace as telemetry:
    ``PROMPT``, ``VERBOSE``, ``SHOW_PROMPT``, ``SHELL``, ``SHELL_TIMEOUT`` and
    ``ENCODING``.
    """

    prompt: str = "*"
    verbose_errors: bool = False
    prompt_visible: bool = False
    shell: Optional[str] = None
    shell_timeout: Optional[float] = None
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "InterpreterConfig":
        timeout = env_value("SHELL_TIMEOUT")
        return cls(
            prompt=env_value("PROMPT") or "*",
            verbose_errors=env_flag("VERBOSE", False),
            prompt_visible=env_flag("SHOW_PROMPT", False),
            shell=env_value("SHELL") or None,
            shell_timeout=float(timeout) if timeout else None,
            encoding=env_value("ENCODING") or "utf-8",
        )


__all__ = ["InterpreterConfig"]
