"""UI-agnostic ed-style line editing interpreter."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "commands",
    "errors",
    "interpreter",
    "modes",
    "parsing",
    "runtime",
    "session",
]

__version__ = "0.1.0"
