"""QWT Exceptions

Errors raised while loading and rendering a template. Every one of them is
fatal: the CLI reports the message and exits non-zero.
"""

from __future__ import annotations


class QwtError(Exception):
    """Base exception for all QWT errors."""

    pass


class ConfigError(QwtError):
    """Raised when a config file cannot be read or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"config: {path}: {reason}")


class ShellError(QwtError):
    """Raised when a bash filter script fails to start or exits non-zero."""

    def __init__(self, stderr: str, reason: str):
        self.stderr = stderr.strip()
        self.reason = reason
        if self.stderr:
            message = f"{self.stderr}: {reason}"
        else:
            message = reason
        super().__init__(message)


class DecodeError(QwtError):
    """Raised when structured text cannot be decoded."""

    pass


class InteractionError(QwtError):
    """Raised when an interactive prompt is aborted."""

    pass


class PromptPatternError(QwtError):
    """Raised when a prompt validation pattern is not a valid regex."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"prompt: failed to compile pattern {pattern!r}: {reason}")
