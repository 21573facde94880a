"""Interactive value collection for prompt and choose.

Both operations block the render until the operator answers. Questions are
printed on stderr so that a document rendered to stdout is not mixed with
prompt text.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Sequence, TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, InvalidResponse, Prompt

from qwt.exceptions import InteractionError, PromptPatternError

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a validation pattern, raising PromptPatternError if malformed."""
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PromptPatternError(pattern, str(e)) from e


class _EndOfInputMixin:
    """Treat an exhausted input stream as an aborted interaction.

    rich returns an empty string when a stream hits EOF, which would silently
    accept the default. Stdin raises EOFError on its own. Lines read from a
    stream keep their newline, so it is dropped to let an empty line accept
    the default as it does on a terminal.
    """

    @classmethod
    def get_input(cls, console, prompt, password, stream=None) -> str:
        value = super().get_input(console, prompt, password, stream=stream)  # type: ignore[misc]
        if stream is not None:
            if value == "":
                raise EOFError
            value = value.rstrip("\r\n")
        return value


class PatternPrompt(_EndOfInputMixin, Prompt):
    """Text prompt that re-asks until the answer matches a regex."""

    def __init__(self, *args: Any, pattern: Optional[re.Pattern[str]] = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.pattern = pattern

    def process_response(self, value: str) -> str:
        value = super().process_response(value)
        if self.pattern is not None and not self.pattern.search(value):
            raise InvalidResponse(
                f"[prompt.invalid]invalid value (required pattern: {escape(self.pattern.pattern)})"
            )
        return value


class IndexPrompt(_EndOfInputMixin, IntPrompt):
    """1-based index prompt used by select."""

    pass


class Interaction:
    """Operator-facing input provider backed by rich prompts.

    Args:
        console: Console to print questions on. Defaults to a stderr console.
        stream: Optional stream to read answers from instead of stdin.
    """

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        self.console = console or Console(stderr=True)
        self.stream = stream

    def prompt(
        self,
        label: str,
        default: Optional[str] = None,
        pattern: Optional[re.Pattern[str]] = None,
    ) -> str:
        """Ask for a single line of text.

        An empty answer accepts ``default``. With ``pattern``, answers that do
        not match are rejected and asked for again. A default that does not
        match the pattern is not offered.
        """
        if default is not None and pattern is not None and not pattern.search(default):
            logger.debug("Default %r does not match %s, not offering it", default, pattern.pattern)
            default = None

        question = PatternPrompt(escape(label), console=self.console, pattern=pattern)
        try:
            if default is None:
                return question(stream=self.stream)
            return question(default=default, stream=self.stream)
        except (EOFError, KeyboardInterrupt) as e:
            raise InteractionError(f"prompt: {label}: input aborted") from e

    def select(self, label: str, candidates: Sequence[Any]) -> Any:
        """Ask the operator to pick one candidate and return it.

        Candidates are listed in their given order. The returned object is the
        candidate itself, not a copy or a re-evaluation of it.
        """
        items = list(candidates)
        if not items:
            raise InteractionError(f"select: {label}: no candidates to choose from")

        for i, item in enumerate(items, start=1):
            self.console.print(f"  [bold]{i}[/bold]) {escape(str(item))}", highlight=False)

        question = IndexPrompt(
            escape(label),
            console=self.console,
            choices=[str(i) for i in range(1, len(items) + 1)],
        )
        try:
            index = question(default=1, stream=self.stream)
        except (EOFError, KeyboardInterrupt) as e:
            raise InteractionError(f"select: {label}: input aborted") from e

        return items[index - 1]
