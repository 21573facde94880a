"""Shared fixtures for qwt tests."""

from __future__ import annotations

import pytest


class ScriptedInteraction:
    """Interaction stand-in that answers from a script and records questions.

    An answer of None accepts the offered default. Choices are 0-based indexes.
    """

    def __init__(self, answers=(), choices=()):
        self.answers = list(answers)
        self.choices = list(choices)
        self.prompts = []
        self.selections = []

    def prompt(self, label, default=None, pattern=None):
        self.prompts.append((label, default, pattern))
        answer = self.answers.pop(0)
        return default if answer is None else answer

    def select(self, label, candidates):
        self.selections.append((label, list(candidates)))
        return candidates[self.choices.pop(0)]


@pytest.fixture
def scripted():
    """Factory for ScriptedInteraction instances."""
    return ScriptedInteraction
