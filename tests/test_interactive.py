"""Tests for the rich-backed interaction provider."""

import io
import re

import pytest
from rich.console import Console

from qwt.exceptions import InteractionError, PromptPatternError
from qwt.interactive import Interaction, compile_pattern


def make_interaction(answers: str):
    out = io.StringIO()
    console = Console(file=out, force_terminal=False, width=120)
    return Interaction(console=console, stream=io.StringIO(answers)), out


def test_prompt_accepts_default():
    interaction, _ = make_interaction("\n")
    assert interaction.prompt("Name", default="alice") == "alice"


def test_prompt_typed_value():
    interaction, out = make_interaction("bob\n")
    assert interaction.prompt("Name", default="alice") == "bob"
    assert "Name" in out.getvalue()
    assert "alice" in out.getvalue()


def test_prompt_retries_until_pattern_matches():
    interaction, out = make_interaction("Bob\nb0b\nbob\n")
    pattern = re.compile(r"^[a-z]+$")

    assert interaction.prompt("Name", pattern=pattern) == "bob"
    assert out.getvalue().count("invalid value (required pattern: ^[a-z]+$)") == 2


def test_prompt_default_not_matching_pattern_is_not_offered():
    interaction, _ = make_interaction("\nbob\n")
    pattern = re.compile(r"^[a-z]+$")

    # The empty answer is rejected instead of falling back to "ALICE".
    assert interaction.prompt("Name", default="ALICE", pattern=pattern) == "bob"


def test_prompt_end_of_input():
    interaction, _ = make_interaction("")
    with pytest.raises(InteractionError):
        interaction.prompt("Name", default="alice")


def test_prompt_end_of_input_after_invalid_answers():
    interaction, _ = make_interaction("NOPE\n")
    with pytest.raises(InteractionError):
        interaction.prompt("Name", pattern=re.compile(r"^[a-z]+$"))


def test_select_returns_candidate_itself():
    candidates = [{"n": 10}, {"n": 20}, {"n": 30}]
    interaction, out = make_interaction("2\n")

    chosen = interaction.select("Pick", candidates)

    assert chosen is candidates[1]
    text = out.getvalue()
    assert text.index("{'n': 10}") < text.index("{'n': 20}") < text.index("{'n': 30}")


def test_select_defaults_to_first():
    interaction, _ = make_interaction("\n")
    assert interaction.select("Pick", [10, 20, 30]) == 10


def test_select_retries_out_of_range():
    interaction, _ = make_interaction("7\nx\n3\n")
    assert interaction.select("Pick", ["a", "b", "c"]) == "c"


def test_select_without_candidates():
    interaction, _ = make_interaction("1\n")
    with pytest.raises(InteractionError):
        interaction.select("Pick", [])


def test_select_end_of_input():
    interaction, _ = make_interaction("")
    with pytest.raises(InteractionError):
        interaction.select("Pick", [1, 2])


def test_compile_pattern():
    assert compile_pattern(r"^\d+$").search("123")


def test_compile_pattern_invalid():
    with pytest.raises(PromptPatternError) as excinfo:
        compile_pattern("[")

    assert excinfo.value.pattern == "["
    assert "failed to compile pattern" in str(excinfo.value)
