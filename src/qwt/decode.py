"""YAML decoding and encoding for the yaml and to_yaml filters."""

from __future__ import annotations

from typing import Any

import yaml

from qwt.exceptions import DecodeError


def decode(text: str) -> Any:
    """Decode YAML text into plain Python values.

    Returns scalars, lists and dicts. Empty input decodes to None.

    Raises:
        DecodeError: If the text is not valid YAML.
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DecodeError(f"yaml: failed to decode: {e}") from e


def encode(value: Any) -> str:
    """Encode a value as YAML text, keeping mapping key order."""
    try:
        return yaml.safe_dump(value, sort_keys=False, allow_unicode=True)
    except yaml.YAMLError as e:
        raise DecodeError(f"yaml: failed to encode: {e}") from e
