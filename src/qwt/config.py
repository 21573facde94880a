"""Render configuration for qwt.

Settings can be supplied as a YAML file via ``qwt -c config.yaml``:

    shell: bash
    shell_options: set -euo pipefail
    trim_blocks: true
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from qwt.exceptions import ConfigError


class RenderConfig(BaseModel):
    """Options for the template environment and the bash filter."""

    model_config = {"extra": "forbid"}

    shell: str = Field(default="bash", description="Shell used by the bash filter")
    shell_options: str = Field(
        default="set -euo pipefail",
        description="Prelude prepended to every bash filter script",
    )
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True


def load_config(path: Path | None = None) -> RenderConfig:
    """Load a RenderConfig from a YAML file, or the defaults if path is None."""
    if path is None:
        return RenderConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(str(path), e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"invalid yaml: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected a mapping at top level")

    try:
        return RenderConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(path), str(e)) from e
