"""QWT - template rendering with shell, prompt and YAML extensions."""

from qwt._version import __version__
from qwt.config import RenderConfig, load_config
from qwt.environment import create_environment, load_template, render_file, render_string
from qwt.exceptions import (
    ConfigError,
    DecodeError,
    InteractionError,
    PromptPatternError,
    QwtError,
    ShellError,
)
from qwt.interactive import Interaction
from qwt.shell import run_script

__all__ = [
    "__version__",
    "RenderConfig",
    "load_config",
    "create_environment",
    "load_template",
    "render_file",
    "render_string",
    "ConfigError",
    "DecodeError",
    "InteractionError",
    "PromptPatternError",
    "QwtError",
    "ShellError",
    "Interaction",
    "run_script",
]
