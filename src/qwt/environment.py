"""Template environment and file rendering for qwt."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import BaseLoader, Environment, FileSystemLoader, StrictUndefined, Template

from qwt.config import RenderConfig
from qwt.extensions import register_extensions
from qwt.interactive import Interaction

logger = logging.getLogger(__name__)


def create_environment(
    config: Optional[RenderConfig] = None,
    interaction: Optional[Interaction] = None,
    loader: Optional[BaseLoader] = None,
) -> Environment:
    """Create a Jinja2 Environment with the qwt filters and tags.

    Args:
        config: Render settings. Defaults to RenderConfig().
        interaction: Input provider for prompt and choose. Defaults to a
            rich prompt on stdin/stderr.
        loader: Loader used by include/import/extends.

    Returns:
        Configured Jinja2 Environment.
    """
    config = config or RenderConfig()
    interaction = interaction or Interaction()

    env = Environment(
        loader=loader,
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=config.keep_trailing_newline,
    )
    register_extensions(env, interaction, config)
    return env


def load_template(env: Environment, source: str, filename: Optional[str] = None) -> Template:
    """Parse and compile a template.

    Syntax errors, including malformed prompt patterns, are raised here as
    jinja2.TemplateSyntaxError before anything is rendered.
    """
    name = Path(filename).name if filename else None
    code = env.compile(source, name=name, filename=filename)
    return env.template_class.from_code(env, code, env.make_globals(None))


def render_string(
    source: str,
    context: Optional[dict[str, Any]] = None,
    config: Optional[RenderConfig] = None,
    interaction: Optional[Interaction] = None,
) -> str:
    """Render template source text."""
    env = create_environment(config=config, interaction=interaction)
    template = load_template(env, source)
    return template.render(context or {})


def render_file(
    path: Path,
    config: Optional[RenderConfig] = None,
    interaction: Optional[Interaction] = None,
) -> str:
    """Render a template file.

    include/import/extends are resolved relative to the file's directory.
    """
    source = path.read_text(encoding="utf-8")
    env = create_environment(
        config=config,
        interaction=interaction,
        loader=FileSystemLoader(str(path.parent)),
    )
    template = load_template(env, source, filename=str(path))
    logger.info("Rendering %s", path)
    return template.render()
