"""Jinja2 extensions for QWT templates.

Two shapes of extension are bound into an environment:

* value filters, used inside expressions and substituting their result:

      {{ "hello" | bash("tr a-z A-Z") }}
      {{ "^[a-z]+$" | prompt("Your name", "alice") }}
      {{ ["dev", "prod"] | choose("Target") }}
      {{ "a: 1" | yaml }}

* statement tags, which assign to the render context and print nothing:

      {% prompt name = "alice" label "Your name" validate "^[a-z]+$" %}
      {% choose target = "dev", "staging", "prod" label "Deploy to" %}

The filter is called ``choose`` rather than ``select`` because ``select`` is a
built-in Jinja2 filter.

Tags assign with Jinja2 scoping rules: a value assigned inside a
``{% for %}`` loop is not visible after the loop. Collect it into a
``namespace()`` object when it is needed later:

      {% set ns = namespace(name="") %}
      {% for i in [1] %}{% prompt v = "" %}{% set ns.name = v %}{% endfor %}
      {{ ns.name }}
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence, Union

from jinja2 import nodes, pass_environment
from jinja2.exceptions import TemplateSyntaxError
from jinja2.ext import Extension
from jinja2.lexer import Token, TokenStream, describe_token

from qwt.config import RenderConfig
from qwt.decode import decode, encode
from qwt.exceptions import PromptPatternError
from qwt.interactive import Interaction, compile_pattern
from qwt.shell import run_script

logger = logging.getLogger(__name__)


class ExtensionKind(enum.Enum):
    VALUE_FILTER = "filter"
    STATEMENT_TAG = "tag"


@dataclass(frozen=True)
class ExtensionDefinition:
    """A named extension and the handler bound for it.

    Value filters carry a filter function, statement tags an Extension class.
    """

    name: str
    kind: ExtensionKind
    handler: Union[Callable[..., Any], type[Extension]]


@dataclass(frozen=True)
class PromptStatement:
    """Parsed ``{% prompt %}`` tag: target variable and its validation pattern."""

    target: str
    pattern: Optional[re.Pattern[str]] = None


@dataclass(frozen=True)
class ChoiceStatement:
    """Parsed ``{% choose %}`` tag."""

    target: str
    size: int


def _optional_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


# -----------------------------------------------------------------------------
# Value filters
# -----------------------------------------------------------------------------


@pass_environment
def bash_filter(environment, value: Any, script: Any) -> str:
    """Pipe ``value`` through a bash script and return its stdout.

    ``script`` is either the script text or a callable (such as a macro)
    that builds it from the input.
    """
    config: RenderConfig = environment.render_config
    return run_script(
        script, str(value), shell=config.shell, options=config.shell_options
    )


@pass_environment
def prompt_filter(environment, pattern: Any, label: Any, default: Any = "") -> str:
    """Ask the operator for a value matching ``pattern``."""
    regex = compile_pattern(str(pattern))
    interaction: Interaction = environment.interaction
    return interaction.prompt(str(label), _optional_text(default), regex)


@pass_environment
def choose_filter(environment, candidates: Any, label: Any = "") -> Any:
    """Ask the operator to pick one of ``candidates``."""
    if isinstance(candidates, (str, bytes)) or not isinstance(candidates, Sequence):
        raise TypeError(
            f"choose: expected a list of candidates, got {type(candidates).__name__}"
        )
    interaction: Interaction = environment.interaction
    return interaction.select(str(label), candidates)


def yaml_filter(value: Any) -> Any:
    """Decode YAML text."""
    return decode(str(value))


def to_yaml_filter(value: Any) -> str:
    """Encode a value as YAML text."""
    return encode(value)


# -----------------------------------------------------------------------------
# Statement tags
# -----------------------------------------------------------------------------


class PromptExtension(Extension):
    """Extension for ``{% prompt name = default [label expr] [validate "re"] %}``.

    The default expression is evaluated against the render context when the
    tag is reached, offered to the operator, and the answer assigned to
    ``name``. The validation pattern must be a string literal; it is compiled
    while the template is parsed so a bad pattern fails before rendering.

    Literal patterns piped into the ``prompt`` filter are checked at parse
    time as well.
    """

    tags = {"prompt"}

    def __init__(self, environment):
        super().__init__(environment)
        self.statements: list[PromptStatement] = []

    def filter_stream(self, stream: TokenStream) -> Iterator[Token]:
        """Compile literal patterns of ``"..." | prompt(...)`` as they are lexed.

        Adjacent string literals are joined the way the parser joins them.
        """
        strings: list[Token] = []
        piped: list[Token] = []
        for token in stream:
            if piped and token.test("name:prompt"):
                pattern = "".join(t.value for t in piped)
                try:
                    compile_pattern(pattern)
                except PromptPatternError as e:
                    raise TemplateSyntaxError(
                        str(e), piped[0].lineno, stream.name, stream.filename
                    ) from e

            if token.type == "string":
                strings.append(token)
                piped = []
            elif token.type == "pipe" and strings:
                piped, strings = strings, []
            else:
                strings, piped = [], []
            yield token

    def parse(self, parser):
        """Parse the ``{% prompt %}`` tag into an assignment."""
        lineno = next(parser.stream).lineno

        target = parser.parse_assign_target(name_only=True)
        parser.stream.expect("assign")
        default = parser.parse_expression()

        label: nodes.Expr = nodes.Const(target.name)
        pattern: Optional[re.Pattern[str]] = None

        while parser.stream.current.type != "block_end":
            if parser.stream.skip_if("name:label"):
                label = parser.parse_expression()
            elif parser.stream.current.test("name:validate"):
                next(parser.stream)
                token = parser.stream.expect("string")
                try:
                    pattern = compile_pattern(token.value)
                except PromptPatternError as e:
                    parser.fail(str(e), token.lineno)
            else:
                parser.fail(
                    f"unexpected {describe_token(parser.stream.current)!r} in prompt tag",
                    parser.stream.current.lineno,
                )

        self.statements.append(PromptStatement(target=target.name, pattern=pattern))
        index = len(self.statements) - 1

        call = self.call_method("_run_prompt", [nodes.Const(index), label, default])
        return nodes.Assign(target, call).set_lineno(lineno)

    def _run_prompt(self, index: int, label: Any, default: Any) -> str:
        """Called at render time with the evaluated label and default."""
        statement = self.statements[index]
        logger.debug("Prompting for %s", statement.target)
        interaction: Interaction = self.environment.interaction  # type: ignore[attr-defined]
        return interaction.prompt(str(label), _optional_text(default), statement.pattern)


class ChooseExtension(Extension):
    """Extension for ``{% choose name = expr1, expr2, ... [label expr] %}``.

    Every candidate is evaluated once, in order, when the tag is reached.
    The candidate the operator picks is assigned to ``name`` as is.
    """

    tags = {"choose"}

    def __init__(self, environment):
        super().__init__(environment)
        self.statements: list[ChoiceStatement] = []

    def parse(self, parser):
        """Parse the ``{% choose %}`` tag into an assignment."""
        lineno = next(parser.stream).lineno

        target = parser.parse_assign_target(name_only=True)
        parser.stream.expect("assign")

        candidates = [parser.parse_expression()]
        while parser.stream.skip_if("comma"):
            candidates.append(parser.parse_expression())

        label: nodes.Expr = nodes.Const(target.name)
        if parser.stream.skip_if("name:label"):
            label = parser.parse_expression()

        self.statements.append(ChoiceStatement(target=target.name, size=len(candidates)))
        index = len(self.statements) - 1

        call = self.call_method(
            "_run_choose",
            [nodes.Const(index), label, nodes.List(candidates).set_lineno(lineno)],
        )
        return nodes.Assign(target, call).set_lineno(lineno)

    def _run_choose(self, index: int, label: Any, candidates: list) -> Any:
        """Called at render time with the label and the evaluated candidates."""
        statement = self.statements[index]
        logger.debug(
            "Choosing %s from %d candidates", statement.target, statement.size
        )
        interaction: Interaction = self.environment.interaction  # type: ignore[attr-defined]
        return interaction.select(str(label), candidates)


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


EXTENSIONS: tuple[ExtensionDefinition, ...] = (
    ExtensionDefinition("bash", ExtensionKind.VALUE_FILTER, bash_filter),
    ExtensionDefinition("prompt", ExtensionKind.VALUE_FILTER, prompt_filter),
    ExtensionDefinition("choose", ExtensionKind.VALUE_FILTER, choose_filter),
    ExtensionDefinition("yaml", ExtensionKind.VALUE_FILTER, yaml_filter),
    ExtensionDefinition("to_yaml", ExtensionKind.VALUE_FILTER, to_yaml_filter),
    ExtensionDefinition("prompt", ExtensionKind.STATEMENT_TAG, PromptExtension),
    ExtensionDefinition("choose", ExtensionKind.STATEMENT_TAG, ChooseExtension),
)


def register_extensions(
    environment,
    interaction: Interaction,
    config: RenderConfig,
    extensions: Sequence[ExtensionDefinition] = EXTENSIONS,
) -> None:
    """Bind extensions into a Jinja2 environment.

    The interaction provider and config are stored on the environment so
    filters and tags of that environment, and only that one, share them.
    """
    environment.extend(interaction=interaction, render_config=config)

    for ext in extensions:
        if ext.kind is ExtensionKind.VALUE_FILTER:
            environment.filters[ext.name] = ext.handler
        elif ext.kind is ExtensionKind.STATEMENT_TAG:
            environment.add_extension(ext.handler)
        else:
            raise ValueError(f"Unknown extension kind: {ext.kind}")
