"""
Scene text parser.

Turns raw scene text into an ordered list of expressions: literal text runs
and ``{{ variable.path }}`` placeholders. Grammar::

    identifier    = '_'? LETTER (LETTER | DIGIT | '_')*
    variable      = identifier ('.' identifier)*
    interpolation = '{{' WS* variable WS* '}}'
    text_content  = (any char not starting '{{')+
    document      = (interpolation | text_content)* EOF

The parser only checks syntax. Whether a path exists in the context is the
resolver's concern.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from makinilya.exceptions import TextSyntaxError


OPEN_MARKER = '{{'
CLOSE_MARKER = '}}'

IDENTIFIER = r'_?[A-Za-z][A-Za-z0-9_]*'
IDENTIFIER_PATTERN = re.compile(rf'^{IDENTIFIER}$')
INTERPOLATION_PATTERN = re.compile(
    rf'\{{\{{\s*({IDENTIFIER}(?:\.{IDENTIFIER})*)\s*\}}\}}'
)

EXCERPT_LENGTH = 40


@dataclass(frozen=True)
class TextContent:
    """Literal run of scene text, reproduced verbatim."""
    text: str
    offset: int = 0

    @property
    def source(self) -> str:
        return self.text


@dataclass(frozen=True)
class Interpolation:
    """Placeholder referencing a dotted variable path."""
    path: Tuple[str, ...]
    source: str
    offset: int = 0

    @property
    def variable(self) -> str:
        """Dotted form of the path, e.g. 'names.author.full'."""
        return '.'.join(self.path)


Expression = Union[TextContent, Interpolation]


def parse(raw_text: str) -> List[Expression]:
    """
    Parse scene text into expressions.

    Consecutive literal characters are collected into a single TextContent,
    so the result grows with the number of placeholders, not the input size.

    Args:
        raw_text: Full text of one scene

    Returns:
        Expressions in source order (empty for empty input)

    Raises:
        TextSyntaxError: On the first malformed placeholder
    """
    expressions: List[Expression] = []
    position = 0
    length = len(raw_text)

    while position < length:
        start = raw_text.find(OPEN_MARKER, position)
        if start == -1:
            expressions.append(TextContent(raw_text[position:], position))
            break

        if start > position:
            expressions.append(TextContent(raw_text[position:start], position))

        match = INTERPOLATION_PATTERN.match(raw_text, start)
        if not match:
            raise _syntax_error(raw_text, start)

        expressions.append(Interpolation(
            path=tuple(match.group(1).split('.')),
            source=match.group(0),
            offset=start
        ))
        position = match.end()

    return expressions


def variable_paths(expressions: Iterable[Expression]) -> List[str]:
    """Return the dotted path of every placeholder, in order of appearance."""
    return [expr.variable for expr in expressions if isinstance(expr, Interpolation)]


def line_column(text: str, offset: int) -> Tuple[int, int]:
    """Convert a character offset into a 1-based (line, column) pair."""
    line = text.count('\n', 0, offset) + 1
    column = offset - (text.rfind('\n', 0, offset) + 1) + 1
    return line, column


def _syntax_error(text: str, start: int) -> TextSyntaxError:
    """Build a descriptive error for the malformed marker at ``start``."""
    line, column = line_column(text, start)
    inner_start = start + len(OPEN_MARKER)
    close = text.find(CLOSE_MARKER, inner_start)
    reopen = text.find(OPEN_MARKER, inner_start)

    if close == -1 or (reopen != -1 and reopen < close):
        excerpt = text[start:start + EXCERPT_LENGTH]
        if reopen != -1:
            excerpt = text[start:reopen][:EXCERPT_LENGTH]
        return TextSyntaxError(
            "Unterminated placeholder: missing '}}'", start, line, column, excerpt.rstrip()
        )

    excerpt = text[start:close + len(CLOSE_MARKER)][:EXCERPT_LENGTH]
    inner = text[inner_start:close].strip()
    return TextSyntaxError(
        _describe_variable(inner), start, line, column, excerpt
    )


def _describe_variable(inner: str) -> str:
    if not inner:
        return "Empty placeholder: expected a variable path"

    segments = inner.split('.')
    for index, segment in enumerate(segments):
        if not segment:
            return f"Invalid variable path '{inner}': empty segment at position {index + 1}"
        if segment[0].isdigit():
            return f"Invalid variable path '{inner}': segment '{segment}' starts with a digit"
        if not IDENTIFIER_PATTERN.match(segment):
            return f"Invalid variable path '{inner}': '{segment}' is not a valid identifier"

    # Every segment is valid, so the marker itself must be malformed (e.g. '{{{')
    return f"Invalid placeholder '{inner}'"
