"""
Placeholder resolution against a context tree.
Handles {{ a.b.c }} lookups: walk, scalar conversion and error reporting.
"""

import math
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from makinilya.context import Context
from makinilya.exceptions import (
    NotFoundError,
    NotIndexableError,
    NotScalarError,
    ResolveError,
)
from makinilya.text.parser import Expression, Interpolation


VariablePath = Union[str, Sequence[str]]


def _split_path(path: VariablePath) -> Tuple[str, ...]:
    if isinstance(path, str):
        return tuple(path.split('.'))
    return tuple(path)


def _root_mapping(root: Union[Context, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(root, Context):
        return root.variables
    return Context.from_mapping(root).variables


def format_value(value: Any) -> str:
    """
    Convert a scalar context value to its textual form.

    Booleans print as 'true'/'false'. Integral finite floats print without a
    fractional part; other floats use repr, the shortest round-trip form.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, int):
        return str(value)
    elif isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    elif isinstance(value, str):
        return value
    else:
        raise TypeError(f"Unsupported context value type: {type(value).__name__}")


def resolve(path: VariablePath, root: Union[Context, Mapping[str, Any]]) -> str:
    """
    Resolve a variable path to text.

    Args:
        path: Dotted string or sequence of identifiers
        root: Context (or plain mapping) to start from

    Returns:
        Textual representation of the scalar at the end of the path

    Raises:
        NotFoundError: A segment is missing from the current object
        NotIndexableError: A non-terminal segment is a scalar
        NotScalarError: The path ends on an object
        ContextError: If a plain mapping root holds unsupported values
    """
    parts = _split_path(path)
    dotted = '.'.join(parts)
    if not parts or not all(parts):
        raise ValueError(f"Invalid variable path: '{dotted}'")

    current: Any = _root_mapping(root)
    walked: List[str] = []
    for part in parts:
        if not isinstance(current, Mapping):
            raise NotIndexableError(
                dotted, part,
                f"Cannot resolve '{dotted}': '{'.'.join(walked)}' is a "
                f"{_kind(current)}, not an object"
            )
        if part not in current:
            location = '.'.join(walked) or '<root>'
            raise NotFoundError(
                dotted, part,
                f"Cannot resolve '{dotted}': no key '{part}' in '{location}'"
            )
        current = current[part]
        walked.append(part)

    if isinstance(current, Mapping):
        raise NotScalarError(
            dotted, parts[-1],
            f"Cannot resolve '{dotted}': value is an object, not a scalar"
        )

    return format_value(current)


def resolve_safe(
    path: VariablePath,
    root: Union[Context, Mapping[str, Any]]
) -> Tuple[bool, Optional[str], Optional[ResolveError]]:
    """
    Resolve a path without raising on resolution failures.

    Returns:
        (success, text, error) tuple
    """
    try:
        return True, resolve(path, root), None
    except ResolveError as e:
        return False, None, e


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return type(value).__name__


class ContextResolver:
    """
    Resolves the placeholders of parsed scenes against one context.

    The context is never modified, so one resolver may be shared by several
    threads.
    """

    def __init__(self, context: Union[Context, Mapping[str, Any]]):
        """
        Initialize resolver.

        Args:
            context: Root of the context tree; plain mappings are validated

        Raises:
            ContextError: If a plain mapping holds unsupported values
        """
        if not isinstance(context, Context):
            context = Context.from_mapping(context)
        self.context = context

    def resolve(self, path: VariablePath) -> str:
        """Resolve a single path; see module-level ``resolve``."""
        return resolve(path, self.context)

    def interpolate(self, expressions: Sequence[Expression]) -> Tuple[str, List[ResolveError]]:
        """
        Splice resolved values into a parsed scene.

        Resolution continues past failures. A placeholder that cannot be
        resolved keeps its original marker text in the output.

        Args:
            expressions: Parser output for one scene

        Returns:
            (text, errors) where errors lists every failing placeholder in order
        """
        pieces: List[str] = []
        errors: List[ResolveError] = []

        for expression in expressions:
            if isinstance(expression, Interpolation):
                try:
                    pieces.append(resolve(expression.path, self.context))
                except ResolveError as e:
                    e.offset = expression.offset
                    errors.append(e)
                    pieces.append(expression.source)
            else:
                pieces.append(expression.text)

        return ''.join(pieces), errors
