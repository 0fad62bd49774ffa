"""
Context model for scene interpolation.

The context is a free-form tree of values authored by the writer, usually in
``Context.yaml``. Interior nodes are mappings, leaves are strings, numbers or
booleans. Once built, the tree is read-only.

Example ``Context.yaml``::

    names:
      author:
        first: Mark
        full: Mark Lopez
"""

import json
import logging
import re
import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

import yaml

from makinilya.exceptions import ContextError


logger = logging.getLogger(__name__)


class PreservingLoader(yaml.SafeLoader):
    """YAML loader that keeps words like 'yes', 'no', 'on', 'off' as strings.

    Only true/false (in any of the usual casings) load as booleans, so prose
    values such as ``answer: no`` reach the story unchanged.
    """
    pass


BOOL_TAG = 'tag:yaml.org,2002:bool'

PreservingLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
PreservingLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF')
)

SCALAR_TYPES = (str, bool, int, float)


class Context:
    """Immutable root of a context tree."""

    def __init__(self, variables: Mapping[str, Any]):
        """
        Initialize context from an already validated, frozen mapping.

        Use ``Context.from_mapping`` for untrusted data.
        """
        self._variables = variables

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'Context':
        """
        Validate and freeze a plain mapping.

        Args:
            data: Nested mapping of str keys to scalars or mappings

        Returns:
            Context wrapping a read-only copy of the data

        Raises:
            ContextError: If a key is not a string or a value is unsupported
        """
        if not isinstance(data, Mapping):
            raise ContextError(
                f"Context root must be a mapping, got {type(data).__name__}"
            )
        return cls(_freeze(data, ""))

    @property
    def variables(self) -> Mapping[str, Any]:
        """Read-only root mapping."""
        return self._variables

    def __contains__(self, key: str) -> bool:
        return key in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"Context({dict(self._variables)!r})"


def _freeze(data: Mapping[str, Any], prefix: str) -> Mapping[str, Any]:
    frozen: Dict[str, Any] = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise ContextError(
                f"Context keys must be strings, got {type(key).__name__} at '{prefix or '<root>'}'"
            )
        location = f"{prefix}.{key}" if prefix else key

        if isinstance(value, Mapping):
            frozen[key] = _freeze(value, location)
        elif isinstance(value, SCALAR_TYPES):
            frozen[key] = value
        else:
            raise ContextError(
                f"Unsupported context value at '{location}': "
                f"{type(value).__name__} (only strings, numbers, booleans and tables are allowed)"
            )
    return MappingProxyType(frozen)


def load_context(path: Union[str, Path]) -> Context:
    """
    Load a context file, choosing the parser from the file suffix.

    Supported: ``.yaml``/``.yml`` (PyYAML safe loader), ``.json``, ``.toml``.

    Raises:
        FileNotFoundError: If the file does not exist
        ContextError: If the file cannot be parsed or holds unsupported values
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Context file not found: {path}")

    suffix = path.suffix.lower()
    logger.debug(f"Loading context from {path}")

    try:
        if suffix in ('.yaml', '.yml'):
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.load(f, Loader=PreservingLoader)
            if data is None:
                data = {}
        elif suffix == '.json':
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        elif suffix == '.toml':
            with open(path, 'rb') as f:
                data = tomllib.load(f)
        else:
            raise ContextError(f"Unsupported context file type '{suffix}': {path}")
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ContextError(f"Failed to parse context file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ContextError(
            f"Context file must contain a mapping at the top level, got {type(data).__name__}"
        )

    return Context.from_mapping(data)
