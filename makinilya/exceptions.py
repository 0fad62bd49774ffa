"""Makinilya exceptions."""

from typing import List, Optional
from dataclasses import dataclass


class TextSyntaxError(ValueError):
    """Raised when a scene contains a malformed placeholder.

    The whole scene is rejected; no partial expression list is produced.
    """

    def __init__(self, message: str, offset: int, line: int, column: int, excerpt: str = ""):
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column
        self.excerpt = excerpt
        super().__init__(f"[line {line}:{column}] {message}")


class ResolveError(LookupError):
    """Base class for placeholder resolution failures.

    Attributes:
        path: Full dotted variable path being resolved
        segment: Identifier at which resolution stopped
        kind: Short machine-readable error kind
    """

    kind = "unresolved"

    def __init__(self, path: str, segment: str, message: str):
        self.path = path
        self.segment = segment
        self.message = message
        # Offset of the placeholder in its scene, filled in by the interpolator
        self.offset: Optional[int] = None
        super().__init__(message)


class NotFoundError(ResolveError):
    """A path segment has no matching key in the current object."""

    kind = "not_found"


class NotIndexableError(ResolveError):
    """A non-terminal path segment resolved to a scalar."""

    kind = "not_indexable"


class NotScalarError(ResolveError):
    """The path ended on an object, which has no textual form."""

    kind = "not_scalar"


class ContextError(ValueError):
    """Raised when context data contains unsupported values."""


class ProjectError(Exception):
    """Raised when a project cannot be discovered or read."""


@dataclass
class ValidationError:
    """Single configuration validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class ConfigValidationError(Exception):
    """Raised when the project configuration fails validation.

    Carries every problem found in the file, not only the first one.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Validation error at '{error.path}': {error.message}")
            else:
                messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))


@dataclass
class AssemblyError:
    """Single scene failure recorded by the assembler.

    Attributes:
        chapter: Chapter identifier
        scene: Scene identifier
        kind: One of 'syntax', 'not_found', 'not_indexable', 'not_scalar'
        detail: Human readable message
        path: Offending variable path, or the raw marker excerpt for syntax errors
        offset: Character offset of the failing placeholder within the scene
    """
    chapter: str
    scene: str
    kind: str
    detail: str
    path: str = ""
    offset: Optional[int] = None

    def __str__(self) -> str:
        location = f"{self.chapter}/{self.scene}"
        if self.offset is not None:
            location += f"@{self.offset}"
        return f"[{self.kind}] {location}: {self.detail}"


class StoryAssemblyError(Exception):
    """Raised when one or more scenes failed to parse or resolve.

    The best-effort story is kept alongside the complete error list.
    """

    def __init__(self, errors: List[AssemblyError], story=None):
        self.errors = errors
        self.story = story
        self.exit_code = 2

        messages = [str(error) for error in errors]
        super().__init__(
            f"{len(errors)} scene error(s) during assembly:\n" + "\n".join(messages)
        )
