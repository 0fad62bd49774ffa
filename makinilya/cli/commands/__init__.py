"""CLI command handlers."""

from .build import build_manuscript
from .check import check_manuscript
from .new import new_project

__all__ = ['build_manuscript', 'check_manuscript', 'new_project']
