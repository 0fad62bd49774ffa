"""
Variable resolution module.
Resolves dotted placeholder paths against the context tree.
"""

from .resolver import ContextResolver, format_value, resolve, resolve_safe

__all__ = ['ContextResolver', 'format_value', 'resolve', 'resolve_safe']
