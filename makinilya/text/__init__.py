"""
Scene text module.
Parses placeholder markup into literal text and variable expressions.
"""

from .parser import Expression, Interpolation, TextContent, parse, variable_paths

__all__ = ['Expression', 'Interpolation', 'TextContent', 'parse', 'variable_paths']
