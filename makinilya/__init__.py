"""Makinilya: an austere manuscript generator."""

__version__ = "0.1.0"
