"""
Plugin contracts — abstract base classes for sheet parser and value plugins.
"""
from .base import SheetParserPlugin, ValuePlugin

__all__ = ['SheetParserPlugin', 'ValuePlugin']
