"""
Flowsheet API — models, value expressions, errors and plugin contracts.
"""
from .types import ValueKind, ValueExpression
from .exceptions import SheetError, StructuralError, PluginReferenceError, LoadError
from .models.node import Node
from .models.link import Link
from .models.graph import Graph
from .plugins.base import SheetParserPlugin, ValuePlugin

__all__ = [
    'ValueKind',
    'ValueExpression',
    'SheetError',
    'StructuralError',
    'PluginReferenceError',
    'LoadError',
    'Node',
    'Link',
    'Graph',
    'SheetParserPlugin',
    'ValuePlugin',
]
