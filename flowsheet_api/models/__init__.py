"""
Sheet graph models.
"""
from .node import Node
from .link import Link
from .graph import Graph

__all__ = ['Node', 'Link', 'Graph']
