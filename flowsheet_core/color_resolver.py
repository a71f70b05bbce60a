"""
    ColorResolver — assigns a display color to every node of a graph.

    Rules, first match wins:
        1. an explicit color other than "random" is kept
        2. the color of the first incoming link that declares one
        3. the parent's color (resolved first)
        4. a palette color picked by the node name
    A "random" color, explicit or inherited, is replaced by the palette
    color of the node name.
"""
import hashlib
from typing import Optional, Sequence, Set

from flowsheet_api.models.graph import Graph
from flowsheet_api.models.node import Node
from flowsheet_api.types import RANDOM_COLOR

# d3 schemeCategory10
CATEGORY10 = (
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
)


def palette_color(name: str, palette: Sequence[str] = CATEGORY10) -> str:
    """Same name, same color, whatever else was colored before."""
    digest = hashlib.md5(name.encode("utf-8")).digest()
    return palette[int.from_bytes(digest[:4], "big") % len(palette)]


class ColorResolver:

    def __init__(self, palette: Sequence[str] = CATEGORY10):
        self._palette = tuple(palette)

    def color_nodes(self, graph: Graph) -> Graph:
        """Mutates node colors in place and returns the graph."""
        resolved: Set[int] = set()
        for node in graph.nodes:
            self._color_node(node, resolved)
        return graph

    def _color_node(self, node: Node, resolved: Set[int]) -> None:
        if id(node) in resolved:
            return
        resolved.add(id(node))

        if node.color and node.color != RANDOM_COLOR:
            return

        if node.color != RANDOM_COLOR:
            node.color = self._inherited_color(node, resolved)

        if node.color == RANDOM_COLOR or not node.color:
            node.color = palette_color(node.name, self._palette)

    def _inherited_color(self, node: Node, resolved: Set[int]) -> Optional[str]:
        for link in node.incoming_links:
            if link.explicit_color:
                return link.explicit_color

        parent = node.parent
        if parent is None:
            return None
        self._color_node(parent, resolved)
        return parent.color
