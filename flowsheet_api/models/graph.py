"""
    Graph model - a resolved, acyclic sheet graph.
"""
from copy import deepcopy
from typing import Callable, Dict, List, Optional

from .node import Node
from .link import Link


class Graph:
    """
        Ordered list of nodes reachable from the declared nodes, plus the
        suffix that tells generated variants apart.

        The graph is fully linked when constructed. Values are computed by
        the resolver bound to it; colors are stored on the nodes.
    """

    def __init__(self, nodes: List[Node], suffix: str = "", resolver=None):
        """
        Initialize a graph.
        Args:
            nodes: Linked nodes in final order
            suffix: Variant / translation suffix (e.g. "-300", "_fi")
            resolver: Value resolver shared by every node of this graph
        """
        self.nodes: List[Node] = list(nodes)
        self.suffix = suffix
        self.resolver = resolver
        self._index: Dict[str, Node] = {node.name: node for node in self.nodes}

        for node in self.nodes:
            node.resolver = resolver

    @property
    def links(self) -> List[Link]:
        return [link for node in self.nodes for link in node.outgoing_links]

    def get_node(self, name: str) -> Optional[Node]:
        return self._index.get(name)

    def get_number_of_nodes(self) -> int:
        return len(self.nodes)

    def get_number_of_links(self) -> int:
        return sum(len(node.outgoing_links) for node in self.nodes)

    def clone(self) -> 'Graph':
        """
        Deep copy with new Node and Link instances.
        Link order on both ends of every node is preserved, so ``parent``
        is the same node (by name) in the copy.
        """
        copies: Dict[str, Node] = {node.name: node.copy_unlinked() for node in self.nodes}
        link_copies: Dict[int, Link] = {}

        for node in self.nodes:
            source = copies[node.name]
            for link in node.outgoing_links:
                new_link = Link(
                    source,
                    copies[link.target_node.name],
                    value=deepcopy(link.explicit_value),
                    color=link.explicit_color,
                    description=link.description,
                )
                link_copies[id(link)] = new_link
                source.outgoing_links.append(new_link)

        for node in self.nodes:
            copies[node.name].incoming_links = [link_copies[id(link)] for link in node.incoming_links]

        resolver = self.resolver.fork() if self.resolver is not None else None
        return Graph([copies[node.name] for node in self.nodes], self.suffix, resolver)

    def translate(self, language: str, lookup: Callable[[str], Optional[str]],
                  separator: str = "_") -> 'Graph':
        """
        Translated copy of this graph. Every node's display name becomes
        ``lookup(name)``; names without a translation are kept as they are.
        """
        translated = self.clone()
        translated.suffix = f"{self.suffix}{separator}{language}"
        for node in translated.nodes:
            display_name = lookup(node.name)
            if display_name is not None:
                node.display_name = str(display_name)
        return translated

    def __repr__(self) -> str:
        return f"Graph(suffix={self.suffix!r}, nodes={len(self.nodes)}, links={self.get_number_of_links()})"

    def to_dict(self) -> Dict:
        return {
            'suffix': self.suffix,
            'nodes': [node.to_dict() for node in self.nodes],
            'links': [link.to_dict() for link in self.links],
        }
