"""
    Node model - a named stock in the flow network.
"""
from copy import deepcopy
from typing import Any, Dict, List, Optional


class Node:
    """
    A node of a sheet graph.

    ``name`` is the key used by links and lookups and never changes.
    ``display_name`` is what gets shown; translations change only this.
    Incoming and outgoing links are filled in once, by the graph builder.
    """

    def __init__(
            self,
            name: Any,
            description: Optional[str] = None,
            color: Optional[str] = None,
            value: Any = None,
            links: Optional[List[Dict[str, Any]]] = None,
            **attributes
    ):
        """
        Initialize a node from a raw declaration.

        Args:
            name: Unique name of the node (will be converted to str)
            description: Optional free text
            color: Explicit color, "random" or None
            value: Declared value expression
            links: Raw link declarations ({to, value, color, description})
            **attributes: Any other keys found in the declaration
        """
        # Ensure name is always a string so YAML numbers can be node names
        self.name = str(name)
        self.display_name = self.name
        self.description = description
        self.color = color
        self.explicit_value = value
        self.original_links: List[Dict[str, Any]] = list(links or [])
        self.attributes: Dict[str, Any] = dict(attributes)

        # set by the graph builder
        self.incoming_links: List['Link'] = []
        self.outgoing_links: List['Link'] = []
        self.resolver = None

    def add_links(self, links: List[Dict[str, Any]]) -> None:
        self.original_links.extend(links)

    @property
    def parent(self) -> Optional['Node']:
        """Source of the first incoming link. Only used for color inheritance."""
        if not self.incoming_links:
            return None
        return self.incoming_links[0].source_node

    @property
    def value(self):
        if self.resolver is None:
            raise RuntimeError(f"{self} is not part of a built graph")
        return self.resolver.node_value(self)

    @property
    def outgoing_value(self):
        return sum(link.value for link in self.outgoing_links)

    def copy_unlinked(self) -> 'Node':
        """Copy of this node with the same declared data and no links attached."""
        copy = Node(
            self.name,
            description=self.description,
            color=self.color,
            value=deepcopy(self.explicit_value),
            links=deepcopy(self.original_links),
            **deepcopy(self.attributes)
        )
        copy.display_name = self.display_name
        return copy

    def __repr__(self) -> str:
        return f"Node({self.name})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.display_name,
            'description': self.description,
            'color': self.color,
            'value': self.value,
        }
