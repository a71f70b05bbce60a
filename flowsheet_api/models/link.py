"""
    Link model - a directed, valued flow between two nodes.
"""
from typing import Any, Dict, Optional

from ..types import RANDOM_COLOR
from .node import Node


class Link:
    """
    Directed link from ``source_node`` to ``target_node``.
    Value and color are derived on every read.
    """

    def __init__(
            self,
            source_node: Node,
            target_node: Node,
            value: Any = None,
            color: Optional[str] = None,
            description: Optional[str] = None,
    ):
        self.source_node = source_node
        self.target_node = target_node
        self.explicit_value = value
        self.explicit_color = color
        self.description = description

    @property
    def color(self) -> Optional[str]:
        """Explicit color, else the target's, else the source's. "random" counts as unset."""
        if self.explicit_color and self.explicit_color != RANDOM_COLOR:
            return self.explicit_color
        return self.target_node.color or self.source_node.color

    @property
    def value(self):
        resolver = self.source_node.resolver
        if resolver is None:
            raise RuntimeError(f"{self} is not part of a built graph")
        return resolver.link_value(self)

    def __repr__(self) -> str:
        return f"Link({self.source_node.name} -> {self.target_node.name})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source_node.display_name,
            'target': self.target_node.display_name,
            'color': self.color,
            'value': self.value,
        }
