"""
    Serialization of resolved sheet graphs into the plain structure handed
    to renderers:

        {title, unit, width, height,
         nodes: [{name, description, color, value}],
         links: [{source, target, color, value}]}

    Field selection is controlled by ``SerializationConfig``.  Values are
    resolved inside one caching pass per graph.
"""
import json
from typing import Any, Callable, Dict, Optional

from flowsheet_api.models.graph import Graph
from flowsheet_api.models.link import Link
from flowsheet_api.models.node import Node

from flowsheet_core.config import SerializationConfig
from flowsheet_core.expander import compose_title
from flowsheet_core.loader import SheetDocument

_NODE_GETTERS: Dict[str, Callable[[Node], Any]] = {
    'name': lambda node: node.display_name,
    'description': lambda node: node.description,
    'color': lambda node: node.color,
    'value': lambda node: node.value,
    # renderers may clamp 'value' (negative flows); this one stays untouched
    'real_value': lambda node: node.value,
}

_LINK_GETTERS: Dict[str, Callable[[Link], Any]] = {
    'source': lambda link: link.source_node.display_name,
    'target': lambda link: link.target_node.display_name,
    'color': lambda link: link.color,
    'value': lambda link: link.value,
    'description': lambda link: link.description,
}


class SheetSerializer:
    """
    Usage:
        serializer = SheetSerializer(SerializationConfig(exclude_node_fields={'description'}))
        data = serializer.serialize(document, graph)     # → dict
        text = serializer.to_json(document, graph)       # → str
    """

    def __init__(self, config: Optional[SerializationConfig] = None):
        self._config = config or SerializationConfig()

    @property
    def config(self) -> SerializationConfig:
        return self._config

    @config.setter
    def config(self, value: SerializationConfig) -> None:
        self._config = value

    def serialize(self, document: SheetDocument, graph: Graph) -> Dict[str, Any]:
        if graph.resolver is None:
            return self._serialize(document, graph)
        with graph.resolver.caching():
            return self._serialize(document, graph)

    def to_json(self, document: SheetDocument, graph: Graph) -> str:
        return json.dumps(self.serialize(document, graph), indent=self._config.indent,
                          ensure_ascii=False)

    def _serialize(self, document: SheetDocument, graph: Graph) -> Dict[str, Any]:
        node_fields = self._config.effective_node_fields()
        link_fields = self._config.effective_link_fields()
        return {
            'title': compose_title(document.title, graph.suffix),
            'unit': document.unit,
            'width': document.width,
            'height': document.height,
            'nodes': [
                {name: _NODE_GETTERS[name](node) for name in node_fields}
                for node in graph.nodes
            ],
            'links': [
                {name: _LINK_GETTERS[name](link) for name in link_fields}
                for link in graph.links
            ],
        }
