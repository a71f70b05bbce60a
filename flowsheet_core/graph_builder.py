"""
    GraphBuilder — turns raw node declarations into linked, ordered,
    colored graphs.

    Declarations are collected as plain dicts, which makes the
    collections cheap to deep-copy when a value with alternatives
    ("1000|2000") multiplies them.  Node and Link objects are only created
    in ``build()``.

        builder = GraphBuilder()
        builder.add({'name': 'A', 'value': '1000|2000', 'links': [...]})
        graphs = builder.build()        # one Graph per alternative
"""
import logging
from copy import deepcopy
from typing import Any, Dict, List, Optional, Set

from flowsheet_api.exceptions import SheetError, StructuralError
from flowsheet_api.models.graph import Graph
from flowsheet_api.models.link import Link
from flowsheet_api.models.node import Node
from flowsheet_api.types import ValueExpression, ValueKind

from .color_resolver import ColorResolver
from .config import EngineConfig
from .plugin_registry import ValuePluginRegistry
from .value_resolver import ValueResolver

logger = logging.getLogger(__name__)

_NODE_KEYS = ('name', 'description', 'color', 'value', 'links')


class NodeCollection:
    """
    Node declarations of one variant, keyed by name in declaration order.
    """

    def __init__(self):
        self._declarations: Dict[str, Dict[str, Any]] = {}
        self.suffix = ""

    def add(self, declaration: Dict[str, Any]) -> None:
        """
        Mutates this collection by adding a declaration.  Redeclaring a
        name appends the new links to the existing declaration.
        """
        name = _declared_name(declaration)
        existing = self._declarations.get(name)
        if existing is None:
            self._declarations[name] = declaration
            return

        existing['links'] = list(existing.get('links') or []) + list(declaration.get('links') or [])

    def clone(self) -> 'NodeCollection':
        clone = NodeCollection()
        clone._declarations = deepcopy(self._declarations)
        clone.suffix = self.suffix
        return clone

    def to_graph(self, resolver: ValueResolver) -> Graph:
        node_map = self._to_node_map()
        autovivify_nodes(node_map)
        link_nodes(node_map)
        return Graph(order_nodes(node_map), self.suffix, resolver)

    def _to_node_map(self) -> Dict[str, Node]:
        node_map: Dict[str, Node] = {}
        for name, declaration in self._declarations.items():
            extra = {
                key: value for key, value in declaration.items()
                if isinstance(key, str) and key not in _NODE_KEYS
            }
            node_map[name] = Node(
                name,
                description=declaration.get('description'),
                color=declaration.get('color'),
                value=declaration.get('value'),
                links=deepcopy(declaration.get('links') or []),
                **extra
            )
        return node_map

    def __len__(self) -> int:
        return len(self._declarations)


class GraphBuilder:
    """
    Collects node declarations one at a time and builds one Graph per
    combination of declared alternatives.
    """

    def __init__(self, plugins: Optional[ValuePluginRegistry] = None,
                 config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._plugins = plugins if plugins is not None else ValuePluginRegistry()
        self._color_resolver = ColorResolver()
        self._collections: List[NodeCollection] = [NodeCollection()]

    def add(self, declaration: Dict[str, Any]) -> 'GraphBuilder':
        value = declaration.get('value')
        if ValueExpression.classify(value) != ValueKind.ALTERNATIVES:
            for collection in self._collections:
                collection.add(deepcopy(declaration))
            return self

        alternatives = ValueExpression.split_alternatives(value)
        logger.debug("Node '%s' declares %d alternatives", declaration.get('name'), len(alternatives))

        expanded: List[NodeCollection] = []
        for alternative in alternatives:
            for collection in self._collections:
                node_copy = deepcopy(declaration)
                node_copy['value'] = alternative
                collection_copy = collection.clone()
                collection_copy.add(node_copy)
                collection_copy.suffix += self._config.variant_separator + alternative
                expanded.append(collection_copy)
        self._collections = expanded
        return self

    def add_all(self, declarations) -> 'GraphBuilder':
        for declaration in declarations:
            self.add(declaration)
        return self

    def build(self) -> List[Graph]:
        graphs = []
        for collection in self._collections:
            resolver = ValueResolver(self._plugins, self._config.zero_value_is_unset)
            graph = collection.to_graph(resolver)
            self._color_resolver.color_nodes(graph)
            graphs.append(graph)

        logger.info("Built %d graph(s)", len(graphs))
        return graphs

    @property
    def variant_count(self) -> int:
        return len(self._collections)


# ── Build steps ──────────────────────────────────────────────────

def autovivify_nodes(node_map: Dict[str, Node]) -> None:
    """
    Creates an empty node for every link target that has not been
    declared.  New nodes go to the end, in order of first reference.
    """
    for node in list(node_map.values()):
        for link_data in node.original_links:
            target = _link_target(node, link_data)
            if target not in node_map:
                logger.debug("Autovivifying node '%s'", target)
                node_map[target] = Node(target)


def link_nodes(node_map: Dict[str, Node]) -> None:
    for node in node_map.values():
        node.incoming_links = []

    for node in node_map.values():
        node.outgoing_links = []
        for link_data in node.original_links:
            link = Link(
                node,
                node_map[_link_target(node, link_data)],
                value=link_data.get('value'),
                color=link_data.get('color'),
                description=link_data.get('description'),
            )
            node.outgoing_links.append(link)
            link.target_node.incoming_links.append(link)


def order_nodes(node_map: Dict[str, Node]) -> List[Node]:
    """
    Depth-first walk from every node in declaration order, recording each
    node the first time it is seen.

    :raises StructuralError: If a node is reached again while still on
                             the current path
    """
    ordered: Dict[str, Node] = {}
    finished: Set[str] = set()
    path: List[Node] = []
    on_path: Set[str] = set()

    def visit(node: Node) -> None:
        if node.name in on_path:
            raise StructuralError([n.name for n in path] + [node.name])
        if node.name in finished:
            return

        ordered.setdefault(node.name, node)
        path.append(node)
        on_path.add(node.name)
        for link in node.outgoing_links:
            visit(link.target_node)
        path.pop()
        on_path.discard(node.name)
        finished.add(node.name)

    for node in node_map.values():
        visit(node)

    return list(ordered.values())


def _declared_name(declaration: Dict[str, Any]) -> str:
    name = declaration.get('name')
    if name is None:
        raise SheetError(f"Node declaration without a name: {declaration!r}")
    return str(name)


def _link_target(node: Node, link_data: Dict[str, Any]) -> str:
    target = link_data.get('to')
    if target is None:
        raise SheetError(f"Link of node '{node.name}' has no target")
    return str(target)
