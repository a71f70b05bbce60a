"""
    ValueResolver — computes node and link values from their declared
    value expressions.

    Values are derived on every read.  ``rest`` and ``auto`` links read
    their siblings and targets, which may be symbolic themselves, so the
    recursion terminates only because the builder rejects cyclic graphs.
    A single uncached read of a very deep chain can exhaust the Python
    stack; that surfaces as a ``SheetError``.

    Inside ``with resolver.caching():`` each value is computed once; the
    memo is dropped when the block exits.  Each graph owns its resolver,
    so a memo is never shared between variants or clones.
"""
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from flowsheet_api.exceptions import SheetError
from flowsheet_api.models.link import Link
from flowsheet_api.models.node import Node
from flowsheet_api.types import Number, ValueExpression, ValueKind

from .plugin_registry import ValuePluginRegistry


class ValueResolver:

    def __init__(self, plugins: Optional[ValuePluginRegistry] = None,
                 zero_value_is_unset: bool = False):
        self._plugins = plugins if plugins is not None else ValuePluginRegistry()
        self._zero_value_is_unset = zero_value_is_unset
        self._cache: Optional[Dict[int, Number]] = None

    @property
    def plugins(self) -> ValuePluginRegistry:
        return self._plugins

    def fork(self) -> 'ValueResolver':
        """Resolver with the same plugins and policy and an empty memo."""
        return ValueResolver(self._plugins, self._zero_value_is_unset)

    @contextmanager
    def caching(self) -> Iterator['ValueResolver']:
        if self._cache is not None:
            yield self
            return
        self._cache = {}
        try:
            yield self
        finally:
            self._cache = None

    # ── Nodes ────────────────────────────────────────────────────

    def node_value(self, node: Node) -> Number:
        return self._resolved(node, self._compute_node_value)

    def _compute_node_value(self, node: Node) -> Number:
        explicit = self.explicit_node_value(node)
        if explicit is not None:
            return explicit

        if not node.incoming_links:
            # top-level node
            return sum(link.value for link in node.outgoing_links)
        return sum(link.value for link in node.incoming_links)

    def explicit_node_value(self, node: Node) -> Optional[Number]:
        """Declared numeric value of the node, None when it has to be derived."""
        number = ValueExpression.to_number(node.explicit_value)
        if number is None:
            return None
        if number == 0 and self._zero_value_is_unset:
            return None
        return number

    # ── Links ────────────────────────────────────────────────────

    def link_value(self, link: Link) -> Number:
        return self._resolved(link, self._compute_link_value)

    def _compute_link_value(self, link: Link) -> Number:
        value = link.explicit_value
        kind = ValueExpression.classify(value)

        if kind == ValueKind.NUMBER:
            return value

        if kind == ValueKind.PLUGIN:
            return self._plugins.call(link, value)

        if kind == ValueKind.REST:
            source = link.source_node
            other_value = sum(other.value for other in source.outgoing_links if other is not link)
            return source.value - other_value

        if kind == ValueKind.AUTO:
            return link.target_node.outgoing_value

        if kind == ValueKind.PERCENTAGE:
            percentage = ValueExpression.parse_percentage(value)
            if percentage is None:
                return 0
            return ValueExpression.round_half_up(link.source_node.value * percentage / 100)

        if kind == ValueKind.NUMERIC_STRING:
            return ValueExpression.parse_number(value)

        return 0

    # ── Internal helpers ─────────────────────────────────────────

    def _resolved(self, item, compute) -> Number:
        try:
            return self._memoized(item, compute)
        except RecursionError as exc:
            raise SheetError(
                f"Value of {item!r} depends on a chain too deep to resolve in one read; "
                "read the graph in node order inside resolver.caching()"
            ) from exc

    def _memoized(self, item, compute) -> Number:
        if self._cache is None:
            return compute(item)
        key = id(item)
        if key not in self._cache:
            self._cache[key] = compute(item)
        return self._cache[key]

    def __repr__(self) -> str:
        return f"ValueResolver(plugins={self._plugins.get_names()})"
