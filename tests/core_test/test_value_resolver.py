# tests/core_test/test_value_resolver.py
"""
Tests for node and link value resolution (flowsheet_core/value_resolver.py).
"""
import pytest

from flowsheet_api.exceptions import PluginReferenceError, SheetError
from flowsheet_api.models.node import Node
from flowsheet_api.plugins.base import ValuePlugin
from flowsheet_core.config import EngineConfig
from flowsheet_core.plugin_registry import ValuePluginRegistry
from flowsheet_core.value_resolver import ValueResolver


def link_values(graph):
    return [link.value for link in graph.links]


class TestStubGraphValues:

    def test_node_values(self, stub_graph):
        values = {node.name: node.value for node in stub_graph.nodes}
        assert values == {
            "Income": 1000,
            "Taxes": 300,
            "Spending": 700,
            "Food": 250,
            "Groceries": 220,
            "Restaurants": 50,
            "Shopping": 100,
            "Savings": 350,
        }

    def test_link_values(self, stub_graph):
        assert link_values(stub_graph) == [300, 700, 250, 100, 350, 200, 50, 20]


class TestRest:

    def test_rest_is_source_value_minus_siblings(self, build):
        [graph] = build({
            'name': 'Parent',
            'value': 1000,
            'links': [{'to': 'Child1', 'value': 300}, {'to': 'Child2', 'value': 'rest'}],
        })
        assert link_values(graph) == [300, 700]

    def test_rest_excludes_only_itself(self, build):
        [graph] = build({
            'name': 'P',
            'value': 100,
            'links': [
                {'to': 'A', 'value': 10},
                {'to': 'B', 'value': 'rest'},
                {'to': 'C', 'value': 20},
            ],
        })
        assert link_values(graph) == [10, 70, 20]

    def test_rest_can_be_negative(self, build):
        [graph] = build({
            'name': 'P',
            'value': 100,
            'links': [{'to': 'A', 'value': 150}, {'to': 'B', 'value': 'rest'}],
        })
        assert graph.links[1].value == -50

    def test_rest_with_surrounding_whitespace(self, build):
        [graph] = build({
            'name': 'P',
            'value': 100,
            'links': [{'to': 'A', 'value': 40}, {'to': 'B', 'value': ' rest '}],
        })
        assert graph.links[1].value == 60


class TestAuto:

    def test_auto_is_sum_of_target_outgoing_links(self, build):
        [graph] = build(
            {'name': 'Parent', 'value': 1000, 'links': [{'to': 'Child', 'value': 'auto'}]},
            {'name': 'Child', 'links': [
                {'to': 'Grandchild1', 'value': 200},
                {'to': 'Grandchild2', 'value': 300},
            ]},
        )
        assert graph.links[0].value == 500

    def test_auto_and_rest_are_transitive(self, build):
        [graph] = build(
            {'name': 'Parent', 'value': 1000, 'links': [
                {'to': 'Child1', 'value': 'auto'},
                {'to': 'Child2', 'value': 'rest'},
            ]},
            {'name': 'Child1', 'links': [{'to': 'Grandchild', 'value': 'auto'}]},
            {'name': 'Grandchild', 'links': [{'to': 'Grandgrandchild', 'value': 300}]},
        )
        assert graph.links[0].value == 300
        assert graph.links[1].value == 700

    def test_auto_to_leaf_is_zero(self, build):
        [graph] = build({'name': 'A', 'value': 10, 'links': [{'to': 'B', 'value': 'auto'}]})
        assert graph.links[0].value == 0


class TestPercentage:

    def test_percentage_of_source_value(self, build):
        [graph] = build({
            'name': 'Parent',
            'value': 1000,
            'links': [{'to': 'Child1', 'value': '30%'}, {'to': 'Child2', 'value': 'rest'}],
        })
        assert link_values(graph) == [300, 700]

    def test_percentage_rounds_half_up(self, build):
        [graph] = build({'name': 'A', 'value': 5, 'links': [{'to': 'B', 'value': '50%'}]})
        assert graph.links[0].value == 3

    def test_fractional_percentage(self, build):
        [graph] = build({'name': 'A', 'value': 1000, 'links': [{'to': 'B', 'value': '12.5%'}]})
        assert graph.links[0].value == 125

    def test_invalid_percentage_is_zero(self, build):
        [graph] = build({'name': 'A', 'value': 1000, 'links': [{'to': 'B', 'value': 'lots%'}]})
        assert graph.links[0].value == 0


class TestLiteralValues:

    @pytest.mark.parametrize("declared, expected", [
        (42, 42),
        (2.5, 2.5),
        ("42", 42),
        (" 1.5 ", 1.5),
        ("-10", -10),
    ])
    def test_numeric_values(self, build, declared, expected):
        [graph] = build({'name': 'A', 'links': [{'to': 'B', 'value': declared}]})
        assert graph.links[0].value == expected

    @pytest.mark.parametrize("declared", [None, "lots", "", True, ["1"], "nan", "inf"])
    def test_unrecognized_values_are_zero(self, build, declared):
        [graph] = build({'name': 'A', 'links': [{'to': 'B', 'value': declared}]})
        assert graph.links[0].value == 0

    def test_link_without_value_is_zero(self, build):
        [graph] = build({'name': 'A', 'links': [{'to': 'B'}]})
        assert graph.links[0].value == 0


class TestNodeValues:

    def test_root_without_value_sums_outgoing(self, build):
        [graph] = build({'name': 'A', 'links': [{'to': 'B', 'value': 200}, {'to': 'C', 'value': 300}]})
        assert graph.nodes[0].value == 500

    def test_child_sums_incoming(self, build):
        [graph] = build(
            {'name': 'A', 'links': [{'to': 'C', 'value': 200}]},
            {'name': 'B', 'links': [{'to': 'C', 'value': 300}]},
        )
        assert graph.get_node('C').value == 500

    def test_explicit_value_wins_over_links(self, build):
        [graph] = build({'name': 'A', 'value': 50, 'links': [{'to': 'B', 'value': 200}]})
        assert graph.get_node('A').value == 50

    def test_numeric_string_node_value(self, build):
        [graph] = build({'name': 'A', 'value': '750'})
        assert graph.get_node('A').value == 750

    def test_non_numeric_node_value_is_derived(self, build):
        [graph] = build({'name': 'A', 'value': 'rest', 'links': [{'to': 'B', 'value': 20}]})
        assert graph.get_node('A').value == 20

    def test_explicit_zero_is_kept_by_default(self, build):
        [graph] = build({'name': 'A', 'value': 0, 'links': [{'to': 'B', 'value': 100}]})
        assert graph.get_node('A').value == 0

    def test_explicit_zero_can_be_treated_as_unset(self, build):
        [graph] = build(
            {'name': 'A', 'value': 0, 'links': [{'to': 'B', 'value': 100}]},
            config=EngineConfig(zero_value_is_unset=True),
        )
        assert graph.get_node('A').value == 100

    def test_outgoing_value(self, stub_graph):
        assert stub_graph.get_node("Spending").outgoing_value == 700

    def test_detached_node_has_no_value(self):
        with pytest.raises(RuntimeError, match="not part of a built graph"):
            Node("loose").value

    def test_values_follow_graph_changes(self, build):
        [graph] = build({'name': 'A', 'value': 100, 'links': [{'to': 'B', 'value': 'rest'}]})
        assert graph.links[0].value == 100
        graph.get_node('A').explicit_value = 40
        assert graph.links[0].value == 40


class TestPlugins:

    def test_plugin_value(self, build):
        plugins = ValuePluginRegistry({
            'scaled': lambda link, params: link.source_node.value * params['factor'],
        })
        [graph] = build(
            {'name': 'A', 'value': 10, 'links': [{'to': 'B', 'value': {'plugin': 'scaled', 'factor': 3}}]},
            plugins=plugins,
        )
        assert graph.links[0].value == 30
        assert graph.get_node('B').value == 30

    def test_plugin_receives_link_and_params(self, build):
        calls = []

        def record(link, params):
            calls.append((link, params))
            return 7

        [graph] = build(
            {'name': 'A', 'links': [{'to': 'B', 'value': {'plugin': 'record', 'x': 1}}]},
            plugins=ValuePluginRegistry({'record': record}),
        )
        link = graph.links[0]
        assert link.value == 7
        assert calls == [(link, {'plugin': 'record', 'x': 1})]

    def test_value_plugin_instance(self, build):
        class Constant(ValuePlugin):
            def get_plugin_name(self):
                return 'constant'

            def compute(self, link, params):
                return params.get('amount', 0)

        plugins = ValuePluginRegistry()
        plugins.register_all([Constant()])
        [graph] = build(
            {'name': 'A', 'links': [{'to': 'B', 'value': {'plugin': 'constant', 'amount': 12}}]},
            plugins=plugins,
        )
        assert graph.links[0].value == 12

    def test_unknown_plugin_raises(self, build):
        [graph] = build({'name': 'A', 'links': [{'to': 'B', 'value': {'plugin': 'nope'}}]})
        with pytest.raises(PluginReferenceError, match="Unknown plugin nope"):
            graph.links[0].value

    def test_missing_plugin_name_raises(self, build):
        [graph] = build({'name': 'A', 'links': [{'to': 'B', 'value': {'factor': 2}}]})
        with pytest.raises(PluginReferenceError, match='"plugin" missing'):
            graph.links[0].value


class TestCaching:

    @pytest.fixture
    def counted(self, build):
        calls = []

        def counting(link, params):
            calls.append(link)
            return 5

        [graph] = build(
            {'name': 'A', 'links': [{'to': 'B', 'value': {'plugin': 'counting'}}]},
            plugins=ValuePluginRegistry({'counting': counting}),
        )
        return graph, calls

    def test_values_are_recomputed_without_cache(self, counted):
        graph, calls = counted
        graph.links[0].value
        graph.links[0].value
        assert len(calls) == 2

    def test_values_are_computed_once_while_caching(self, counted):
        graph, calls = counted
        with graph.resolver.caching():
            graph.links[0].value
            graph.links[0].value
            graph.get_node('B').value
        assert len(calls) == 1

    def test_cache_is_dropped_after_the_pass(self, counted):
        graph, calls = counted
        with graph.resolver.caching():
            graph.links[0].value
        graph.links[0].value
        assert len(calls) == 2

    def test_fork_has_same_plugins_and_own_cache(self):
        plugins = ValuePluginRegistry({'x': lambda link, params: 1})
        resolver = ValueResolver(plugins)
        fork = resolver.fork()
        assert fork is not resolver
        assert fork.plugins is plugins
        with resolver.caching():
            assert fork._cache is None


class TestDeepChains:

    DEPTH = 400

    @pytest.fixture
    def chain(self, build):
        """N0 (value 1) --rest--> N1 --rest--> ... --rest--> N400"""
        declarations = [
            {'name': f'N{i}', 'links': [{'to': f'N{i + 1}', 'value': 'rest'}]}
            for i in range(self.DEPTH)
        ]
        declarations[0]['value'] = 1
        [graph] = build(*declarations)
        return graph

    def test_too_deep_uncached_read_raises_sheet_error(self, chain):
        with pytest.raises(SheetError, match="too deep"):
            chain.get_node(f'N{self.DEPTH}').value

    def test_reading_in_node_order_while_caching(self, chain):
        with chain.resolver.caching():
            values = [node.value for node in chain.nodes]
        assert len(values) == self.DEPTH + 1
        assert set(values) == {1}
