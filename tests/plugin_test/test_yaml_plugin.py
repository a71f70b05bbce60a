import asyncio
from pathlib import Path

import pytest

from flowsheet_api.exceptions import LoadError
from flowsheet_api.plugins.base import SheetParserPlugin
from flowsheet_core.config import EngineConfig
from flowsheet_core.engine import SheetEngine

from sheet_parser_yaml.plugin import YamlSheetParserPlugin

FIXTURES_DIR = Path(__file__).parent / "fixtures"
BUDGET_PATH  = FIXTURES_DIR / "budget.yaml"


def read_fixture(name):
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def plugin():
    return YamlSheetParserPlugin()

@pytest.fixture
def budget_graphs():
    engine = SheetEngine(EngineConfig(discover_plugins=False))
    return engine.parse_sheet(BUDGET_PATH.read_text(encoding="utf-8"), get_file=read_fixture)


# ── Plugin metadata ───────────────────────────────────────────────────────────

class TestPluginMetadata:
    def test_plugin_name(self, plugin):
        assert plugin.get_plugin_name() == "YAML Parser"

    def test_extensions(self, plugin):
        assert plugin.get_file_extensions() == (".yaml", ".yml")

    def test_is_sheet_parser_plugin(self, plugin):
        assert isinstance(plugin, SheetParserPlugin)


# ── Parsing ───────────────────────────────────────────────────────────────────

class TestParse:
    def test_mapping(self, plugin):
        assert plugin.parse("title: T\nwidth: 10\n") == {"title": "T", "width": 10}

    def test_flow_style_links(self, plugin):
        data = plugin.parse("nodes:\n  - name: A\n    links:\n      - { to: B, value: rest }\n")
        assert data["nodes"][0]["links"] == [{"to": "B", "value": "rest"}]

    def test_alternatives_stay_strings(self, plugin):
        assert plugin.parse("value: 1000|2000")["value"] == "1000|2000"

    def test_percentages_stay_strings(self, plugin):
        assert plugin.parse("value: '30%'")["value"] == "30%"

    def test_json_is_yaml(self, plugin):
        assert plugin.parse('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_empty_document(self, plugin):
        assert plugin.parse("") is None

    def test_invalid_yaml(self, plugin):
        with pytest.raises(LoadError, match="Invalid YAML"):
            plugin.parse("a: [1, 2")

    def test_no_python_tags(self, plugin):
        with pytest.raises(LoadError):
            plugin.parse("a: !!python/object/apply:os.system ['true']")


# ── Budget fixture (embeds + alternatives + translations) ─────────────────────

class TestBudgetSheet:
    def test_graph_count_and_titles(self, budget_graphs):
        assert [g["title"] for g in budget_graphs] == [
            "Budget-3000", "Budget-3000_fi", "Budget-3500", "Budget-3500_fi",
        ]

    def test_metadata(self, budget_graphs):
        first = budget_graphs[0]
        assert (first["unit"], first["width"], first["height"]) == ("EUR", 1000, 600)

    def test_node_order(self, budget_graphs):
        assert [n["name"] for n in budget_graphs[0]["nodes"]] == [
            "Salary", "Taxes", "Spending", "Rent", "Household", "Food", "Utilities", "Savings",
        ]

    @pytest.mark.parametrize("index, expected", [
        (0, {"Salary": 3000, "Taxes": 900, "Spending": 2100, "Household": 550, "Savings": 350}),
        (2, {"Salary": 3500, "Taxes": 1050, "Spending": 2450, "Household": 550, "Savings": 700}),
    ])
    def test_values(self, budget_graphs, index, expected):
        values = {n["name"]: n["value"] for n in budget_graphs[index]["nodes"]}
        assert {name: values[name] for name in expected} == expected

    def test_translation(self, budget_graphs):
        names = [n["name"] for n in budget_graphs[1]["nodes"]]
        assert names == ["Palkka", "Verot", "Kulutus", "Vuokra", "Household", "Food", "Utilities", "Säästöt"]

    def test_translation_keeps_values(self, budget_graphs):
        assert [n["value"] for n in budget_graphs[1]["nodes"]] == [n["value"] for n in budget_graphs[0]["nodes"]]

    def test_colors_inherited(self, budget_graphs):
        assert {n["color"] for n in budget_graphs[0]["nodes"]} == {"#2ca02c"}

    def test_description(self, budget_graphs):
        assert budget_graphs[0]["nodes"][2]["description"] == "Monthly spending"

    def test_async_matches_sync(self, budget_graphs):
        async def fetch(name):
            return read_fixture(name)

        engine = SheetEngine(EngineConfig(discover_plugins=False))
        result = asyncio.run(engine.parse_sheet_async(BUDGET_PATH.read_text(encoding="utf-8"), get_file=fetch))
        assert result == budget_graphs
