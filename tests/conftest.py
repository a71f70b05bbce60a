# tests/conftest.py
"""
Shared test fixtures.
Stub sheet: a small household budget with every value expression kind,
an undeclared link target and a diamond (Groceries is reached twice).
"""
import copy

import pytest

from flowsheet_core.config import EngineConfig
from flowsheet_core.engine import SheetEngine
from flowsheet_core.graph_builder import GraphBuilder


# ── Node declarations ────────────────────────────────────────────
_DECLARATIONS = [
    dict(name="Income", value=1000, color="#1f77b4", links=[
        dict(to="Taxes", value="30%"),
        dict(to="Spending", value="rest"),
    ]),
    dict(name="Spending", description="Everything that is not taxes", links=[
        dict(to="Food", value="auto"),
        dict(to="Shopping", value=100, color="#d62728"),
        dict(to="Savings", value="rest"),
    ]),
    dict(name="Food", links=[
        dict(to="Groceries", value=200),
        dict(to="Restaurants", value="50"),
    ]),
    dict(name="Shopping", links=[
        dict(to="Groceries", value=20),
    ]),
]


@pytest.fixture
def declarations():
    """Fresh copy of the stub declarations."""
    return copy.deepcopy(_DECLARATIONS)


@pytest.fixture
def stub_graph(declarations):
    """
        Income --30%--> Taxes
        Income --rest--> Spending --auto--> Food --200--> Groceries
                                                 --"50"--> Restaurants
                                 --100--> Shopping --20--> Groceries
                                 --rest--> Savings
    """
    [graph] = GraphBuilder().add_all(declarations).build()
    return graph


@pytest.fixture
def build():
    """Build graphs from declarations: build(decl, decl, ..., plugins=..., config=...)."""
    def _build(*declarations, **kwargs):
        return GraphBuilder(**kwargs).add_all(declarations).build()
    return _build


@pytest.fixture
def engine():
    """Engine without entry-point discovery, so installed plugins do not leak in."""
    return SheetEngine(EngineConfig(discover_plugins=False))
