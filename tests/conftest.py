"""
Shared fixtures for generals grid tests.

Most tests run against the bundled catalog; the small two-role catalog
mirrors the worked example (Vanguard/Strategist, tiers T0 and T1).
"""
from pathlib import Path

import pytest
import yaml

from generals_grid.catalog import Catalog
from generals_grid.data_loader import DEFAULT_CATALOG_PATH, load_catalog
from generals_grid.engine import SelectionEngine
from generals_grid.models import CatalogData

SMALL_CATALOG = {
    "name": "Small",
    "roles": [
        {"role": "Vanguard", "tiers": {"T0": ["Lu Bu", "Zhang Fei"], "T1": ["Pang De"]}},
        {"role": "Strategist", "tiers": {"T0": ["Zhuge Liang"], "T1": ["Zhuge Liang", "Jia Xu"]}},
    ],
}

# One pick per role, one per tier, from the bundled catalog
FULL_TEAM = [
    ("主将", "T0", "关羽"),
    ("军师", "T1", "贾诩"),
    ("副将", "T2", "关平"),
    ("先锋", "T3", "华雄"),
    ("亲卫", "T4", "宋谦"),
]


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    return load_catalog(DEFAULT_CATALOG_PATH)


@pytest.fixture
def engine(catalog) -> SelectionEngine:
    return SelectionEngine(catalog)


@pytest.fixture
def full_engine(engine) -> SelectionEngine:
    for role, tier, unit in FULL_TEAM:
        engine.toggle_named(role, tier, unit)
    return engine


@pytest.fixture
def small_catalog() -> Catalog:
    return Catalog(CatalogData.model_validate(SMALL_CATALOG))


@pytest.fixture
def small_engine(small_catalog) -> SelectionEngine:
    return SelectionEngine(small_catalog)


@pytest.fixture
def write_catalog(tmp_path):
    """Write a catalog dict (or raw text) to a temp YAML file and return its path."""
    def _write(content, name: str = "catalog.yaml") -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(content, allow_unicode=True), encoding="utf-8")
        return path
    return _write


def picked(engine: SelectionEngine) -> set[tuple]:
    """Current picks as plain (role, tier, unit) tuples."""
    return {(p.role, p.tier.value, p.unit) for p in engine.current_selections()}
