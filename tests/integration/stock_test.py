"""Checks against a real game installation; skipped unless WRSR_PATH_STOCK points at one."""

from __future__ import annotations

import pytest

from wrsr_mt.core.stock import StockCache
from wrsr_mt.fileio import read_bytes
from wrsr_mt.ini import BUILDING, parse
from wrsr_mt.settings import Settings


@pytest.fixture(scope="module")
def stock_settings() -> Settings:
    settings = Settings.from_env()
    if not settings.stock_buildings_ini.exists():
        pytest.skip(f"no stock building table at {settings.stock_buildings_ini}")
    return settings


def test_every_stock_manifest_parses(stock_settings: Settings) -> None:
    cache = StockCache.from_settings(stock_settings)
    assert len(cache) > 0
    for key in cache.keys():
        manifest = cache.manifest(key)
        assert manifest.render() == cache.raw(key)


def test_stock_building_configs_parse_without_errors(stock_settings: Settings) -> None:
    failures = []
    for path in sorted((stock_settings.path_stock / "buildings" / "types").glob("*/building.ini"))[:200]:
        text = read_bytes(path).decode("utf-8", "surrogateescape")
        failures.extend((path, c.failure) for c in parse(BUILDING, text) if c.failure is not None)
    assert failures == []

