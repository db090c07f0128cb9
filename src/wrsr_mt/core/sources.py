"""Batch discovery and validation of building sources under a directory tree."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from wrsr_mt.core.building import BuildingSource, load_building_source
from wrsr_mt.core.paths import BUILDING_INI
from wrsr_mt.core.stock import StockCache
from wrsr_mt.core.validate import validate_building
from wrsr_mt.errors import FileIOError, ModToolError
from wrsr_mt.models import BatchSummary, ValidationReport
from wrsr_mt.settings import Settings

logger = logging.getLogger(__name__)


def discover_sources(root: Path) -> Iterator[Path]:
    """Yield building source directories depth-first in sorted order.

    A directory holding ``building.ini`` is a source and is not descended
    into. Directories whose name starts with ``_`` are skipped.
    """
    if (root / BUILDING_INI).exists():
        yield root
        return
    try:
        subdirs = sorted(p for p in root.iterdir() if p.is_dir())
    except OSError as e:
        raise FileIOError(root, e) from e
    for sub in subdirs:
        if sub.name.startswith("_"):
            logger.debug("Skipping %s", sub)
            continue
        yield from discover_sources(sub)


@dataclass
class LoadedSources:
    sources: list[BuildingSource] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)


def load_sources(root: Path, settings: Settings, stock: StockCache | None = None) -> LoadedSources:
    """Load every source under ``root``; a failing source is recorded and the scan goes on."""
    stock = stock if stock is not None else StockCache.from_settings(settings)
    result = LoadedSources()
    for directory in discover_sources(root):
        try:
            result.sources.append(load_building_source(directory, settings, stock))
        except ModToolError as e:
            logger.warning("%s: %s", directory, e)
            result.failures[str(directory)] = str(e)
    return result


def validate_tree(
    root: Path, settings: Settings, stock: StockCache | None = None
) -> tuple[list[BuildingSource], BatchSummary]:
    loaded = load_sources(root, settings, stock)
    summary = BatchSummary(failures=dict(loaded.failures))
    valid: list[BuildingSource] = []
    for source in loaded.sources:
        try:
            report = validate_building(source, settings)
        except ModToolError as e:
            logger.warning("%s: %s", source.root, e)
            summary.failures[str(source.root)] = str(e)
            continue
        summary.reports.append(report)
        if report.ok:
            valid.append(source)
    total = len(loaded.sources) + len(loaded.failures)
    logger.info("Validated %d source(s): %d OK, %d with errors", total, summary.ok_count, summary.error_count)
    return valid, summary


def failure_reports(summary: BatchSummary) -> list[ValidationReport]:
    """Every problem of a batch as reports, including sources that failed before validation."""
    reports = [r for r in summary.reports if not r.ok]
    for building, message in summary.failures.items():
        report = ValidationReport(building=building)
        report.add("source", "source", message)
        reports.append(report)
    return reports
