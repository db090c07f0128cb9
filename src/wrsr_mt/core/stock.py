"""Index over the game's stock building table.

The stock table holds one ``$TYPE <key>`` block per building. The cache owns the
whole text, keeps only ``(start, end)`` offsets per key and parses a block into
a render manifest the first time it is asked for.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

from wrsr_mt import fileio
from wrsr_mt.errors import ReferenceResolutionError
from wrsr_mt.ini import RENDER, IniFile
from wrsr_mt.settings import Settings

logger = logging.getLogger(__name__)

_TYPE_RX = re.compile(r"\$TYPE ([_A-Za-z0-9]+?)\r?\n(.+?\n\s*END\r?\n)", re.S)


class StockCache:
    def __init__(self, stock_root: Path, text: str | None = None, source: Path | None = None) -> None:
        self.stock_root = stock_root
        self.source = source
        self._text = text
        self._ranges: dict[str, tuple[int, int]] | None = None
        self._parsed: dict[str, IniFile] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> StockCache:
        """Lazy cache; the stock table is only read when a stock key is first looked up."""
        return cls(settings.path_stock, source=settings.stock_buildings_ini)

    def _index(self) -> dict[str, tuple[int, int]]:
        with self._lock:
            if self._ranges is None:
                if self._text is None:
                    assert self.source is not None
                    self._text = fileio.read_text(self.source)
                self._ranges = {m.group(1): m.span(2) for m in _TYPE_RX.finditer(self._text)}
                logger.info("Indexed %d stock buildings", len(self._ranges))
            return self._ranges

    def __contains__(self, key: object) -> bool:
        return key in self._index()

    def __len__(self) -> int:
        return len(self._index())

    def keys(self) -> list[str]:
        return list(self._index())

    def raw(self, key: str) -> str:
        try:
            start, end = self._index()[key]
        except KeyError:
            raise ReferenceResolutionError(f"Unknown stock building '{key}'") from None
        assert self._text is not None
        return self._text[start:end]

    def manifest(self, key: str) -> IniFile:
        """Parsed render manifest of a stock building; each key is parsed at most once."""
        text = self.raw(key)
        with self._lock:
            parsed = self._parsed.get(key)
            if parsed is None:
                parsed = IniFile.parse(RENDER, text)
                self._parsed[key] = parsed
            return parsed
