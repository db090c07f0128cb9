"""Tool configuration: where the game's stock assets and the workshop mods live."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from wrsr_mt.fileio import TEXT_ENCODING

DEFAULT_STOCK = r"C:\Program Files (x86)\Steam\steamapps\common\SovietRepublic\media_soviet"
DEFAULT_WORKSHOP = r"C:\Program Files (x86)\Steam\steamapps\workshop\content\784150"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    path_stock: Path
    path_workshop: Path
    ini_encoding: str = TEXT_ENCODING

    @classmethod
    def from_env(cls, path_stock: str | None = None, path_workshop: str | None = None) -> Settings:
        """Explicit arguments win over ``WRSR_PATH_STOCK`` / ``WRSR_PATH_WORKSHOP``."""
        return cls(
            path_stock=Path(path_stock or os.getenv("WRSR_PATH_STOCK", DEFAULT_STOCK)),
            path_workshop=Path(path_workshop or os.getenv("WRSR_PATH_WORKSHOP", DEFAULT_WORKSHOP)),
            ini_encoding=os.getenv("WRSR_INI_ENCODING", TEXT_ENCODING),
        )

    @property
    def stock_buildings_ini(self) -> Path:
        return self.path_stock / "buildings" / "buildingtypes.ini"
