"""Material dialect (``*.mtl``): submaterial names and their texture slots."""

from __future__ import annotations

from pathlib import Path

from wrsr_mt.ini.grammar import COUNT, IDENT, PATH, Dialect, Directive, Token

SUBMATERIAL = "SUBMATERIAL"
TEXTURE = "TEXTURE"
TEXTURE_MTL = "TEXTURE_MTL"
TEXTURE_NOMIP = "TEXTURE_NOMIP"
TEXTURE_NOMIP_MTL = "TEXTURE_NOMIP_MTL"

TEXTURE_KEYWORDS = (TEXTURE, TEXTURE_MTL, TEXTURE_NOMIP, TEXTURE_NOMIP_MTL)

MATERIAL = Dialect(
    "material",
    [
        Directive(SUBMATERIAL, (IDENT,)),
        *(Directive(k, (COUNT, PATH)) for k in TEXTURE_KEYWORDS),
    ],
)


def is_texture(token: Token) -> bool:
    return token.dialect == MATERIAL.name and token.keyword in TEXTURE_KEYWORDS


def is_material_relative(token: Token) -> bool:
    """``_MTL`` texture slots resolve against the material file, the rest against the stock root."""
    return token.keyword.endswith("_MTL")


def texture_path(token: Token, material_path: Path, stock_root: Path) -> Path:
    if not is_texture(token):
        raise ValueError(f"${token.keyword} is not a texture directive")
    _slot, rel = token.args
    root = material_path.parent if is_material_relative(token) else stock_root
    return root / rel


def submaterial_names(tokens: list[Token]) -> set[str]:
    return {t.args[0] for t in tokens if t.dialect == MATERIAL.name and t.keyword == SUBMATERIAL}
