from wrsr_mt.ini.building import BUILDING
from wrsr_mt.ini.file import IniEntry, IniFile, Modified, Original, TokenState, parse_strict
from wrsr_mt.ini.grammar import (
    Dialect,
    Directive,
    NodeMatch,
    Point3f,
    Rect,
    Token,
    format_token,
)
from wrsr_mt.ini.material import MATERIAL
from wrsr_mt.ini.renderconfig import RENDER
from wrsr_mt.ini.scanner import Chunk, ParseFailure, SourceSpan, parse, parse_tokens
from wrsr_mt.ini.transform import mirror_token, scale_token

DIALECTS = {d.name: d for d in (BUILDING, RENDER, MATERIAL)}

__all__ = [
    "BUILDING",
    "DIALECTS",
    "MATERIAL",
    "RENDER",
    "Chunk",
    "Dialect",
    "Directive",
    "IniEntry",
    "IniFile",
    "Modified",
    "NodeMatch",
    "Original",
    "ParseFailure",
    "Point3f",
    "Rect",
    "SourceSpan",
    "Token",
    "TokenState",
    "format_token",
    "mirror_token",
    "parse",
    "parse_strict",
    "parse_tokens",
    "scale_token",
]
