"""Chunked scanner: splits a source text into pass-through spans and directives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, NamedTuple

from wrsr_mt.errors import IniParseError
from wrsr_mt.ini.grammar import Dialect, Point3f, Rect, Slot, SlotKind, Token

# A directive must be the first thing on its line; a leading BOM is not content.
_DIRECTIVE_RX = re.compile(r"^\ufeff?[ \t]*(\$([A-Za-z0-9_]+))(?!\S)", re.MULTILINE)
_WS_RX = re.compile(r"\s*")
_INLINE_WS_RX = re.compile(r"[ \t]*")
_QUOTED_RX = re.compile(r'"([^"\r\n]*)"')
_BARE_RX = re.compile(r"\S+")
_INT_RX = re.compile(r"[+-]?[0-9]+")
_FLOAT_RX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class SourceSpan(NamedTuple):
    """Half-open ``[start, end)`` offset range into the original source."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ParseFailure:
    message: str
    chunk: str

    def __str__(self) -> str:
        return f"{self.message} in [{self.chunk}]"


ChunkResult = Token | ParseFailure | None


@dataclass(frozen=True)
class Chunk:
    span: SourceSpan
    text: str
    result: ChunkResult = None

    @property
    def token(self) -> Token | None:
        return self.result if isinstance(self.result, Token) else None

    @property
    def failure(self) -> ParseFailure | None:
        return self.result if isinstance(self.result, ParseFailure) else None


class _ArgError(Exception):
    def __init__(self, message: str, pos: int) -> None:
        super().__init__(message)
        self.pos = pos


def _next_item(src: str, pos: int, quoted: bool, multiline: bool) -> tuple[str, int, int]:
    """Return (item, item_start, item_end) of the next whitespace-separated argument.

    Only point and rect coordinates may continue on the following lines.
    """
    ws = _WS_RX if multiline else _INLINE_WS_RX
    start = ws.match(src, pos).end()  # type: ignore[union-attr]
    if start >= len(src):
        raise _ArgError("unexpected end of input", start)
    if src[start] in "\r\n":
        raise _ArgError("missing argument", start)
    if src[start] == "$":
        raise _ArgError("missing argument before next directive", start)
    if quoted:
        m = _QUOTED_RX.match(src, start)
        if m is None:
            raise _ArgError("expected a quoted string", start)
        return m.group(1), start, m.end()
    m = _BARE_RX.match(src, start)
    assert m is not None
    return m.group(0), start, m.end()


def _to_float(item: str, pos: int) -> float:
    if _FLOAT_RX.fullmatch(item) is None:
        raise _ArgError(f"expected a number, found '{item}'", pos)
    return float(item)


def _decode_slot(src: str, pos: int, slot: Slot) -> tuple[Any, int]:
    kind = slot.kind
    if kind is SlotKind.POINT or kind is SlotKind.RECT:
        coords: list[float] = []
        for _ in range(kind.arity):
            item, start, pos = _next_item(src, pos, quoted=False, multiline=True)
            coords.append(_to_float(item, start))
        value: Any = Point3f(*coords) if kind is SlotKind.POINT else Rect(*coords)
        return value, pos

    item, start, pos = _next_item(src, pos, quoted=kind is SlotKind.QUOTED, multiline=False)
    if kind is SlotKind.COUNT:
        if _INT_RX.fullmatch(item) is None:
            raise _ArgError(f"expected an integer, found '{item}'", start)
        return int(item), pos
    if kind is SlotKind.FLOAT:
        return _to_float(item, start), pos
    if kind is SlotKind.CHOICE:
        assert slot.category is not None
        if item not in slot.category:
            raise _ArgError(f"unknown {slot.category.name} '{item}'", start)
    return item, pos


def _line_end(src: str, pos: int) -> int:
    nl = src.find("\n", pos)
    if nl < 0:
        return len(src)
    return nl - 1 if nl > pos and src[nl - 1] == "\r" else nl


def _failure_end(src: str, start: int, err_pos: int) -> int:
    """End of the raw chunk attached to a failure: the offending line, never the next directive."""
    if err_pos >= len(src) or src[err_pos] == "$":
        return start + len(src[start:err_pos].rstrip())
    return _line_end(src, err_pos)


def _scan(dialect: Dialect, src: str) -> list[Chunk]:
    chunks: list[Chunk] = []
    cursor = 0

    def _emit(start: int, end: int, result: ChunkResult) -> None:
        nonlocal cursor
        assert start >= cursor, "chunks must not overlap"
        if start > cursor:
            chunks.append(Chunk(SourceSpan(cursor, start), src[cursor:start]))
        chunks.append(Chunk(SourceSpan(start, end), src[start:end], result))
        cursor = end

    pos = 0
    while True:
        m = _DIRECTIVE_RX.search(src, pos)
        if m is None:
            break
        pos = m.end()
        found = dialect.lookup(m.group(2))
        if found is None:
            continue

        directive, fused_value = found
        start = m.start(1)
        args: list[Any] = [] if fused_value is None else [fused_value]
        arg_pos = m.end()
        try:
            for slot in directive.slots:
                value, arg_pos = _decode_slot(src, arg_pos, slot)
                args.append(value)
        except _ArgError as e:
            end = _failure_end(src, start, e.pos)
            failure = ParseFailure(f"{directive.name}: {e}", src[start:end])
            _emit(start, end, failure)
            pos = end
            continue

        _emit(start, arg_pos, Token(directive, tuple(args)))
        pos = arg_pos

    if cursor < len(src):
        chunks.append(Chunk(SourceSpan(cursor, len(src)), src[cursor:]))
    return chunks


def parse(dialect: Dialect, source: str) -> list[Chunk]:
    """Split ``source`` into ordered chunks covering the whole text.

    Recognized directives decode into tokens or failures; anything else is an
    un-annotated pass-through chunk.
    """
    return _scan(dialect, source)


def parse_tokens(dialect: Dialect, source: str) -> list[Token]:
    """Tokens only; failures and pass-through chunks are dropped."""
    return [c.token for c in _scan(dialect, source) if c.token is not None]


def scan_strict(dialect: Dialect, source: str) -> list[Chunk]:
    """Scan like :func:`parse` but raise with every failure if any directive failed."""
    chunks = _scan(dialect, source)
    failures = [c.failure for c in chunks if c.failure is not None]
    if failures:
        raise IniParseError(failures)
    return chunks
