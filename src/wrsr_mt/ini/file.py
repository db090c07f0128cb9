"""Parsed ini files that re-serialize with a minimal diff.

Every recognized directive keeps the span it was read from. Serialization
copies the original text verbatim and only re-formats the spans whose token
was replaced, so an untouched file is reproduced byte for byte.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from wrsr_mt import fileio
from wrsr_mt.errors import IniParseError
from wrsr_mt.ini.grammar import Dialect, Token, format_token
from wrsr_mt.ini.scanner import SourceSpan, scan_strict


@dataclass(frozen=True)
class Original:
    token: Token


@dataclass(frozen=True)
class Modified:
    token: Token


TokenState = Original | Modified


@dataclass
class IniEntry:
    span: SourceSpan
    text: str
    state: TokenState

    @property
    def token(self) -> Token:
        return self.state.token

    @property
    def modified(self) -> bool:
        return isinstance(self.state, Modified)


class IniFile:
    def __init__(self, dialect: Dialect, source: str, entries: list[IniEntry]) -> None:
        self.dialect = dialect
        self.source = source
        self.entries = entries

    @classmethod
    def parse(cls, dialect: Dialect, source: str) -> IniFile:
        chunks = scan_strict(dialect, source)
        entries = [IniEntry(c.span, c.text, Original(c.token)) for c in chunks if c.token is not None]
        return cls(dialect, source, entries)

    @classmethod
    def load(cls, dialect: Dialect, path: Path, encoding: str = fileio.TEXT_ENCODING) -> IniFile:
        source = fileio.read_text(path, encoding)
        try:
            return cls.parse(dialect, source)
        except IniParseError as e:
            raise e.with_path(path) from None

    def copy(self) -> IniFile:
        """Independent copy; replacing tokens in it leaves this file untouched."""
        entries = [IniEntry(e.span, e.text, e.state) for e in self.entries]
        return IniFile(self.dialect, self.source, entries)

    def __iter__(self) -> Iterator[Token]:
        return (e.token for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def tokens(self) -> list[Token]:
        return [e.token for e in self.entries]

    def find(self, keyword: str) -> list[IniEntry]:
        return [e for e in self.entries if e.token.keyword == keyword]

    def first(self, keyword: str) -> Token | None:
        found = self.find(keyword)
        return found[0].token if found else None

    def replace(self, index: int, token: Token) -> None:
        entry = self.entries[index]
        if token.dialect != self.dialect.name:
            raise ValueError(f"Token {token.keyword} belongs to dialect '{token.dialect}', not '{self.dialect.name}'")
        if token != entry.token:
            entry.state = Modified(token)

    def modify(self, fn: Callable[[Token], Token | None]) -> int:
        """Apply ``fn`` to every token; a non-None result replaces it. Returns the change count."""
        changed = 0
        for i, entry in enumerate(self.entries):
            new = fn(entry.token)
            if new is not None and new != entry.token:
                self.replace(i, new)
                changed += 1
        return changed

    @property
    def is_modified(self) -> bool:
        return any(e.modified for e in self.entries)

    def render(self) -> str:
        out: list[str] = []
        cursor = 0
        prev_end = 0
        for entry in self.entries:
            assert entry.span.start >= prev_end, "token spans must be strictly increasing"
            prev_end = entry.span.end
            if isinstance(entry.state, Modified):
                out.append(self.source[cursor : entry.span.start])
                out.append(format_token(entry.state.token))
                cursor = entry.span.end
        out.append(self.source[cursor:])
        return "".join(out)

    def to_bytes(self, encoding: str = fileio.TEXT_ENCODING) -> bytes:
        return fileio.encode_text(self.render(), encoding)

    def write(self, path: Path, encoding: str = fileio.TEXT_ENCODING) -> None:
        fileio.write_bytes(path, self.to_bytes(encoding))


def parse_strict(dialect: Dialect, source: str) -> IniFile:
    """Parse ``source``; raise :class:`IniParseError` listing every failed directive."""
    return IniFile.parse(dialect, source)
