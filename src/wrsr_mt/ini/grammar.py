"""Data-driven directive tables shared by the three ini dialects.

A dialect is a table of :class:`Directive` entries. Each directive declares its
keyword and an ordered tuple of argument :class:`Slot` values; the scanner and
the formatter walk that table instead of carrying per-directive code.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, NamedTuple

# float serialization precision
FLOAT_PRECISION = 4
LINE_BREAK = "\r\n"


class Point3f(NamedTuple):
    x: float
    y: float
    z: float

    def scaled(self, factor: float) -> Point3f:
        return Point3f(self.x * factor, self.y * factor, self.z * factor)

    def mirrored_z(self) -> Point3f:
        return Point3f(self.x, self.y, -self.z)


class Rect(NamedTuple):
    x1: float
    z1: float
    x2: float
    z2: float

    def scaled(self, factor: float) -> Rect:
        return Rect(self.x1 * factor, self.z1 * factor, self.x2 * factor, self.z2 * factor)

    def mirrored_z(self) -> Rect:
        return Rect(self.x1, -self.z1, self.x2, -self.z2)


class SlotKind(enum.Enum):
    COUNT = "count"
    FLOAT = "float"
    POINT = "point"
    RECT = "rect"
    IDENT = "ident"
    QUOTED = "quoted"
    PATH = "path"
    CHOICE = "choice"

    @property
    def arity(self) -> int:
        if self is SlotKind.POINT:
            return 3
        if self is SlotKind.RECT:
            return 4
        return 1


class NodeMatch(enum.Enum):
    """How a directive's identifier argument is matched against model objects."""

    EXACT = "exact"
    PREFIX = "prefix"


@dataclass(frozen=True)
class Category:
    name: str
    values: frozenset[str]

    @classmethod
    def of(cls, name: str, values: Iterable[str], prefix: str = "") -> Category:
        return cls(name, frozenset(prefix + v for v in values))

    def __contains__(self, value: object) -> bool:
        return value in self.values


@dataclass(frozen=True)
class Slot:
    kind: SlotKind
    category: Category | None = None

    @property
    def arity(self) -> int:
        return self.kind.arity

    @property
    def is_geometric(self) -> bool:
        return self.kind in (SlotKind.POINT, SlotKind.RECT)


COUNT = Slot(SlotKind.COUNT)
FLOAT = Slot(SlotKind.FLOAT)
POINT = Slot(SlotKind.POINT)
RECT = Slot(SlotKind.RECT)
IDENT = Slot(SlotKind.IDENT)
QUOTED = Slot(SlotKind.QUOTED)
PATH = Slot(SlotKind.PATH)


def choice(category: Category) -> Slot:
    return Slot(SlotKind.CHOICE, category)


@dataclass(frozen=True)
class Directive:
    """One keyword of a dialect and the shape of its arguments.

    A ``fused`` directive carries a category value glued to its keyword
    (``$TYPE_LIVING``): ``keyword`` is the prefix and ``fused`` the category the
    remainder must belong to. The fused value becomes the first token argument.
    """

    keyword: str
    slots: tuple[Slot, ...] = ()
    fused: Category | None = None
    node_ref: NodeMatch | None = None
    inline: bool = False
    dialect: str = field(default="", compare=False)

    @property
    def name(self) -> str:
        if self.fused is not None:
            return f"{self.keyword}<{self.fused.name}>"
        return self.keyword

    @property
    def is_geometric(self) -> bool:
        return any(s.is_geometric for s in self.slots)


@dataclass(frozen=True)
class Token:
    """An immutable decoded directive."""

    directive: Directive
    args: tuple[Any, ...] = ()

    @property
    def keyword(self) -> str:
        return self.directive.keyword

    @property
    def dialect(self) -> str:
        return self.directive.dialect

    @property
    def fused_value(self) -> str | None:
        return self.args[0] if self.directive.fused is not None else None

    @property
    def values(self) -> tuple[Any, ...]:
        """Arguments without the fused keyword value."""
        return self.args[1:] if self.directive.fused is not None else self.args

    def replace(self, *values: Any) -> Token:
        if self.directive.fused is not None:
            return Token(self.directive, (self.args[0], *values))
        return Token(self.directive, tuple(values))

    def format(self) -> str:
        return format_token(self)

    def __str__(self) -> str:
        return self.format().replace(LINE_BREAK, " ")


class Dialect:
    """A closed keyword table."""

    def __init__(self, name: str, directives: Iterable[Directive]) -> None:
        self.name = name
        self._exact: dict[str, Directive] = {}
        self._fused: list[Directive] = []
        for d in directives:
            d = Directive(d.keyword, d.slots, d.fused, d.node_ref, d.inline, dialect=name)
            if d.fused is not None:
                self._fused.append(d)
            elif d.keyword in self._exact:
                raise ValueError(f"Duplicate keyword '{d.keyword}' in dialect '{name}'")
            else:
                self._exact[d.keyword] = d
        # longest prefixes first so the most specific fused keyword wins
        self._fused.sort(key=lambda d: len(d.keyword), reverse=True)

    def __getitem__(self, keyword: str) -> Directive:
        return self._exact[keyword]

    def __iter__(self) -> Iterator[Directive]:
        yield from self._exact.values()
        yield from self._fused

    def lookup(self, word: str) -> tuple[Directive, str | None] | None:
        """Resolve a keyword as written after ``$``; None for unknown keywords."""
        d = self._exact.get(word)
        if d is not None:
            return d, None
        for d in self._fused:
            assert d.fused is not None
            if word.startswith(d.keyword) and word[len(d.keyword) :] in d.fused:
                return d, word[len(d.keyword) :]
        return None

    def fused_directive(self, keyword: str, value: str) -> Directive:
        for d in self._fused:
            if d.keyword == keyword and d.fused is not None and value in d.fused:
                return d
        raise KeyError(keyword + value)

    def token(self, keyword: str, *args: Any) -> Token:
        """Build a token programmatically, e.g. ``BUILDING.token("TYPE_", "LIVING")``."""
        if keyword in self._exact:
            return Token(self._exact[keyword], tuple(args))
        return Token(self.fused_directive(keyword, args[0]), tuple(args))

    def __repr__(self) -> str:
        return f"Dialect({self.name!r})"


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _fmt_float(value: float) -> str:
    return f"{value:.{FLOAT_PRECISION}f}"


def format_token(token: Token) -> str:
    d = token.directive
    out = ["$", d.keyword]
    values = token.values
    if d.fused is not None:
        out.append(token.args[0])

    for slot, value in zip(d.slots, values, strict=True):
        if slot.kind is SlotKind.POINT:
            sep = " " if d.inline else LINE_BREAK
            out.append(sep + " ".join(_fmt_float(c) for c in value))
        elif slot.kind is SlotKind.RECT:
            if d.inline:
                out.append(" " + " ".join(_fmt_float(c) for c in value))
            else:
                out.append(f"{LINE_BREAK}{_fmt_float(value.x1)} {_fmt_float(value.z1)}")
                out.append(f"{LINE_BREAK}{_fmt_float(value.x2)} {_fmt_float(value.z2)}")
        elif slot.kind is SlotKind.FLOAT:
            out.append(" " + _fmt_float(value))
        elif slot.kind is SlotKind.QUOTED:
            out.append(f' "{value}"')
        else:
            out.append(f" {value}")
    return "".join(out)
