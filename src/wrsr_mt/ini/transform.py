"""Geometric token rewrites used when a whole building is scaled or mirrored."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from wrsr_mt.ini.grammar import Point3f, Rect, Token


def _map_geometry(token: Token, fn: Callable[[Point3f | Rect], Point3f | Rect]) -> Token | None:
    if not token.directive.is_geometric:
        return None
    values: list[Any] = []
    for slot, value in zip(token.directive.slots, token.values, strict=True):
        values.append(fn(value) if slot.is_geometric else value)
    return token.replace(*values)


def scale_token(token: Token, factor: float) -> Token | None:
    """Scaled copy of a token carrying points or rects; None for every other token."""
    return _map_geometry(token, lambda v: v.scaled(factor))


def mirror_token(token: Token) -> Token | None:
    """Copy of a point/rect token mirrored across the XY plane; None otherwise."""
    return _map_geometry(token, lambda v: v.mirrored_z())
