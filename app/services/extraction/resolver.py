"""Ordered selector fallback shared by every extracted field.

Result-page markup is unversioned, so no single selector can be trusted. Each
field is described by an ordered list of ``Lookup`` descriptors plus an
acceptance predicate; the resolver returns the value of the first descriptor
that yields an acceptable, non-empty value and ``""`` (or ``[]``) otherwise.
Callers apply their own sentinels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from app.services.extraction.document import NodeHandle
from app.services.extraction.text import clean_text, is_pure_numeric

Predicate = Callable[[str], bool]
Splitter = Callable[[str], List[str]]


@dataclass(frozen=True)
class Lookup:
    """Describe how to read one candidate value relative to a scoped node.

    ``selector=None`` targets the scoped node itself. ``attribute`` reads an
    attribute (URL attributes come back absolute) instead of the text content.
    """

    selector: Optional[str] = None
    attribute: Optional[str] = None

    def targets(self, node: NodeHandle, *, all_matches: bool = False) -> List[NodeHandle]:
        if self.selector is None:
            return [node]
        if all_matches:
            return node.select(self.selector)
        match = node.select_one(self.selector)
        return [match] if match is not None else []

    def read(self, target: NodeHandle) -> str:
        if self.attribute:
            return clean_text(target.attr(self.attribute))
        return clean_text(target.text)


def lookups(*selectors: str, attribute: Optional[str] = None) -> List[Lookup]:
    """Shorthand for a strategy list of plain selector lookups."""

    return [Lookup(selector, attribute) for selector in selectors]


def resolve_text(
    node: Optional[NodeHandle],
    strategies: Sequence[Lookup],
    *,
    accept: Optional[Predicate] = None,
    min_length: int = 0,
) -> str:
    """Return the first acceptable cleaned value produced by ``strategies``."""

    if node is None:
        return ""
    for strategy in strategies:
        for target in strategy.targets(node):
            value = strategy.read(target)
            if not value or len(value) < min_length:
                continue
            if accept is not None and not accept(value):
                continue
            return value
    return ""


def resolve_list(
    node: Optional[NodeHandle],
    strategies: Sequence[Lookup],
    *,
    accept: Optional[Predicate] = None,
    limit: int = 5,
    split: Optional[Splitter] = None,
) -> List[str]:
    """Return the first non-empty list of values, collected from all matches of one strategy."""

    if node is None:
        return []
    for strategy in strategies:
        values: List[str] = []
        for target in strategy.targets(node, all_matches=True):
            raw = strategy.read(target)
            candidates = split(raw) if split else [raw]
            for candidate in candidates:
                value = clean_text(candidate)
                if len(value) <= 1 or is_pure_numeric(value):
                    continue
                if accept is not None and not accept(value):
                    continue
                values.append(value)
        if values:
            return values[:limit]
    return []


def resolve_node(node: Optional[NodeHandle], selectors: Sequence[str]) -> Optional[NodeHandle]:
    """Return the first element matched by the ordered ``selectors``."""

    if node is None:
        return None
    for selector in selectors:
        match = node.select_one(selector)
        if match is not None:
            return match
    return None


def resolve_nodes(node: NodeHandle, selectors: Sequence[str]) -> List[NodeHandle]:
    """Return the match set of the first selector that matches anything."""

    for selector in selectors:
        matches = node.select(selector)
        if matches:
            return matches
    return []
