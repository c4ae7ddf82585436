"""Read-only document capability handed to the source adapters.

Adapters never look up a browser or a page from ambient state; they receive a
``DocumentHandle`` and query it with CSS selectors. ``SoupDocument`` backs the
handle with BeautifulSoup so the same adapters run against a rendered page
snapshot or a synthetic HTML fixture.
"""

from __future__ import annotations

from typing import List, Optional, Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

URL_ATTRIBUTES = frozenset({"href", "src", "action"})


class NodeHandle(Protocol):
    """A queryable element scoped to part of a document."""

    @property
    def text(self) -> str:
        ...

    def attr(self, name: str) -> Optional[str]:
        ...

    def select(self, selector: str) -> List["NodeHandle"]:
        ...

    def select_one(self, selector: str) -> Optional["NodeHandle"]:
        ...


class DocumentHandle(NodeHandle, Protocol):
    """A whole rendered page."""

    url: str


class SoupNode:
    """``NodeHandle`` implementation over a BeautifulSoup tag."""

    def __init__(self, tag: Tag, base_url: str = "") -> None:
        self._tag = tag
        self._base_url = base_url

    @property
    def text(self) -> str:
        # Mirrors DOM textContent: descendant strings concatenated as-is.
        return self._tag.get_text()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            value = " ".join(value)
        if name in URL_ATTRIBUTES and value:
            return urljoin(self._base_url, value)
        return value

    def select(self, selector: str) -> List["SoupNode"]:
        return [SoupNode(tag, self._base_url) for tag in self._tag.select(selector)]

    def select_one(self, selector: str) -> Optional["SoupNode"]:
        tag = self._tag.select_one(selector)
        return SoupNode(tag, self._base_url) if tag is not None else None

    def __repr__(self) -> str:
        return f"SoupNode(<{self._tag.name}>)"


class SoupDocument(SoupNode):
    """A parsed page snapshot exposing the ``DocumentHandle`` interface."""

    def __init__(self, soup: BeautifulSoup, url: str = "") -> None:
        super().__init__(soup, base_url=url)
        self.url = url

    @classmethod
    def from_html(cls, html: str, url: str = "") -> "SoupDocument":
        return cls(BeautifulSoup(html, "html.parser"), url=url)
