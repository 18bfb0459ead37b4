"""Read-only document nodes for the extraction strategies.

Strategies only ever select, read text and read attributes, so they see
this small interface instead of BeautifulSoup itself.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag


class PageNode:
    """A parsed HTML element (or the whole document)."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @classmethod
    def parse(cls, html: Optional[str]) -> "PageNode":
        return cls(BeautifulSoup(html or "", "lxml"))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PageNode) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"PageNode(<{self.name}>)"

    @property
    def name(self) -> str:
        return self._tag.name or ""

    def select(self, selector: str) -> list["PageNode"]:
        return [PageNode(t) for t in self._tag.select(selector)]

    def select_one(self, selector: str) -> Optional["PageNode"]:
        tag = self._tag.select_one(selector)
        return PageNode(tag) if tag is not None else None

    def find_all(self, name: Optional[str] = None, **attrs: str) -> list["PageNode"]:
        """Descendants by tag name and exact attribute values."""
        return [PageNode(t) for t in self._tag.find_all(name, attrs=attrs) if isinstance(t, Tag)]

    def first_of(self, *selectors: str) -> Optional["PageNode"]:
        """First match trying each selector in priority order."""
        for selector in selectors:
            node = self.select_one(selector)
            if node is not None:
                return node
        return None

    def text(self) -> str:
        """Visible text with whitespace collapsed."""
        return re.sub(r"\s+", " ", self._tag.get_text(" ")).strip()

    def raw_text(self) -> str:
        """Unprocessed string content, e.g. the body of a <script>."""
        return self._tag.string or ""

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def has_attr(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def closest_with_attr(self, name: str) -> Optional["PageNode"]:
        """Nearest ancestor carrying the given attribute."""
        parent = self._tag.find_parent(attrs={name: True})
        return PageNode(parent) if parent is not None else None
