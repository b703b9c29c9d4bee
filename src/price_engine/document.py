"""Read-only document tree over a BeautifulSoup parse.

Every node of the parse gets a stable integer id (its position in the
depth-first traversal). Price candidates keep that id instead of the node
itself, so nothing extracted from a pass holds on to the tree.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    NavigableString,
    PageElement,
    PreformattedString,
    Script,
    Stylesheet,
    Tag,
    TemplateString,
)

# Strings that are never rendered in the page body.
_HIDDEN_STRINGS = (PreformattedString, Script, Stylesheet, TemplateString)
_HIDDEN_PARENTS = {"script", "style", "template", "noscript", "title"}
_LINK_TAGS = {"a", "area"}
_DOCUMENT_TEXT_TYPES = (NavigableString, CData, Script, Stylesheet, TemplateString)


@dataclass(frozen=True)
class StructuralQuery:
    """A CSS selector and the attribute holding the value (None = node text)."""

    selector: str
    attribute: str | None = None


class DocumentTree:
    """Immutable view over a parsed HTML document.

    Usage:
        tree = DocumentTree("<html>...</html>")
        node = tree.select_one("meta[property='og:title']")
        title = tree.attribute(node, "content")
    """

    def __init__(self, markup: str | bytes, parser: str = "lxml") -> None:
        self._soup = BeautifulSoup(markup, parser)
        self._nodes: list[PageElement] = list(self._soup.descendants)
        self._ids: dict[int, int] = {id(node): i for i, node in enumerate(self._nodes)}
        # get_text() is recomputed for the same ancestors over and over
        # while measuring name distances.
        self._text_cache: dict[int, str] = {}

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    @property
    def root(self) -> Tag | None:
        """The document element (<html>), or None for an empty document."""
        return self._soup.find(True)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def node(self, node_id: int) -> PageElement:
        return self._nodes[node_id]

    def node_id(self, node: PageElement) -> int | None:
        return self._ids.get(id(node))

    def elements(self) -> Iterator[tuple[int, Tag]]:
        for node_id, node in enumerate(self._nodes):
            if isinstance(node, Tag):
                yield node_id, node

    def text_nodes(self) -> Iterator[tuple[int, NavigableString]]:
        """Text nodes that could be displayed (no comments, scripts or styles)."""
        for node_id, node in enumerate(self._nodes):
            if not isinstance(node, NavigableString) or isinstance(node, _HIDDEN_STRINGS):
                continue
            parent = node.parent
            if parent is not None and parent.name in _HIDDEN_PARENTS:
                continue
            yield node_id, node

    def leaf_texts(self) -> Iterator[tuple[int, str]]:
        """Non-blank displayable text nodes with their raw text."""
        for node_id, node in self.text_nodes():
            text = str(node)
            if text.strip():
                yield node_id, text

    def parent_id(self, node_id: int) -> int | None:
        parent = self._nodes[node_id].parent
        if parent is None or parent is self._soup:
            return None
        return self.node_id(parent)

    def is_inside_link(self, node_id: int) -> bool:
        """Whether the nearest enclosing element is a hyperlink."""
        parent = self._nodes[node_id].parent
        return parent is not None and parent.name in _LINK_TAGS

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def text_content(self, node_id: int) -> str:
        """Concatenated text of a node and all its descendants."""
        cached = self._text_cache.get(node_id)
        if cached is not None:
            return cached
        node = self._nodes[node_id]
        text = node.get_text() if isinstance(node, Tag) else str(node)
        self._text_cache[node_id] = text
        return text

    def full_text(self) -> str:
        """Text content of the whole document, script code included.

        Plain get_text() leaves script and style strings out.
        """
        return self._soup.get_text(types=_DOCUMENT_TEXT_TYPES)

    @staticmethod
    def attribute(node: Tag | None, name: str) -> str | None:
        if node is None:
            return None
        value = node.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def select_one(self, selector: str) -> Tag | None:
        """First element matching a CSS selector.

        Raises:
            soupsieve.SelectorSyntaxError: If the selector is malformed.
        """
        return self._soup.select_one(selector)

    def select(self, selector: str) -> list[Tag]:
        return self._soup.select(selector)

    def read(self, node: Tag, attribute: str | None) -> str | None:
        """Read an attribute value, or the node text when ``attribute`` is None."""
        if attribute:
            return self.attribute(node, attribute)
        return node.get_text()

    def first_content(self, queries: tuple[StructuralQuery, ...]) -> str | None:
        """Value of the first query whose node exists and has a non-blank value."""
        for query in queries:
            node = self.select_one(query.selector)
            if node is None:
                continue
            value = self.read(node, query.attribute)
            if value and value.strip():
                return value
        return None

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def distance_to_closest(
        self, node_id: int, predicate: Callable[[str], bool]
    ) -> int | None:
        """Hop count from a node to the closest node whose text satisfies ``predicate``.

        An ancestor's text contains the text of every node below it, so the
        closest match in the tree is always the node itself or one of its
        ancestors; walking up is enough.
        """
        distance = 0
        current: int | None = node_id
        while current is not None:
            if predicate(self.text_content(current)):
                return distance
            current = self.parent_id(current)
            distance += 1
        return None
