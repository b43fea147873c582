"""
Inline Mark Renderer
====================

Renders text leaves and their marks into the inline markup of an output
grammar. Text is escaped first; each mark then wraps the result of the
previous one, in the order the marks appear on the node::

    {"text": "a<b", "marks": [bold, italic]}  ->  <i><b>a&lt;b</b></i>   (house)

Targets:
    house    custom research-document XML
    docbook  DocBook 5
    html     HTML body markup
"""

from typing import Any, Dict, Optional, Tuple
import logging

from storpub_core.model.document import Mark, Node, NodeType
from storpub_core.xml.utils import escape_xml

logger = logging.getLogger(__name__)

HOUSE = "house"
DOCBOOK = "docbook"
HTML = "html"

# mark type -> (open tag, close tag); links are handled separately
_WRAPPERS: Dict[str, Dict[str, Tuple[str, str]]] = {
    HOUSE: {
        "bold": ("<b>", "</b>"),
        "italic": ("<i>", "</i>"),
        "underline": ("<u>", "</u>"),
        "strike": ("<s>", "</s>"),
        "code": ("<code>", "</code>"),
        "superscript": ("<sup>", "</sup>"),
        "subscript": ("<sub>", "</sub>"),
    },
    DOCBOOK: {
        "bold": ('<emphasis role="strong">', "</emphasis>"),
        "italic": ("<emphasis>", "</emphasis>"),
        "underline": ('<emphasis role="underline">', "</emphasis>"),
        "strike": ('<emphasis role="strikethrough">', "</emphasis>"),
        "code": ("<code>", "</code>"),
        "superscript": ("<superscript>", "</superscript>"),
        "subscript": ("<subscript>", "</subscript>"),
    },
    HTML: {
        "bold": ("<strong>", "</strong>"),
        "italic": ("<em>", "</em>"),
        "underline": ("<u>", "</u>"),
        "strike": ("<s>", "</s>"),
        "code": ("<code>", "</code>"),
        "superscript": ("<sup>", "</sup>"),
        "subscript": ("<sub>", "</sub>"),
    },
}

_ALIASES = {"strong": "bold", "em": "italic"}

_LINE_BREAKS = {
    HOUSE: "<br/>",
    DOCBOOK: "<?linebreak?>",
    HTML: "<br/>",
}

TARGETS = tuple(_WRAPPERS)


class InlineRenderer:
    """
    Render inline content for one output grammar.

    Args:
        target: One of ``house``, ``docbook``, ``html``

    Example:
        renderer = InlineRenderer("docbook")
        renderer.render_inline(paragraph_node)
    """

    def __init__(self, target: str = HOUSE):
        if target not in _WRAPPERS:
            raise ValueError(f"Unknown inline target {target!r}; expected one of {TARGETS}")
        self.target = target
        self._wrappers = _WRAPPERS[target]

    @property
    def line_break(self) -> str:
        return _LINE_BREAKS[self.target]

    def _link(self, mark: Mark, inner: str) -> str:
        href = mark.attrs.get("href")
        if not href:
            return inner
        title = mark.attrs.get("title")
        if self.target == DOCBOOK:
            title_attr = f' xlink:title="{escape_xml(title)}"' if title else ""
            return f'<link xlink:href="{escape_xml(href)}"{title_attr}>{inner}</link>'
        title_attr = f' title="{escape_xml(title)}"' if title else ""
        return f'<a href="{escape_xml(href)}"{title_attr}>{inner}</a>'

    def apply_mark(self, mark: Mark, inner: str) -> str:
        """Wrap already-rendered markup in one mark; unknown marks are no-ops."""
        mark_type = _ALIASES.get(mark.type, mark.type)
        if mark_type == "link":
            return self._link(mark, inner)
        wrapper = self._wrappers.get(mark_type)
        if wrapper is None:
            return inner
        return f"{wrapper[0]}{inner}{wrapper[1]}"

    def render_text(self, node: Node) -> str:
        """Render a single text leaf with its marks."""
        markup = escape_xml(node.text or "")
        for mark in node.marks:
            markup = self.apply_mark(mark, markup)
        return markup

    def render_inline(self, node: Optional[Any]) -> str:
        """
        Render every leaf below ``node`` in document order.

        Text leaves render with their marks, ``hardBreak`` renders as the
        target's line break, and any other node contributes its children.
        """
        if node is None:
            return ""
        if not isinstance(node, Node):
            node = Node.coerce(node)
        if node.is_text:
            return self.render_text(node)
        if node.type == NodeType.HARD_BREAK.value:
            return self.line_break
        return "".join(self.render_inline(child) for child in node.content)


def render_inline(node: Any, target: str = HOUSE) -> str:
    """Shortcut for ``InlineRenderer(target).render_inline(node)``."""
    return InlineRenderer(target).render_inline(node)
