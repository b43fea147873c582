"""
Block Renderers
===============

Block-level rendering of the document tree, one renderer per output
grammar. Each renderer dispatches through a handler table keyed by node
type; node types without a handler render their children, so unknown
nodes never fail a conversion.

Renderers:
    HouseBlockRenderer    <p>, <list>, <item>, <codeblock>, <table>/<row>/<cell>
    DocBookBlockRenderer  <para>, <itemizedlist>, <programlisting>, <informaltable>
    HtmlBlockRenderer     <p>, <ul>/<ol>, <pre><code>, <table>
"""

from typing import Callable, Dict, Iterator, Optional
import logging

from storpub_core.model.document import Node, NodeType
from storpub_core.serializers.inline import DOCBOOK, HOUSE, HTML, InlineRenderer
from storpub_core.xml.utils import escape_xml

logger = logging.getLogger(__name__)

Handler = Callable[[Node], str]

ROW_TYPES = frozenset({NodeType.TABLE_ROW.value, "tr"})
HEADER_CELL_TYPES = frozenset({NodeType.TABLE_HEADER.value, "th"})
CELL_TYPES = frozenset({NodeType.TABLE_CELL.value, "td"}) | HEADER_CELL_TYPES


def iter_table_rows(table: Node) -> Iterator[Node]:
    """Yield the rows of a table, looking through thead/tbody/tfoot wrappers."""
    for child in table.content:
        if child.type in ROW_TYPES:
            yield child
        elif not child.is_text:
            yield from iter_table_rows(child)


def iter_row_cells(row: Node) -> Iterator[Node]:
    for child in row.content:
        if child.type in CELL_TYPES:
            yield child


class BlockRenderer:
    """
    Base class for block renderers.

    Subclasses set ``target`` and return their handler table from
    ``build_handlers``.
    """

    target = HOUSE

    def __init__(self, inline: Optional[InlineRenderer] = None):
        self.inline = inline or InlineRenderer(self.target)
        self.handlers: Dict[str, Handler] = self.build_handlers()

    def build_handlers(self) -> Dict[str, Handler]:
        return {}

    def render(self, node: Node) -> str:
        """Render one node through the handler table."""
        if node.is_text:
            return self.inline.render_text(node)
        if node.type == NodeType.HARD_BREAK.value:
            return self.inline.line_break
        handler = self.handlers.get(node.type, self.render_children)
        return handler(node)

    def render_children(self, node: Node, separator: str = "") -> str:
        return separator.join(self.render(child) for child in node.content)

    def inline_markup(self, node: Node) -> str:
        """Inline markup of a node (used for paragraphs and heading titles)."""
        return self.inline.render_inline(node)

    def paragraph(self, node: Node) -> str:
        raise NotImplementedError


class HouseBlockRenderer(BlockRenderer):
    """Blocks of the house research-document schema."""

    target = HOUSE

    def build_handlers(self) -> Dict[str, Handler]:
        return {
            NodeType.PARAGRAPH.value: self.paragraph,
            NodeType.HEADING.value: self.heading,
            NodeType.BLOCKQUOTE.value: lambda n: f"<blockquote>{self.render_children(n)}</blockquote>",
            NodeType.BULLET_LIST.value: lambda n: f'<list type="bullet">{self.render_children(n)}</list>',
            NodeType.ORDERED_LIST.value: lambda n: f'<list type="ordered">{self.render_children(n)}</list>',
            NodeType.LIST_ITEM.value: lambda n: f"<item>{self.render_children(n)}</item>",
            NodeType.CODE_BLOCK.value: lambda n: f"<codeblock>{escape_xml(n.text_content())}</codeblock>",
            NodeType.HORIZONTAL_RULE.value: lambda n: "<hr/>",
            NodeType.TABLE.value: lambda n: f"<table>{self.render_children(n)}</table>",
            NodeType.TABLE_ROW.value: lambda n: f"<row>{self.render_children(n)}</row>",
            NodeType.TABLE_CELL.value: self.cell,
            NodeType.TABLE_HEADER.value: lambda n: f'<cell header="true">{self.render_children(n)}</cell>',
            "th": self.cell,
            "td": self.cell,
        }

    def paragraph(self, node: Node) -> str:
        return f"<p>{self.inline_markup(node)}</p>"

    def heading(self, node: Node) -> str:
        # Flat: the heading's following blocks are not nested inside it.
        title = self.inline_markup(node) or "Untitled"
        return f"<section><title>{title}</title></section>"

    def cell(self, node: Node) -> str:
        return f"<cell>{self.render_children(node)}</cell>"


class DocBookBlockRenderer(BlockRenderer):
    """Blocks of a DocBook 5 article body."""

    target = DOCBOOK

    def build_handlers(self) -> Dict[str, Handler]:
        return {
            NodeType.PARAGRAPH.value: self.paragraph,
            NodeType.HEADING.value: lambda n: f"<bridgehead>{self.inline_markup(n)}</bridgehead>",
            NodeType.BLOCKQUOTE.value: self.blockquote,
            NodeType.BULLET_LIST.value: lambda n: self.list_block(n, "itemizedlist"),
            NodeType.ORDERED_LIST.value: lambda n: self.list_block(n, "orderedlist"),
            NodeType.LIST_ITEM.value: self.list_item,
            NodeType.CODE_BLOCK.value: self.code_block,
            NodeType.HORIZONTAL_RULE.value: lambda n: "<literallayout>—</literallayout>",
            NodeType.TABLE.value: self.table,
        }

    def paragraph(self, node: Node) -> str:
        return f"<para>{self.inline_markup(node)}</para>"

    def _block_or_para(self, node: Node) -> str:
        if node.is_text or node.type not in self.handlers:
            return self.paragraph(node)
        return self.render(node)

    def blockquote(self, node: Node) -> str:
        inner = "".join(self._block_or_para(child) for child in node.content)
        return f"<blockquote>{inner or '<para></para>'}</blockquote>"

    def list_block(self, node: Node, tag: str) -> str:
        return f"<{tag}>{self.render_children(node)}</{tag}>"

    def list_item(self, node: Node) -> str:
        inner = "".join(self._block_or_para(child) for child in node.content)
        return f"<listitem>{inner or '<para></para>'}</listitem>"

    def code_block(self, node: Node) -> str:
        return f"<programlisting>{escape_xml(node.text_content())}</programlisting>"

    def entry(self, cell: Node) -> str:
        inner = "".join(self._block_or_para(child) for child in cell.content)
        role = ' role="header"' if cell.type in HEADER_CELL_TYPES else ""
        return f"<entry{role}>{inner}</entry>"

    def table(self, node: Node) -> str:
        rows = [
            f"<row>{''.join(self.entry(cell) for cell in iter_row_cells(row))}</row>"
            for row in iter_table_rows(node)
        ]
        body = "\n".join(rows)
        return f"<informaltable>\n<tbody>\n{body}\n</tbody>\n</informaltable>"


class HtmlBlockRenderer(BlockRenderer):
    """HTML body markup, for documents that arrive without editor HTML."""

    target = HTML

    def build_handlers(self) -> Dict[str, Handler]:
        return {
            NodeType.PARAGRAPH.value: self.paragraph,
            NodeType.HEADING.value: self.heading,
            NodeType.BLOCKQUOTE.value: lambda n: f"<blockquote>{self.render_children(n)}</blockquote>",
            NodeType.BULLET_LIST.value: lambda n: f"<ul>{self.render_children(n)}</ul>",
            NodeType.ORDERED_LIST.value: lambda n: f"<ol>{self.render_children(n)}</ol>",
            NodeType.LIST_ITEM.value: lambda n: f"<li>{self.render_children(n)}</li>",
            NodeType.CODE_BLOCK.value: lambda n: f"<pre><code>{escape_xml(n.text_content())}</code></pre>",
            NodeType.HORIZONTAL_RULE.value: lambda n: "<hr/>",
            NodeType.TABLE.value: self.table,
        }

    def paragraph(self, node: Node) -> str:
        return f"<p>{self.inline_markup(node)}</p>"

    def heading(self, node: Node) -> str:
        level = node.heading_level()
        return f"<h{level}>{self.inline_markup(node)}</h{level}>"

    def cell(self, cell: Node) -> str:
        tag = "th" if cell.type in HEADER_CELL_TYPES else "td"
        return f"<{tag}>{self.render_children(cell)}</{tag}>"

    def table(self, node: Node) -> str:
        rows = "".join(
            f"<tr>{''.join(self.cell(cell) for cell in iter_row_cells(row))}</tr>"
            for row in iter_table_rows(node)
        )
        return f"<table><tbody>{rows}</tbody></table>"
