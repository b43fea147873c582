"""
Section Builder
===============

Turns the flat block sequence of a document into a tree of sections keyed
by heading level. Used by the DocBook serializer.

Stack rule (pop-while-top-level-≥-new-level):
    A stack of open sections starts with a synthetic level-0 root. A
    heading of level L pops sections while the top of the stack has
    level >= L, becomes a child of the new top, and is pushed. Every other
    block is attached to the section on top of the stack.

Out-of-order levels never fail. ``[H1 "A", H3 "B", H2 "C"]`` gives::

    root
    └── A (1)
        ├── B (3)
        └── C (2)

Example:
    root = build_sections(tree)
    for section in root.children:
        print(section.level, section.title_text)
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional
import logging

from storpub_core.model.document import Node, NodeType
from storpub_core.serializers.blocks import BlockRenderer, DocBookBlockRenderer
from storpub_core.xml.utils import strip_markup, xml_comment

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"

PARAGRAPH_TYPES = frozenset({NodeType.PARAGRAPH.value, NodeType.TEXT.value})
EXTRA_TYPES = frozenset({
    NodeType.BULLET_LIST.value,
    NodeType.ORDERED_LIST.value,
    NodeType.BLOCKQUOTE.value,
    NodeType.CODE_BLOCK.value,
    NodeType.HORIZONTAL_RULE.value,
    NodeType.TABLE.value,
})


@dataclass
class Section:
    """
    A section of the restructured document.

    Attributes:
        level: Heading level (0 for the synthetic root)
        title: Rendered title markup (None for the root)
        title_text: Plain text of the title, used for ids
        children: Nested sections, in document order
        paragraphs: Rendered paragraph markup
        extras: Other rendered block markup (lists, tables, placeholders)
    """
    level: int
    title: Optional[str] = None
    title_text: str = ""
    children: List['Section'] = field(default_factory=list)
    paragraphs: List[str] = field(default_factory=list)
    extras: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.children or self.paragraphs or self.extras)

    def iter_sections(self) -> Iterator['Section']:
        """Depth-first walk over all descendant sections."""
        for child in self.children:
            yield child
            yield from child.iter_sections()


def _attach(node: Node, current: Section, renderer: BlockRenderer) -> None:
    if node.type in PARAGRAPH_TYPES:
        current.paragraphs.append(renderer.paragraph(node))
    elif node.type in EXTRA_TYPES:
        current.extras.append(renderer.render(node))
    elif node.content:
        markup = renderer.render_children(node)
        if markup:
            current.extras.append(markup)


def build_sections(document: Any, renderer: Optional[BlockRenderer] = None) -> Section:
    """
    Build the section tree of a document.

    Args:
        document: Root node (Node or editor JSON mapping)
        renderer: Block renderer for paragraphs, extras and titles;
            defaults to DocBookBlockRenderer

    Returns:
        Synthetic level-0 root section. Content before the first heading
        stays on the root.
    """
    tree = Node.coerce(document)
    renderer = renderer or DocBookBlockRenderer()

    root = Section(level=0)
    stack: List[Section] = [root]

    for node in tree.content:
        current = stack[-1]
        try:
            if node.type == NodeType.HEADING.value:
                level = node.heading_level()
                title = renderer.inline_markup(node) or UNTITLED
                title_text = strip_markup(title).strip() or UNTITLED
                while stack[-1].level >= level:
                    stack.pop()
                section = Section(level=level, title=title, title_text=title_text)
                stack[-1].children.append(section)
                stack.append(section)
            else:
                _attach(node, current, renderer)
        except Exception as e:
            logger.warning(f"Could not render {node.type} block: {e}")
            current.extras.append(xml_comment(f"block error: {node.type}: {e}"))

    return root
