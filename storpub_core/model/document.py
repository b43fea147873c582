"""
Document Tree
=============

The canonical editable-content representation: a recursive node tree in
the ProseMirror/TipTap JSON shape::

    {"type": "doc", "content": [
        {"type": "heading", "attrs": {"level": 1},
         "content": [{"type": "text", "text": "Intro", "marks": [{"type": "bold"}]}]},
        ...
    ]}

Trees are read-only input to the serializers. ``Node.from_dict`` is
tolerant: it never raises on odd shapes, it drops what it cannot use.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional
import logging

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    """Node types with dedicated serializer handling."""
    DOC = "doc"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    CODE_BLOCK = "codeBlock"
    HORIZONTAL_RULE = "horizontalRule"
    HARD_BREAK = "hardBreak"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_CELL = "tableCell"
    TABLE_HEADER = "tableHeader"
    TEXT = "text"


class MarkType(str, Enum):
    """Inline mark types understood by the inline renderer."""
    BOLD = "bold"
    STRONG = "strong"
    ITALIC = "italic"
    EM = "em"
    UNDERLINE = "underline"
    STRIKE = "strike"
    CODE = "code"
    LINK = "link"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


LIST_TYPES = frozenset({NodeType.BULLET_LIST.value, NodeType.ORDERED_LIST.value})
TABLE_CELL_TYPES = frozenset({NodeType.TABLE_CELL.value, NodeType.TABLE_HEADER.value})


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


@dataclass(frozen=True)
class Mark:
    """An inline formatting mark on a text node."""

    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Mark"]:
        """Build a mark, or return None when ``data`` has no usable type."""
        if isinstance(data, str):
            return cls(type=data)
        if not isinstance(data, Mapping):
            return None
        mark_type = data.get("type")
        if not isinstance(mark_type, str) or not mark_type:
            return None
        return cls(type=mark_type, attrs=_as_dict(data.get("attrs")))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        return data


@dataclass(frozen=True)
class Node:
    """
    A document tree node.

    Attributes:
        type: Node type name (see NodeType; any string is accepted)
        attrs: Node attributes (e.g. heading ``level``)
        content: Ordered child nodes; always empty for ``text`` leaves
        text: Text of a ``text`` leaf
        marks: Ordered inline marks of a ``text`` leaf
    """

    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    content: List["Node"] = field(default_factory=list)
    text: Optional[str] = None
    marks: List[Mark] = field(default_factory=list)

    @classmethod
    def _from_mapping(cls, data: Mapping[str, Any]) -> "Node":
        node_type = data.get("type")
        if not isinstance(node_type, str) or not node_type:
            node_type = "unknown"

        if node_type == NodeType.TEXT.value:
            raw_text = data.get("text")
            text = raw_text if isinstance(raw_text, str) else ("" if raw_text is None else str(raw_text))
            marks = [m for m in (Mark.from_dict(x) for x in _as_list(data.get("marks"))) if m]
            return cls(type=node_type, attrs=_as_dict(data.get("attrs")), text=text, marks=marks)

        return cls(type=node_type, attrs=_as_dict(data.get("attrs")))

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Node"]:
        """
        Build a node tree from editor JSON.

        Built with an explicit stack; nesting depth is not bounded by the
        recursion limit.

        Args:
            data: Mapping in the ProseMirror JSON shape

        Returns:
            Node, or None when ``data`` is not a mapping
        """
        if isinstance(data, Node):
            return data
        if not isinstance(data, Mapping):
            return None

        root = cls._from_mapping(data)
        pending = [(data, root)]
        while pending:
            raw, node = pending.pop()
            if node.is_text:
                continue
            for child_data in _as_list(raw.get("content")):
                if isinstance(child_data, Node):
                    node.content.append(child_data)
                elif isinstance(child_data, Mapping):
                    child = cls._from_mapping(child_data)
                    node.content.append(child)
                    pending.append((child_data, child))
        return root

    @classmethod
    def coerce(cls, value: Any) -> "Node":
        """Accept a Node, a mapping or None and always return a root node."""
        if isinstance(value, Node):
            return value
        node = cls.from_dict(value)
        if node is None:
            if value is not None:
                logger.warning(f"Document tree is not a mapping ({type(value).__name__}); using empty document")
            return cls(type=NodeType.DOC.value)
        return node

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to editor JSON."""
        data: Dict[str, Any] = {"type": self.type}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        if self.type == NodeType.TEXT.value:
            data["text"] = self.text or ""
            if self.marks:
                data["marks"] = [m.to_dict() for m in self.marks]
        elif self.content:
            data["content"] = [c.to_dict() for c in self.content]
        return data

    @property
    def is_text(self) -> bool:
        return self.type == NodeType.TEXT.value

    def text_content(self) -> str:
        """Concatenated text of all descendant text leaves."""
        if self.is_text:
            return self.text or ""
        return "".join(node.text or "" for node in self.iter_descendants() if node.is_text)

    def iter_descendants(self) -> Iterator["Node"]:
        """Depth-first pre-order walk (excluding self)."""
        pending = list(reversed(self.content))
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node.content))

    def heading_level(self) -> int:
        """Heading level clamped to 1..6; anything unreadable counts as 1."""
        raw = self.attrs.get("level", 1)
        try:
            level = int(raw)
        except (TypeError, ValueError, OverflowError):
            return 1
        return max(1, min(6, level))


def document(*blocks: Node) -> Node:
    """Convenience constructor for a ``doc`` node."""
    return Node(type=NodeType.DOC.value, content=list(blocks))
