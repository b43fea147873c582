"""
Base Adapter Classes
====================

Abstract base class for DOCX body converters, and the result containers
of the import pipeline. Extend ``BodyConverter`` to plug in a different
.docx to HTML converter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence
import logging

logger = logging.getLogger(__name__)


@dataclass
class ConversionOutput:
    """
    Output of a body conversion.

    Attributes:
        html: Converted body HTML
        messages: Converter warnings/notes, in the order emitted
    """
    html: str = ""
    messages: List[str] = field(default_factory=list)


@dataclass
class ImportResult:
    """
    Container for import results.

    Attributes:
        html: Body HTML for the editor
        metadata: Merged metadata record
        properties: Extracted ``{core, custom}`` property maps
        messages: Converter messages
    """
    html: str = ""
    metadata: Any = None
    properties: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)

    def summary(self) -> str:
        """Generate a text summary of the import."""
        title = getattr(self.metadata, "title", "") or "(untitled)"
        lines = [
            f"Import: {title}",
            f"Body: {len(self.html)} characters",
            f"Core properties: {len(self.properties.get('core', {}))}",
            f"Custom properties: {len(self.properties.get('custom', {}))}",
        ]
        if self.messages:
            lines.append(f"\nMessages ({len(self.messages)}):")
            for message in self.messages[:3]:
                lines.append(f"  - {message}")
        return "\n".join(lines)


class BodyConverter(ABC):
    """
    Abstract base class for .docx body converters.

    Example:
        class PlainTextConverter(BodyConverter):
            def convert(self, archive_bytes, style_map=()) -> ConversionOutput:
                text = extract_text(archive_bytes)
                return ConversionOutput(html=f"<p>{escape_xml(text)}</p>")
    """

    @property
    def converter_name(self) -> str:
        """Return converter name (default: class name)."""
        return self.__class__.__name__

    @abstractmethod
    def convert(self, archive_bytes: bytes, style_map: Sequence[str] = ()) -> ConversionOutput:
        """
        Convert a .docx package to body HTML.

        Args:
            archive_bytes: Raw .docx bytes
            style_map: Style mapping rules (e.g. ``"p[style-name='Title'] => h1"``)

        Returns:
            ConversionOutput with HTML and messages

        Raises:
            Any exception on unreadable input; the importer reports it
        """
        pass
