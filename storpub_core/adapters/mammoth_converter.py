"""
Mammoth Body Converter
======================

.docx body to HTML conversion through the ``mammoth`` library. Word
paragraph styles are mapped to HTML headings by a style map; mammoth's
default style map stays enabled for everything else (lists, tables,
bold/italic runs).
"""

from typing import List, Optional, Sequence
import io
import logging

import mammoth

from storpub_core.adapters.base import BodyConverter, ConversionOutput

logger = logging.getLogger(__name__)

DEFAULT_STYLE_MAP = (
    "p[style-name='Title'] => h1",
    "p[style-name='Heading 1'] => h1",
    "p[style-name='Heading 2'] => h2",
    "p[style-name='Heading 3'] => h3",
    "p[style-name='Heading 4'] => h4",
)


class MammothBodyConverter(BodyConverter):
    """
    Convert .docx bodies with mammoth.

    Args:
        style_map: Default style map, used when ``convert`` gets none
        include_default_style_map: Keep mammoth's built-in style map
    """

    def __init__(self,
                 style_map: Optional[Sequence[str]] = None,
                 include_default_style_map: bool = True):
        self.style_map: List[str] = list(style_map if style_map is not None else DEFAULT_STYLE_MAP)
        self.include_default_style_map = include_default_style_map

    def convert(self, archive_bytes: bytes, style_map: Sequence[str] = ()) -> ConversionOutput:
        rules = list(style_map) or self.style_map
        result = mammoth.convert_to_html(
            io.BytesIO(archive_bytes),
            style_map="\n".join(rules),
            include_default_style_map=self.include_default_style_map,
        )
        messages = [f"{m.type}: {m.message}" for m in result.messages]
        for message in messages:
            logger.info(f"mammoth: {message}")
        return ConversionOutput(html=result.value, messages=messages)
