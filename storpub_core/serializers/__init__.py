"""
Serializers
===========

Output grammars for a document tree plus its metadata record:

- House XML (``<researchDocument>``), walked block by block
- DocBook 5 (``<article>``), restructured into sections by heading level
- HTML page with embedded JSON-LD
- JSON-LD sidecar
"""

from storpub_core.serializers.blocks import (
    BlockRenderer,
    DocBookBlockRenderer,
    HouseBlockRenderer,
    HtmlBlockRenderer,
)
from storpub_core.serializers.docbook import serialize_docbook
from storpub_core.serializers.house_xml import serialize_house_xml
from storpub_core.serializers.html import render_html_body, wrap_html
from storpub_core.serializers.inline import InlineRenderer, render_inline
from storpub_core.serializers.jsonld import build_jsonld, build_page_jsonld, jsonld_script
from storpub_core.serializers.sections import Section, build_sections

__all__ = [
    "InlineRenderer",
    "render_inline",
    "BlockRenderer",
    "HouseBlockRenderer",
    "DocBookBlockRenderer",
    "HtmlBlockRenderer",
    "Section",
    "build_sections",
    "serialize_house_xml",
    "serialize_docbook",
    "wrap_html",
    "render_html_body",
    "build_jsonld",
    "build_page_jsonld",
    "jsonld_script",
]
