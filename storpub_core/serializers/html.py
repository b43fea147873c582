"""
HTML Serializer
===============

Wraps body HTML in a complete, standalone HTML page with a small
stylesheet and embedded JSON-LD.
"""

from typing import Any, Optional
import logging

from storpub_core.model.document import Node
from storpub_core.model.metadata import load_metadata
from storpub_core.serializers.blocks import HtmlBlockRenderer
from storpub_core.serializers.jsonld import build_page_jsonld, jsonld_script
from storpub_core.xml.utils import escape_xml, xml_comment

logger = logging.getLogger(__name__)

STYLESHEET = """\
    body{font-family:system-ui,-apple-system,Segoe UI,Roboto,sans-serif;max-width:760px;margin:2rem auto;padding:0 1rem;line-height:1.6}
    h1,h2,h3{line-height:1.25}
    figure{margin:1rem 0}
    figcaption{font-size:.9rem;color:#555}
    pre{background:#f7f7f7;padding:1rem;border-radius:8px;overflow:auto}
    table{border-collapse:collapse}
    td,th{border:1px solid #ddd;padding:.25rem .5rem}"""

PAGE_TEMPLATE = """\
<!doctype html>
<html lang="{lang}">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{title}</title>
  <style>
{stylesheet}
  </style>
  <script type="application/ld+json">{jsonld}</script>
</head>
<body>
{body}
</body>
</html>
"""


def render_html_body(document: Any, renderer: Optional[HtmlBlockRenderer] = None) -> str:
    """
    Render a document tree as HTML body markup.

    Args:
        document: Document tree (Node or editor JSON)
        renderer: Optional HtmlBlockRenderer

    Returns:
        HTML fragment, one top-level block per line
    """
    tree = Node.coerce(document)
    renderer = renderer or HtmlBlockRenderer()
    blocks = []
    for node in tree.content:
        try:
            markup = renderer.render(node)
        except Exception as e:
            logger.warning(f"Could not render {node.type} block as HTML: {e}")
            markup = xml_comment(f"block error: {node.type}: {e}")
        if markup:
            blocks.append(markup)
    return "\n".join(blocks)


def wrap_html(body_html: str, metadata: Any = None) -> str:
    """
    Wrap body HTML in a complete HTML page.

    Args:
        body_html: Body markup, inserted verbatim
        metadata: Metadata record (Metadata, mapping or None)

    Returns:
        HTML document as a string
    """
    meta = load_metadata(metadata)
    return PAGE_TEMPLATE.format(
        lang=escape_xml(meta.language or "en"),
        title=escape_xml(meta.title or "Exported Document"),
        stylesheet=STYLESHEET,
        jsonld=jsonld_script(build_page_jsonld(meta), indent=None),
        body=body_html or "",
    )
