"""
House XML Serializer
====================

Serializes a document and its metadata into the house research-document
schema::

    <?xml version="1.0" encoding="UTF-8"?>
    <researchDocument version="0.2" xml:lang="en">
      <metadata>...</metadata>
      <body>...</body>
    </researchDocument>

The body is produced by walking the tree directly (no section nesting);
headings render as flat ``<section><title>`` elements.

Only generated structure is indented; text content (abstracts, code
blocks) is emitted exactly as given.
"""

from typing import Any, List, Optional
import logging

from storpub_core.config.settings import PipelineConfig, get_default_config
from storpub_core.model.document import Node
from storpub_core.model.metadata import DEFAULT_SCHEMA_VERSION, Affiliation, Contributor, Metadata, load_metadata
from storpub_core.serializers.blocks import HouseBlockRenderer
from storpub_core.xml.utils import escape_xml, xml_comment

logger = logging.getLogger(__name__)

INDENT = "  "


def _element(tag: str, value: Any) -> str:
    return f"<{tag}>{escape_xml(value)}</{tag}>" if value else ""


def _attrs(*pairs) -> str:
    return "".join(f' {name}="{escape_xml(value)}"' for name, value in pairs if value)


def _affiliation_lines(affiliation: Affiliation) -> List[str]:
    attrs = _attrs(
        ("unitCode", affiliation.unit_code),
        ("committeeCode", affiliation.committee_code),
        ("unitUri", affiliation.unit_uri),
        ("committeeUri", affiliation.committee_uri),
        ("orgId", affiliation.org_id),
    )
    lines = [
        f"<affiliation{attrs}>",
        f"{INDENT}<org>{escape_xml(affiliation.org)}</org>",
        f"{INDENT}<unit>{escape_xml(affiliation.unit)}</unit>",
    ]
    if affiliation.country:
        lines.append(f"{INDENT}<country>{escape_xml(affiliation.country)}</country>")
    lines.append("</affiliation>")
    return lines


def contributor_lines(contributor: Contributor) -> List[str]:
    """Render one ``<contrib>`` element as lines."""
    corresponding = ' corresponding="true"' if contributor.corresponding else ""
    inner = [
        f"<name><given>{escape_xml(contributor.given)}</given>"
        f"<family>{escape_xml(contributor.family)}</family></name>",
    ]
    if contributor.affiliation is not None:
        inner.extend(_affiliation_lines(contributor.affiliation))
    inner.extend(filter(None, [
        _element("orcid", contributor.orcid),
        _element("email", contributor.email),
        _element("uri", contributor.uri),
    ]))
    return (
        [f'<contrib role="{escape_xml(contributor.role)}"{corresponding}>']
        + [INDENT + line for line in inner]
        + ["</contrib>"]
    )


def _list_block(tag: str, items: List[List[str]]) -> List[str]:
    if not items:
        return []
    lines = [f"<{tag}>"]
    for item in items:
        lines.extend(INDENT + line for line in item)
    lines.append(f"</{tag}>")
    return lines


def metadata_lines(meta: Metadata, config: PipelineConfig) -> List[str]:
    """Render the ``<metadata>`` element as lines."""
    fields = [
        f"<title>{escape_xml(meta.title or 'Untitled')}</title>",
        _element("subtitle", meta.subtitle),
        _element("abstract", meta.abstract),
        f"<status>{escape_xml(meta.status.value)}</status>",
        f"<language>{escape_xml(meta.language or 'en')}</language>",
        f"<version>{escape_xml(meta.version or config.export.default_version)}</version>",
        _element("datePublished", meta.date_published),
        _element("dateModified", meta.date_modified),
        _element("doi", meta.doi),
    ]

    if meta.series is not None:
        fields.append(
            f"<series><name>{escape_xml(meta.series.name)}</name>"
            f"{_element('number', meta.series.number)}{_element('total', meta.series.total)}</series>"
        )

    fields.append(f"<license>{escape_xml(meta.license or config.organization.default_license)}</license>")
    fields.append(_element("publisher", meta.publisher))

    if meta.unit is not None:
        attrs = _attrs(
            ("unitCode", meta.unit.unit_code),
            ("committeeCode", meta.unit.committee_code),
            ("unitUri", meta.unit.unit_uri),
            ("committeeUri", meta.unit.committee_uri),
        )
        fields.append(f"<unit{attrs}>{escape_xml(meta.unit.unit)}</unit>")

    lines = [f for f in fields if f]
    lines.extend(_list_block("keywords", [[_element("keyword", k)] for k in meta.keywords]))
    lines.extend(_list_block("contributors", [contributor_lines(c) for c in meta.contributors]))
    lines.extend(_list_block("related", [
        [f'<item{_attrs(("relation", r.relation), ("uri", r.uri))}/>'] for r in meta.related
    ]))
    lines.extend(_list_block("dataLinks", [
        [f'<item{_attrs(("label", d.label), ("uri", d.uri))}/>'] for d in meta.data_links
    ]))

    return ["<metadata>"] + [INDENT + line for line in lines] + ["</metadata>"]


def body_blocks(document: Any, renderer: Optional[HouseBlockRenderer] = None) -> List[str]:
    """
    Render the top-level blocks of the body.

    Each block is rendered on its own; a block that fails is replaced by an
    ``unsupported node`` comment.
    """
    tree = Node.coerce(document)
    renderer = renderer or HouseBlockRenderer()
    blocks = []
    for node in tree.content:
        try:
            markup = renderer.render(node)
        except Exception as e:
            logger.warning(f"Could not serialize {node.type} node: {e}")
            markup = xml_comment(f"unsupported node: {node.type} ({e})")
        if markup:
            blocks.append(markup)
    return blocks


def schema_version_number(schema_version: Optional[str]) -> str:
    """``researchDocument@0.2`` -> ``0.2``."""
    _, _, number = (schema_version or "").partition("@")
    return number or "0.2"


def serialize_house_xml(document: Any,
                        metadata: Any = None,
                        config: Optional[PipelineConfig] = None) -> str:
    """
    Serialize a document to house XML.

    Args:
        document: Document tree (Node or editor JSON)
        metadata: Metadata record (Metadata, mapping or None)
        config: Pipeline configuration

    Returns:
        Complete XML document as a string
    """
    config = config or get_default_config()
    meta = load_metadata(metadata)
    schema_version = meta.schema_version
    if schema_version == DEFAULT_SCHEMA_VERSION:
        schema_version = config.export.house_schema_version
    language = meta.language or "en"

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<researchDocument version="{escape_xml(schema_version_number(schema_version))}"'
        f' xml:lang="{escape_xml(language)}">',
    ]
    lines.extend(INDENT + line for line in metadata_lines(meta, config))
    lines.append(f"{INDENT}<body>")
    lines.extend(body_blocks(document))
    lines.append(f"{INDENT}</body>")
    lines.append("</researchDocument>")
    return "\n".join(lines) + "\n"
