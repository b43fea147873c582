"""
DocBook Serializer
==================

Serializes a document and its metadata into a DocBook 5 ``<article>``.

The ``<info>`` block carries the bibliographic metadata (authors,
contributors, DOI, series, dates, revision history, publisher, licence,
abstract, keywords) plus the unit in the vendor ``oor`` namespace. The
body is restructured into nested ``<section>`` elements by the section
builder; every section gets a unique ``xml:id`` derived from its title.

Usage:
    from storpub_core.serializers import serialize_docbook

    xml = serialize_docbook(tree, metadata)
"""

from typing import Any, Callable, List, Optional
import logging

from storpub_core.config.settings import PipelineConfig, get_default_config
from storpub_core.model.document import Node
from storpub_core.model.metadata import Contributor, Metadata, Unit, load_metadata
from storpub_core.serializers.blocks import DocBookBlockRenderer
from storpub_core.serializers.sections import Section, build_sections
from storpub_core.xml.utils import escape_xml, make_unique_id_factory, slugify

logger = logging.getLogger(__name__)

DOCBOOK_NS = "http://docbook.org/ns/docbook"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
XLINK_NS = "http://www.w3.org/1999/xlink"

DEFAULT_ARTICLE_TITLE = "Untitled research document"
INDENT = "  "


def _element(tag: str, value: Any) -> str:
    return f"<{tag}>{escape_xml(value)}</{tag}>" if value else ""


def _bibliomisc(role: str, value: Any) -> str:
    return f'<bibliomisc role="{role}">{escape_xml(value)}</bibliomisc>' if value else ""


# ---------------------------------------------------------------------------
# <info>
# ---------------------------------------------------------------------------

def author_xml(person: Contributor) -> str:
    """Render an author-role contributor as ``<author>``."""
    name = f"<personname>{_element('firstname', person.given)}{_element('surname', person.family)}</personname>"
    parts = [name]
    affiliation = person.affiliation
    if affiliation is not None:
        orgdiv = _element("orgdiv", affiliation.unit)
        parts.append(f"<affiliation><orgname>{escape_xml(affiliation.org)}</orgname>{orgdiv}</affiliation>")
    parts.append(_element("email", person.email))
    parts.append(_element("uri", person.uri or person.orcid))
    return f'<author role="{escape_xml(person.role)}">{"".join(parts)}</author>'


def contributors_remark(people: List[Contributor]) -> str:
    """Fold non-author contributors into a ``<remark>`` list."""
    if not people:
        return ""
    items = []
    for person in people:
        text = f"<emphasis>{escape_xml(person.display_name)}</emphasis> ({escape_xml(person.role)})"
        affiliation = person.affiliation
        if affiliation is not None and (affiliation.unit or affiliation.org):
            text += f", {escape_xml(affiliation.unit or affiliation.org)}"
        profile = person.uri or person.orcid
        if profile:
            text += f' (<link xlink:href="{escape_xml(profile)}">profile</link>)'
        items.append(f"<listitem><para>{text}</para></listitem>")
    return f"<remark><para>Contributors:</para><itemizedlist>{''.join(items)}</itemizedlist></remark>"


def series_xml(meta: Metadata) -> str:
    series = meta.series
    if series is None or not series.name:
        return ""
    return (
        f"<seriesinfo><title>{escape_xml(series.name)}</title>"
        f"{_element('volumenum', series.number)}"
        f"{_bibliomisc('totalseries', series.total)}</seriesinfo>"
    )


def revhistory_xml(meta: Metadata, date: str) -> str:
    if not meta.version:
        return ""
    return (
        f"<revhistory><revision><revnumber>{escape_xml(meta.version)}</revnumber>"
        f"{_element('date', date)}"
        f"<revremark>{escape_xml(meta.status.value)}</revremark></revision></revhistory>"
    )


def unit_xml(unit: Optional[Unit], prefix: str) -> str:
    """Vendor-namespace unit element, e.g. ``<oor:unit unitCode="PBO">``."""
    if unit is None or not unit.unit:
        return ""
    attrs = "".join(
        f' {name}="{escape_xml(value)}"'
        for name, value in (
            ("unitCode", unit.unit_code),
            ("committeeCode", unit.committee_code),
            ("unitUri", unit.unit_uri),
            ("committeeUri", unit.committee_uri),
        )
        if value
    )
    return f"<{prefix}:unit{attrs}>{escape_xml(unit.unit)}</{prefix}:unit>"


def unit_remark(unit: Optional[Unit]) -> str:
    """Human-readable echo of the unit: ``Unit: X • code=... • committee=...``."""
    if unit is None or not unit.unit:
        return ""
    bits = [f"Unit: {unit.unit}"]
    if unit.unit_code:
        bits.append(f"code={unit.unit_code}")
    if unit.committee_code:
        bits.append(f"committee={unit.committee_code}")
    if unit.unit_uri:
        bits.append(f"unitUri={unit.unit_uri}")
    if unit.committee_uri:
        bits.append(f"committeeUri={unit.committee_uri}")
    return f"<remark><para>{escape_xml(' • '.join(bits))}</para></remark>"


def info_parts(meta: Metadata, config: PipelineConfig) -> List[str]:
    """Children of ``<info>``, in output order."""
    date = (meta.date_published or "")[:10]
    parts = [
        f"<title>{escape_xml(meta.title or DEFAULT_ARTICLE_TITLE)}</title>",
        _element("subtitle", meta.subtitle),
    ]
    parts.extend(author_xml(person) for person in meta.authors)
    parts.append(contributors_remark(meta.non_authors))
    if meta.doi:
        parts.append(f'<pubidentifier type="doi">{escape_xml(meta.doi)}</pubidentifier>')
    parts.append(series_xml(meta))
    parts.append(_element("date", date))
    parts.append(revhistory_xml(meta, date))
    if meta.publisher:
        parts.append(f"<publisher><publishername>{escape_xml(meta.publisher)}</publishername></publisher>")
    if meta.license:
        parts.append(f"<legalnotice><para>{escape_xml(meta.license)}</para></legalnotice>")
    if meta.abstract:
        parts.append(f"<abstract><para>{escape_xml(meta.abstract)}</para></abstract>")
    if meta.keywords:
        keywords = "".join(f"<keyword>{escape_xml(k)}</keyword>" for k in meta.keywords)
        parts.append(f"<keywordset>{keywords}</keywordset>")
    parts.append(unit_xml(meta.unit, config.organization.vendor_prefix))
    parts.append(unit_remark(meta.unit))
    return [p for p in parts if p]


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------

def section_xml(section: Section, unique_id: Callable[[str], str], slug_length: int = 60) -> str:
    """Render a section and its descendants."""
    section_id = unique_id(slugify(section.title_text, slug_length))
    parts = [f"<title>{section.title or ''}</title>"]
    parts.extend(section.paragraphs)
    parts.extend(section.extras)
    parts.extend(section_xml(child, unique_id, slug_length) for child in section.children)
    body = "\n".join(parts)
    return f'<section xml:id="{escape_xml(section_id)}">\n{body}\n</section>'


def body_xml(document: Any, title: str, config: PipelineConfig) -> str:
    """
    Render the article body.

    Content before the first heading comes first. A document without
    headings becomes one section titled with the document title.
    """
    root = build_sections(Node.coerce(document), DocBookBlockRenderer())
    unique_id = make_unique_id_factory()
    slug_length = config.export.slug_length
    leading = root.paragraphs + root.extras

    if root.children:
        sections = [section_xml(child, unique_id, slug_length) for child in root.children]
        return "\n".join(leading + sections)

    synthetic = Section(
        level=1,
        title=escape_xml(title),
        title_text=title,
        paragraphs=leading or ["<para></para>"],
    )
    return section_xml(synthetic, unique_id, slug_length)


def serialize_docbook(document: Any,
                      metadata: Any = None,
                      config: Optional[PipelineConfig] = None) -> str:
    """
    Serialize a document to a DocBook 5 article.

    Args:
        document: Document tree (Node or editor JSON)
        metadata: Metadata record (Metadata, mapping or None)
        config: Pipeline configuration

    Returns:
        Complete XML document as a string
    """
    config = config or get_default_config()
    meta = load_metadata(metadata)
    title = meta.title or DEFAULT_ARTICLE_TITLE
    org = config.organization

    header = "\n".join([
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<article xmlns="{DOCBOOK_NS}"',
        f'         xmlns:xsi="{XSI_NS}"',
        f'         xmlns:xlink="{XLINK_NS}"',
        f'         xmlns:{org.vendor_prefix}="{escape_xml(org.vendor_namespace)}"',
        '         version="5.0"',
        f'         xml:lang="{escape_xml(meta.language or "en")}"',
        f'         xsi:schemaLocation="{escape_xml(config.export.docbook_schema_location)}">',
    ])
    info = "\n".join(INDENT * 2 + part for part in info_parts(meta, config))

    return (
        f"{header}\n"
        f"{INDENT}<info>\n{info}\n{INDENT}</info>\n"
        f"{body_xml(document, title, config)}\n"
        "</article>\n"
    )
