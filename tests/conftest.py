"""
Shared fixtures for the Stór Publisher tests.

Run with: pytest tests -v
"""

import io
import zipfile
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

import pytest

from storpub_core.adapters.base import BodyConverter, ConversionOutput
from storpub_core.xml.utils import escape_xml

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

CONTENT_TYPES_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="xml" ContentType="application/xml"/>
  <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

ROOT_RELS_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

DOCUMENT_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
  <w:body>{paragraphs}</w:body>
</w:document>"""

CORE_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
                   xmlns:dc="http://purl.org/dc/elements/1.1/"
                   xmlns:dcterms="http://purl.org/dc/terms/"
                   xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">{fields}</cp:coreProperties>"""

CUSTOM_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Properties xmlns="http://schemas.openxmlformats.org/officeDocument/2006/custom-properties"
            xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">{props}</Properties>"""

CORE_TAGS = {
    "title": "dc:title",
    "subject": "dc:subject",
    "creator": "dc:creator",
    "description": "dc:description",
    "keywords": "cp:keywords",
    "lastModifiedBy": "cp:lastModifiedBy",
    "contentStatus": "cp:contentStatus",
    "language": "dc:language",
}


def core_xml(**fields) -> str:
    """Build a docProps/core.xml part; ``created``/``modified`` become W3CDTF dates."""
    parts = []
    for name, value in fields.items():
        if name in ("created", "modified"):
            parts.append(f'<dcterms:{name} xsi:type="dcterms:W3CDTF">{escape_xml(value)}</dcterms:{name}>')
        else:
            tag = CORE_TAGS[name]
            parts.append(f"<{tag}>{escape_xml(value)}</{tag}>")
    return CORE_XML.format(fields="".join(parts))


def custom_xml(props: Dict[str, str], filetimes: Iterable[str] = ()) -> str:
    """Build a docProps/custom.xml part; names in ``filetimes`` use vt:filetime."""
    parts = []
    for pid, (name, value) in enumerate(props.items(), start=2):
        vtype = "filetime" if name in filetimes else "lpwstr"
        parts.append(
            f'<property fmtid="{{D5CDD505-2E9C-101B-9397-08002B2CF9AE}}" pid="{pid}" name="{escape_xml(name)}">'
            f"<vt:{vtype}>{escape_xml(value)}</vt:{vtype}></property>"
        )
    return CUSTOM_XML.format(props="".join(parts))


def build_docx(paragraphs: Iterable[str] = ("Hello world",),
               core: Optional[str] = None,
               custom: Optional[str] = None) -> bytes:
    """Assemble a minimal .docx package in memory."""
    body = "".join(
        f"<w:p><w:r><w:t>{escape_xml(text)}</w:t></w:r></w:p>" for text in paragraphs
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES_XML)
        archive.writestr("_rels/.rels", ROOT_RELS_XML)
        archive.writestr("word/document.xml", DOCUMENT_XML.format(paragraphs=body))
        if core is not None:
            archive.writestr("docProps/core.xml", core)
        if custom is not None:
            archive.writestr("docProps/custom.xml", custom)
    return buffer.getvalue()


class FakeConverter(BodyConverter):
    """Body converter returning fixed HTML, so tests do not depend on mammoth."""

    def __init__(self, html: str = "<h1>Imported</h1><p>Body</p>", messages=()):
        self.html = html
        self.messages = list(messages)
        self.calls = 0

    def convert(self, archive_bytes, style_map=()):
        self.calls += 1
        return ConversionOutput(html=self.html, messages=list(self.messages))


class FailingConverter(BodyConverter):
    """Body converter that always fails."""

    def convert(self, archive_bytes, style_map=()):
        raise KeyError("word/document.xml")


def text(value: str, *marks) -> dict:
    node = {"type": "text", "text": value}
    if marks:
        node["marks"] = [m if isinstance(m, dict) else {"type": m} for m in marks]
    return node


def paragraph(*children) -> dict:
    return {"type": "paragraph", "content": [c if isinstance(c, dict) else text(c) for c in children]}


def heading(level, title) -> dict:
    return {"type": "heading", "attrs": {"level": level}, "content": [text(title)] if title else []}


def doc(*blocks) -> dict:
    return {"type": "doc", "content": list(blocks)}


def nested(depth: int, node_type: str = "blockquote", leaf: str = "deep") -> dict:
    """A doc holding ``depth`` nested ``node_type`` nodes around one paragraph."""
    node = paragraph(leaf)
    for _ in range(depth):
        node = {"type": node_type, "content": [node]}
    return doc(node)


@pytest.fixture
def now():
    """Fixed evaluation time for date rules."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_docx():
    """Factory for in-memory .docx packages."""
    return build_docx


@pytest.fixture
def fake_converter():
    return FakeConverter(messages=["warning: Unrecognised paragraph style: Quote"])


@pytest.fixture
def failing_converter():
    return FailingConverter()


@pytest.fixture
def sample_tree():
    """Editor tree exercising every block type."""
    return doc(
        paragraph("Preface text."),
        heading(1, "Introduction"),
        paragraph(
            "Costs rose ",
            text("sharply", "bold"),
            " (see ",
            text("report", {"type": "link", "attrs": {"href": "https://example.ie/r?a=1&b=2"}}),
            ").",
        ),
        {"type": "bulletList", "content": [
            {"type": "listItem", "content": [paragraph("First")]},
            {"type": "listItem", "content": [paragraph("Second")]},
        ]},
        heading(2, "Background"),
        paragraph("Fish & chips <today>"),
        {"type": "codeBlock", "content": [text("if a < b:\n    return a")]},
        {"type": "table", "content": [
            {"type": "tableRow", "content": [
                {"type": "tableHeader", "content": [paragraph("Year")]},
                {"type": "tableHeader", "content": [paragraph("Cost")]},
            ]},
            {"type": "tableRow", "content": [
                {"type": "tableCell", "content": [paragraph("2025")]},
                {"type": "tableCell", "content": [paragraph("10")]},
            ]},
        ]},
        heading(1, "Introduction"),
        paragraph("Line one", {"type": "hardBreak"}, "Line two"),
        {"type": "horizontalRule"},
    )


@pytest.fixture
def valid_metadata():
    """A published record that passes validation without warnings."""
    return {
        "title": "Budget Outlook 2025",
        "subtitle": "Medium-term projections",
        "abstract": "Projections for\nthe next five years.",
        "language": "en",
        "status": "published",
        "version": "1.0",
        "keywords": ["budget", "fiscal"],
        "datePublished": "2025-01-15",
        "doi": "10.1234/pbo.2025.1",
        "license": "CC-BY-4.0",
        "unit": {"unitCode": "PBO"},
        "series": {"name": "Fiscal Notes", "number": "3", "total": "12"},
        "contributors": [
            {
                "given": "Jane",
                "family": "Murphy",
                "role": "author",
                "email": "jane.murphy@example.ie",
                "orcid": "0000-0002-1825-0097",
                "affiliation": {"unitCode": "PBO"},
            },
            {
                "given": "Tom",
                "family": "Kelly",
                "role": "editor",
                "uri": "https://example.ie/people/tom-kelly",
            },
        ],
    }
