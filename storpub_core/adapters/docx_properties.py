"""
DOCX Property Extractor
=======================

Reads the standard (``docProps/core.xml``) and producer-defined
(``docProps/custom.xml``) property parts of a .docx package into two flat
maps.

Extraction never raises: a missing part gives an empty map, a corrupt
archive gives two empty maps, and malformed XML is parsed with lxml's
recovering parser so whatever is readable is returned.

Core map keys:
    title, subject, description, creator, author (alias of creator),
    lastModifiedBy, revision, category, contentStatus, language,
    keywords (list), createdRaw, modifiedRaw, dateCreated, dateModified

Dates are normalized to ``YYYY-MM-DDTHH:MM:SSZ``; unparseable dates are None.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import io
import logging
import zipfile
import zlib

from lxml import etree

from storpub_core.model.metadata import split_keywords
from storpub_core.xml.utils import first_by_local_name, iter_by_local_name, local_name

logger = logging.getLogger(__name__)

CORE_PART = "docProps/core.xml"
CUSTOM_PART = "docProps/custom.xml"

CORE_TEXT_FIELDS = (
    "title",
    "subject",
    "description",
    "creator",
    "lastModifiedBy",
    "revision",
    "category",
    "contentStatus",
    "language",
)

CUSTOM_DATE_KEYS = ("DatePublished", "DateModified", "DateCreated")


@dataclass
class DocxProperties:
    """Extracted property maps."""
    core: Dict[str, Any] = field(default_factory=dict)
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {"core": dict(self.core), "custom": dict(self.custom)}


def to_iso_datetime(value: Optional[str]) -> Optional[str]:
    """
    Normalize a W3CDTF/ISO date-time to ``YYYY-MM-DDTHH:MM:SSZ`` (UTC).

    Values without a zone are taken as UTC. Returns None when unparseable
    or when the UTC equivalent falls outside the datetime range.

    Example:
        >>> to_iso_datetime("2025-10-05T15:22:33+01:00")
        '2025-10-05T14:22:33Z'
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable date: {value!r}")
        return None


def _parse_part(data: Optional[bytes], part: str):
    if not data:
        return None
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        logger.warning(f"Could not parse {part}: {e}")
        return None
    if root is None:
        logger.warning(f"{part} contains no readable XML")
    return root


def _text(root, name: str) -> Optional[str]:
    element = first_by_local_name(root, name)
    if element is None:
        return None
    text = "".join(element.itertext())
    return text or None


def parse_core_properties(data: Optional[bytes]) -> Dict[str, Any]:
    """Parse ``docProps/core.xml`` content into the core map."""
    root = _parse_part(data, CORE_PART)
    if root is None:
        return {}

    core: Dict[str, Any] = {name: _text(root, name) for name in CORE_TEXT_FIELDS}
    core["author"] = core["creator"]
    core["keywords"] = split_keywords(_text(root, "keywords"))

    created = _text(root, "created")
    modified = _text(root, "modified")
    core["createdRaw"] = created
    core["modifiedRaw"] = modified
    core["dateCreated"] = to_iso_datetime(created)
    core["dateModified"] = to_iso_datetime(modified)
    return core


def parse_custom_properties(data: Optional[bytes]) -> Dict[str, Any]:
    """
    Parse ``docProps/custom.xml`` content into the custom map.

    Each named ``property`` element contributes one entry whose value is the
    text of its first typed child (``vt:lpwstr``, ``vt:filetime``, ...).
    """
    root = _parse_part(data, CUSTOM_PART)
    if root is None:
        return {}

    custom: Dict[str, Any] = {}
    for prop in iter_by_local_name(root, "property"):
        name = prop.get("name") or ""
        if not name:
            continue
        value = ""
        for child in prop:
            if not isinstance(child.tag, str):
                continue
            value = "".join(child.itertext())
            if local_name(child) == "filetime":
                value = to_iso_datetime(value)
            break
        custom[name] = value

    for key in CUSTOM_DATE_KEYS:
        if custom.get(key):
            custom[key] = to_iso_datetime(custom[key])
    if custom.get("Language"):
        custom["Language"] = custom["Language"].strip()
    if custom.get("Keywords"):
        custom["Keywords"] = split_keywords(custom["Keywords"])
    return custom


def _read_part(archive: zipfile.ZipFile, part: str) -> Optional[bytes]:
    try:
        return archive.read(part)
    except KeyError:
        return None


def extract_docx_properties(archive_bytes: bytes) -> DocxProperties:
    """
    Extract core and custom properties from .docx bytes.

    Args:
        archive_bytes: Raw .docx package

    Returns:
        DocxProperties; both maps are empty if the archive cannot be opened
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes or b"")) as archive:
            core_xml = _read_part(archive, CORE_PART)
            custom_xml = _read_part(archive, CUSTOM_PART)
    except (zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError, ValueError) as e:
        logger.warning(f"Could not open .docx package: {e}")
        return DocxProperties()

    properties = DocxProperties(
        core=parse_core_properties(core_xml),
        custom=parse_custom_properties(custom_xml),
    )
    logger.debug(
        f"Extracted {len(properties.core)} core and {len(properties.custom)} custom properties"
    )
    return properties
