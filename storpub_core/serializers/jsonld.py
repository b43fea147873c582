"""
JSON-LD Builder
===============

schema.org structured data for a metadata record, used as a sidecar export
and embedded in HTML pages.
"""

from typing import Any, Dict, List, Optional
import json
import logging
import re

from storpub_core.model.metadata import Affiliation, Contributor, Metadata, load_metadata
from storpub_core.model.units import DEFAULT_LICENSE, ORGANIZATION_NAME

logger = logging.getLogger(__name__)

SCHEMA_CONTEXT = "https://schema.org"
ORCID_PREFIX = "https://orcid.org/"
_ORCID_URL_RE = re.compile(r"^https?://orcid\.org/", re.IGNORECASE)


def orcid_url(orcid: str) -> str:
    """Normalize a bare ORCID iD or ORCID URL to ``https://orcid.org/<id>``."""
    return ORCID_PREFIX + _ORCID_URL_RE.sub("", orcid.strip())


def _organization(affiliation: Affiliation) -> Dict[str, Any]:
    org: Dict[str, Any] = {
        "@type": "Organization",
        "name": affiliation.unit or affiliation.org or ORGANIZATION_NAME,
    }
    if affiliation.unit_code:
        org["identifier"] = affiliation.unit_code
    if affiliation.unit_uri:
        org["url"] = affiliation.unit_uri
    return org


def person(contributor: Contributor) -> Dict[str, Any]:
    """schema.org ``Person`` for a contributor."""
    data: Dict[str, Any] = {"@type": "Person"}
    if contributor.display_name:
        data["name"] = contributor.display_name
    if contributor.orcid:
        data["identifier"] = orcid_url(contributor.orcid)
    if contributor.email:
        data["email"] = contributor.email
    if contributor.affiliation is not None:
        data["affiliation"] = _organization(contributor.affiliation)
    return data


def build_jsonld(metadata: Any, canonical_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the full JSON-LD description of a document.

    Args:
        metadata: Metadata record (Metadata, mapping or None)
        canonical_url: Absolute URL of the published page

    Returns:
        JSON-LD dictionary; empty fields are omitted
    """
    meta = load_metadata(metadata)

    publisher: Dict[str, Any] = {"@type": "Organization", "name": meta.publisher or ORGANIZATION_NAME}
    if meta.unit is not None and meta.unit.unit:
        publisher["department"] = {"@type": "Organization", "name": meta.unit.unit}

    authors = [person(c) for c in meta.authors]
    editors = [person(c) for c in meta.contributors if c.role == "editor"]

    data: Dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": meta.genre or "Report",
        "headline": meta.title or "Untitled research document",
        "alternativeHeadline": meta.subtitle,
        "inLanguage": meta.language or "en",
        "description": meta.abstract,
        "keywords": list(meta.keywords) or None,
        "version": meta.version or None,
        "identifier": meta.doi,
        "creativeWorkStatus": meta.status.value,
        "datePublished": meta.date_published,
        "dateModified": meta.date_modified,
        "url": canonical_url,
        "author": authors or None,
        "editor": editors or None,
        "publisher": publisher,
        "license": meta.license or DEFAULT_LICENSE,
    }
    return {key: value for key, value in data.items() if value is not None}


def build_page_jsonld(metadata: Any) -> Dict[str, Any]:
    """
    Minimal ``Article`` description embedded in exported HTML pages.

    Authors are plain names; keywords are a comma-joined string.
    """
    meta = load_metadata(metadata)
    authors: List[str] = [c.display_name for c in meta.authors if c.display_name]
    data: Dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Article",
        "headline": meta.title or "Untitled research document",
        "inLanguage": meta.language or "en",
        "datePublished": meta.date_published,
        "dateModified": meta.date_modified,
        "keywords": ", ".join(meta.keywords) or None,
        "version": meta.version or None,
        "author": authors or None,
        "publisher": meta.publisher or ORGANIZATION_NAME,
        "license": meta.license,
    }
    return {key: value for key, value in data.items() if value is not None}


def jsonld_script(data: Dict[str, Any], indent: Optional[int] = 2) -> str:
    """
    Serialize JSON-LD so it can sit inside a ``<script>`` element.

    Every ``</`` is written as ``<\\/``, so the JSON cannot close the script.
    """
    return json.dumps(data, indent=indent, ensure_ascii=False).replace("</", "<\\/")
