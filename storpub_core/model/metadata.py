"""
Metadata Record
===============

pydantic models for the publication metadata curated alongside a document.

The models are deliberately lenient: a record missing a version, keywords
or a publication date still loads, so the editor can always hold a
half-filled record. Publication rules (title length, required fields,
dates) are enforced by ``storpub_core.validation``, which reports errors
and warnings instead of raising.

Field names are snake_case in Python and camelCase on the wire
(``datePublished``, ``unitCode`` ...); both spellings are accepted.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
import datetime as dt
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from storpub_core.model.units import (
    COMMITTEE_UNIT_CODE,
    DEFAULT_COUNTRY,
    ORGANIZATION_NAME,
    unit_from_code,
)

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_VERSION = "researchDocument@0.2"
DEFAULT_ROLE = "author"
KEYWORD_SPLIT_RE = re.compile(r"[,;]\s*|\s*\n+\s*")


class DocumentStatus(str, Enum):
    """Editorial status of a document."""
    DRAFT = "draft"
    IN_REVIEW = "in_review"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    @classmethod
    def normalize(cls, value: Any) -> Optional["DocumentStatus"]:
        """
        Map free text such as "In Review" or "in-review" to a status.

        Returns None for values that do not name a status.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        key = re.sub(r"[\s\-]+", "_", str(value).strip().lower())
        try:
            return cls(key)
        except ValueError:
            return None


def split_keywords(raw: Any) -> List[str]:
    """Split a comma/semicolon/newline separated string into keywords."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        items = [str(k).strip() for k in raw if k is not None]
        return [k for k in items if k]
    return [k.strip() for k in KEYWORD_SPLIT_RE.split(str(raw)) if k.strip()]


def split_name(name: str) -> Tuple[str, str]:
    """
    Split a display name into ``(given, family)``.

    "Murphy, Jane" -> ("Jane", "Murphy"); "Jane Murphy" -> ("Jane", "Murphy");
    "Murphy" -> ("", "Murphy"). Only the first two comma parts are used.
    """
    name = (name or "").strip()
    if "," in name:
        parts = [p.strip() for p in name.split(",")]
        return parts[1], parts[0]
    tokens = name.split()
    if len(tokens) > 1:
        return tokens[0], " ".join(tokens[1:])
    return "", name


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def _unit_code(value: Any) -> Optional[str]:
    text = _optional_text(value)
    return text.upper() if text else None


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_dict(self) -> Dict[str, Any]:
        """Wire (camelCase) representation without empty optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Affiliation(_Record):
    """Organizational affiliation of a contributor."""

    org: str = ORGANIZATION_NAME
    unit_code: Optional[str] = Field(default=None, alias="unitCode")
    unit: Optional[str] = None
    committee_code: Optional[str] = Field(default=None, alias="committeeCode")
    unit_uri: Optional[str] = Field(default=None, alias="unitUri")
    committee_uri: Optional[str] = Field(default=None, alias="committeeUri")
    org_id: Optional[str] = Field(default=None, alias="orgId")
    country: Optional[str] = DEFAULT_COUNTRY

    @field_validator("org", mode="before")
    @classmethod
    def _default_org(cls, value: Any) -> str:
        return _optional_text(value) or ORGANIZATION_NAME

    @field_validator("unit_code", mode="before")
    @classmethod
    def _normalize_unit_code(cls, value: Any) -> Optional[str]:
        return _unit_code(value)

    @field_validator("unit", "committee_code", "unit_uri", "committee_uri", "org_id", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @field_validator("country", mode="before")
    @classmethod
    def _normalize_country(cls, value: Any) -> Optional[str]:
        text = _optional_text(value)
        return text.upper() if text else None

    @model_validator(mode="after")
    def _committee_only_for_committees(self) -> "Affiliation":
        if self.unit_code != COMMITTEE_UNIT_CODE:
            self.committee_code = None
        if self.unit_code and not self.unit:
            self.unit = unit_from_code(self.unit_code)
        return self


class Contributor(_Record):
    """A person credited on the document."""

    role: str = DEFAULT_ROLE
    given: Optional[str] = None
    family: str = ""
    email: Optional[str] = None
    orcid: Optional[str] = None
    uri: Optional[str] = None
    corresponding: bool = False
    affiliation: Optional[Affiliation] = None

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> str:
        text = _optional_text(value)
        return text.lower() if text else DEFAULT_ROLE

    @field_validator("family", mode="before")
    @classmethod
    def _normalize_family(cls, value: Any) -> str:
        return _optional_text(value) or ""

    @field_validator("given", "email", "orcid", "uri", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.given, self.family) if p).strip()

    @property
    def is_author(self) -> bool:
        return self.role == DEFAULT_ROLE


class Unit(_Record):
    """The unit a document is published under."""

    unit_code: str = Field(alias="unitCode")
    unit: str = ""
    committee_code: Optional[str] = Field(default=None, alias="committeeCode")
    unit_uri: Optional[str] = Field(default=None, alias="unitUri")
    committee_uri: Optional[str] = Field(default=None, alias="committeeUri")

    @field_validator("unit_code", mode="before")
    @classmethod
    def _normalize_unit_code(cls, value: Any) -> str:
        code = _unit_code(value)
        if not code:
            raise ValueError("unitCode must not be empty")
        return code

    @field_validator("unit", mode="before")
    @classmethod
    def _normalize_unit(cls, value: Any) -> str:
        return _optional_text(value) or ""

    @field_validator("committee_code", "unit_uri", "committee_uri", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @model_validator(mode="after")
    def _committee_only_for_committees(self) -> "Unit":
        if self.unit_code != COMMITTEE_UNIT_CODE:
            self.committee_code = None
        if not self.unit:
            self.unit = unit_from_code(self.unit_code)
        return self

    @classmethod
    def from_code(cls, code: str, committee_code: Optional[str] = None) -> "Unit":
        return cls(unit_code=code, committee_code=committee_code)


class Series(_Record):
    """Publication series membership."""

    name: str
    number: Optional[str] = None
    total: Optional[str] = None

    @field_validator("number", "total", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)


class RelatedItem(_Record):
    relation: str = ""
    uri: str = ""


class DataLink(_Record):
    label: str = ""
    uri: str = ""


class Metadata(_Record):
    """
    The metadata record of a document.

    Example:
        meta = Metadata(title="Budget Outlook", version="1.0", keywords=["budget"])
        meta.to_dict()["datePublished"]  # KeyError: unset optionals are omitted
    """

    title: str = ""
    subtitle: Optional[str] = None
    abstract: Optional[str] = None
    language: str = "en"
    status: DocumentStatus = DocumentStatus.DRAFT
    version: str = ""
    keywords: List[str] = Field(default_factory=list)
    date_published: Optional[str] = Field(default=None, alias="datePublished")
    date_modified: Optional[str] = Field(default=None, alias="dateModified")
    doi: Optional[str] = None
    license: Optional[str] = None
    publisher: str = ORGANIZATION_NAME
    unit: Optional[Unit] = None
    contributors: List[Contributor] = Field(default_factory=list)
    series: Optional[Series] = None
    related: List[RelatedItem] = Field(default_factory=list)
    data_links: List[DataLink] = Field(default_factory=list, alias="dataLinks")
    genre: Optional[str] = None
    schema_version: str = Field(default=DEFAULT_SCHEMA_VERSION, alias="schemaVersion")

    @field_validator("title", "version", mode="before")
    @classmethod
    def _normalize_required_text(cls, value: Any) -> str:
        return _optional_text(value) or ""

    @field_validator("language", mode="before")
    @classmethod
    def _normalize_language(cls, value: Any) -> str:
        return _optional_text(value) or ""

    @field_validator(
        "subtitle", "abstract", "date_published", "date_modified", "doi", "license", "genre",
        mode="before",
    )
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return _optional_text(value)

    @field_validator("publisher", mode="before")
    @classmethod
    def _default_publisher(cls, value: Any) -> str:
        return _optional_text(value) or ORGANIZATION_NAME

    @field_validator("schema_version", mode="before")
    @classmethod
    def _default_schema_version(cls, value: Any) -> str:
        return _optional_text(value) or DEFAULT_SCHEMA_VERSION

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> DocumentStatus:
        if value is None or value == "":
            return DocumentStatus.DRAFT
        status = DocumentStatus.normalize(value)
        if status is None:
            raise ValueError(f"unknown status {value!r}")
        return status

    @field_validator("keywords", mode="before")
    @classmethod
    def _normalize_keywords(cls, value: Any) -> List[str]:
        return split_keywords(value)

    @property
    def authors(self) -> List[Contributor]:
        return [c for c in self.contributors if c.is_author]

    @property
    def non_authors(self) -> List[Contributor]:
        return [c for c in self.contributors if not c.is_author]


# ---------------------------------------------------------------------------
# Legacy shapes
# ---------------------------------------------------------------------------

def _migrate_unit(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    unit = dict(value)
    if "unitCode" not in unit and "unit_code" not in unit and "code" in unit:
        unit["unitCode"] = unit.pop("code")
    if "unit" not in unit and "title" in unit:
        unit["unit"] = unit.pop("title")
    return unit


def _migrate_contributor(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    person = dict(value)
    name = person.pop("name", None)
    if name and not person.get("family"):
        given, family = split_name(str(name))
        person["family"] = family
        person.setdefault("given", given or None)
    return person


def migrate_legacy_metadata(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Translate older metadata shapes into the canonical one.

    This is the only place that knows about earlier shapes:

    - ``imprint`` (the old name of ``unit``) becomes ``unit``
    - imprint-style ``{code, title}`` becomes ``{unitCode, unit}``
    - a single ``date`` becomes ``datePublished``
    - contributors carrying only ``name`` get ``given``/``family``

    Args:
        data: Raw metadata mapping (editor JSON, stored record, ...)

    Returns:
        New dictionary in the canonical shape; ``data`` is not modified
    """
    migrated = dict(data)

    imprint = migrated.pop("imprint", None)
    if imprint and not migrated.get("unit"):
        migrated["unit"] = imprint
    if "unit" in migrated:
        migrated["unit"] = _migrate_unit(migrated["unit"]) or None

    legacy_date = migrated.pop("date", None)
    if legacy_date and not (migrated.get("datePublished") or migrated.get("date_published")):
        migrated["datePublished"] = legacy_date

    contributors = migrated.get("contributors")
    if isinstance(contributors, (list, tuple)):
        migrated["contributors"] = [_migrate_contributor(c) for c in contributors]
    elif contributors is not None:
        migrated["contributors"] = []

    return migrated


def _field_key(data: Mapping[str, Any], key: Any) -> Any:
    """Key under which ``data`` holds the field an error location names."""
    if key in data:
        return key
    for name, info in Metadata.model_fields.items():
        if key in (name, info.alias):
            return name if name in data else info.alias
    return key


def _drop_invalid(data: Dict[str, Any], error: ValidationError) -> Dict[str, Any]:
    cleaned = dict(data)
    list_drops: Dict[str, set] = {}
    for problem in error.errors():
        loc = problem.get("loc") or ()
        if not loc:
            continue
        key = _field_key(cleaned, loc[0])
        if len(loc) > 1 and isinstance(loc[1], int) and isinstance(cleaned.get(key), list):
            list_drops.setdefault(key, set()).add(loc[1])
        else:
            cleaned.pop(key, None)
        logger.warning(f"Dropping invalid metadata field {'.'.join(str(p) for p in loc)}: {problem.get('msg')}")
    for key, indexes in list_drops.items():
        if key in cleaned:
            cleaned[key] = [item for i, item in enumerate(cleaned[key]) if i not in indexes]
    return cleaned


def load_metadata(data: Any) -> Metadata:
    """
    Load a metadata record from any supported input.

    Legacy shapes are migrated first. Fields that still fail validation are
    dropped (and logged) rather than failing the whole record.

    Args:
        data: Metadata instance, mapping, or None

    Returns:
        Metadata instance
    """
    if isinstance(data, Metadata):
        return data
    if data is None:
        return Metadata()
    if not isinstance(data, Mapping):
        logger.warning(f"Metadata is not a mapping ({type(data).__name__}); using defaults")
        return Metadata()

    migrated = migrate_legacy_metadata(data)
    try:
        return Metadata.model_validate(migrated)
    except ValidationError as e:
        cleaned = _drop_invalid(migrated, e)

    try:
        return Metadata.model_validate(cleaned)
    except ValidationError as e:
        logger.warning(f"Metadata could not be repaired ({e.error_count()} error(s)); using defaults")
        return Metadata()
