"""
DOCX Property Mapping
=====================

Maps the ``{core, custom}`` property maps extracted from a .docx package
onto a metadata patch, and merges the patch into the current record.

Precedence for each field is: custom property, then core property, then
the current record. Recognized custom property names:

    Title, Subtitle, Abstract, Language, Status, Version, DatePublished,
    DateModified, DOI, License, Keywords, UnitCode (legacy: ImprintCode),
    CommitteeCode, Contributors (legacy: Authors)
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from pydantic import ValidationError

from storpub_core.mapping.contributors import (
    affiliation_for_unit,
    merge_contributors,
    parse_contributors,
)
from storpub_core.model.metadata import (
    Contributor,
    DocumentStatus,
    Metadata,
    Unit,
    load_metadata,
    split_keywords,
    split_name,
)
from storpub_core.model.units import COMMITTEE_UNIT_CODE, ORGANIZATION_NAME

logger = logging.getLogger(__name__)


def _first(*values: Any) -> Any:
    """Return the first value that is not None or empty."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        return value
    return None


def _properties(properties: Any) -> Dict[str, Dict[str, Any]]:
    if properties is None:
        return {'core': {}, 'custom': {}}
    if isinstance(properties, Mapping):
        core = properties.get('core') or {}
        custom = properties.get('custom') or {}
    else:
        core = getattr(properties, 'core', None) or {}
        custom = getattr(properties, 'custom', None) or {}
    return {'core': dict(core), 'custom': dict(custom)}


def _map_unit(custom: Mapping[str, Any], current: Metadata) -> Optional[Unit]:
    code = _first(custom.get('UnitCode'), custom.get('ImprintCode'))
    if not code:
        return current.unit
    committee = custom.get('CommitteeCode') if str(code).strip().upper() == COMMITTEE_UNIT_CODE else None
    return Unit(unit_code=str(code), committee_code=committee)


def _map_contributors(core: Mapping[str, Any],
                      custom: Mapping[str, Any],
                      unit: Optional[Unit],
                      current: Metadata) -> List[Contributor]:
    raw = _first(custom.get('Contributors'), custom.get('Authors'))
    unit_code = unit.unit_code if unit else None
    committee_code = unit.committee_code if unit else None
    incoming = parse_contributors(raw, unit_code, committee_code) if raw else []

    creator = core.get('creator')
    if not incoming and creator:
        given, family = split_name(str(creator))
        if family:
            incoming = [Contributor(
                role="author",
                given=given or None,
                family=family,
                affiliation=affiliation_for_unit(unit),
            )]

    return merge_contributors(current.contributors, incoming)


def map_docx_properties(properties: Any,
                        current: Any = None,
                        config: Any = None) -> Dict[str, Any]:
    """
    Build a metadata patch from extracted DOCX properties.

    Args:
        properties: DocxProperties or ``{"core": {...}, "custom": {...}}``
        current: Current metadata (Metadata, mapping or None)
        config: Optional PipelineConfig (organization name)

    Returns:
        Patch dictionary in the wire (camelCase) shape
    """
    props = _properties(properties)
    core, custom = props['core'], props['custom']
    record = load_metadata(current)
    publisher = config.organization.name if config is not None else ORGANIZATION_NAME

    status = DocumentStatus.normalize(_first(custom.get('Status'), core.get('contentStatus')))
    if status is None:
        status = record.status

    unit = _map_unit(custom, record)
    contributors = _map_contributors(core, custom, unit, record)

    patch: Dict[str, Any] = {
        'title': _first(custom.get('Title'), core.get('title'), record.title) or 'Untitled',
        'subtitle': _first(custom.get('Subtitle'), record.subtitle),
        'abstract': _first(custom.get('Abstract'), record.abstract),
        'language': str(_first(custom.get('Language'), core.get('language'), record.language) or 'en').strip(),
        'status': status.value,
        'version': _first(custom.get('Version'), record.version),
        'datePublished': _first(custom.get('DatePublished'), core.get('dateCreated'), record.date_published),
        'dateModified': _first(custom.get('DateModified'), core.get('dateModified'), record.date_modified),
        'doi': _first(custom.get('DOI'), record.doi),
        'license': _first(custom.get('License'), record.license),
        'keywords': split_keywords(_first(custom.get('Keywords'), core.get('keywords'), record.keywords)),
        'publisher': publisher,
        'unit': unit.to_dict() if unit else None,
        'contributors': [c.to_dict() for c in contributors],
    }
    patch = {key: value for key, value in patch.items() if value is not None}
    logger.debug(f"Mapped DOCX properties onto {len(patch)} metadata field(s)")
    return patch


def apply_metadata_patch(current: Any, patch: Mapping[str, Any]) -> Metadata:
    """
    Merge a patch into the current record.

    The merged record is validated as a whole; if that fails, the merge is
    loaded field by field and invalid fields are dropped.

    Args:
        current: Current metadata (Metadata, mapping or None)
        patch: Fields to overwrite

    Returns:
        New Metadata instance; ``current`` is not modified
    """
    merged = load_metadata(current).to_dict()
    merged.update(patch)
    try:
        return Metadata.model_validate(merged)
    except ValidationError as e:
        logger.warning(f"Imported metadata did not validate ({e.error_count()} error(s)); merging leniently")
        return load_metadata(merged)
