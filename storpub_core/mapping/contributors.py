"""
Contributor Parsing
===================

Parses the compact contributor notation used in DOCX custom properties and
form input::

    Murphy, Jane|editor|PBO|j@x.ie|https://orcid.org/0000-0001; Tom Kelly||COM-FIN

Entries are separated by ``;``; each entry holds up to five ``|`` fields
``name|role|unitOrCommitteeToken|email|orcid``. Only the name is required.

Also provides the merge helpers the editor uses when an import adds
contributors to an existing list.
"""

from typing import Iterable, List, Optional, Union
import logging

from storpub_core.model.metadata import Affiliation, Contributor, Unit, split_name
from storpub_core.model.units import (
    COMMITTEE_UNIT_CODE,
    DEFAULT_COUNTRY,
    FALLBACK_UNIT_CODE,
    ORGANIZATION_NAME,
    is_committee_token,
    unit_from_code,
)
from storpub_core.xml.utils import normalize_whitespace

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = ";"
FIELD_SEPARATOR = "|"
FIELD_COUNT = 5


def _resolve_unit(token: str,
                  fallback_unit_code: Optional[str],
                  fallback_committee_code: Optional[str]) -> Affiliation:
    if is_committee_token(token):
        unit_code = COMMITTEE_UNIT_CODE
        committee_code = token
    else:
        unit_code = (token or fallback_unit_code or FALLBACK_UNIT_CODE).upper()
        committee_code = fallback_committee_code if unit_code == COMMITTEE_UNIT_CODE else None

    return Affiliation(
        org=ORGANIZATION_NAME,
        unit_code=unit_code,
        unit=unit_from_code(unit_code),
        committee_code=committee_code or None,
        country=DEFAULT_COUNTRY,
    )


def parse_contributor_entry(entry: str,
                            fallback_unit_code: Optional[str] = None,
                            fallback_committee_code: Optional[str] = None) -> Optional[Contributor]:
    """
    Parse a single ``name|role|unit|email|orcid`` entry.

    Returns:
        Contributor, or None when the name field is empty
    """
    fields = [f.strip() for f in entry.split(FIELD_SEPARATOR)]
    fields += [""] * (FIELD_COUNT - len(fields))
    name, role, unit_token, email, orcid = fields[:FIELD_COUNT]

    if not name:
        logger.debug(f"Skipping contributor entry without a name: {entry!r}")
        return None

    given, family = split_name(name)
    return Contributor(
        role=(role or "author").lower(),
        given=given or None,
        family=family,
        email=email or None,
        orcid=orcid or None,
        affiliation=_resolve_unit(unit_token, fallback_unit_code, fallback_committee_code),
    )


def parse_contributors(raw: Optional[str],
                       fallback_unit_code: Optional[str] = None,
                       fallback_committee_code: Optional[str] = None) -> List[Contributor]:
    """
    Parse contributor notation into an ordered list of contributors.

    Args:
        raw: Contributor string; None or whitespace yields an empty list
        fallback_unit_code: Unit for entries without a unit token
        fallback_committee_code: Committee for entries that resolve to COM
            without a committee token

    Returns:
        Contributors in input order

    Example:
        >>> people = parse_contributors("Kelly, Tom|author|COM-FIN", "PBO")
        >>> people[0].affiliation.unit_code, people[0].affiliation.committee_code
        ('COM', 'COM-FIN')
    """
    if not raw or not str(raw).strip():
        return []

    contributors = []
    for entry in str(raw).split(ENTRY_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue
        person = parse_contributor_entry(entry, fallback_unit_code, fallback_committee_code)
        if person is not None:
            contributors.append(person)

    logger.debug(f"Parsed {len(contributors)} contributor(s)")
    return contributors


def contributor_key(contributor: Contributor) -> str:
    """Normalized ``given|family|role`` identity used for de-duplication."""
    parts = (contributor.given or "", contributor.family or "", contributor.role or "")
    return "|".join(normalize_whitespace(p).lower() for p in parts)


def merge_contributors(existing: Iterable[Contributor],
                       incoming: Iterable[Contributor]) -> List[Contributor]:
    """
    Append ``incoming`` to ``existing``, skipping people already listed.

    Order is preserved; the first occurrence of a key wins.
    """
    merged: List[Contributor] = []
    seen = set()
    for person in list(existing) + list(incoming):
        key = contributor_key(person)
        if key in seen:
            continue
        seen.add(key)
        merged.append(person)
    return merged


def affiliation_for_unit(unit: Optional[Union[Unit, dict]]) -> Affiliation:
    """Default affiliation for a new contributor, taken from the document unit."""
    if unit is None:
        return Affiliation()
    if not isinstance(unit, Unit):
        unit = Unit.model_validate(unit)
    return Affiliation(
        unit_code=unit.unit_code,
        unit=unit.unit,
        committee_code=unit.committee_code,
        unit_uri=unit.unit_uri,
        committee_uri=unit.committee_uri,
    )


def display_name(contributor: Contributor) -> str:
    """``Given Family``, or whatever part is present."""
    return contributor.display_name
