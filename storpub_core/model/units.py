"""
Organizational Units
====================

Units (formerly "imprints") of the Houses of the Oireachtas that can
publish or be credited as an affiliation. Each has a stable code and a
display title.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

ORGANIZATION_NAME = "Houses of the Oireachtas"
DEFAULT_COUNTRY = "IE"
DEFAULT_LICENSE = "Oireachtas (Open Data) PSI Licence"
COMMITTEE_UNIT_CODE = "COM"
COMMITTEE_TOKEN_PREFIX = "COM-"
FALLBACK_UNIT_CODE = "OTHER"


@dataclass(frozen=True)
class UnitOption:
    """A selectable publishing unit."""

    code: str
    title: str


UNITS: Dict[str, UnitOption] = {
    "PBO": UnitOption("PBO", "Parliamentary Budget Office"),
    "LIB": UnitOption("LIB", "Library and Research Service"),
    "COM": UnitOption("COM", "Committees"),
    "COMMS": UnitOption("COMMS", "Communications"),
    "COMMISSION": UnitOption("COMMISSION", "Houses of the Oireachtas Commission"),
    "OTHER": UnitOption("OTHER", "Other"),
}


def unit_options() -> List[UnitOption]:
    """Units in display order, for dropdowns and the REST API."""
    return list(UNITS.values())


def unit_from_code(code: Optional[str]) -> str:
    """
    Given a code like "PBO", return its display name.

    Unknown codes fall back to the upper-cased code itself; an empty code
    yields "Unknown".
    """
    if not code:
        return "Unknown"
    normalized = code.strip().upper()
    option = UNITS.get(normalized)
    return option.title if option else normalized


def is_committee_token(token: Optional[str]) -> bool:
    """True for committee tokens such as ``COM-FIN`` (case-insensitive)."""
    return bool(token) and token.upper().startswith(COMMITTEE_TOKEN_PREFIX)
