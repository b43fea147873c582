"""
Metadata Validator
==================

Publication rules for a metadata record.

Blocking rules (errors, in this order):
    - title present and at least 3 characters
    - language present
    - version present
    - at least one keyword
    - when published: datePublished starting with YYYY-MM-DD

Non-blocking rules (warnings):
    - unit not set
    - no contributors
    - when published: empty license, datePublished in the future

Usage:
    from storpub_core.validation import validate_metadata

    report = validate_metadata(record)
    if not report.ok:
        print(report.summary())
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional
import logging
import re

from storpub_core.model.metadata import DocumentStatus, Metadata, split_keywords
from storpub_core.validation.base import BaseValidator, ValidationReport

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ERROR_TITLE = 'Title (min 3 chars)'
ERROR_LANGUAGE = 'Language (e.g., "en")'
ERROR_VERSION = 'Version'
ERROR_KEYWORDS = 'At least one keyword'
ERROR_DATE_PUBLISHED = 'Date published (YYYY-MM-DD)'

WARNING_UNIT = 'Unit not set'
WARNING_CONTRIBUTORS = 'No contributors listed'
WARNING_LICENSE = 'License is empty for a published item'
WARNING_FUTURE_DATE = 'Date published is in the future'


def _get(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse an ISO date or date-time into an aware UTC datetime.

    A date without a time means midnight UTC; a naive date-time is taken
    as UTC. Returns None for anything unparseable, including values whose
    UTC equivalent falls outside the datetime range.
    """
    text = _text(value)
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        return None


def _record_mapping(record: Any) -> Mapping[str, Any]:
    if isinstance(record, Metadata):
        return record.model_dump(by_alias=True)
    if isinstance(record, Mapping):
        return record
    return {}


def validate_metadata(record: Any, now: Optional[datetime] = None) -> ValidationReport:
    """
    Validate a metadata record.

    Args:
        record: Metadata instance or plain mapping (camelCase or snake_case keys)
        now: Evaluation time for the "future date" warning; defaults to the
            current UTC time. A naive value is taken as UTC.

    Returns:
        ValidationReport; ``ok`` is True iff there are no errors
    """
    data = _record_mapping(record)
    report = ValidationReport()
    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    if len(_text(data.get('title'))) < 3:
        report.add_error(ERROR_TITLE)
    if not _text(data.get('language')):
        report.add_error(ERROR_LANGUAGE)
    if not _text(data.get('version')):
        report.add_error(ERROR_VERSION)
    if not split_keywords(data.get('keywords')):
        report.add_error(ERROR_KEYWORDS)

    published = DocumentStatus.normalize(data.get('status')) == DocumentStatus.PUBLISHED
    date_published = _text(_get(data, 'datePublished', 'date_published'))
    if published and not DATE_RE.match(date_published[:10]):
        report.add_error(ERROR_DATE_PUBLISHED)

    unit = data.get('unit')
    unit_code = _get(unit, 'unitCode', 'unit_code') if isinstance(unit, Mapping) else None
    if not _text(unit_code):
        report.add_warning(WARNING_UNIT)
    if not data.get('contributors'):
        report.add_warning(WARNING_CONTRIBUTORS)

    if published:
        if not _text(data.get('license')):
            report.add_warning(WARNING_LICENSE)
        when = parse_date(date_published)
        if when is not None and when > current:
            report.add_warning(WARNING_FUTURE_DATE)

    if not report.ok:
        logger.debug(f"Metadata validation failed: {report.errors}")
    return report


class MetadataValidator(BaseValidator):
    """
    Metadata validator behind the BaseValidator interface.

    Args:
        clock: Optional callable returning the evaluation time
    """

    def __init__(self, clock=None):
        self.clock = clock

    def validate(self, record: Any, **kwargs) -> ValidationReport:
        now = kwargs.get('now')
        if now is None and self.clock is not None:
            now = self.clock()
        return validate_metadata(record, now=now)
