"""
Base Validation Classes
=======================

Validation reports and the abstract validator interface. Validators never
raise on invalid input: they return a report that callers use for gating.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """
    Container for validation results.

    Attributes:
        errors: Blocking problems, in rule order
        warnings: Non-blocking problems, in rule order
        metadata: Additional validation context
    """
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when there are no blocking errors."""
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: 'ValidationReport') -> None:
        """Merge another report into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.metadata.update(other.metadata)

    def summary(self) -> str:
        """Generate a text summary of the report."""
        if self.ok and not self.warnings:
            return "Validation PASSED - No problems found"

        head = "PASSED" if self.ok else "FAILED"
        lines = [f"Validation {head} - {len(self.errors)} error(s), {len(self.warnings)} warning(s)"]
        lines.extend(f"  Error: {message}" for message in self.errors)
        lines.extend(f"  Warning: {message}" for message in self.warnings)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ok': self.ok,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
        }


class BaseValidator(ABC):
    """
    Abstract base class for validators.

    Example:
        class TitleOnlyValidator(BaseValidator):
            def validate(self, record, **kwargs) -> ValidationReport:
                report = ValidationReport()
                if not record.get("title"):
                    report.add_error("Title")
                return report
    """

    @abstractmethod
    def validate(self, record: Any, **kwargs) -> ValidationReport:
        """
        Validate a record.

        Args:
            record: Object to validate
            **kwargs: Additional validation options

        Returns:
            ValidationReport with validation outcome
        """
        pass

    def is_valid(self, record: Any, **kwargs) -> bool:
        """Convenience wrapper returning only the gate decision."""
        return self.validate(record, **kwargs).ok
