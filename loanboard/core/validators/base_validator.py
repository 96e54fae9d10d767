"""
Row rejection rules.

A rule looks at one mapped row (canonical field name to stripped cell)
and raises ValidationError when the row cannot become a loan record.
Coercion problems are not rejections; see loanboard.core.normalization.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping


class ValidationError(Exception):
    """A row failed a rejection rule."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """Rule bound to one canonical field."""

    rule_type: str = "rule"

    def __init__(self, field_name: str, parameters: Mapping[str, Any] | None = None):
        self.field_name = field_name
        self.parameters = dict(parameters or {})

    def fail(self, message: str) -> None:
        raise ValidationError(self.rule_type, self.field_name, message)

    @abstractmethod
    def validate(self, value: Any, record: Mapping[str, Any]) -> None:
        """Raise ValidationError if ``value`` (taken from ``record``) is unacceptable."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field_name!r})"
