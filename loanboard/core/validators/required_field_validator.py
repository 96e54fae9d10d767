"""
Required field rule; the default rule rejects rows without a wallet id.
"""

from typing import Any, Mapping

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Rejects a row whose field column is absent, null or blank.

    Parameters:
        allow_empty_string: accept a present but blank cell
    """

    rule_type = "required_field"

    def validate(self, value: Any, record: Mapping[str, Any]) -> None:
        if self.field_name not in record:
            self.fail("column not present in file")
        if value is None:
            self.fail("value is null")
        if isinstance(value, str) and not value.strip():
            if not self.parameters.get("allow_empty_string", False):
                self.fail("value is blank")
