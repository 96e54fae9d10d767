"""
Synonym table configuration.

Loads header synonym overrides from YAML files.
"""

from pathlib import Path
from typing import Any

import yaml

from loanboard.core.schema import DEFAULT_SYNONYMS, CanonicalField, build_synonym_index
from loanboard.exceptions import ConfigurationError


class SynonymConfigLoader:
    """
    Loads header synonym tables from YAML configuration files.

    Expected YAML format:
    ```yaml
    extend_defaults: true   # merge with the built-in table (default)
    synonyms:
      user_wallet:
        - borrower
        - borrower_wallet
      loan_due_date:
        - repay_by
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the synonym config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Synonym configuration file not found: {config_path}")

    def load_synonyms(self) -> dict[CanonicalField, tuple[str, ...]]:
        """
        Load and validate the synonym table.

        Returns:
            Canonical field → accepted spellings

        Raises:
            ConfigurationError: If the YAML is malformed, names an unknown
                canonical field, or maps one spelling to two fields
        """
        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(config, dict) or "synonyms" not in config:
            raise ConfigurationError("Configuration file must contain 'synonyms' section")

        extend_defaults = config.get("extend_defaults", True)
        table: dict[CanonicalField, tuple[str, ...]] = (
            dict(DEFAULT_SYNONYMS) if extend_defaults else {}
        )

        entries = config["synonyms"] or {}
        if not isinstance(entries, dict):
            raise ConfigurationError("'synonyms' must map canonical fields to lists")

        for field_name, spellings in entries.items():
            canonical = self._parse_field(field_name)
            parsed = self._parse_spellings(field_name, spellings)
            table[canonical] = tuple(dict.fromkeys(table.get(canonical, ()) + parsed))

        # Raises SynonymConflictError on overlap
        build_synonym_index(table)
        return table

    def _parse_field(self, field_name: Any) -> CanonicalField:
        try:
            return CanonicalField(str(field_name))
        except ValueError:
            known = ", ".join(f.value for f in CanonicalField)
            raise ConfigurationError(
                f"Unknown canonical field '{field_name}'. Expected one of: {known}"
            ) from None

    def _parse_spellings(self, field_name: str, spellings: Any) -> tuple[str, ...]:
        if not isinstance(spellings, list):
            raise ConfigurationError(f"Synonyms for field '{field_name}' must be a list")
        return tuple(str(s) for s in spellings)
