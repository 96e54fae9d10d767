"""
Unit tests for YAML synonym configuration.
"""

import pytest

from loanboard.core.rules import SynonymConfigLoader
from loanboard.core.schema import DEFAULT_SYNONYMS, CanonicalField, HeaderResolver
from loanboard.exceptions import ConfigurationError, SynonymConflictError


def write_config(tmp_path, text):
    path = tmp_path / "synonyms.yaml"
    path.write_text(text)
    return path


class TestSynonymConfigLoader:
    """Tests for SynonymConfigLoader"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SynonymConfigLoader(tmp_path / "nope.yaml")

    def test_extends_defaults(self, tmp_path):
        path = write_config(tmp_path, """
synonyms:
  user_wallet:
    - borrower
    - Borrower Wallet
  loan_due_date:
    - repay_by
""")
        table = SynonymConfigLoader(path).load_synonyms()

        assert "borrower" in table[CanonicalField.USER_WALLET]
        assert "wallet" in table[CanonicalField.USER_WALLET]
        assert table[CanonicalField.LOAN_AMOUNT] == DEFAULT_SYNONYMS[CanonicalField.LOAN_AMOUNT]

        resolver = HeaderResolver(table)
        assert resolver.match("borrower-wallet") is CanonicalField.USER_WALLET
        assert resolver.match("Repay By") is CanonicalField.LOAN_DUE_DATE

    def test_replaces_defaults(self, tmp_path):
        path = write_config(tmp_path, """
extend_defaults: false
synonyms:
  user_wallet: [borrower]
  loan_amount: [amt]
""")
        table = SynonymConfigLoader(path).load_synonyms()

        assert set(table) == {CanonicalField.USER_WALLET, CanonicalField.LOAN_AMOUNT}
        assert HeaderResolver(table).match("wallet") is None

    def test_unknown_field(self, tmp_path):
        path = write_config(tmp_path, "synonyms:\n  borrower_name: [name]\n")

        with pytest.raises(ConfigurationError, match="Unknown canonical field"):
            SynonymConfigLoader(path).load_synonyms()

    def test_missing_section(self, tmp_path):
        path = write_config(tmp_path, "other: 1\n")

        with pytest.raises(ConfigurationError, match="synonyms"):
            SynonymConfigLoader(path).load_synonyms()

    def test_spellings_must_be_list(self, tmp_path):
        path = write_config(tmp_path, "synonyms:\n  user_wallet: borrower\n")

        with pytest.raises(ConfigurationError, match="must be a list"):
            SynonymConfigLoader(path).load_synonyms()

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "synonyms: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            SynonymConfigLoader(path).load_synonyms()

    def test_overlap_with_defaults(self, tmp_path):
        path = write_config(tmp_path, "synonyms:\n  version: [amount]\n")

        with pytest.raises(SynonymConflictError):
            SynonymConfigLoader(path).load_synonyms()
