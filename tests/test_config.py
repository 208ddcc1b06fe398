"""
Tests for settings loading and validation.
"""

import pytest
from pydantic import ValidationError

from gridcalc.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("ROWS", "COLUMNS", "COLUMN_WIDTH", "ROW_HEIGHT"):
            monkeypatch.delenv(f"GRIDCALC_DEFAULT_{name}", raising=False)
        monkeypatch.delenv("GRIDCALC_HISTORY_LIMIT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_rows == 100
        assert settings.default_columns == 100
        assert settings.default_column_width == 100
        assert settings.default_row_height == 24
        assert settings.history_limit is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GRIDCALC_DEFAULT_ROWS", "500")
        monkeypatch.setenv("GRIDCALC_HISTORY_LIMIT", "50")
        settings = Settings(_env_file=None)
        assert settings.default_rows == 500
        assert settings.history_limit == 50

    @pytest.mark.parametrize("field", [
        "default_rows", "default_columns", "default_column_width", "default_row_height",
    ])
    def test_sizes_must_be_positive(self, field):
        with pytest.raises(ValidationError, match="positive"):
            Settings(_env_file=None, **{field: 0})

    def test_history_limit_must_be_positive(self):
        with pytest.raises(ValidationError, match="history_limit"):
            Settings(_env_file=None, history_limit=0)
