"""Test LegalSettings loading: defaults, TOML files, env overrides, validation."""

import pytest
from pydantic import ValidationError

from kaisha.core.config import LegalSettings, ObservabilityConfig, load_settings
from kaisha.core.enums import TransferRestriction
from kaisha.core.values import FiscalYearEnd


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "KAISHA_DEFAULT_AUTHORIZED_SHARES",
        "KAISHA_LEGAL_AFFAIRS_BUREAU",
        "KAISHA_OBSERVABILITY__LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_default_settings(self):
        settings = LegalSettings()
        assert settings.fiscal_year_end() == FiscalYearEnd.march_31()
        assert settings.default_authorized_shares == 10_000
        assert settings.default_transfer_restriction is (
            TransferRestriction.REQUIRES_BOARD_APPROVAL
        )
        assert settings.legal_affairs_bureau == "東京法務局"

    def test_observability_defaults(self):
        obs = LegalSettings().observability
        assert obs.log_level == "INFO"
        assert obs.log_format == "json"


class TestValidation:
    def test_unknown_log_format(self):
        with pytest.raises(ValidationError, match="log_format"):
            ObservabilityConfig(log_format="xml")

    def test_non_existent_fiscal_day(self):
        with pytest.raises(ValidationError):
            LegalSettings(fiscal_year_end_month=2, fiscal_year_end_day=30)

    def test_leap_day_fiscal_year_end(self):
        settings = LegalSettings(fiscal_year_end_month=2, fiscal_year_end_day=29)
        assert settings.fiscal_year_end().day == 29

    @pytest.mark.parametrize("shares", [0, -10])
    def test_authorized_shares_must_be_positive(self, shares):
        with pytest.raises(ValidationError, match="default_authorized_shares"):
            LegalSettings(default_authorized_shares=shares)


class TestLoadSettings:
    def test_no_file(self):
        assert load_settings().default_authorized_shares == 10_000

    def test_missing_file_ignored(self, tmp_path):
        settings = load_settings(tmp_path / "absent.toml")
        assert settings.legal_affairs_bureau == "東京法務局"

    def test_toml_file(self, tmp_path):
        path = tmp_path / "kaisha.toml"
        path.write_text(
            "fiscal_year_end_month = 12\n"
            "fiscal_year_end_day = 31\n"
            'default_transfer_restriction = "no_restriction"\n'
            'legal_affairs_bureau = "大阪法務局"\n'
            "\n"
            "[observability]\n"
            'log_format = "console"\n',
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings.fiscal_year_end() == FiscalYearEnd.december_31()
        assert settings.default_transfer_restriction is TransferRestriction.NO_RESTRICTION
        assert settings.legal_affairs_bureau == "大阪法務局"
        assert settings.observability.log_format == "console"

    def test_overrides_win_over_file(self, tmp_path):
        path = tmp_path / "kaisha.toml"
        path.write_text("default_authorized_shares = 500\n", encoding="utf-8")
        settings = load_settings(path, overrides={"default_authorized_shares": 800})
        assert settings.default_authorized_shares == 800

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("KAISHA_DEFAULT_AUTHORIZED_SHARES", "2000")
        monkeypatch.setenv("KAISHA_OBSERVABILITY__LOG_LEVEL", "DEBUG")
        settings = load_settings()
        assert settings.default_authorized_shares == 2000
        assert settings.observability.log_level == "DEBUG"
