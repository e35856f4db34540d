"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.

Only operational defaults live here.  Statutory limits (director term cap,
net-asset floor for dividends, quorum rule, minimum headcounts) are law and
stay as module constants next to the rules that apply them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from .enums import TransferRestriction
from .values import FiscalYearEnd


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"

    @field_validator("log_format")
    @classmethod
    def format_must_be_known(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class LegalSettings(BaseSettings):
    """Defaults applied when incorporating companies and opening registers.

    Loaded from TOML config files, overridden by ``KAISHA_*`` environment
    variables (``KAISHA_OBSERVABILITY__LOG_LEVEL`` for nested values).
    """

    # Fiscal year end used by quick incorporation helpers (3/31 is standard)
    fiscal_year_end_month: int = 3
    fiscal_year_end_day: int = 31

    # Shareholder register defaults
    default_authorized_shares: int = 10_000
    default_transfer_restriction: TransferRestriction = (
        TransferRestriction.REQUIRES_BOARD_APPROVAL
    )

    # Seal registration
    legal_affairs_bureau: str = "東京法務局"

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "KAISHA_", "env_nested_delimiter": "__"}

    @field_validator("default_authorized_shares")
    @classmethod
    def authorized_shares_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"default_authorized_shares must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def fiscal_year_end_must_exist(self) -> LegalSettings:
        # Raises through FiscalYearEnd's own validation
        self.fiscal_year_end()
        return self

    def fiscal_year_end(self) -> FiscalYearEnd:
        return FiscalYearEnd(
            month=self.fiscal_year_end_month, day=self.fiscal_year_end_day
        )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> LegalSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    return LegalSettings(**data)
