"""Incorporation: the only construction path for a Company.

``CompanyFactory.incorporate`` validates an ``IncorporateCompany`` command
and produces an Active company with ``net_assets = initial capital`` and a
zero legal reserve, together with ``CompanyIncorporated``.

Two conveniences sit on top of it:

- ``kabushiki_kaisha`` / ``godo_kaisha`` for the common case (configured
  fiscal year end, establishment today, Japanese name only)
- ``IncorporationBuilder`` for assembling a command step by step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from kaisha.core.config import LegalSettings
from kaisha.core.enums import CompanyStatus, Currency, EntityType, TransferRestriction
from kaisha.core.errors import (
    CapitalBelowMinimum,
    CompanyError,
    InvalidCapital,
    InvalidCompanyName,
    InvalidCorporateNumber,
)
from kaisha.core.ids import new_company_id, today
from kaisha.core.result import Result, first_error, require
from kaisha.core.values import (
    Address,
    BilingualName,
    CorporateNumber,
    FiscalYearEnd,
    Money,
)
from kaisha.domain.company import Company, CorporateSeals, minimum_capital
from kaisha.domain.events import CompanyIncorporated
from kaisha.domain.shareholder import ShareholderRegister

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IncorporateCompany:
    """Request to incorporate.  ``corporate_number`` is the raw string as filed."""

    corporate_number: str
    legal_name: BilingualName
    entity_type: EntityType
    initial_capital: Money
    fiscal_year_end: FiscalYearEnd
    headquarters_address: Address
    establishment_date: date


def validate_incorporation(cmd: IncorporateCompany) -> Result[None, CompanyError]:
    """Check an incorporation request, stopping at the first failure."""
    number = CorporateNumber.parse(cmd.corporate_number)
    if number.is_err():
        return Result.err(InvalidCorporateNumber(number.error))

    capital = cmd.initial_capital
    minimum = minimum_capital(cmd.entity_type)
    return first_error(
        require(
            capital.currency is Currency.JPY,
            InvalidCapital("Capital must be in Japanese Yen"),
        ),
        require(capital.is_positive(), InvalidCapital("Initial capital must be positive")),
        require(
            capital.amount >= minimum,
            CapitalBelowMinimum(cmd.entity_type, minimum, capital.amount),
        ),
        require(
            bool(cmd.legal_name.japanese.strip()),
            InvalidCompanyName("Japanese company name is required"),
        ),
    )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class CompanyFactory:
    """Builds new Company aggregates (and their shareholder registers)."""

    def __init__(self, settings: LegalSettings | None = None) -> None:
        self._settings = settings or LegalSettings()

    @property
    def settings(self) -> LegalSettings:
        return self._settings

    def incorporate(
        self, cmd: IncorporateCompany
    ) -> Result[tuple[Company, CompanyIncorporated], CompanyError]:
        check = validate_incorporation(cmd)
        if check.is_err():
            logger.debug("Incorporation rejected: %s", check.error)
            return Result.err(check.error)

        corporate_number = CorporateNumber.parse(cmd.corporate_number).value
        company = Company(
            id=new_company_id(),
            corporate_number=corporate_number,
            legal_name=cmd.legal_name,
            entity_type=cmd.entity_type,
            status=CompanyStatus.ACTIVE,
            registered_capital=cmd.initial_capital,
            fiscal_year_end=cmd.fiscal_year_end,
            headquarters=cmd.headquarters_address,
            establishment_date=cmd.establishment_date,
            corporate_seals=CorporateSeals(),
            net_assets=cmd.initial_capital,
            legal_reserve=Money.yen(0),
        )
        event = CompanyIncorporated(
            company_id=company.id,
            corporate_number=corporate_number,
            legal_name=cmd.legal_name,
            entity_type=cmd.entity_type,
            initial_capital=cmd.initial_capital,
            fiscal_year_end=cmd.fiscal_year_end,
            headquarters_address=cmd.headquarters_address,
            establishment_date=cmd.establishment_date,
        )
        logger.info(
            "Incorporated %s (%s) capital=%s",
            company.display_name, corporate_number.format(), cmd.initial_capital,
        )
        return Result.ok((company, event))

    def open_register(
        self,
        company: Company,
        authorized_shares: int | None = None,
        transfer_restriction: TransferRestriction | None = None,
    ) -> ShareholderRegister:
        """Open an empty shareholder register using the configured defaults."""
        return ShareholderRegister.create(
            company.id,
            authorized_shares or self._settings.default_authorized_shares,
            transfer_restriction or self._settings.default_transfer_restriction,
        )

    def quick(
        self,
        entity_type: EntityType,
        corporate_number: str,
        japanese_name: str,
        capital: Decimal | int,
        address: Address,
        english_name: str | None = None,
    ) -> Result[tuple[Company, CompanyIncorporated], CompanyError]:
        name = BilingualName.parse(japanese_name, english_name)
        if name.is_err():
            return Result.err(InvalidCompanyName(name.error))
        cmd = IncorporateCompany(
            corporate_number=corporate_number,
            legal_name=name.value,
            entity_type=entity_type,
            initial_capital=Money.yen(capital),
            fiscal_year_end=self._settings.fiscal_year_end(),
            headquarters_address=address,
            establishment_date=today(),
        )
        return self.incorporate(cmd)


def kabushiki_kaisha(
    corporate_number: str,
    japanese_name: str,
    capital: Decimal | int,
    address: Address,
    settings: LegalSettings | None = None,
) -> Result[tuple[Company, CompanyIncorporated], CompanyError]:
    """株式会社 established today with the configured fiscal year end."""
    return CompanyFactory(settings).quick(
        EntityType.KABUSHIKI_KAISHA, corporate_number, japanese_name, capital, address
    )


def godo_kaisha(
    corporate_number: str,
    japanese_name: str,
    capital: Decimal | int,
    address: Address,
    settings: LegalSettings | None = None,
) -> Result[tuple[Company, CompanyIncorporated], CompanyError]:
    return CompanyFactory(settings).quick(
        EntityType.GODO_KAISHA, corporate_number, japanese_name, capital, address
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class IncorporationBuilder:
    """Fluent assembly of an ``IncorporateCompany`` command.

    Usage::

        result = (
            IncorporationBuilder()
            .with_corporate_number("1010401089234")
            .with_japanese_name("テスト")
            .with_capital(10_000_000)
            .with_address(address)
            .incorporate()
        )
    """

    def __init__(self, settings: LegalSettings | None = None) -> None:
        self._settings = settings or LegalSettings()
        self._corporate_number = ""
        self._japanese_name = ""
        self._english_name: str | None = None
        self._kana_name: str | None = None
        self._entity_type = EntityType.KABUSHIKI_KAISHA
        self._capital = Decimal(0)
        self._fiscal_year_end = self._settings.fiscal_year_end()
        self._address: Address | None = None
        self._establishment_date = today()

    def with_corporate_number(self, number: str) -> IncorporationBuilder:
        self._corporate_number = number
        return self

    def with_japanese_name(self, name: str) -> IncorporationBuilder:
        self._japanese_name = name
        return self

    def with_english_name(self, name: str) -> IncorporationBuilder:
        self._english_name = name
        return self

    def with_kana_name(self, name: str) -> IncorporationBuilder:
        self._kana_name = name
        return self

    def with_entity_type(self, entity_type: EntityType) -> IncorporationBuilder:
        self._entity_type = entity_type
        return self

    def as_kabushiki_kaisha(self) -> IncorporationBuilder:
        return self.with_entity_type(EntityType.KABUSHIKI_KAISHA)

    def as_godo_kaisha(self) -> IncorporationBuilder:
        return self.with_entity_type(EntityType.GODO_KAISHA)

    def with_capital(self, amount: Decimal | int) -> IncorporationBuilder:
        self._capital = Decimal(amount)
        return self

    def with_fiscal_year_end(self, fiscal_year_end: FiscalYearEnd) -> IncorporationBuilder:
        self._fiscal_year_end = fiscal_year_end
        return self

    def with_march_fiscal_year(self) -> IncorporationBuilder:
        return self.with_fiscal_year_end(FiscalYearEnd.march_31())

    def with_december_fiscal_year(self) -> IncorporationBuilder:
        return self.with_fiscal_year_end(FiscalYearEnd.december_31())

    def with_address(self, address: Address) -> IncorporationBuilder:
        self._address = address
        return self

    def with_establishment_date(self, on: date) -> IncorporationBuilder:
        self._establishment_date = on
        return self

    def build(self) -> Result[IncorporateCompany, str]:
        if not self._corporate_number.strip():
            return Result.err("Corporate number is required")
        if not self._japanese_name.strip():
            return Result.err("Japanese name is required")
        if self._capital <= 0:
            return Result.err("Capital must be positive")
        if self._address is None:
            return Result.err("Address is required")

        name = BilingualName(
            japanese=self._japanese_name,
            japanese_kana=self._kana_name,
            english=self._english_name,
        )
        return Result.ok(
            IncorporateCompany(
                corporate_number=self._corporate_number,
                legal_name=name,
                entity_type=self._entity_type,
                initial_capital=Money.yen(self._capital),
                fiscal_year_end=self._fiscal_year_end,
                headquarters_address=self._address,
                establishment_date=self._establishment_date,
            )
        )

    def incorporate(self) -> Result[tuple[Company, CompanyIncorporated], CompanyError]:
        cmd = self.build()
        if cmd.is_err():
            return Result.err(InvalidCompanyName(cmd.error))
        return CompanyFactory(self._settings).incorporate(cmd.value)
