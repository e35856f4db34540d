"""Company aggregate root (会社).

Owns corporate identity, registered capital, fiscal year, seals, status and
a reference to the company's board.

Lifecycle (strict, forward only; no edge skips a state):

    INCORPORATING -> ACTIVE <-> SUSPENDED
    ACTIVE | SUSPENDED -> UNDER_LIQUIDATION -> DISSOLVED

Invariants:
    - Registered capital >= statutory minimum for the entity type
    - An ACTIVE company has a registered representative seal (実印)
    - Dividends only while ACTIVE and net assets >= ¥3,000,000

``validate()`` checks the first two on demand; commands enforce their own
preconditions and never mutate the receiver.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from kaisha.core.enums import CompanyStatus, Currency, EntityType, SealType
from kaisha.core.errors import (
    CannotDissolve,
    CapitalBelowMinimum,
    CompanyError,
    CompanyNotActive,
    InsufficientCapital,
    InsufficientNetAssets,
    InvalidCapital,
    InvalidCompanyName,
    InvalidStatusTransition,
    LegalError,
    RepresentativeSealRequired,
    SealAlreadyRegistered,
    SealNotRegistered,
)
from kaisha.core.ids import BoardId, CompanyId
from kaisha.core.result import Result
from kaisha.core.values import (
    Address,
    BilingualName,
    CorporateNumber,
    CorporateSeal,
    FiscalYear,
    FiscalYearEnd,
    Money,
    PersonName,
)
from kaisha.domain.events import (
    CapitalDecreased,
    CapitalIncreased,
    CompanyDissolved,
    CompanyNameChanged,
    CorporateSealRegistered,
    CorporateSealRetired,
    FiscalYearEndChanged,
    HeadquartersChanged,
    LiquidationInitiated,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Statutory figures
# ---------------------------------------------------------------------------

# Companies Act art. 458: no dividend while net assets are below ¥3M
MINIMUM_NET_ASSETS_FOR_DIVIDEND = Decimal("3000000")
# Legal reserve must reach 25% of capital
LEGAL_RESERVE_RATIO = Decimal("0.25")
# 10% of each dividend goes to the legal reserve until the ratio is met
DIVIDEND_RESERVE_CONTRIBUTION = Decimal("0.10")

MINIMUM_CAPITAL: dict[EntityType, Decimal] = {
    EntityType.KABUSHIKI_KAISHA: Decimal("1"),
    EntityType.GODO_KAISHA: Decimal("1"),
    EntityType.GOMEI_KAISHA: Decimal("0"),
    EntityType.GOSHI_KAISHA: Decimal("0"),
}

# Practical (credibility) capital, not a legal requirement
RECOMMENDED_CAPITAL: dict[EntityType, Decimal] = {
    EntityType.KABUSHIKI_KAISHA: Decimal("10000000"),
    EntityType.GODO_KAISHA: Decimal("3000000"),
    EntityType.GOMEI_KAISHA: Decimal("0"),
    EntityType.GOSHI_KAISHA: Decimal("0"),
}


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------

TRANSITIONS: dict[CompanyStatus, frozenset[CompanyStatus]] = {
    CompanyStatus.INCORPORATING: frozenset({CompanyStatus.ACTIVE}),
    CompanyStatus.ACTIVE: frozenset({
        CompanyStatus.SUSPENDED, CompanyStatus.UNDER_LIQUIDATION,
    }),
    CompanyStatus.SUSPENDED: frozenset({
        CompanyStatus.ACTIVE, CompanyStatus.UNDER_LIQUIDATION,
    }),
    CompanyStatus.UNDER_LIQUIDATION: frozenset({CompanyStatus.DISSOLVED}),
    CompanyStatus.DISSOLVED: frozenset(),
}


def can_transition(current: CompanyStatus, target: CompanyStatus) -> bool:
    return target in TRANSITIONS[current]


# ---------------------------------------------------------------------------
# Corporate seals
# ---------------------------------------------------------------------------

# Seal types tracked per company.  認印 is accepted but never stored.
TRACKED_SEALS: frozenset[SealType] = frozenset({
    SealType.JITSUIN, SealType.GINKOIN, SealType.KAKUIN,
})


@dataclass(frozen=True)
class CorporateSeals:
    jitsuin: CorporateSeal | None = None  # 実印 (representative seal)
    ginkoin: CorporateSeal | None = None  # 銀行印 (bank seal)
    kakuin: CorporateSeal | None = None  # 角印 (acknowledgment seal)

    def get(self, seal_type: SealType) -> CorporateSeal | None:
        if seal_type not in TRACKED_SEALS:
            return None
        return getattr(self, seal_type.value)

    def with_seal(self, seal: CorporateSeal) -> CorporateSeals:
        if seal.seal_type not in TRACKED_SEALS:
            return self
        return dataclasses.replace(self, **{seal.seal_type.value: seal})

    def is_registered(self, seal_type: SealType) -> bool:
        seal = self.get(seal_type)
        return seal is not None and seal.is_registered

    @property
    def has_registered_seal(self) -> bool:
        """True when the representative seal is registered."""
        return self.is_registered(SealType.JITSUIN)


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Company:
    id: CompanyId
    corporate_number: CorporateNumber
    legal_name: BilingualName
    entity_type: EntityType
    status: CompanyStatus
    registered_capital: Money
    fiscal_year_end: FiscalYearEnd
    headquarters: Address
    establishment_date: date
    corporate_seals: CorporateSeals = field(default_factory=CorporateSeals)
    board_id: BoardId | None = None
    net_assets: Money | None = None
    legal_reserve: Money | None = None

    # -- queries -----------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status is CompanyStatus.ACTIVE

    @property
    def capital_amount(self) -> Decimal:
        return self.registered_capital.amount

    @property
    def has_registered_seal(self) -> bool:
        return self.corporate_seals.has_registered_seal

    @property
    def can_pay_dividend(self) -> bool:
        return self.can_pay_dividend_of(Money.zero()).is_ok()

    @property
    def display_name(self) -> str:
        return format_company_name(self.legal_name, self.entity_type)

    # -- capital -----------------------------------------------------------

    def increase_capital(
        self, amount: Money, effective_date: date
    ) -> Result[tuple[Company, CapitalIncreased], CompanyError]:
        if not self.is_active:
            return self._reject(CompanyNotActive(self.status))
        if amount.currency is not Currency.JPY:
            return self._reject(InvalidCapital("Capital must be in Japanese Yen"))
        if not amount.is_positive():
            return self._reject(InvalidCapital("Capital increase must be positive"))

        new_capital = self.registered_capital.add(amount)
        if new_capital.is_err():
            return self._reject(InvalidCapital(new_capital.error))

        company = dataclasses.replace(self, registered_capital=new_capital.value)
        event = CapitalIncreased(
            company_id=self.id,
            previous_capital=self.registered_capital,
            new_capital=new_capital.value,
            increase_amount=amount,
            effective_date=effective_date,
        )
        logger.info(
            "Company %s capital increased %s -> %s",
            self.id, self.registered_capital, new_capital.value,
        )
        return Result.ok((company, event))

    def decrease_capital(
        self, amount: Money, reason: str, effective_date: date
    ) -> Result[tuple[Company, CapitalDecreased], CompanyError]:
        """Capital reduction (減資); cannot go below the statutory minimum."""
        if not self.is_active:
            return self._reject(CompanyNotActive(self.status))
        if amount.currency is not Currency.JPY:
            return self._reject(InvalidCapital("Capital must be in Japanese Yen"))
        if not amount.is_positive():
            return self._reject(InvalidCapital("Capital decrease must be positive"))
        if amount.amount > self.capital_amount:
            return self._reject(InsufficientCapital(amount, self.registered_capital))

        new_capital = self.registered_capital.subtract(amount)
        if new_capital.is_err():
            return self._reject(InvalidCapital(new_capital.error))
        minimum = minimum_capital(self.entity_type)
        if new_capital.value.amount < minimum:
            return self._reject(
                CapitalBelowMinimum(self.entity_type, minimum, new_capital.value.amount)
            )

        company = dataclasses.replace(self, registered_capital=new_capital.value)
        event = CapitalDecreased(
            company_id=self.id,
            previous_capital=self.registered_capital,
            new_capital=new_capital.value,
            decrease_amount=amount,
            reason=reason,
            effective_date=effective_date,
        )
        logger.info(
            "Company %s capital decreased %s -> %s (%s)",
            self.id, self.registered_capital, new_capital.value, reason,
        )
        return Result.ok((company, event))

    # -- registered particulars --------------------------------------------

    def change_name(
        self, new_name: BilingualName, effective_date: date
    ) -> Result[tuple[Company, CompanyNameChanged], CompanyError]:
        if not self.is_active:
            return self._reject(CompanyNotActive(self.status))
        if new_name.japanese == self.legal_name.japanese:
            return self._reject(
                InvalidCompanyName("New name must be different from current name")
            )

        event = CompanyNameChanged(
            company_id=self.id,
            previous_name=self.legal_name,
            new_name=new_name,
            effective_date=effective_date,
        )
        return Result.ok((dataclasses.replace(self, legal_name=new_name), event))

    def change_headquarters(
        self, new_address: Address, effective_date: date
    ) -> Result[tuple[Company, HeadquartersChanged], CompanyError]:
        if not self.is_active:
            return self._reject(CompanyNotActive(self.status))

        event = HeadquartersChanged(
            company_id=self.id,
            previous_address=self.headquarters,
            new_address=new_address,
            effective_date=effective_date,
        )
        return Result.ok((dataclasses.replace(self, headquarters=new_address), event))

    def change_fiscal_year_end(
        self, new_fiscal_year_end: FiscalYearEnd, effective_date: date
    ) -> Result[tuple[Company, FiscalYearEndChanged], CompanyError]:
        if not self.is_active:
            return self._reject(CompanyNotActive(self.status))

        event = FiscalYearEndChanged(
            company_id=self.id,
            previous_fiscal_year_end=self.fiscal_year_end,
            new_fiscal_year_end=new_fiscal_year_end,
            effective_date=effective_date,
        )
        company = dataclasses.replace(self, fiscal_year_end=new_fiscal_year_end)
        return Result.ok((company, event))

    # -- seals -------------------------------------------------------------

    def register_seal(
        self, seal_type: SealType, registration_date: date, legal_affairs_bureau: str
    ) -> Result[tuple[Company, CorporateSealRegistered], LegalError]:
        """Register a seal with the Legal Affairs Bureau.

        認印 is accepted and emits the event, but is not stored on the company.
        """
        if self.corporate_seals.is_registered(seal_type):
            return self._reject(SealAlreadyRegistered(seal_type))

        seal = CorporateSeal.registered(seal_type, registration_date, legal_affairs_bureau)
        company = dataclasses.replace(
            self, corporate_seals=self.corporate_seals.with_seal(seal)
        )
        event = CorporateSealRegistered(
            company_id=self.id,
            seal_type=seal_type,
            registration_date=registration_date,
            legal_affairs_bureau=legal_affairs_bureau,
        )
        return Result.ok((company, event))

    def retire_seal(
        self, seal_type: SealType, retirement_date: date, reason: str
    ) -> Result[tuple[Company, CorporateSealRetired], LegalError]:
        seal = self.corporate_seals.get(seal_type)
        if seal is None or not seal.is_registered:
            return self._reject(SealNotRegistered(seal_type))

        company = dataclasses.replace(
            self,
            corporate_seals=self.corporate_seals.with_seal(seal.retire(retirement_date)),
        )
        event = CorporateSealRetired(
            company_id=self.id,
            seal_type=seal_type,
            retirement_date=retirement_date,
            reason=reason,
        )
        return Result.ok((company, event))

    # -- non-event updates -------------------------------------------------

    def update_net_assets(self, net_assets: Money) -> Company:
        return dataclasses.replace(self, net_assets=net_assets)

    def update_legal_reserve(self, reserve: Money) -> Company:
        return dataclasses.replace(self, legal_reserve=reserve)

    def associate_board(self, board_id: BoardId) -> Company:
        return dataclasses.replace(self, board_id=board_id)

    # -- lifecycle ---------------------------------------------------------

    def initiate_liquidation(
        self,
        reason: str,
        initiated_date: date,
        liquidator: PersonName | None = None,
    ) -> Result[tuple[Company, LiquidationInitiated], CompanyError]:
        if not can_transition(self.status, CompanyStatus.UNDER_LIQUIDATION):
            return self._reject(
                CannotDissolve(
                    f"Cannot initiate liquidation in {self.status.value} status"
                )
            )

        event = LiquidationInitiated(
            company_id=self.id,
            initiated_date=initiated_date,
            reason=reason,
            liquidator=liquidator,
        )
        logger.info("Company %s liquidation initiated: %s", self.id, reason)
        company = dataclasses.replace(self, status=CompanyStatus.UNDER_LIQUIDATION)
        return Result.ok((company, event))

    def dissolve(
        self, reason: str, dissolution_date: date
    ) -> Result[tuple[Company, CompanyDissolved], CompanyError]:
        if not can_transition(self.status, CompanyStatus.DISSOLVED):
            return self._reject(
                CannotDissolve("Company must be under liquidation to dissolve")
            )

        event = CompanyDissolved(
            company_id=self.id,
            dissolution_date=dissolution_date,
            reason=reason,
        )
        logger.info("Company %s dissolved: %s", self.id, reason)
        return Result.ok((dataclasses.replace(self, status=CompanyStatus.DISSOLVED), event))

    def suspend(self) -> Result[Company, CompanyError]:
        """休眠: only an active company can be suspended."""
        if not self.is_active:
            return self._reject(CompanyNotActive(self.status))
        logger.info("Company %s suspended", self.id)
        return Result.ok(dataclasses.replace(self, status=CompanyStatus.SUSPENDED))

    def resume(self) -> Result[Company, CompanyError]:
        if self.status is not CompanyStatus.SUSPENDED:
            return self._reject(
                InvalidStatusTransition(self.status, CompanyStatus.ACTIVE)
            )
        logger.info("Company %s resumed", self.id)
        return Result.ok(dataclasses.replace(self, status=CompanyStatus.ACTIVE))

    # -- validation --------------------------------------------------------

    def validate(self) -> Result[None, LegalError]:
        minimum = minimum_capital(self.entity_type)
        if self.capital_amount < minimum:
            return Result.err(
                CapitalBelowMinimum(self.entity_type, minimum, self.capital_amount)
            )
        if self.is_active and not self.has_registered_seal:
            return Result.err(RepresentativeSealRequired())
        return Result.ok(None)

    def can_pay_dividend_of(self, amount: Money) -> Result[None, CompanyError]:
        """Gate a dividend on status and the ¥3,000,000 net-asset floor.

        *amount* is not compared against distributable surplus; only the
        net-asset floor is enforced.
        """
        if not self.is_active:
            return Result.err(CompanyNotActive(self.status))
        floor = Money.yen(MINIMUM_NET_ASSETS_FOR_DIVIDEND)
        if self.net_assets is None:
            return Result.err(InsufficientNetAssets(floor, Money.yen(0)))
        if self.net_assets.amount < MINIMUM_NET_ASSETS_FOR_DIVIDEND:
            return Result.err(InsufficientNetAssets(floor, self.net_assets))
        return Result.ok(None)

    def _reject(self, error: LegalError) -> Result:
        logger.debug("Company %s command rejected: %s", self.id, error)
        return Result.err(error)


# ---------------------------------------------------------------------------
# Company rules
# ---------------------------------------------------------------------------

def minimum_capital(entity_type: EntityType) -> Decimal:
    return MINIMUM_CAPITAL[entity_type]


def recommended_capital(entity_type: EntityType) -> Decimal:
    return RECOMMENDED_CAPITAL[entity_type]


def meets_capital_recommendation(entity_type: EntityType, capital: Decimal) -> bool:
    return capital >= recommended_capital(entity_type)


def registration_fee(entity_type: EntityType, capital: Decimal) -> Decimal:
    """Registration and license tax (登録免許税) for incorporation."""
    if entity_type is EntityType.KABUSHIKI_KAISHA:
        return max(Decimal("150000"), capital * Decimal("0.007"))
    if entity_type is EntityType.GODO_KAISHA:
        return max(Decimal("60000"), capital * Decimal("0.007"))
    return Decimal("60000")


def required_legal_reserve(capital: Decimal) -> Decimal:
    return capital * LEGAL_RESERVE_RATIO


def dividend_reserve_contribution(dividend_amount: Decimal) -> Decimal:
    return dividend_amount * DIVIDEND_RESERVE_CONTRIBUTION


def allows_simplified_governance(entity_type: EntityType) -> bool:
    """Mochibun companies (持分会社) run without K.K. governance organs."""
    return entity_type is not EntityType.KABUSHIKI_KAISHA


def format_company_name(name: BilingualName, entity_type: EntityType) -> str:
    return f"{entity_type.japanese}{name.japanese}"


def fiscal_year_for_date(fiscal_year_end: FiscalYearEnd, on: date) -> FiscalYear:
    return FiscalYear.for_date(fiscal_year_end, on)


def validate_corporate_number(raw: str) -> Result[CorporateNumber, str]:
    return CorporateNumber.parse(raw)
