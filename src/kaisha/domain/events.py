"""Domain events emitted by the legal aggregates.

Design invariants
-----------------
1.  Every event is **immutable** (``frozen=True``).
2.  Every event type has exactly **one writer** aggregate, see
    ``WRITE_OWNERSHIP``.
3.  ``event_id`` is a UUID4 generated at creation time; downstream
    consumers (financial, HR, compliance contexts) use it as the
    idempotency key.
4.  ``correlation_id`` links all events that originate from the *same
    external request*.  It defaults to the id bound via
    ``kaisha.observability.logger.bind_correlation_id``.
5.  ``causation_id`` points to the ``event_id`` that *directly caused*
    this event.

A command that represents a fact emits exactly one event next to the new
snapshot.  Delivery, retry and cross-aggregate ordering belong to whatever
bus the caller publishes to.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

from kaisha.core.enums import (
    BoardStructure,
    DirectorPosition,
    DirectorRemovalReason,
    EntityType,
    ResolutionType,
    SealType,
    ShareClass,
    ShareholderMeetingType,
    ShareholderResolutionType,
)
from kaisha.core.ids import BoardId, CompanyId, DirectorId, ShareholderId
from kaisha.core.ids import new_id as _uuid
from kaisha.core.ids import utc_now as _now
from kaisha.core.values import (
    Address,
    BilingualName,
    CorporateNumber,
    FiscalYearEnd,
    Money,
    PersonName,
)
from kaisha.observability.logger import current_correlation_id

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LegalEvent:
    """Immutable base for every legal domain event.

    Shared fields
    ~~~~~~~~~~~~~
    event_id        Unique identity (UUID4).  Idempotency key.
    occurred_at     UTC creation time.
    company_id      Company the fact belongs to.
    correlation_id  Groups events from the same external request.
    causation_id    The ``event_id`` that directly caused this event.
    user_id         Acting user, when the caller knows it.
    """

    event_id: str = field(default_factory=_uuid)
    occurred_at: datetime = field(default_factory=_now)
    company_id: CompanyId = CompanyId("")
    correlation_id: str | None = field(default_factory=current_correlation_id)
    causation_id: str | None = None
    user_id: str | None = None

    @property
    def event_type(self) -> str:
        return type(self).__name__


E = TypeVar("E", bound=LegalEvent)


def with_user(event: E, user_id: str) -> E:
    return dataclasses.replace(event, user_id=user_id)


def with_causation(event: E, cause: LegalEvent) -> E:
    """Chain *event* after *cause*, inheriting its correlation when unset."""
    return dataclasses.replace(
        event,
        causation_id=cause.event_id,
        correlation_id=event.correlation_id or cause.correlation_id,
    )


# =========================================================================
# Company  (writer: company)
# =========================================================================

@dataclass(frozen=True)
class CompanyIncorporated(LegalEvent):
    """A company was registered (設立登記)."""

    corporate_number: CorporateNumber | None = None
    legal_name: BilingualName | None = None
    entity_type: EntityType = EntityType.KABUSHIKI_KAISHA
    initial_capital: Money = field(default_factory=Money.zero)
    fiscal_year_end: FiscalYearEnd = field(default_factory=FiscalYearEnd.march_31)
    headquarters_address: Address | None = None
    establishment_date: date | None = None


@dataclass(frozen=True)
class CapitalIncreased(LegalEvent):
    previous_capital: Money = field(default_factory=Money.zero)
    new_capital: Money = field(default_factory=Money.zero)
    increase_amount: Money = field(default_factory=Money.zero)
    effective_date: date | None = None


@dataclass(frozen=True)
class CapitalDecreased(LegalEvent):
    previous_capital: Money = field(default_factory=Money.zero)
    new_capital: Money = field(default_factory=Money.zero)
    decrease_amount: Money = field(default_factory=Money.zero)
    reason: str = ""
    effective_date: date | None = None


@dataclass(frozen=True)
class CompanyNameChanged(LegalEvent):
    previous_name: BilingualName | None = None
    new_name: BilingualName | None = None
    effective_date: date | None = None


@dataclass(frozen=True)
class HeadquartersChanged(LegalEvent):
    previous_address: Address | None = None
    new_address: Address | None = None
    effective_date: date | None = None


@dataclass(frozen=True)
class FiscalYearEndChanged(LegalEvent):
    previous_fiscal_year_end: FiscalYearEnd | None = None
    new_fiscal_year_end: FiscalYearEnd | None = None
    effective_date: date | None = None


@dataclass(frozen=True)
class LiquidationInitiated(LegalEvent):
    initiated_date: date | None = None
    reason: str = ""
    liquidator: PersonName | None = None


@dataclass(frozen=True)
class CompanyDissolved(LegalEvent):
    dissolution_date: date | None = None
    reason: str = ""


@dataclass(frozen=True)
class CorporateSealRegistered(LegalEvent):
    """Seal registered with the Legal Affairs Bureau (印鑑登録)."""

    seal_type: SealType = SealType.JITSUIN
    registration_date: date | None = None
    legal_affairs_bureau: str = ""


@dataclass(frozen=True)
class CorporateSealRetired(LegalEvent):
    seal_type: SealType = SealType.JITSUIN
    retirement_date: date | None = None
    reason: str = ""


# =========================================================================
# Board & directors  (writer: board)
# =========================================================================

@dataclass(frozen=True)
class DirectorAppointed(LegalEvent):
    board_id: BoardId = BoardId("")
    director_id: DirectorId = DirectorId("")
    name: PersonName | None = None
    position: DirectorPosition = DirectorPosition.DIRECTOR
    is_outside_director: bool = False
    appointment_date: date | None = None
    term_expiry: date | None = None


@dataclass(frozen=True)
class RepresentativeDirectorDesignated(LegalEvent):
    board_id: BoardId = BoardId("")
    director_id: DirectorId = DirectorId("")
    previous_representative_id: DirectorId | None = None
    designation_date: date | None = None


@dataclass(frozen=True)
class DirectorRemoved(LegalEvent):
    board_id: BoardId = BoardId("")
    director_id: DirectorId = DirectorId("")
    removal_date: date | None = None
    reason: DirectorRemovalReason = DirectorRemovalReason.RESIGNATION


@dataclass(frozen=True)
class DirectorTermRenewed(LegalEvent):
    board_id: BoardId = BoardId("")
    director_id: DirectorId = DirectorId("")
    previous_term_expiry: date | None = None
    new_term_expiry: date | None = None
    renewal_date: date | None = None


@dataclass(frozen=True)
class BoardEstablished(LegalEvent):
    board_id: BoardId = BoardId("")
    structure: BoardStructure = BoardStructure.WITH_STATUTORY_AUDITORS
    initial_directors: tuple[DirectorId, ...] = ()
    establishment_date: date | None = None


@dataclass(frozen=True)
class BoardMeetingHeld(LegalEvent):
    board_id: BoardId = BoardId("")
    meeting_date: date | None = None
    attendees_count: int = 0
    quorum_met: bool = False
    resolutions_passed: int = 0


@dataclass(frozen=True)
class BoardResolutionPassed(LegalEvent):
    board_id: BoardId = BoardId("")
    resolution_type: ResolutionType = ResolutionType.OTHER
    description: str = ""
    votes_for: int = 0
    votes_against: int = 0
    abstentions: int = 0
    passed_date: date | None = None


# =========================================================================
# Shares  (writer: shareholder_register)
# =========================================================================

@dataclass(frozen=True)
class SharesIssued(LegalEvent):
    shareholder_id: ShareholderId = ShareholderId("")
    shareholder_name: str = ""
    share_count: int = 0
    share_class: ShareClass = ShareClass.COMMON
    par_value: Money | None = None  # None when no par value is set
    total_value: Money | None = None
    issue_date: date | None = None


@dataclass(frozen=True)
class SharesTransferred(LegalEvent):
    from_shareholder_id: ShareholderId = ShareholderId("")
    to_shareholder_id: ShareholderId = ShareholderId("")
    share_count: int = 0
    transfer_price: Money | None = None
    transfer_date: date | None = None
    board_approval_date: date | None = None


@dataclass(frozen=True)
class ShareholderMeetingHeld(LegalEvent):
    meeting_type: ShareholderMeetingType = ShareholderMeetingType.ANNUAL_GENERAL
    meeting_date: date | None = None
    shares_represented: int = 0
    total_issued_shares: int = 0
    quorum_met: bool = False


@dataclass(frozen=True)
class ShareholderResolutionPassed(LegalEvent):
    resolution_type: ShareholderResolutionType = ShareholderResolutionType.ORDINARY
    description: str = ""
    votes_for: int = 0
    votes_against: int = 0
    required_majority: Decimal = Decimal("0.5")
    passed_date: date | None = None


# =========================================================================
# Write ownership registry
# =========================================================================

WRITE_OWNERSHIP: dict[type[LegalEvent], str] = {
    # Company
    CompanyIncorporated: "company",
    CapitalIncreased: "company",
    CapitalDecreased: "company",
    CompanyNameChanged: "company",
    HeadquartersChanged: "company",
    FiscalYearEndChanged: "company",
    LiquidationInitiated: "company",
    CompanyDissolved: "company",
    CorporateSealRegistered: "company",
    CorporateSealRetired: "company",
    # Board
    DirectorAppointed: "board",
    RepresentativeDirectorDesignated: "board",
    DirectorRemoved: "board",
    DirectorTermRenewed: "board",
    BoardEstablished: "board",
    BoardMeetingHeld: "board",
    BoardResolutionPassed: "board",
    # Shares
    SharesIssued: "shareholder_register",
    SharesTransferred: "shareholder_register",
    ShareholderMeetingHeld: "shareholder_register",
    ShareholderResolutionPassed: "shareholder_register",
}

ALL_LEGAL_EVENTS: tuple[type[LegalEvent], ...] = tuple(WRITE_OWNERSHIP.keys())

EVENT_REGISTRY: dict[str, type[LegalEvent]] = {
    cls.__name__: cls for cls in ALL_LEGAL_EVENTS
}


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

@lru_cache(maxsize=None)
def _adapter(cls: type[LegalEvent]) -> TypeAdapter[Any]:
    return TypeAdapter(cls)


def event_to_dict(event: LegalEvent) -> dict[str, Any]:
    """Serialize an event to a JSON-safe dict tagged with ``__event_type__``."""
    d: dict[str, Any] = _adapter(type(event)).dump_python(event, mode="json")
    d["__event_type__"] = type(event).__name__
    return d


def event_from_dict(
    d: dict[str, Any],
    registry: dict[str, type[LegalEvent]] | None = None,
) -> LegalEvent | None:
    """Deserialize a dict produced by ``event_to_dict``.

    Returns ``None`` if the event type is unrecognized (forward compat).
    """
    registry = registry if registry is not None else EVENT_REGISTRY
    data = dict(d)
    type_name = data.pop("__event_type__", None)
    if type_name is None or type_name not in registry:
        return None
    cls = registry[type_name]
    return _adapter(cls).validate_python(data)
