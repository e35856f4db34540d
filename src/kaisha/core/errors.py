"""Closed error taxonomy for the legal core.

Invariants:
    - Every error is a ``LegalError`` with a stable ``code`` and ``category``
    - Errors are *returned* inside ``Result.err``; they are exceptions only so
      that ``Result.unwrap()`` can raise them
    - Each variant carries the data needed to explain the violation
    - Per-aggregate bases (CompanyError, DirectorError, BoardError,
      ShareholderError, SealError) partition the taxonomy; ``LegalError`` is
      their union for cross-cutting reporting

Variants are non-frozen dataclasses: frozen exceptions break when
``contextlib`` re-assigns ``__traceback__``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from kaisha.core.enums import DirectorPosition, EntityType, SealType, CompanyStatus
    from kaisha.core.values import Money


class ErrorCategory(str, Enum):
    """High-level error categories for routing and reporting."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    STATE = "state"
    NOT_FOUND = "not_found"


def _yen(amount: Decimal | int) -> str:
    return f"¥{Decimal(amount):,.0f}"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, "format") and hasattr(value, "currency"):
        return value.format()
    return value


@dataclass(unsafe_hash=True)
class LegalError(Exception):
    """Base for every legal-core error."""

    code: ClassVar[str] = "LEGAL_ERROR"
    category: ClassVar[ErrorCategory] = ErrorCategory.BUSINESS_RULE

    @property
    def message(self) -> str:
        return "Legal rule violated"

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-safe envelope for logs and external reporting."""
        payload: dict[str, Any] = {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
        }
        for f in dataclasses.fields(self):
            payload[f.name] = _jsonable(getattr(self, f.name))
        return payload


@dataclass(unsafe_hash=True)
class ValidationFailure(LegalError):
    """Low-level value parse failure not yet classified by an aggregate."""

    code: ClassVar[str] = "VALIDATION_ERROR"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Validation error: {self.reason}"


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------

@dataclass(unsafe_hash=True)
class CompanyError(LegalError):
    code: ClassVar[str] = "COMPANY_ERROR"


@dataclass(unsafe_hash=True)
class InvalidCorporateNumber(CompanyError):
    code: ClassVar[str] = "INVALID_CORPORATE_NUMBER"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid corporate number: {self.reason}"


@dataclass(unsafe_hash=True)
class InvalidCompanyName(CompanyError):
    code: ClassVar[str] = "INVALID_COMPANY_NAME"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid company name: {self.reason}"


@dataclass(unsafe_hash=True)
class InvalidCapital(CompanyError):
    code: ClassVar[str] = "INVALID_CAPITAL"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid capital: {self.reason}"


@dataclass(unsafe_hash=True)
class InsufficientCapital(CompanyError):
    code: ClassVar[str] = "INSUFFICIENT_CAPITAL"

    required: Money
    actual: Money

    @property
    def message(self) -> str:
        return (
            f"Insufficient capital: required {self.required.format()}, "
            f"actual {self.actual.format()}"
        )


@dataclass(unsafe_hash=True)
class CapitalBelowMinimum(CompanyError):
    code: ClassVar[str] = "CAPITAL_BELOW_MINIMUM"

    entity_type: EntityType
    minimum: Decimal
    actual: Decimal

    @property
    def message(self) -> str:
        return (
            f"Capital {_yen(self.actual)} is below minimum {_yen(self.minimum)} "
            f"for {self.entity_type.japanese}"
        )


@dataclass(unsafe_hash=True)
class RepresentativeNotOnBoard(CompanyError):
    code: ClassVar[str] = "REPRESENTATIVE_NOT_ON_BOARD"

    director_id: str

    @property
    def message(self) -> str:
        return f"Representative director {self.director_id} is not on the board"


@dataclass(unsafe_hash=True)
class CompanyNotActive(CompanyError):
    code: ClassVar[str] = "COMPANY_NOT_ACTIVE"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    status: CompanyStatus | None = None

    @property
    def message(self) -> str:
        if self.status is None:
            return "Company is not in active status"
        return f"Company is not in active status (current: {self.status.value})"


@dataclass(unsafe_hash=True)
class CannotIncorporate(CompanyError):
    code: ClassVar[str] = "CANNOT_INCORPORATE"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Cannot incorporate: {self.reason}"


@dataclass(unsafe_hash=True)
class CannotDissolve(CompanyError):
    code: ClassVar[str] = "CANNOT_DISSOLVE"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Cannot dissolve: {self.reason}"


@dataclass(unsafe_hash=True)
class AlreadyDissolved(CompanyError):
    code: ClassVar[str] = "ALREADY_DISSOLVED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    @property
    def message(self) -> str:
        return "Company has already been dissolved"


@dataclass(unsafe_hash=True)
class CompanyUnderLiquidation(CompanyError):
    code: ClassVar[str] = "UNDER_LIQUIDATION"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    @property
    def message(self) -> str:
        return "Company is under liquidation"


@dataclass(unsafe_hash=True)
class InvalidStatusTransition(CompanyError):
    code: ClassVar[str] = "INVALID_STATUS_TRANSITION"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    current: CompanyStatus
    target: CompanyStatus

    @property
    def message(self) -> str:
        return (
            f"Invalid status transition: {self.current.value} -> {self.target.value}"
        )


@dataclass(unsafe_hash=True)
class InsufficientNetAssets(CompanyError):
    code: ClassVar[str] = "INSUFFICIENT_NET_ASSETS"

    required: Money
    actual: Money

    @property
    def message(self) -> str:
        return (
            f"Net assets {self.actual.format()} below required minimum "
            f"{self.required.format()}"
        )


@dataclass(unsafe_hash=True)
class InsufficientRetainedEarnings(CompanyError):
    code: ClassVar[str] = "INSUFFICIENT_RETAINED_EARNINGS"

    @property
    def message(self) -> str:
        return "Insufficient retained earnings for dividend"


@dataclass(unsafe_hash=True)
class ReserveRequirementNotMet(CompanyError):
    code: ClassVar[str] = "RESERVE_REQUIREMENT_NOT_MET"

    required_reserve: Decimal
    actual_reserve: Decimal

    @property
    def message(self) -> str:
        return (
            f"Legal reserve requirement not met: required "
            f"{self.required_reserve:.0%}, actual {self.actual_reserve:.0%}"
        )


# ---------------------------------------------------------------------------
# Director
# ---------------------------------------------------------------------------

@dataclass(unsafe_hash=True)
class DirectorError(LegalError):
    code: ClassVar[str] = "DIRECTOR_ERROR"


@dataclass(unsafe_hash=True)
class InvalidDirectorName(DirectorError):
    code: ClassVar[str] = "INVALID_DIRECTOR_NAME"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid director name: {self.reason}"


@dataclass(unsafe_hash=True)
class InvalidTerm(DirectorError):
    code: ClassVar[str] = "INVALID_TERM"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid term: {self.reason}"


@dataclass(unsafe_hash=True)
class TermExceedsMaximum(DirectorError):
    code: ClassVar[str] = "TERM_EXCEEDS_MAXIMUM"

    max_years: int
    requested_years: int

    @property
    def message(self) -> str:
        return (
            f"Term {self.requested_years} years exceeds maximum "
            f"{self.max_years} years"
        )


@dataclass(unsafe_hash=True)
class DirectorAlreadyOnBoard(DirectorError):
    code: ClassVar[str] = "DIRECTOR_ALREADY_ON_BOARD"

    director_id: str

    @property
    def message(self) -> str:
        return f"Director {self.director_id} is already on the board"


@dataclass(unsafe_hash=True)
class DirectorNotOnBoard(DirectorError):
    code: ClassVar[str] = "DIRECTOR_NOT_ON_BOARD"
    category: ClassVar[ErrorCategory] = ErrorCategory.NOT_FOUND

    director_id: str

    @property
    def message(self) -> str:
        return f"Director {self.director_id} is not on the board"


@dataclass(unsafe_hash=True)
class CannotRemoveLastDirector(DirectorError):
    code: ClassVar[str] = "CANNOT_REMOVE_LAST_DIRECTOR"

    @property
    def message(self) -> str:
        return "Cannot remove the last director"


@dataclass(unsafe_hash=True)
class CannotRemoveRepresentativeDirector(DirectorError):
    code: ClassVar[str] = "CANNOT_REMOVE_REPRESENTATIVE_DIRECTOR"

    director_id: str = ""

    @property
    def message(self) -> str:
        return "Must designate new representative before removing current one"


@dataclass(unsafe_hash=True)
class OutsideDirectorRequired(DirectorError):
    code: ClassVar[str] = "OUTSIDE_DIRECTOR_REQUIRED"

    @property
    def message(self) -> str:
        return "At least one outside director is required"


@dataclass(unsafe_hash=True)
class PositionAlreadyFilled(DirectorError):
    code: ClassVar[str] = "POSITION_ALREADY_FILLED"

    position: DirectorPosition

    @property
    def message(self) -> str:
        return f"Company already has an active {self.position.value}"


@dataclass(unsafe_hash=True)
class DirectorTermExpired(DirectorError):
    code: ClassVar[str] = "DIRECTOR_TERM_EXPIRED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    director_id: str
    expired_on: date

    @property
    def message(self) -> str:
        return (
            f"Director {self.director_id} term expired on "
            f"{self.expired_on.isoformat()}"
        )


@dataclass(unsafe_hash=True)
class DirectorNotActive(DirectorError):
    code: ClassVar[str] = "DIRECTOR_NOT_ACTIVE"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    director_id: str

    @property
    def message(self) -> str:
        return f"Director {self.director_id} is not active"


@dataclass(unsafe_hash=True)
class NoRepresentativeDirector(DirectorError):
    code: ClassVar[str] = "NO_REPRESENTATIVE_DIRECTOR"

    @property
    def message(self) -> str:
        return "Board must have exactly one active representative director"


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------

@dataclass(unsafe_hash=True)
class BoardError(LegalError):
    code: ClassVar[str] = "BOARD_ERROR"


@dataclass(unsafe_hash=True)
class InsufficientDirectors(BoardError):
    code: ClassVar[str] = "INSUFFICIENT_DIRECTORS"

    required: int
    actual: int

    @property
    def message(self) -> str:
        return (
            f"Insufficient directors: required {self.required}, "
            f"actual {self.actual}"
        )


@dataclass(unsafe_hash=True)
class InsufficientOutsideDirectors(BoardError):
    code: ClassVar[str] = "INSUFFICIENT_OUTSIDE_DIRECTORS"

    required: int
    actual: int

    @property
    def message(self) -> str:
        return (
            f"Insufficient outside directors: required {self.required}, "
            f"actual {self.actual}"
        )


@dataclass(unsafe_hash=True)
class BoardAlreadyExists(BoardError):
    code: ClassVar[str] = "BOARD_ALREADY_EXISTS"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    @property
    def message(self) -> str:
        return "Board of directors already exists"


@dataclass(unsafe_hash=True)
class BoardNotEstablished(BoardError):
    code: ClassVar[str] = "BOARD_NOT_ESTABLISHED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    @property
    def message(self) -> str:
        return "Board of directors has not been established"


@dataclass(unsafe_hash=True)
class QuorumNotMet(BoardError):
    code: ClassVar[str] = "QUORUM_NOT_MET"

    required: int
    present: int

    @property
    def message(self) -> str:
        return f"Quorum not met: required {self.required}, present {self.present}"


@dataclass(unsafe_hash=True)
class InvalidResolution(BoardError):
    code: ClassVar[str] = "INVALID_RESOLUTION"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid resolution: {self.reason}"


@dataclass(unsafe_hash=True)
class MeetingNotConvened(BoardError):
    code: ClassVar[str] = "MEETING_NOT_CONVENED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    @property
    def message(self) -> str:
        return "Board meeting has not been convened"


# ---------------------------------------------------------------------------
# Shareholder
# ---------------------------------------------------------------------------

@dataclass(unsafe_hash=True)
class ShareholderError(LegalError):
    code: ClassVar[str] = "SHAREHOLDER_ERROR"


@dataclass(unsafe_hash=True)
class InvalidShareCount(ShareholderError):
    code: ClassVar[str] = "INVALID_SHARE_COUNT"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid share count: {self.reason}"


@dataclass(unsafe_hash=True)
class InvalidShareTransfer(ShareholderError):
    code: ClassVar[str] = "INVALID_SHARE_TRANSFER"

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid share transfer: {self.reason}"


@dataclass(unsafe_hash=True)
class InsufficientShares(ShareholderError):
    code: ClassVar[str] = "INSUFFICIENT_SHARES"

    required: int
    available: int

    @property
    def message(self) -> str:
        return (
            f"Insufficient shares: required {self.required}, "
            f"available {self.available}"
        )


@dataclass(unsafe_hash=True)
class ShareholderNotFound(ShareholderError):
    code: ClassVar[str] = "SHAREHOLDER_NOT_FOUND"
    category: ClassVar[ErrorCategory] = ErrorCategory.NOT_FOUND

    shareholder_id: str

    @property
    def message(self) -> str:
        return f"Shareholder {self.shareholder_id} not found"


@dataclass(unsafe_hash=True)
class TransferRequiresApproval(ShareholderError):
    code: ClassVar[str] = "TRANSFER_REQUIRES_APPROVAL"

    @property
    def message(self) -> str:
        return "Share transfer requires board approval"


@dataclass(unsafe_hash=True)
class TransferNotApproved(ShareholderError):
    code: ClassVar[str] = "TRANSFER_NOT_APPROVED"

    @property
    def message(self) -> str:
        return "Share transfer has not been approved"


@dataclass(unsafe_hash=True)
class CannotTransferToSelf(ShareholderError):
    code: ClassVar[str] = "CANNOT_TRANSFER_TO_SELF"

    @property
    def message(self) -> str:
        return "Cannot transfer shares to self"


@dataclass(unsafe_hash=True)
class SharesAlreadyIssued(ShareholderError):
    code: ClassVar[str] = "SHARES_ALREADY_ISSUED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    share_count: int

    @property
    def message(self) -> str:
        return f"Shares already issued: {self.share_count}"


@dataclass(unsafe_hash=True)
class NoSharesIssued(ShareholderError):
    code: ClassVar[str] = "NO_SHARES_ISSUED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    @property
    def message(self) -> str:
        return "No shares have been issued"


@dataclass(unsafe_hash=True)
class ExceedsAuthorizedShares(ShareholderError):
    code: ClassVar[str] = "EXCEEDS_AUTHORIZED_SHARES"

    authorized: int
    requested: int

    @property
    def message(self) -> str:
        return (
            f"Requested {self.requested} shares exceeds authorized "
            f"{self.authorized}"
        )


# ---------------------------------------------------------------------------
# Seal
# ---------------------------------------------------------------------------

@dataclass(unsafe_hash=True)
class SealError(LegalError):
    code: ClassVar[str] = "SEAL_ERROR"


@dataclass(unsafe_hash=True)
class SealNotRegistered(SealError):
    code: ClassVar[str] = "SEAL_NOT_REGISTERED"
    category: ClassVar[ErrorCategory] = ErrorCategory.NOT_FOUND

    seal_type: SealType

    @property
    def message(self) -> str:
        return f"Seal not registered: {self.seal_type.value}"


@dataclass(unsafe_hash=True)
class SealAlreadyRegistered(SealError):
    code: ClassVar[str] = "SEAL_ALREADY_REGISTERED"
    category: ClassVar[ErrorCategory] = ErrorCategory.STATE

    seal_type: SealType

    @property
    def message(self) -> str:
        return f"Seal already registered: {self.seal_type.value}"


@dataclass(unsafe_hash=True)
class InvalidSealRegistration(SealError):
    code: ClassVar[str] = "INVALID_SEAL_REGISTRATION"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid seal registration: {self.reason}"


@dataclass(unsafe_hash=True)
class RepresentativeSealRequired(SealError):
    code: ClassVar[str] = "REPRESENTATIVE_SEAL_REQUIRED"

    @property
    def message(self) -> str:
        return "Representative seal (実印) is required"
