"""Shareholder register aggregate (株主名簿).

Conservation law: ``issued_shares == sum(h.share_count for h in shareholdings)``
after every command, and ``issued_shares <= authorized_shares``.

Issuance creates a new holding under a fresh shareholder id.  Transfers move
shares between two holdings without touching ``issued_shares``; a holding
whose count reaches zero is removed from the register, not kept at zero.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType

from kaisha.core.enums import (
    CertificateStatus,
    Currency,
    ShareClass,
    ShareholderMeetingType,
    ShareholderResolutionType,
    ShareholderType,
    TransferRestriction,
)
from kaisha.core.errors import (
    CannotTransferToSelf,
    ExceedsAuthorizedShares,
    InsufficientShares,
    InvalidResolution,
    InvalidShareCount,
    InvalidShareTransfer,
    LegalError,
    NoSharesIssued,
    ShareholderError,
    ShareholderNotFound,
    TransferNotApproved,
    ValidationFailure,
)
from kaisha.core.ids import CompanyId, ShareholderId, new_shareholder_id
from kaisha.core.result import Result
from kaisha.core.values import BilingualName, CorporateNumber, Money, PersonName
from kaisha.domain.events import (
    ShareholderMeetingHeld,
    ShareholderResolutionPassed,
    SharesIssued,
    SharesTransferred,
)

logger = logging.getLogger(__name__)

ORDINARY_MAJORITY = Decimal("0.5")
SPECIAL_MAJORITY = Decimal(2) / Decimal(3)
SUPER_SPECIAL_MAJORITY = Decimal("0.75")

CONTROLLING_INTEREST_PCT = Decimal("50")
BLOCKING_MINORITY_PCT = Decimal("33.33")


# ---------------------------------------------------------------------------
# Shareholder identity & holdings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShareholderProfile:
    """Who holds the shares: an individual, a domestic company or a foreign holder."""

    shareholder_type: ShareholderType
    display_name: str
    country: str | None = None
    corporate_number: CorporateNumber | None = None
    identifier: str | None = None

    @classmethod
    def individual(cls, name: PersonName) -> ShareholderProfile:
        return cls(ShareholderType.INDIVIDUAL, name.full_name, country="JP")

    @classmethod
    def domestic_corporate(
        cls, name: BilingualName, corporate_number: CorporateNumber
    ) -> ShareholderProfile:
        return cls(
            ShareholderType.DOMESTIC_CORPORATE,
            name.japanese,
            country="JP",
            corporate_number=corporate_number,
        )

    @classmethod
    def foreign(
        cls, name: str, country: str, identifier: str | None = None
    ) -> ShareholderProfile:
        return cls(
            ShareholderType.FOREIGN, name, country=country, identifier=identifier
        )


@dataclass(frozen=True)
class Shareholding:
    shareholder_id: ShareholderId
    profile: ShareholderProfile
    share_count: int
    share_class: ShareClass
    acquisition_date: date
    acquisition_price: Money | None = None
    certificate_status: CertificateStatus = CertificateStatus.NOT_ISSUED
    voting_rights_per_share: int = 1

    @property
    def shareholder_type(self) -> ShareholderType:
        return self.profile.shareholder_type

    @property
    def total_voting_rights(self) -> int:
        return self.share_count * self.voting_rights_per_share

    @property
    def has_voting_rights(self) -> bool:
        return self.voting_rights_per_share > 0


# ---------------------------------------------------------------------------
# Register
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShareholderRegister:
    company_id: CompanyId
    authorized_shares: int
    transfer_restriction: TransferRestriction
    issued_shares: int = 0
    par_value: Money | None = None
    shareholdings: Mapping[ShareholderId, Shareholding] = field(
        default_factory=lambda: MappingProxyType({})
    )
    share_classes: frozenset[ShareClass] = frozenset({ShareClass.COMMON})

    @classmethod
    def create(
        cls,
        company_id: CompanyId,
        authorized_shares: int,
        transfer_restriction: TransferRestriction,
    ) -> ShareholderRegister:
        return cls(
            company_id=company_id,
            authorized_shares=authorized_shares,
            transfer_restriction=transfer_restriction,
        )

    # -- queries -----------------------------------------------------------

    @property
    def total_issued_shares(self) -> int:
        return self.issued_shares

    @property
    def total_voting_rights(self) -> int:
        return sum(h.total_voting_rights for h in self.shareholdings.values())

    @property
    def shareholder_count(self) -> int:
        return len(self.shareholdings)

    def get_shareholding(self, shareholder_id: ShareholderId) -> Shareholding | None:
        return self.shareholdings.get(shareholder_id)

    def all_shareholdings(self) -> list[Shareholding]:
        return list(self.shareholdings.values())

    def shareholdings_by_type(self, shareholder_type: ShareholderType) -> list[Shareholding]:
        return [
            h for h in self.shareholdings.values()
            if h.shareholder_type is shareholder_type
        ]

    def is_conserved(self) -> bool:
        """True when issued shares equal the sum of all holdings."""
        held = sum(h.share_count for h in self.shareholdings.values())
        return self.issued_shares == held and self.issued_shares <= self.authorized_shares

    # -- commands ----------------------------------------------------------

    def issue_shares(
        self,
        profile: ShareholderProfile,
        share_count: int,
        share_class: ShareClass,
        issue_date: date,
    ) -> Result[tuple[ShareholderRegister, SharesIssued], ShareholderError]:
        """Issue new shares to a new shareholder id."""
        if share_count <= 0:
            return self._reject(InvalidShareCount("Share count must be positive"))
        requested_total = self.issued_shares + share_count
        if requested_total > self.authorized_shares:
            return self._reject(
                ExceedsAuthorizedShares(self.authorized_shares, requested_total)
            )

        shareholder_id = new_shareholder_id()
        holding = Shareholding(
            shareholder_id=shareholder_id,
            profile=profile,
            share_count=share_count,
            share_class=share_class,
            acquisition_date=issue_date,
            voting_rights_per_share=0 if share_class is ShareClass.NON_VOTING else 1,
        )
        holdings = dict(self.shareholdings)
        holdings[shareholder_id] = holding
        register = dataclasses.replace(
            self,
            issued_shares=requested_total,
            shareholdings=MappingProxyType(holdings),
            share_classes=self.share_classes | {share_class},
        )

        total_value = self.par_value.multiply(share_count) if self.par_value else None
        event = SharesIssued(
            company_id=self.company_id,
            shareholder_id=shareholder_id,
            shareholder_name=profile.display_name,
            share_count=share_count,
            share_class=share_class,
            par_value=self.par_value,
            total_value=total_value,
            issue_date=issue_date,
        )
        logger.info(
            "Issued %d %s shares to %s (issued %d / authorized %d)",
            share_count, share_class.value, shareholder_id,
            requested_total, self.authorized_shares,
        )
        return Result.ok((register, event))

    def transfer_shares(
        self,
        from_id: ShareholderId,
        to_id: ShareholderId,
        share_count: int,
        transfer_date: date,
        board_approved: bool = False,
        transfer_price: Money | None = None,
        recipient: ShareholderProfile | None = None,
    ) -> Result[tuple[ShareholderRegister, SharesTransferred], ShareholderError]:
        """Move shares between holdings; ``issued_shares`` is unchanged.

        A recipient not yet on the register gets a new holding under
        *recipient*, or an anonymous profile of the seller's holder type when
        none is given.  An existing recipient keeps its own profile.
        """
        restriction = self.transfer_restriction
        if restriction is TransferRestriction.REQUIRES_BOARD_APPROVAL and not board_approved:
            return self._reject(TransferNotApproved())
        if restriction is TransferRestriction.PROHIBITED:
            return self._reject(InvalidShareTransfer("Share transfers are prohibited"))
        if from_id == to_id:
            return self._reject(CannotTransferToSelf())
        if share_count <= 0:
            return self._reject(InvalidShareCount("Transfer count must be positive"))

        source = self.shareholdings.get(from_id)
        if source is None:
            return self._reject(ShareholderNotFound(from_id))
        if share_count > source.share_count:
            return self._reject(InsufficientShares(share_count, source.share_count))

        holdings = dict(self.shareholdings)
        remaining = source.share_count - share_count
        if remaining == 0:
            del holdings[from_id]
        else:
            holdings[from_id] = dataclasses.replace(source, share_count=remaining)

        target = holdings.get(to_id)
        if target is not None:
            holdings[to_id] = dataclasses.replace(
                target, share_count=target.share_count + share_count
            )
        else:
            # Only the share class carries over from the seller
            holdings[to_id] = Shareholding(
                shareholder_id=to_id,
                profile=recipient or ShareholderProfile(source.shareholder_type, to_id),
                share_count=share_count,
                share_class=source.share_class,
                acquisition_date=transfer_date,
                acquisition_price=transfer_price,
                voting_rights_per_share=source.voting_rights_per_share,
            )

        register = dataclasses.replace(self, shareholdings=MappingProxyType(holdings))
        event = SharesTransferred(
            company_id=self.company_id,
            from_shareholder_id=from_id,
            to_shareholder_id=to_id,
            share_count=share_count,
            transfer_price=transfer_price,
            transfer_date=transfer_date,
            board_approval_date=transfer_date if board_approved else None,
        )
        return Result.ok((register, event))

    def increase_authorized_shares(
        self, additional_shares: int
    ) -> Result[ShareholderRegister, ShareholderError]:
        """Raise the ceiling set by the articles of incorporation."""
        if additional_shares < 0:
            return self._reject(InvalidShareCount("Share count cannot be negative"))
        return Result.ok(
            dataclasses.replace(
                self, authorized_shares=self.authorized_shares + additional_shares
            )
        )

    def set_par_value(self, par_value: Money) -> Result[ShareholderRegister, LegalError]:
        if par_value.currency is not Currency.JPY:
            return self._reject(ValidationFailure("Par value must be in Japanese Yen"))
        if not par_value.is_positive():
            return self._reject(ValidationFailure("Par value must be positive"))
        return Result.ok(dataclasses.replace(self, par_value=par_value))

    def set_transfer_restriction(
        self, restriction: TransferRestriction
    ) -> ShareholderRegister:
        return dataclasses.replace(self, transfer_restriction=restriction)

    # -- shareholder meetings ----------------------------------------------

    def hold_shareholder_meeting(
        self,
        meeting_type: ShareholderMeetingType,
        meeting_date: date,
        shares_represented: int,
    ) -> Result[ShareholderMeetingHeld, ShareholderError]:
        """Record attendance; quorum is a majority of issued shares."""
        if self.issued_shares == 0:
            return self._reject(NoSharesIssued())
        if not 0 <= shares_represented <= self.issued_shares:
            return self._reject(
                InvalidShareCount(
                    f"Represented shares must be between 0 and {self.issued_shares}"
                )
            )
        return Result.ok(
            ShareholderMeetingHeld(
                company_id=self.company_id,
                meeting_type=meeting_type,
                meeting_date=meeting_date,
                shares_represented=shares_represented,
                total_issued_shares=self.issued_shares,
                quorum_met=shares_represented * 2 > self.issued_shares,
            )
        )

    def pass_shareholder_resolution(
        self,
        resolution_type: ShareholderResolutionType,
        description: str,
        votes_for: int,
        votes_against: int,
        resolution_date: date,
    ) -> Result[ShareholderResolutionPassed | None, LegalError]:
        """Evaluate a vote; ``ok(None)`` when the resolution does not pass."""
        if votes_for < 0 or votes_against < 0:
            return self._reject(InvalidResolution("Vote counts cannot be negative"))

        total = votes_for + votes_against
        if resolution_type is ShareholderResolutionType.ORDINARY:
            passed = ordinary_resolution_passes(votes_for, votes_against)
        elif resolution_type is ShareholderResolutionType.SPECIAL:
            passed = special_resolution_passes(votes_for, total)
        else:
            passed = super_special_resolution_passes(votes_for, total)

        if not passed:
            return Result.ok(None)
        return Result.ok(
            ShareholderResolutionPassed(
                company_id=self.company_id,
                resolution_type=resolution_type,
                description=description,
                votes_for=votes_for,
                votes_against=votes_against,
                required_majority=required_majority(resolution_type),
                passed_date=resolution_date,
            )
        )

    def _reject(self, error: LegalError) -> Result:
        logger.debug("Register %s command rejected: %s", self.company_id, error)
        return Result.err(error)


# ---------------------------------------------------------------------------
# Shareholder rules
# ---------------------------------------------------------------------------

def ownership_percentage(holding: Shareholding, total_issued: int) -> Decimal:
    """Ownership as a percentage (0-100)."""
    if total_issued == 0:
        return Decimal(0)
    return Decimal(holding.share_count) / Decimal(total_issued) * 100


def has_controlling_interest(holding: Shareholding, total_issued: int) -> bool:
    return ownership_percentage(holding, total_issued) > CONTROLLING_INTEREST_PCT


def has_blocking_minority(holding: Shareholding, total_issued: int) -> bool:
    """More than a third: enough to block special resolutions."""
    return ownership_percentage(holding, total_issued) > BLOCKING_MINORITY_PCT


def dividend_per_share(
    total_dividend: Money, total_shares: int
) -> Result[Money, LegalError]:
    if total_shares == 0:
        return Result.err(NoSharesIssued())
    return total_dividend.divide(total_shares).map_err(ValidationFailure)


def group_by_type(
    holdings: Iterable[Shareholding],
) -> dict[ShareholderType, list[Shareholding]]:
    groups: dict[ShareholderType, list[Shareholding]] = {}
    for h in holdings:
        groups.setdefault(h.shareholder_type, []).append(h)
    return groups


def meeting_quorum_ratio(present_shares: int, total_shares: int) -> Decimal:
    if total_shares == 0:
        return Decimal(0)
    return Decimal(present_shares) / Decimal(total_shares)


def ordinary_resolution_passes(votes_for: int, votes_against: int) -> bool:
    return votes_for > votes_against


def special_resolution_passes(votes_for: int, total_votes: int) -> bool:
    """At least two thirds of the votes cast."""
    if total_votes == 0:
        return False
    return Decimal(votes_for) / Decimal(total_votes) >= SPECIAL_MAJORITY


def super_special_resolution_passes(votes_for: int, total_votes: int) -> bool:
    """At least three quarters of the votes cast."""
    if total_votes == 0:
        return False
    return Decimal(votes_for) / Decimal(total_votes) >= SUPER_SPECIAL_MAJORITY


def required_majority(resolution_type: ShareholderResolutionType) -> Decimal:
    return {
        ShareholderResolutionType.ORDINARY: ORDINARY_MAJORITY,
        ShareholderResolutionType.SPECIAL: SPECIAL_MAJORITY,
        ShareholderResolutionType.SUPER_SPECIAL: SUPER_SPECIAL_MAJORITY,
    }[resolution_type]
