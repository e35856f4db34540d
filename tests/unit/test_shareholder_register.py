"""Test the ShareholderRegister aggregate and shareholder rules."""

import dataclasses
from datetime import date
from decimal import Decimal
from types import MappingProxyType

import pytest

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
    NoSharesIssued,
    ShareholderNotFound,
    TransferNotApproved,
    ValidationFailure,
)
from kaisha.core.ids import ShareholderId
from kaisha.core.values import BilingualName, CorporateNumber, Money, PersonName
from kaisha.domain.shareholder import (
    SPECIAL_MAJORITY,
    ShareholderProfile,
    ShareholderRegister,
    dividend_per_share,
    group_by_type,
    has_blocking_minority,
    has_controlling_interest,
    meeting_quorum_ratio,
    ordinary_resolution_passes,
    ownership_percentage,
    special_resolution_passes,
    super_special_resolution_passes,
)

ISSUE_DAY = date(2024, 4, 1)
TRANSFER_DAY = date(2024, 9, 1)


def _issue(register, profile, count, share_class=ShareClass.COMMON):
    register, event = register.issue_shares(profile, count, share_class, ISSUE_DAY).unwrap()
    return register, event.shareholder_id


@pytest.fixture
def holder_of_100(open_register, founder_profile):
    """Register with one holder of 100 shares; returns (register, holder id)."""
    return _issue(open_register, founder_profile, 100)


class TestIssueShares:
    def test_issue_creates_holding(self, open_register, founder_profile):
        register, event = open_register.issue_shares(
            founder_profile, 1_000, ShareClass.COMMON, ISSUE_DAY
        ).unwrap()
        assert register.total_issued_shares == 1_000
        assert register.shareholder_count == 1
        holding = register.get_shareholding(event.shareholder_id)
        assert holding.share_count == 1_000
        assert holding.shareholder_type is ShareholderType.INDIVIDUAL
        assert event.shareholder_name == "山田 太郎"
        assert event.par_value is None
        assert register.is_conserved()

    def test_issue_with_par_value(self, open_register, founder_profile):
        register = open_register.set_par_value(Money.yen(50_000)).unwrap()
        _, event = register.issue_shares(
            founder_profile, 200, ShareClass.COMMON, ISSUE_DAY
        ).unwrap()
        assert event.par_value == Money.yen(50_000)
        assert event.total_value == Money.yen(10_000_000)

    def test_each_issue_gets_fresh_holder(self, open_register, founder_profile):
        register, a = _issue(open_register, founder_profile, 10)
        register, b = _issue(register, founder_profile, 10)
        assert a != b
        assert register.shareholder_count == 2

    def test_exceeds_authorized(self, open_register, founder_profile):
        register, _ = _issue(open_register, founder_profile, 9_000)
        r = register.issue_shares(founder_profile, 1_001, ShareClass.COMMON, ISSUE_DAY)
        assert r.error == ExceedsAuthorizedShares(10_000, 10_001)

    def test_exactly_authorized(self, open_register, founder_profile):
        register, _ = _issue(open_register, founder_profile, 10_000)
        assert register.total_issued_shares == register.authorized_shares

    @pytest.mark.parametrize("count", [0, -5])
    def test_non_positive_count(self, open_register, founder_profile, count):
        r = open_register.issue_shares(founder_profile, count, ShareClass.COMMON, ISSUE_DAY)
        assert isinstance(r.error, InvalidShareCount)

    def test_new_class_registered(self, open_register, founder_profile):
        register, _ = _issue(open_register, founder_profile, 10, ShareClass.PREFERRED_DIVIDEND)
        assert register.share_classes == {ShareClass.COMMON, ShareClass.PREFERRED_DIVIDEND}

    def test_non_voting_shares(self, open_register, founder_profile):
        register, _ = _issue(open_register, founder_profile, 100)
        register, holder = _issue(register, founder_profile, 50, ShareClass.NON_VOTING)
        assert not register.get_shareholding(holder).has_voting_rights
        assert register.total_voting_rights == 100


class TestTransferShares:
    def test_transfer_to_new_holder(self, holder_of_100):
        register, holder = holder_of_100
        buyer = ShareholderId("buyer")
        register2, event = register.transfer_shares(
            holder, buyer, 40, TRANSFER_DAY, transfer_price=Money.yen(400_000)
        ).unwrap()
        assert register2.get_shareholding(holder).share_count == 60
        recipient = register2.get_shareholding(buyer)
        assert recipient.share_count == 40
        assert recipient.acquisition_date == TRANSFER_DAY
        assert recipient.share_class is ShareClass.COMMON
        assert register2.total_issued_shares == 100
        assert register2.is_conserved()
        assert event.transfer_price == Money.yen(400_000)
        assert event.board_approval_date is None

    def test_new_holder_gets_own_profile(self, holder_of_100):
        register, holder = holder_of_100
        buyer_profile = ShareholderProfile.individual(
            PersonName(family_name="買主", given_name="花子")
        )
        register2, _ = register.transfer_shares(
            holder, ShareholderId("buyer"), 40, TRANSFER_DAY, recipient=buyer_profile
        ).unwrap()
        buyer = register2.get_shareholding(ShareholderId("buyer"))
        assert buyer.profile == buyer_profile
        assert register2.get_shareholding(holder).profile.display_name == "山田 太郎"

    def test_new_holder_does_not_inherit_seller_identity(self, holder_of_100):
        register, holder = holder_of_100
        certified = dataclasses.replace(
            register.get_shareholding(holder), certificate_status=CertificateStatus.ISSUED
        )
        register = dataclasses.replace(
            register, shareholdings=MappingProxyType({holder: certified})
        )
        register2, _ = register.transfer_shares(
            holder, ShareholderId("buyer"), 40, TRANSFER_DAY
        ).unwrap()
        buyer = register2.get_shareholding(ShareholderId("buyer"))
        assert buyer.profile.display_name != "山田 太郎"
        assert buyer.profile.display_name == "buyer"
        assert buyer.profile.country is None
        assert buyer.shareholder_type is ShareholderType.INDIVIDUAL
        assert buyer.certificate_status is CertificateStatus.NOT_ISSUED

    def test_existing_holder_keeps_profile(self, holder_of_100, founder_profile):
        register, holder = holder_of_100
        other_profile = ShareholderProfile.foreign("Acme Ltd", "US")
        register, other = _issue(register, other_profile, 10)
        register2, _ = register.transfer_shares(
            holder, other, 5, TRANSFER_DAY, recipient=founder_profile
        ).unwrap()
        assert register2.get_shareholding(other).profile == other_profile

    def test_full_transfer_removes_source(self, holder_of_100):
        register, holder = holder_of_100
        register2, _ = register.transfer_shares(
            holder, ShareholderId("buyer"), 100, TRANSFER_DAY
        ).unwrap()
        assert register2.get_shareholding(holder) is None
        assert register2.shareholder_count == 1

    def test_transfer_to_existing_holder(self, holder_of_100, founder_profile):
        register, holder = holder_of_100
        register, other = _issue(register, founder_profile, 10)
        register2, _ = register.transfer_shares(holder, other, 30, TRANSFER_DAY).unwrap()
        assert register2.get_shareholding(other).share_count == 40

    def test_insufficient_shares_leaves_register_unchanged(self, holder_of_100):
        register, holder = holder_of_100
        r = register.transfer_shares(holder, ShareholderId("buyer"), 150, TRANSFER_DAY)
        assert r.error == InsufficientShares(150, 100)
        assert register.get_shareholding(holder).share_count == 100

    def test_unknown_source(self, holder_of_100):
        register, _ = holder_of_100
        r = register.transfer_shares(
            ShareholderId("ghost"), ShareholderId("buyer"), 1, TRANSFER_DAY
        )
        assert r.error == ShareholderNotFound("ghost")

    def test_to_self(self, holder_of_100):
        register, holder = holder_of_100
        assert register.transfer_shares(
            holder, holder, 1, TRANSFER_DAY
        ).error == CannotTransferToSelf()

    def test_zero_count(self, holder_of_100):
        register, holder = holder_of_100
        r = register.transfer_shares(holder, ShareholderId("buyer"), 0, TRANSFER_DAY)
        assert isinstance(r.error, InvalidShareCount)

    def test_board_approval_required(self, holder_of_100):
        register, holder = holder_of_100
        restricted = register.set_transfer_restriction(
            TransferRestriction.REQUIRES_BOARD_APPROVAL
        )
        r = restricted.transfer_shares(holder, ShareholderId("buyer"), 10, TRANSFER_DAY)
        assert r.error == TransferNotApproved()

        _, event = restricted.transfer_shares(
            holder, ShareholderId("buyer"), 10, TRANSFER_DAY, board_approved=True
        ).unwrap()
        assert event.board_approval_date == TRANSFER_DAY

    def test_prohibited(self, holder_of_100):
        register, holder = holder_of_100
        prohibited = register.set_transfer_restriction(TransferRestriction.PROHIBITED)
        r = prohibited.transfer_shares(
            holder, ShareholderId("buyer"), 10, TRANSFER_DAY, board_approved=True
        )
        assert isinstance(r.error, InvalidShareTransfer)


class TestAuthorizedAndParValue:
    def test_increase_authorized(self, open_register):
        assert open_register.increase_authorized_shares(5_000).unwrap().authorized_shares == 15_000

    def test_negative_increase(self, open_register):
        assert isinstance(
            open_register.increase_authorized_shares(-1).error, InvalidShareCount
        )

    def test_par_value_must_be_yen(self, open_register):
        usd = Money(amount=Decimal("10"), currency=Currency.USD)
        assert open_register.set_par_value(usd).error == ValidationFailure(
            "Par value must be in Japanese Yen"
        )

    def test_par_value_must_be_positive(self, open_register):
        assert isinstance(open_register.set_par_value(Money.zero()).error, ValidationFailure)


class TestQueries:
    def test_create_defaults(self, company):
        register = ShareholderRegister.create(
            company.id, 1_000, TransferRestriction.REQUIRES_BOARD_APPROVAL
        )
        assert register.company_id == company.id
        assert register.total_issued_shares == 0
        assert register.share_classes == {ShareClass.COMMON}
        assert register.par_value is None
        assert register.is_conserved()

    def test_by_type(self, open_register, founder_profile):
        corp = ShareholderProfile.domestic_corporate(
            BilingualName(japanese="親会社"), CorporateNumber(value="1010401089234")
        )
        foreign = ShareholderProfile.foreign("Acme Holdings", "US")
        register, _ = _issue(open_register, founder_profile, 10)
        register, _ = _issue(register, corp, 20)
        register, _ = _issue(register, foreign, 30)

        assert len(register.shareholdings_by_type(ShareholderType.FOREIGN)) == 1
        groups = group_by_type(register.all_shareholdings())
        assert {t: len(hs) for t, hs in groups.items()} == {
            ShareholderType.INDIVIDUAL: 1,
            ShareholderType.DOMESTIC_CORPORATE: 1,
            ShareholderType.FOREIGN: 1,
        }


class TestShareholderMeetings:
    def test_quorum_is_majority_of_issued(self, holder_of_100):
        register, _ = holder_of_100
        held = register.hold_shareholder_meeting(
            ShareholderMeetingType.ANNUAL_GENERAL, date(2024, 6, 25), 51
        ).unwrap()
        assert held.quorum_met
        assert held.total_issued_shares == 100

        half = register.hold_shareholder_meeting(
            ShareholderMeetingType.ANNUAL_GENERAL, date(2024, 6, 25), 50
        ).unwrap()
        assert not half.quorum_met

    def test_no_shares(self, open_register):
        r = open_register.hold_shareholder_meeting(
            ShareholderMeetingType.EXTRAORDINARY, date(2024, 6, 25), 0
        )
        assert r.error == NoSharesIssued()

    def test_represented_out_of_range(self, holder_of_100):
        register, _ = holder_of_100
        r = register.hold_shareholder_meeting(
            ShareholderMeetingType.ANNUAL_GENERAL, date(2024, 6, 25), 101
        )
        assert isinstance(r.error, InvalidShareCount)


class TestShareholderResolutions:
    def test_ordinary_passes(self, open_register):
        event = open_register.pass_shareholder_resolution(
            ShareholderResolutionType.ORDINARY, "取締役選任", 51, 49, date(2024, 6, 25)
        ).unwrap()
        assert event.required_majority == Decimal("0.5")

    def test_ordinary_tie_fails(self, open_register):
        assert open_register.pass_shareholder_resolution(
            ShareholderResolutionType.ORDINARY, "x", 50, 50, date(2024, 6, 25)
        ).unwrap() is None

    def test_special_two_thirds(self, open_register):
        passed = open_register.pass_shareholder_resolution(
            ShareholderResolutionType.SPECIAL, "定款変更", 200, 100, date(2024, 6, 25)
        ).unwrap()
        assert passed is not None
        assert passed.required_majority == SPECIAL_MAJORITY
        assert open_register.pass_shareholder_resolution(
            ShareholderResolutionType.SPECIAL, "定款変更", 199, 101, date(2024, 6, 25)
        ).unwrap() is None

    def test_super_special(self, open_register):
        assert open_register.pass_shareholder_resolution(
            ShareholderResolutionType.SUPER_SPECIAL, "x", 75, 25, date(2024, 6, 25)
        ).unwrap() is not None
        assert open_register.pass_shareholder_resolution(
            ShareholderResolutionType.SUPER_SPECIAL, "x", 74, 26, date(2024, 6, 25)
        ).unwrap() is None

    def test_negative_votes(self, open_register):
        r = open_register.pass_shareholder_resolution(
            ShareholderResolutionType.ORDINARY, "x", -1, 0, date(2024, 6, 25)
        )
        assert isinstance(r.error, InvalidResolution)


class TestShareholderRules:
    def test_ownership(self, holder_of_100):
        register, holder = holder_of_100
        holding = register.get_shareholding(holder)
        assert ownership_percentage(holding, 400) == Decimal(25)
        assert ownership_percentage(holding, 0) == 0

    def test_controlling_interest_is_strictly_above_half(self, holder_of_100):
        register, holder = holder_of_100
        holding = register.get_shareholding(holder)
        assert not has_controlling_interest(holding, 200)
        assert has_controlling_interest(holding, 199)

    def test_blocking_minority(self, holder_of_100):
        register, holder = holder_of_100
        holding = register.get_shareholding(holder)
        assert has_blocking_minority(holding, 300)
        assert not has_blocking_minority(holding, 301)

    def test_dividend_per_share(self):
        assert dividend_per_share(Money.yen(1_000_000), 400).unwrap() == Money.yen(2_500)
        assert dividend_per_share(Money.yen(1_000_000), 0).error == NoSharesIssued()

    def test_resolution_helpers(self):
        assert ordinary_resolution_passes(2, 1)
        assert not ordinary_resolution_passes(1, 1)
        assert special_resolution_passes(2, 3)
        assert not special_resolution_passes(0, 0)
        assert super_special_resolution_passes(3, 4)
        assert not super_special_resolution_passes(2, 3)

    def test_meeting_quorum_ratio(self):
        assert meeting_quorum_ratio(1, 2) == Decimal("0.5")
        assert meeting_quorum_ratio(1, 0) == 0
