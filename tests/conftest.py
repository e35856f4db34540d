"""Shared fixtures for the kaisha test suite."""

from __future__ import annotations

from datetime import date

import pytest

from kaisha.core.enums import (
    BoardStructure,
    DirectorClassification,
    DirectorPosition,
    EntityType,
    Prefecture,
    SealType,
    TransferRestriction,
)
from kaisha.core.ids import DirectorId, new_company_id
from kaisha.core.values import (
    Address,
    BilingualName,
    FiscalYearEnd,
    Money,
    PersonName,
    PostalCode,
)
from kaisha.domain.board import Board
from kaisha.domain.company import Company
from kaisha.domain.director import Director
from kaisha.domain.factory import CompanyFactory, IncorporateCompany
from kaisha.domain.shareholder import ShareholderProfile, ShareholderRegister
from kaisha.observability.logger import clear_correlation_id

# Checksum-valid
VALID_CORPORATE_NUMBER = "1010401089234"

APPOINTED = date(2024, 4, 1)


def make_director(
    family: str = "山田",
    given: str = "太郎",
    position: DirectorPosition = DirectorPosition.DIRECTOR,
    classification: DirectorClassification = DirectorClassification.INSIDE,
    director_id: str | None = None,
    term_years: int = 2,
    appointed_at: date = APPOINTED,
) -> Director:
    """Build a valid director, raising if the term is rejected."""
    return Director.create(
        DirectorId(director_id or f"dir-{family}-{given}"),
        PersonName(family_name=family, given_name=given),
        position,
        classification,
        term_years,
        appointed_at,
    ).unwrap()


@pytest.fixture(name="make_director")
def _make_director_fixture():
    """Factory fixture: ``make_director(family, given, position, ...)``."""
    return make_director


# ---------------------------------------------------------------------------
# Autouse
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _no_correlation_leak():
    clear_correlation_id()
    yield
    clear_correlation_id()


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

@pytest.fixture
def tokyo_address() -> Address:
    return Address(
        postal_code=PostalCode(value="100-0005"),
        prefecture=Prefecture.TOKYO,
        city="千代田区",
        street="丸の内1-1-1",
    )


@pytest.fixture
def osaka_address() -> Address:
    return Address(
        postal_code=PostalCode(value="530-0001"),
        prefecture=Prefecture.OSAKA,
        city="大阪市北区",
        street="梅田3-1-1",
    )


@pytest.fixture
def company_name() -> BilingualName:
    return BilingualName(japanese="テスト", english="Test")


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------

@pytest.fixture
def incorporate_cmd(tokyo_address, company_name) -> IncorporateCompany:
    return IncorporateCompany(
        corporate_number=VALID_CORPORATE_NUMBER,
        legal_name=company_name,
        entity_type=EntityType.KABUSHIKI_KAISHA,
        initial_capital=Money.yen(10_000_000),
        fiscal_year_end=FiscalYearEnd.march_31(),
        headquarters_address=tokyo_address,
        establishment_date=date(2024, 4, 1),
    )


@pytest.fixture
def company(incorporate_cmd) -> Company:
    """Freshly incorporated, Active K.K. without seals."""
    company, _ = CompanyFactory().incorporate(incorporate_cmd).unwrap()
    return company


@pytest.fixture
def sealed_company(company) -> Company:
    """Active K.K. with a registered representative seal."""
    sealed, _ = company.register_seal(
        SealType.JITSUIN, date(2024, 4, 2), "東京法務局"
    ).unwrap()
    return sealed


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------

@pytest.fixture
def president() -> Director:
    return make_director("山田", "太郎", DirectorPosition.PRESIDENT, director_id="d-president")


@pytest.fixture
def three_directors(president) -> list[Director]:
    return [
        president,
        make_director("佐藤", "花子", director_id="d-sato"),
        make_director(
            "鈴木",
            "一郎",
            DirectorPosition.OUTSIDE_DIRECTOR,
            DirectorClassification.OUTSIDE,
            director_id="d-suzuki",
        ),
    ]


@pytest.fixture
def board(three_directors, president) -> Board:
    """Board with statutory auditors, three directors, president as representative."""
    board, _ = Board.establish(
        new_company_id(),
        BoardStructure.WITH_STATUTORY_AUDITORS,
        three_directors,
        president.id,
        APPOINTED,
    ).unwrap()
    return board


# ---------------------------------------------------------------------------
# Shareholder register
# ---------------------------------------------------------------------------

@pytest.fixture
def founder_profile() -> ShareholderProfile:
    return ShareholderProfile.individual(PersonName(family_name="山田", given_name="太郎"))


@pytest.fixture
def open_register() -> ShareholderRegister:
    return ShareholderRegister.create(
        new_company_id(), 10_000, TransferRestriction.NO_RESTRICTION
    )

