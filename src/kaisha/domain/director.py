"""Director: a single board member (取締役).

A ``Director`` is an immutable snapshot.  Build one through ``create`` (or
the ``create_*_director`` conveniences) so the term is validated; every
command returns a new value and never touches the receiver.  Directors are
never deleted: leaving the board is a transition to a terminal status
(Resigned / Dismissed / Deceased / TermExpired) and the value is kept for
history.

Invariants:
    - Term length is 1..2 years at creation and at every renewal
    - A non-active director is never representative
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from kaisha.core.enums import (
    DirectorClassification,
    DirectorPosition,
    DirectorStatus,
    RegistrationState,
)
from kaisha.core.errors import (
    DirectorError,
    DirectorNotActive,
    InvalidTerm,
    PositionAlreadyFilled,
    TermExceedsMaximum,
)
from kaisha.core.ids import DirectorId, new_director_id
from kaisha.core.result import Result
from kaisha.core.values import Money, PersonName, TermPeriod

logger = logging.getLogger(__name__)

# Companies Act art. 332: director term is at most 2 years
MAX_TERM_YEARS = 2
# Companies Act art. 336: statutory auditor term is 4 years
MAX_AUDITOR_TERM_YEARS = 4


# ---------------------------------------------------------------------------
# Supporting values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DirectorCompensation:
    """Director remuneration (役員報酬)."""

    base_salary: Money | None = None
    bonus: Money | None = None
    stock_options: int | None = None
    other_benefits: tuple[str, ...] = ()


@dataclass(frozen=True)
class Registration:
    """Registration with the Legal Affairs Bureau (登記)."""

    state: RegistrationState = RegistrationState.PENDING
    effective_date: date | None = None

    @classmethod
    def registered(cls, on: date) -> Registration:
        return cls(state=RegistrationState.REGISTERED, effective_date=on)

    @classmethod
    def deregistered(cls, on: date) -> Registration:
        return cls(state=RegistrationState.DEREGISTERED, effective_date=on)


# ---------------------------------------------------------------------------
# Director
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Director:
    id: DirectorId
    name: PersonName
    position: DirectorPosition
    classification: DirectorClassification
    term: TermPeriod
    appointed_at: date
    status: DirectorStatus = DirectorStatus.ACTIVE
    is_representative: bool = False
    compensation: DirectorCompensation = field(default_factory=DirectorCompensation)
    registration: Registration = field(default_factory=Registration)

    # -- factories ---------------------------------------------------------

    @classmethod
    def create(
        cls,
        id: DirectorId,
        name: PersonName,
        position: DirectorPosition,
        classification: DirectorClassification,
        term_years: int,
        appointed_at: date,
    ) -> Result[Director, DirectorError]:
        """Validate the term and build an active, non-representative director."""
        check = validate_term(term_years)
        if check.is_err():
            logger.debug("Director %s rejected: %s", id, check.error)
            return Result.err(check.error)

        term = TermPeriod.director_term(appointed_at, term_years)
        if term.is_err():
            return Result.err(InvalidTerm(term.error))

        return Result.ok(
            cls(
                id=id,
                name=name,
                position=position,
                classification=classification,
                term=term.value,
                appointed_at=appointed_at,
            )
        )

    @classmethod
    def create_inside_director(
        cls,
        name: PersonName,
        position: DirectorPosition,
        term_years: int,
        appointed_at: date,
    ) -> Result[Director, DirectorError]:
        return cls.create(
            new_director_id(),
            name,
            position,
            DirectorClassification.INSIDE,
            term_years,
            appointed_at,
        )

    @classmethod
    def create_outside_director(
        cls, name: PersonName, term_years: int, appointed_at: date
    ) -> Result[Director, DirectorError]:
        return cls.create(
            new_director_id(),
            name,
            DirectorPosition.OUTSIDE_DIRECTOR,
            DirectorClassification.OUTSIDE,
            term_years,
            appointed_at,
        )

    @classmethod
    def create_independent_director(
        cls, name: PersonName, term_years: int, appointed_at: date
    ) -> Result[Director, DirectorError]:
        return cls.create(
            new_director_id(),
            name,
            DirectorPosition.OUTSIDE_DIRECTOR,
            DirectorClassification.INDEPENDENT,
            term_years,
            appointed_at,
        )

    # -- queries -----------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status is DirectorStatus.ACTIVE

    @property
    def is_outside_director(self) -> bool:
        return self.classification in (
            DirectorClassification.OUTSIDE,
            DirectorClassification.INDEPENDENT,
        )

    @property
    def term_expiry(self) -> date:
        return self.term.end_date

    def is_term_expired_on(self, on: date) -> bool:
        return self.term.is_expired(on)

    def days_remaining_in_term(self, on: date) -> int:
        return self.term.days_remaining(on)

    # -- commands ----------------------------------------------------------

    def designate_as_representative(self) -> Result[Director, DirectorError]:
        if not self.is_active:
            return Result.err(DirectorNotActive(self.id))
        return Result.ok(dataclasses.replace(self, is_representative=True))

    def remove_representative_designation(self) -> Result[Director, DirectorError]:
        return Result.ok(dataclasses.replace(self, is_representative=False))

    def renew_term(
        self, new_term_years: int, renewal_date: date
    ) -> Result[Director, DirectorError]:
        """Start a fresh term from *renewal_date*; the director becomes active again."""
        max_years = max_term_years_for(self.position)
        if new_term_years > max_years:
            return Result.err(TermExceedsMaximum(max_years, new_term_years))

        term = TermPeriod.director_term(renewal_date, new_term_years)
        if term.is_err():
            return Result.err(InvalidTerm(term.error))

        return Result.ok(
            dataclasses.replace(self, term=term.value, status=DirectorStatus.ACTIVE)
        )

    def resign(self, resignation_date: date) -> Director:
        return self._leave(DirectorStatus.RESIGNED, resignation_date)

    def dismiss(self, dismissal_date: date) -> Director:
        return self._leave(DirectorStatus.DISMISSED, dismissal_date)

    def record_death(self, on: date) -> Director:
        return self._leave(DirectorStatus.DECEASED, on)

    def expire_term(self) -> Director:
        return dataclasses.replace(
            self, status=DirectorStatus.TERM_EXPIRED, is_representative=False
        )

    def mark_as_registered(self, registration_date: date) -> Director:
        return dataclasses.replace(
            self, registration=Registration.registered(registration_date)
        )

    def update_compensation(self, compensation: DirectorCompensation) -> Director:
        return dataclasses.replace(self, compensation=compensation)

    def _leave(self, status: DirectorStatus, on: date) -> Director:
        return dataclasses.replace(
            self,
            status=status,
            is_representative=False,
            registration=Registration.deregistered(on),
        )


# ---------------------------------------------------------------------------
# Director rules
# ---------------------------------------------------------------------------

def max_term_years_for(position: DirectorPosition) -> int:
    """Term cap by position.  Currently the statutory 2 years for every position."""
    return MAX_TERM_YEARS


def validate_term(term_years: int) -> Result[None, DirectorError]:
    if term_years <= 0:
        return Result.err(InvalidTerm("Term must be at least 1 year"))
    if term_years > MAX_TERM_YEARS:
        return Result.err(TermExceedsMaximum(MAX_TERM_YEARS, term_years))
    return Result.ok(None)


def can_appoint_to_position(
    existing: Iterable[Director], position: DirectorPosition
) -> Result[None, DirectorError]:
    """Only one active President at a time."""
    if position is DirectorPosition.PRESIDENT and any(
        d.position is DirectorPosition.PRESIDENT and d.is_active for d in existing
    ):
        return Result.err(PositionAlreadyFilled(DirectorPosition.PRESIDENT))
    return Result.ok(None)


def active_directors(directors: Iterable[Director]) -> list[Director]:
    return [d for d in directors if d.is_active]


def representative_directors(directors: Iterable[Director]) -> list[Director]:
    return [d for d in directors if d.is_active and d.is_representative]


def count_outside_directors(directors: Iterable[Director]) -> int:
    return sum(1 for d in directors if d.is_active and d.is_outside_director)


def meets_outside_director_requirement(
    directors: Iterable[Director], required_count: int
) -> bool:
    return count_outside_directors(directors) >= required_count


def find_expiring_terms(
    directors: Iterable[Director], within_days: int, as_of: date
) -> list[Director]:
    """Active directors whose term ends within *within_days* of *as_of*."""
    return [
        d for d in directors
        if d.is_active and d.days_remaining_in_term(as_of) <= within_days
    ]
