"""Board of directors aggregate (取締役会).

The board owns a keyed collection of directors and enforces quorum,
minimum headcount and representative-director designation.

Commands check only their own local precondition.  Global validity
(headcount for the structure, exactly one active representative, outside
director minimums) is a derived property checked on demand by
``Board.validate()``.

Meetings and resolutions are kept most-recent-first: ``meetings[0]`` is the
latest meeting, and ``pass_resolution`` consults only that one.
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
    BoardStructure,
    DirectorRemovalReason,
    MeetingType,
    ResolutionStatus,
    ResolutionType,
)
from kaisha.core.errors import (
    BoardError,
    CannotRemoveLastDirector,
    CannotRemoveRepresentativeDirector,
    DirectorAlreadyOnBoard,
    DirectorError,
    DirectorNotActive,
    DirectorNotOnBoard,
    InsufficientDirectors,
    InsufficientOutsideDirectors,
    InvalidResolution,
    NoRepresentativeDirector,
    QuorumNotMet,
)
from kaisha.core.ids import BoardId, CompanyId, DirectorId, new_board_id, today
from kaisha.core.result import Result
from kaisha.domain.director import Director, find_expiring_terms
from kaisha.domain.events import (
    BoardEstablished,
    BoardMeetingHeld,
    BoardResolutionPassed,
    DirectorAppointed,
    DirectorRemoved,
    DirectorTermRenewed,
    RepresentativeDirectorDesignated,
)

logger = logging.getLogger(__name__)

BoardCommandError = BoardError | DirectorError

# Audit & supervisory committee company: at least 2 outside directors
AUDIT_COMMITTEE_MIN_OUTSIDE = 2


# ---------------------------------------------------------------------------
# Meeting & resolution records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AttendanceRecord:
    director_id: DirectorId
    present: bool = True
    proxy_id: DirectorId | None = None


@dataclass(frozen=True)
class BoardMeeting:
    meeting_date: date
    meeting_type: MeetingType
    attendees: tuple[AttendanceRecord, ...]
    quorum_met: bool
    # Distinct active board members marked present
    present_count: int = 0
    minutes: str | None = None


@dataclass(frozen=True)
class BoardResolution:
    resolution_type: ResolutionType
    description: str
    proposed_date: date
    votes_for: int
    votes_against: int
    abstentions: int
    status: ResolutionStatus
    passed_date: date | None = None


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Board:
    id: BoardId
    company_id: CompanyId
    structure: BoardStructure
    established_date: date
    directors: Mapping[DirectorId, Director] = field(
        default_factory=lambda: MappingProxyType({})
    )
    representative_director_id: DirectorId | None = None
    meetings: tuple[BoardMeeting, ...] = ()
    resolutions: tuple[BoardResolution, ...] = ()

    # -- factories ---------------------------------------------------------

    @classmethod
    def create(
        cls,
        company_id: CompanyId,
        structure: BoardStructure,
        established_date: date,
    ) -> Board:
        """An empty board with a fresh id."""
        return cls(
            id=new_board_id(),
            company_id=company_id,
            structure=structure,
            established_date=established_date,
        )

    @classmethod
    def establish(
        cls,
        company_id: CompanyId,
        structure: BoardStructure,
        directors: Iterable[Director],
        representative_id: DirectorId,
        established_date: date,
    ) -> Result[tuple[Board, BoardEstablished], BoardCommandError]:
        """Seat the initial directors, designate the representative, emit ``BoardEstablished``."""
        board = cls.create(company_id, structure, established_date)
        for director in directors:
            added = board.add_director(director)
            if added.is_err():
                return Result.err(added.error)
            board, _ = added.value

        designated = board.designate_representative_director(
            representative_id, established_date
        )
        if designated.is_err():
            return Result.err(designated.error)
        board, _ = designated.value

        event = BoardEstablished(
            company_id=company_id,
            board_id=board.id,
            structure=structure,
            initial_directors=tuple(board.directors),
            establishment_date=established_date,
        )
        logger.info(
            "Board %s established for company %s with %d directors",
            board.id, company_id, board.director_count,
        )
        return Result.ok((board, event))

    # -- queries -----------------------------------------------------------

    @property
    def director_count(self) -> int:
        """Active directors only."""
        return sum(1 for d in self.directors.values() if d.is_active)

    @property
    def outside_director_count(self) -> int:
        return sum(
            1 for d in self.directors.values() if d.is_active and d.is_outside_director
        )

    @property
    def has_representative_director(self) -> bool:
        return self.representative_director_id is not None

    @property
    def minimum_directors(self) -> int:
        return minimum_directors_for(self.structure)

    @property
    def quorum(self) -> int:
        return quorum_for(self.director_count)

    @property
    def latest_meeting(self) -> BoardMeeting | None:
        return self.meetings[0] if self.meetings else None

    def active_directors(self) -> list[Director]:
        return [d for d in self.directors.values() if d.is_active]

    def get_director(self, director_id: DirectorId) -> Director | None:
        return self.directors.get(director_id)

    def get_representative_director(self) -> Director | None:
        if self.representative_director_id is None:
            return None
        return self.directors.get(self.representative_director_id)

    # -- commands ----------------------------------------------------------

    def add_director(
        self, director: Director
    ) -> Result[tuple[Board, DirectorAppointed], BoardCommandError]:
        if director.id in self.directors:
            return self._reject(DirectorAlreadyOnBoard(director.id))

        board = self._with_director(director)
        event = DirectorAppointed(
            company_id=self.company_id,
            board_id=self.id,
            director_id=director.id,
            name=director.name,
            position=director.position,
            is_outside_director=director.is_outside_director,
            appointment_date=director.appointed_at,
            term_expiry=director.term_expiry,
        )
        return Result.ok((board, event))

    def remove_director(
        self,
        director_id: DirectorId,
        reason: DirectorRemovalReason = DirectorRemovalReason.RESIGNATION,
        removal_date: date | None = None,
    ) -> Result[tuple[Board, DirectorRemoved], BoardCommandError]:
        """Mark a director as having left; the entry is kept for history.

        A dismissal marks the director Dismissed, every other reason Resigned.
        The current representative cannot be removed until another director
        is designated.  A director who has already left keeps their recorded
        status and date.
        """
        director = self.directors.get(director_id)
        if director is None:
            return self._reject(DirectorNotOnBoard(director_id))
        if not director.is_active:
            return self._reject(DirectorNotActive(director_id))
        if self.director_count <= 1:
            return self._reject(CannotRemoveLastDirector())
        if self.representative_director_id == director_id:
            return self._reject(CannotRemoveRepresentativeDirector(director_id))

        on = removal_date or today()
        if reason is DirectorRemovalReason.DISMISSAL:
            removed = director.dismiss(on)
        else:
            removed = director.resign(on)

        event = DirectorRemoved(
            company_id=self.company_id,
            board_id=self.id,
            director_id=director_id,
            removal_date=on,
            reason=reason,
        )
        return Result.ok((self._with_director(removed), event))

    def designate_representative_director(
        self, director_id: DirectorId, designation_date: date | None = None
    ) -> Result[tuple[Board, RepresentativeDirectorDesignated], BoardCommandError]:
        director = self.directors.get(director_id)
        if director is None:
            return self._reject(DirectorNotOnBoard(director_id))
        if not director.is_active:
            return self._reject(DirectorNotActive(director_id))

        directors = dict(self.directors)
        previous_id = self.representative_director_id
        if previous_id is not None and previous_id != director_id:
            previous = directors.get(previous_id)
            if previous is not None:
                # Best effort: a failed clear does not abort the designation
                directors[previous_id] = (
                    previous.remove_representative_designation().unwrap_or(previous)
                )

        designated = director.designate_as_representative()
        if designated.is_err():
            return self._reject(designated.error)
        directors[director_id] = designated.value

        board = dataclasses.replace(
            self,
            directors=MappingProxyType(directors),
            representative_director_id=director_id,
        )
        event = RepresentativeDirectorDesignated(
            company_id=self.company_id,
            board_id=self.id,
            director_id=director_id,
            previous_representative_id=previous_id,
            designation_date=designation_date or today(),
        )
        return Result.ok((board, event))

    def record_meeting(
        self,
        meeting_date: date,
        meeting_type: MeetingType,
        attendees: Iterable[AttendanceRecord],
        minutes: str | None = None,
    ) -> Result[tuple[Board, BoardMeetingHeld], BoardCommandError]:
        """Record a meeting; quorum is derived from present attendees.  Never fails.

        Only active directors of this board count, each once however many
        attendance records name them.
        """
        attendance = tuple(attendees)
        present = len({
            a.director_id for a in attendance
            if a.present and a.director_id in self.directors
            and self.directors[a.director_id].is_active
        })
        meeting = BoardMeeting(
            meeting_date=meeting_date,
            meeting_type=meeting_type,
            attendees=attendance,
            quorum_met=present >= self.quorum,
            present_count=present,
            minutes=minutes,
        )
        board = dataclasses.replace(self, meetings=(meeting, *self.meetings))
        event = BoardMeetingHeld(
            company_id=self.company_id,
            board_id=self.id,
            meeting_date=meeting_date,
            attendees_count=present,
            quorum_met=meeting.quorum_met,
        )
        return Result.ok((board, event))

    def pass_resolution(
        self,
        resolution_type: ResolutionType,
        description: str,
        votes_for: int,
        votes_against: int,
        abstentions: int,
        resolution_date: date,
    ) -> Result[tuple[Board, BoardResolutionPassed | None], BoardCommandError]:
        """Vote on a resolution at the latest meeting.

        Passed iff ``votes_for > votes_against`` and at least one vote was
        cast; ties and zero-vote outcomes are recorded as Rejected and emit
        no event.
        """
        latest = self.latest_meeting
        if latest is None:
            return self._reject(QuorumNotMet(self.quorum, 0))
        if not latest.quorum_met:
            return self._reject(QuorumNotMet(self.quorum, latest.present_count))
        if min(votes_for, votes_against, abstentions) < 0:
            return self._reject(InvalidResolution("Vote counts cannot be negative"))

        passed = votes_for > votes_against and votes_for + votes_against > 0
        resolution = BoardResolution(
            resolution_type=resolution_type,
            description=description,
            proposed_date=resolution_date,
            votes_for=votes_for,
            votes_against=votes_against,
            abstentions=abstentions,
            status=ResolutionStatus.PASSED if passed else ResolutionStatus.REJECTED,
            passed_date=resolution_date if passed else None,
        )
        board = dataclasses.replace(
            self, resolutions=(resolution, *self.resolutions)
        )
        if not passed:
            logger.debug(
                "Board %s resolution rejected: %d for / %d against",
                self.id, votes_for, votes_against,
            )
            return Result.ok((board, None))

        event = BoardResolutionPassed(
            company_id=self.company_id,
            board_id=self.id,
            resolution_type=resolution_type,
            description=description,
            votes_for=votes_for,
            votes_against=votes_against,
            abstentions=abstentions,
            passed_date=resolution_date,
        )
        return Result.ok((board, event))

    def renew_director_term(
        self, director_id: DirectorId, new_term_years: int, renewal_date: date
    ) -> Result[tuple[Board, DirectorTermRenewed], BoardCommandError]:
        director = self.directors.get(director_id)
        if director is None:
            return self._reject(DirectorNotOnBoard(director_id))

        renewed = director.renew_term(new_term_years, renewal_date)
        if renewed.is_err():
            return self._reject(renewed.error)

        event = DirectorTermRenewed(
            company_id=self.company_id,
            board_id=self.id,
            director_id=director_id,
            previous_term_expiry=director.term_expiry,
            new_term_expiry=renewed.value.term_expiry,
            renewal_date=renewal_date,
        )
        return Result.ok((self._with_director(renewed.value), event))

    # -- validation --------------------------------------------------------

    def validate(self) -> Result[None, BoardCommandError]:
        """Check the board against the legal requirements for its structure."""
        active = self.director_count
        required = self.minimum_directors
        if active < required:
            return Result.err(InsufficientDirectors(required, active))

        if active > 0:
            representative = self.get_representative_director()
            flagged = [d for d in self.directors.values() if d.is_representative]
            if (
                representative is None
                or not representative.is_active
                or flagged != [representative]
            ):
                return Result.err(NoRepresentativeDirector())

        outside = self.outside_director_count
        if self.structure is BoardStructure.WITH_AUDIT_COMMITTEE:
            if outside < AUDIT_COMMITTEE_MIN_OUTSIDE:
                return Result.err(
                    InsufficientOutsideDirectors(AUDIT_COMMITTEE_MIN_OUTSIDE, outside)
                )
        elif self.structure is BoardStructure.WITH_THREE_COMMITTEES:
            # Each committee needs a majority of outside directors
            if outside * 2 < active:
                return Result.err(InsufficientOutsideDirectors(active // 2 + 1, outside))

        return Result.ok(None)

    # -- internals ---------------------------------------------------------

    def _with_director(self, director: Director) -> Board:
        directors = dict(self.directors)
        directors[director.id] = director
        return dataclasses.replace(self, directors=MappingProxyType(directors))

    def _reject(self, error: BoardCommandError) -> Result:
        logger.debug("Board %s command rejected: %s", self.id, error)
        return Result.err(error)


# ---------------------------------------------------------------------------
# Board rules
# ---------------------------------------------------------------------------

def minimum_directors_for(structure: BoardStructure) -> int:
    """Companies Act: 1 director without a board, otherwise at least 3."""
    if structure is BoardStructure.WITHOUT_BOARD:
        return 1
    return 3


def quorum_for(total_directors: int) -> int:
    """Majority of directors, rounding up: ceil(n / 2)."""
    return (total_directors + 1) // 2


def allows_simplified_governance(structure: BoardStructure) -> bool:
    return structure is BoardStructure.WITHOUT_BOARD


def required_outside_director_ratio(structure: BoardStructure) -> Decimal | None:
    if structure is BoardStructure.WITH_THREE_COMMITTEES:
        return Decimal("0.5")
    if structure is BoardStructure.WITH_AUDIT_COMMITTEE:
        return Decimal("0")  # count-based (at least 2), no ratio
    return None


def quorum_percentage(present: int, total: int) -> Decimal:
    if total == 0:
        return Decimal(0)
    return Decimal(present) / Decimal(total)


def requires_special_majority(resolution_type: ResolutionType) -> bool:
    return resolution_type in (
        ResolutionType.AMENDMENT_OF_ARTICLES,
        ResolutionType.CAPITAL_DECREASE,
    )


def expiring_terms(
    board: Board, within_days: int, as_of: date | None = None
) -> list[Director]:
    return find_expiring_terms(board.active_directors(), within_days, as_of or today())
