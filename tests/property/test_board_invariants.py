"""Property test: board invariants under random membership changes.

- quorum is ceil(n / 2)
- exactly the representative carries the representative flag
- the last active director can never be removed
- a resolution passes iff votes_for > votes_against (ties reject)
"""

from datetime import date

from hypothesis import given, settings, strategies as st

from kaisha.core.enums import (
    BoardStructure,
    DirectorClassification,
    DirectorPosition,
    DirectorRemovalReason,
    MeetingType,
    ResolutionStatus,
    ResolutionType,
)
from kaisha.core.ids import CompanyId, DirectorId
from kaisha.core.values import PersonName
from kaisha.domain.board import AttendanceRecord, Board, quorum_for
from kaisha.domain.director import Director

APPOINTED = date(2024, 4, 1)
MEETING = date(2024, 6, 1)


def _director(i: int) -> Director:
    return Director.create(
        DirectorId(f"d-{i}"),
        PersonName(family_name="取締", given_name=f"{i}号"),
        DirectorPosition.DIRECTOR,
        DirectorClassification.INSIDE if i % 2 else DirectorClassification.OUTSIDE,
        2,
        APPOINTED,
    ).unwrap()


def _board(n: int) -> Board:
    board, _ = Board.establish(
        CompanyId("c-prop"),
        BoardStructure.WITH_STATUTORY_AUDITORS,
        [_director(i) for i in range(n)],
        DirectorId("d-0"),
        APPOINTED,
    ).unwrap()
    return board


def _assert_representative_invariant(board: Board) -> None:
    flagged = [d.id for d in board.directors.values() if d.is_representative]
    if board.representative_director_id is None:
        assert flagged == []
    else:
        assert flagged == [board.representative_director_id]
        assert board.get_representative_director().is_active


@given(n=st.integers(min_value=0, max_value=1_000))
def test_quorum_is_ceiling_half(n):
    q = quorum_for(n)
    assert 2 * q >= n
    assert 2 * (q - 1) < n or q == 0


op = st.tuples(
    st.sampled_from(["remove", "dismiss", "designate"]),
    st.integers(min_value=0, max_value=6),
)


@given(n=st.integers(min_value=1, max_value=6), ops=st.lists(op, max_size=15))
@settings(max_examples=200)
def test_membership_changes_keep_invariants(n, ops):
    board = _board(n)
    _assert_representative_invariant(board)

    for action, i in ops:
        director_id = DirectorId(f"d-{i}")
        if action == "designate":
            result = board.designate_representative_director(director_id, MEETING)
        else:
            reason = (
                DirectorRemovalReason.DISMISSAL if action == "dismiss"
                else DirectorRemovalReason.RESIGNATION
            )
            before = board.director_count
            result = board.remove_director(director_id, reason, MEETING)
            if before <= 1:
                assert result.is_err()

        if result.is_ok():
            board, _ = result.value
        assert board.director_count >= 1
        _assert_representative_invariant(board)


@given(
    votes_for=st.integers(min_value=0, max_value=20),
    votes_against=st.integers(min_value=0, max_value=20),
    abstentions=st.integers(min_value=0, max_value=5),
)
def test_resolution_passes_iff_strict_majority(votes_for, votes_against, abstentions):
    board = _board(3)
    board, _ = board.record_meeting(
        MEETING,
        MeetingType.REGULAR,
        [AttendanceRecord(director_id=d) for d in board.directors],
    ).unwrap()

    board, event = board.pass_resolution(
        ResolutionType.OTHER, "議案", votes_for, votes_against, abstentions, MEETING
    ).unwrap()

    passed = votes_for > votes_against
    assert (event is not None) == passed
    assert board.resolutions[0].status is (
        ResolutionStatus.PASSED if passed else ResolutionStatus.REJECTED
    )
