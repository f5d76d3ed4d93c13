"""Transition tables for review requests and training sessions."""

import pytest
from libs.common.errors import IllegalStateError
from libs.common.state_machine import TransitionTable
from services.reviews_service.lifecycle import REVIEW_TRANSITIONS, TERMINAL_STATUSES
from services.reviews_service.models import ReviewAction, ReviewStatus
from services.sessions_service.lifecycle import SESSION_TRANSITIONS
from services.sessions_service.models import SessionAction, SessionStatus


@pytest.mark.unit
def test_review_happy_path():
    status = REVIEW_TRANSITIONS.next_state(ReviewStatus.OPEN, ReviewAction.ACCEPT)
    status = REVIEW_TRANSITIONS.next_state(status, ReviewAction.COMPLETE)

    assert status == ReviewStatus.COMPLETED


@pytest.mark.unit
@pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES))
@pytest.mark.parametrize("action", list(ReviewAction))
def test_terminal_review_states_reject_everything(terminal, action):
    assert not REVIEW_TRANSITIONS.allows(terminal, action)
    with pytest.raises(IllegalStateError):
        REVIEW_TRANSITIONS.next_state(terminal, action)


@pytest.mark.unit
def test_review_reject_reasons_are_per_action():
    with pytest.raises(IllegalStateError, match="Can only cancel open requests"):
        REVIEW_TRANSITIONS.next_state(ReviewStatus.ACCEPTED, ReviewAction.CANCEL)
    with pytest.raises(IllegalStateError, match="Request must be in Accepted status"):
        REVIEW_TRANSITIONS.next_state(ReviewStatus.OPEN, ReviewAction.COMPLETE)


@pytest.mark.unit
def test_session_cancel_sources_and_target():
    assert set(SESSION_TRANSITIONS.sources(SessionAction.CANCEL)) == {
        SessionStatus.PENDING,
        SessionStatus.CONFIRMED,
    }
    assert SESSION_TRANSITIONS.target(SessionAction.CANCEL) == SessionStatus.CANCELLED
    assert SESSION_TRANSITIONS.sources(SessionAction.CONFIRM) == [SessionStatus.PENDING]


@pytest.mark.unit
def test_table_requires_reason_for_every_action():
    with pytest.raises(ValueError):
        TransitionTable({("a", "go"): "b"}, reject_reasons={})


@pytest.mark.unit
def test_target_must_be_unique():
    table = TransitionTable(
        {("a", "go"): "b", ("b", "go"): "c"}, reject_reasons={"go": "nope"}
    )

    with pytest.raises(ValueError):
        table.target("go")
