"""Racing transitions on a file-backed database.

Every contender gets its own session, and so its own connection. The
conditional UPDATE must let exactly one of them through.
"""

import asyncio
from decimal import Decimal

import pytest
import pytest_asyncio
from libs.common.errors import IllegalStateError
from libs.db.base import Base
from services.reviews_service.models import ReviewStatus, VideoReviewRequest
from services.reviews_service.services import review_ops
from services.sessions_service.models import SessionStatus, TrainingSession
from services.sessions_service.services import session_ops
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from tests.factories import (
    CoachFactory,
    TrainingSessionFactory,
    UserFactory,
    VideoReviewRequestFactory,
    persist,
)

CONTENDERS = 6


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def _attempt(session_factory, operation, **kwargs):
    """Run one operation in a fresh session; return the error it raised, if any."""
    async with session_factory() as db:
        try:
            await operation(db, **kwargs)
        except IllegalStateError as exc:
            return exc
        return None


def _split(results):
    winners = [i for i, result in enumerate(results) if result is None]
    losers = [result for result in results if result is not None]
    return winners, losers


@pytest.mark.asyncio
@pytest.mark.unit
async def test_concurrent_accepts_have_one_winner(session_factory):
    async with session_factory() as db:
        student = await persist(db, UserFactory.create())
        coaches = [await persist(db, CoachFactory.create()) for _ in range(2)]
        request = await persist(db, VideoReviewRequestFactory.create(student.id))

    contenders = [coaches[i % 2].id for i in range(CONTENDERS)]
    results = await asyncio.gather(
        *(
            _attempt(
                session_factory,
                review_ops.accept_request,
                coach_id=coach_id,
                request_id=request.id,
            )
            for coach_id in contenders
        )
    )

    winners, losers = _split(results)
    assert len(winners) == 1
    assert len(losers) == CONTENDERS - 1
    assert all(str(exc) == "Request is no longer available" for exc in losers)

    async with session_factory() as db:
        stored = await db.get(VideoReviewRequest, request.id)
    assert stored.status == ReviewStatus.ACCEPTED
    assert stored.accepted_by_coach_id == contenders[winners[0]]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_concurrent_confirms_have_one_winner(session_factory):
    async with session_factory() as db:
        student = await persist(db, UserFactory.create())
        coach = await persist(db, CoachFactory.create())
        session = await persist(db, TrainingSessionFactory.create(coach.id, student.id))

    prices = [Decimal(50 + 5 * i) for i in range(CONTENDERS)]
    results = await asyncio.gather(
        *(
            _attempt(
                session_factory,
                session_ops.confirm_session,
                coach_id=coach.id,
                session_id=session.id,
                price=price,
                meeting_link=f"https://meet.example.com/{i}",
            )
            for i, price in enumerate(prices)
        )
    )

    winners, losers = _split(results)
    assert len(winners) == 1
    assert len(losers) == CONTENDERS - 1
    assert all(str(exc) == "Session is not pending confirmation" for exc in losers)

    async with session_factory() as db:
        stored = await db.get(TrainingSession, session.id)
    assert stored.status == SessionStatus.CONFIRMED
    assert stored.price == prices[winners[0]]
    assert stored.meeting_link == f"https://meet.example.com/{winners[0]}"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_accept_racing_cancel_leaves_one_outcome(session_factory):
    async with session_factory() as db:
        student = await persist(db, UserFactory.create())
        coach = await persist(db, CoachFactory.create())
        request = await persist(db, VideoReviewRequestFactory.create(student.id))

    accept, cancel = await asyncio.gather(
        _attempt(
            session_factory,
            review_ops.accept_request,
            coach_id=coach.id,
            request_id=request.id,
        ),
        _attempt(
            session_factory,
            review_ops.cancel_request,
            student_id=student.id,
            request_id=request.id,
        ),
    )

    assert (accept is None) != (cancel is None)
    async with session_factory() as db:
        stored = await db.get(VideoReviewRequest, request.id)
    if accept is None:
        assert stored.status == ReviewStatus.ACCEPTED
        assert str(cancel) == "Can only cancel open requests"
    else:
        assert stored.status == ReviewStatus.CANCELLED
        assert str(accept) == "Request is no longer available"
