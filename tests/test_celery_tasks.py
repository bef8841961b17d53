from datetime import date, timedelta

from librarium.models import Reservation, ReservationStatus
from librarium.services.celery_config import celery_app
from librarium.services.crud_service import create_entity
from librarium.services.library_tasks import _expire_pending_reservations

TASK_NAME = "librarium.services.library_tasks.expire_pending_reservations"


def test_expiry_task_is_registered_and_scheduled():
    assert TASK_NAME in celery_app.tasks

    schedule = celery_app.conf.beat_schedule["expire_pending_reservations"]
    assert schedule["task"] == TASK_NAME


async def test_expiry_job_expires_lapsed_reservations(db, session_factory, make_member, make_book):
    member = await make_member()
    book = await make_book()
    today = date.today()
    lapsed = await create_entity(
        db,
        Reservation,
        {
            "book_id": book.book_id,
            "member_id": member.member_id,
            "reservation_date": today - timedelta(days=10),
            "expiry_date": today - timedelta(days=3),
        },
    )

    assert await _expire_pending_reservations(session_factory) == 1

    db.expunge_all()
    lapsed = await db.get(Reservation, lapsed.reservation_id)
    assert lapsed.status == ReservationStatus.EXPIRED
