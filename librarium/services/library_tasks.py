import asyncio
import logging

from librarium.dependencies.database import SessionLocal
from librarium.services.celery_config import celery_app
from librarium.services.reservation_service import expire_reservations

logger = logging.getLogger(__name__)


@celery_app.task(name="librarium.services.library_tasks.expire_pending_reservations")
def expire_pending_reservations():
    logger.info("✅ expire_pending_reservations started")

    try:
        loop = asyncio.get_event_loop()
        if loop.is_closed():
            raise RuntimeError
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

    return loop.run_until_complete(_expire_pending_reservations())


async def _expire_pending_reservations(session_factory=SessionLocal) -> int:
    async with session_factory() as db:
        return await expire_reservations(db)
