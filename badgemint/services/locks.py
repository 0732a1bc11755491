import logging
from contextlib import contextmanager

import redis

from badgemint.core import config
from badgemint.core.config import get_redis_url
from badgemint.services.errors import LockUnavailableError

logger = logging.getLogger(__name__)


def get_redis_client():
    """Get Redis client for locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)


@contextmanager
def event_lock(event_id: int):
    """Hold the per-event lock for the duration of the block.

    Serialises claims and whitelist writes against one event, which covers
    the per-(event, identity) checks and the per-event counter.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(
        f"event_lock:{event_id}",
        timeout=config.CLAIM_LOCK_TIMEOUT,
        blocking_timeout=config.CLAIM_LOCK_BLOCKING_TIMEOUT,
    )
    try:
        acquired = lock.acquire(blocking=True)
    except redis.exceptions.LockError:
        raise LockUnavailableError("Could not acquire event lock, please try again.")
    if not acquired:
        raise LockUnavailableError("Could not acquire event lock, please try again.")

    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockError:
            # Lock expired while held; the transaction has already finished
            logger.warning("Lock for event %s expired before release", event_id)
