"""
Test the Redis-backed per-event lock.
"""
import pytest

from badgemint.core import config
from badgemint.services.locks import event_lock
from badgemint.services.errors import LockUnavailableError


class TestRedisLock:
    """Test Redis locking used around claims and whitelist writes."""

    def test_event_lock_held_inside_block(self, fake_redis):
        with event_lock(7):
            other = fake_redis.lock("event_lock:7", timeout=5)
            assert other.acquire(blocking=False) is False

        # Released on exit
        assert other.acquire(blocking=False) is True
        other.release()

    def test_event_lock_released_on_error(self, fake_redis):
        with pytest.raises(RuntimeError):
            with event_lock(8):
                raise RuntimeError("boom")

        assert fake_redis.get("event_lock:8") is None

    def test_event_locks_are_per_event(self, fake_redis):
        with event_lock(1):
            with event_lock(2):
                assert fake_redis.get("event_lock:1") is not None
                assert fake_redis.get("event_lock:2") is not None

    def test_event_lock_contention(self, fake_redis, monkeypatch):
        monkeypatch.setattr(config, "CLAIM_LOCK_BLOCKING_TIMEOUT", 0)
        held = fake_redis.lock("event_lock:3", timeout=10)
        assert held.acquire(blocking=False) is True

        with pytest.raises(LockUnavailableError):
            with event_lock(3):
                pass

        held.release()
