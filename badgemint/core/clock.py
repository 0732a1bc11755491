"""Wall clock used for claim windows and mint timestamps.

Services call ``clock.now()`` through the module so tests can swap it out.
"""
import time


def now() -> int:
    """Current time as whole Unix seconds."""
    return int(time.time())
