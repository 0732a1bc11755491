"""Observable notifications (EventCreated, BadgeClaimed, ...).

Each notification is a log record on the ``badgemint.notifications`` logger
carrying ``notification`` and ``payload`` attributes, so any logging handler
can forward them. Callers emit only after their transaction has committed.
"""
import logging

logger = logging.getLogger("badgemint.notifications")

EVENT_CREATED = "EventCreated"
EVENT_UPDATED = "EventUpdated"
EVENT_DEACTIVATED = "EventDeactivated"
ADDRESS_WHITELISTED = "AddressWhitelisted"
ADDRESSES_WHITELISTED_BATCH = "AddressesWhitelistedBatch"
BADGE_CLAIMED = "BadgeClaimed"


def emit(notification: str, /, **payload) -> None:
    logger.info("%s %s", notification, payload, extra={"notification": notification, "payload": payload})
