"""Errors raised by the registry, whitelist and issuer services.

Every error carries the HTTP status the routes translate it to.
"""


class BadgeMintError(Exception):
    status_code = 400


class InvalidInputError(BadgeMintError):
    status_code = 422


class NotAuthorizedError(BadgeMintError):
    status_code = 403


class NotFoundError(BadgeMintError):
    status_code = 404


class StateConflictError(BadgeMintError):
    status_code = 409


class LockUnavailableError(BadgeMintError):
    status_code = 503


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: int):
        super().__init__(f"Event {event_id} not found.")
        self.event_id = event_id


class BadgeNotFoundError(NotFoundError):
    def __init__(self, badge_id: int):
        super().__init__(f"Badge {badge_id} not found.")
        self.badge_id = badge_id


class EventNotEditableError(StateConflictError):
    pass


class EventInactiveError(StateConflictError):
    pass


class ClaimWindowClosedError(StateConflictError):
    pass


class CapacityExhaustedError(StateConflictError):
    pass


class AlreadyWhitelistedError(StateConflictError):
    pass


class NotWhitelistedError(StateConflictError):
    pass


class AlreadyClaimedError(StateConflictError):
    pass


class NonTransferableError(StateConflictError):
    pass
