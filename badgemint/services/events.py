import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from badgemint.core import clock, config, notifications
from badgemint.core.identity import normalize_identity
from badgemint.database.db import atomic
from badgemint.models import Badge, Event, MetadataStatus, WhitelistEntry
from badgemint.services.errors import (
    CapacityExhaustedError,
    ClaimWindowClosedError,
    EventInactiveError,
    EventNotEditableError,
    EventNotFoundError,
    InvalidInputError,
    NotAuthorizedError,
)

logger = logging.getLogger(__name__)


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def get_events_by_organizer(db: Session, organizer: str) -> list[Event]:
    """Events created by ``organizer``, oldest first."""
    identity = normalize_identity(organizer)
    if identity is None:
        return []
    return list(db.scalars(select(Event).where(Event.organizer == identity).order_by(Event.id)))


def count_events(db: Session) -> int:
    return int(db.scalar(select(func.count(Event.id))) or 0)


def create_event(
    db: Session,
    *,
    organizer: str,
    name: str,
    description: str = "",
    image_uri: str = "",
    start_time: int,
    end_time: int,
    max_attendees: int,
) -> Event:
    organizer_id = normalize_identity(organizer)
    if organizer_id is None:
        raise NotAuthorizedError("An organizer identity is required to create an event.")
    if not name or not name.strip():
        raise InvalidInputError("Event name cannot be empty.")
    if start_time <= clock.now():
        raise InvalidInputError("Start time must be in the future.")
    if end_time <= start_time:
        raise InvalidInputError("End time must be after start time.")
    if max_attendees <= 0:
        raise InvalidInputError("Max attendees must be greater than zero.")

    with atomic(db):
        event = Event(
            name=name,
            description=description or "",
            image_uri=image_uri or "",
            organizer=organizer_id,
            start_time=start_time,
            end_time=end_time,
            max_attendees=max_attendees,
            claimed_count=0,
            is_active=True,
        )
        db.add(event)
        db.flush()  # gets event.id
        event_id = event.id

    logger.info("Event %s created by %s", event_id, organizer_id)
    notifications.emit(
        notifications.EVENT_CREATED,
        event_id=event_id,
        name=name,
        organizer=organizer_id,
        start_time=start_time,
        end_time=end_time,
    )
    return event


def update_event(
    db: Session,
    event_id: int,
    *,
    caller: str,
    name: str | None = None,
    description: str | None = None,
    image_uri: str | None = None,
) -> Event:
    """Partially update an event's display fields.

    Blank strings and ``None`` leave the field unchanged. Only the organizer
    may edit, and only while the event is active and has not started.
    """
    with atomic(db):
        event = get_event(db, event_id)
        if normalize_identity(caller) != event.organizer:
            raise NotAuthorizedError("Only the organizer can update this event.")
        if not event.is_active:
            raise EventInactiveError(f"Event {event_id} is not active.")
        if clock.now() >= event.start_time:
            raise EventNotEditableError(f"Event {event_id} has already started.")

        if name and name.strip():
            event.name = name
        if description and description.strip():
            event.description = description
        if image_uri and image_uri.strip():
            event.image_uri = image_uri

    logger.info("Event %s updated", event_id)
    notifications.emit(notifications.EVENT_UPDATED, event_id=event_id)
    return event


def deactivate_event(db: Session, event_id: int, *, caller: str) -> Event:
    with atomic(db):
        event = get_event(db, event_id)
        identity = normalize_identity(caller)
        is_owner = bool(config.REGISTRY_OWNER) and identity == config.REGISTRY_OWNER
        if identity is None or (identity != event.organizer and not is_owner):
            raise NotAuthorizedError("Only the organizer or registry owner can deactivate this event.")
        if not event.is_active:
            raise EventInactiveError(f"Event {event_id} is already inactive.")
        event.is_active = False

    logger.info("Event %s deactivated by %s", event_id, identity)
    notifications.emit(notifications.EVENT_DEACTIVATED, event_id=event_id)
    return event


def check_claimable(event: Event, now: int | None = None) -> None:
    """Raise the specific reason ``event`` cannot be claimed right now."""
    now = clock.now() if now is None else now
    if not event.is_active:
        raise EventInactiveError(f"Event {event.id} is not active.")
    if now < event.start_time or now > event.end_time:
        raise ClaimWindowClosedError(f"Event {event.id} is outside its claim window.")
    if event.claimed_count >= event.max_attendees:
        raise CapacityExhaustedError(f"Event {event.id} has reached max attendees.")


def is_claimable(db: Session, event_id: int) -> bool:
    event = db.get(Event, event_id)
    if event is None:
        return False
    try:
        check_claimable(event)
    except (EventInactiveError, ClaimWindowClosedError, CapacityExhaustedError):
        return False
    return True


def increment_claimed_count(db: Session, event_id: int, *, caller: str) -> int:
    """Bump the claimed counter on behalf of the badge issuer.

    Activity and capacity are re-checked in the same UPDATE so concurrent
    issuers can never push ``claimed_count`` past ``max_attendees``. Runs
    inside the caller's transaction; returns the new count.
    """
    if normalize_identity(caller) != config.BADGE_ISSUER:
        raise NotAuthorizedError("Only the badge issuer can increment the claimed count.")

    stmt = (
        update(Event)
        .where(Event.id == event_id)
        .where(Event.is_active.is_(True))
        .where(Event.claimed_count < Event.max_attendees)
        .values(claimed_count=Event.claimed_count + 1)
        .execution_options(synchronize_session=False)
    )
    res = db.execute(stmt)
    event = get_event(db, event_id)
    if res.rowcount != 1:  # type: ignore
        if not event.is_active:
            raise EventInactiveError(f"Event {event_id} is not active.")
        raise CapacityExhaustedError(f"Event {event_id} has reached max attendees.")
    db.refresh(event)
    return event.claimed_count


def get_event_stats(db: Session, event_id: int) -> dict:
    event = get_event(db, event_id)

    whitelisted_count = db.scalar(
        select(func.count(WhitelistEntry.id)).where(WhitelistEntry.event_id == event_id)
    )
    badges_minted = db.scalar(select(func.count(Badge.id)).where(Badge.event_id == event_id))
    metadata_published = db.scalar(
        select(func.count(Badge.id)).where(
            Badge.event_id == event_id,
            Badge.metadata_status == MetadataStatus.PUBLISHED.value,
        )
    )

    return {
        "event_id": event.id,
        "max_attendees": event.max_attendees,
        "claimed_count": event.claimed_count,
        "whitelisted_count": int(whitelisted_count or 0),
        "badges_minted": int(badges_minted or 0),
        "metadata_published": int(metadata_published or 0),
        "is_active": event.is_active,
    }


def get_overall_report(db: Session) -> dict:
    """Return aggregated totals across all events."""
    total_capacity = db.scalar(select(func.sum(Event.max_attendees)))
    total_claimed = db.scalar(select(func.sum(Event.claimed_count)))
    active_events = db.scalar(select(func.count(Event.id)).where(Event.is_active.is_(True)))
    total_badges = db.scalar(select(func.count(Badge.id)))

    return {
        "total_events": count_events(db),
        "active_events": int(active_events or 0),
        "total_capacity": int(total_capacity or 0),
        "total_claimed": int(total_claimed or 0),
        "total_badges": int(total_badges or 0),
    }
