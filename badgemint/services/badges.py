import json
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from badgemint.core import clock, config, notifications
from badgemint.core.identity import normalize_identity
from badgemint.database.db import atomic
from badgemint.models import Badge, Event, MetadataStatus
from badgemint.services.errors import (
    AlreadyClaimedError,
    BadgeNotFoundError,
    CapacityExhaustedError,
    ClaimWindowClosedError,
    EventInactiveError,
    EventNotFoundError,
    InvalidInputError,
    NonTransferableError,
    NotAuthorizedError,
    NotWhitelistedError,
)
from badgemint.services.events import check_claimable, get_event, increment_claimed_count
from badgemint.services.locks import event_lock
from badgemint.services.whitelist import is_whitelisted

logger = logging.getLogger(__name__)


def get_badge(db: Session, badge_id: int) -> Badge:
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise BadgeNotFoundError(badge_id)
    return badge


def get_badge_for_event(db: Session, event_id: int, identity: str | None) -> Badge | None:
    owner = normalize_identity(identity)
    if owner is None:
        return None
    return db.scalar(select(Badge).where(Badge.event_id == event_id, Badge.owner == owner))


def get_badges_for_owner(db: Session, identity: str) -> list[Badge]:
    owner = normalize_identity(identity)
    if owner is None:
        return []
    return list(db.scalars(select(Badge).where(Badge.owner == owner).order_by(Badge.id)))


def has_claimed(db: Session, event_id: int, identity: str | None) -> bool:
    return get_badge_for_event(db, event_id, identity) is not None


def can_claim(db: Session, event_id: int, identity: str | None) -> bool:
    """Whether ``identity`` would pass every claim precondition right now."""
    claimant = normalize_identity(identity)
    event = db.get(Event, event_id)
    if claimant is None or event is None:
        return False
    if has_claimed(db, event_id, claimant):
        return False
    try:
        check_claimable(event)
    except (EventInactiveError, ClaimWindowClosedError, CapacityExhaustedError):
        return False
    return is_whitelisted(db, event_id, claimant)


def _claim_in_transaction(db: Session, event_id: int, claimant: str) -> Badge:
    """Check eligibility, bump the counter and mint, all in the open transaction."""
    # Reload so the checks below see the counter as committed, not as cached
    event = db.get(Event, event_id, populate_existing=True)
    if event is None:
        raise EventNotFoundError(event_id)
    if has_claimed(db, event_id, claimant):
        raise AlreadyClaimedError(f"{claimant} has already claimed a badge for event {event_id}.")
    check_claimable(event)
    if not is_whitelisted(db, event_id, claimant):
        raise NotWhitelistedError(f"{claimant} is not whitelisted for event {event_id}.")

    increment_claimed_count(db, event_id, caller=config.BADGE_ISSUER)

    badge = Badge(
        event_id=event_id,
        owner=claimant,
        token_uri=event.image_uri,
        minted_at=clock.now(),
        metadata_status=MetadataStatus.PENDING.value,
    )
    db.add(badge)
    try:
        db.flush()  # gets badge.id
    except IntegrityError:
        raise AlreadyClaimedError(f"{claimant} has already claimed a badge for event {event_id}.")
    return badge


def _issue(db: Session, event_id: int, claimant: str) -> Badge:
    with event_lock(event_id):
        with atomic(db):
            badge = _claim_in_transaction(db, event_id, claimant)
            badge_id = badge.id

    logger.info("Badge %s minted for %s (event %s)", badge_id, claimant, event_id)
    notifications.emit(
        notifications.BADGE_CLAIMED, event_id=event_id, claimant=claimant, badge_id=badge_id
    )
    return badge


def claim_badge(db: Session, event_id: int, *, caller: str) -> Badge:
    """Self-service claim: the caller mints a badge for themselves."""
    claimant = normalize_identity(caller)
    if claimant is None:
        raise NotAuthorizedError("A wallet identity is required to claim.")
    return _issue(db, event_id, claimant)


def claim_badge_with_qr(db: Session, event_id: int, claimant: str | None, *, caller: str) -> Badge:
    """Organizer-assisted claim, e.g. after scanning an attendee's QR code.

    The organizer authenticates; eligibility and ownership apply to ``claimant``.
    """
    attendee = normalize_identity(claimant)
    if attendee is None:
        raise InvalidInputError("Claimant address is required.")
    event = get_event(db, event_id)
    if normalize_identity(caller) != event.organizer:
        raise NotAuthorizedError("Only the organizer can claim on behalf of an attendee.")
    return _issue(db, event_id, attendee)


def transfer_badge(db: Session, badge_id: int, *, caller: str, to: str) -> None:
    """Badges are soulbound: every transfer is rejected."""
    badge = get_badge(db, badge_id)
    logger.warning("Rejected transfer of badge %s from %s to %s", badge.id, caller, to)
    raise NonTransferableError("Soulbound: badges cannot be transferred.")


def build_badge_metadata(badge: Badge) -> dict:
    event = badge.event
    return {
        "name": f"{event.name} Attendance Badge",
        "description": event.description,
        "image": badge.token_uri,
        "attributes": [
            {"trait_type": "Event ID", "value": event.id},
            {"trait_type": "Event", "value": event.name},
            {"trait_type": "Organizer", "value": event.organizer},
            {"display_type": "date", "trait_type": "Minted", "value": badge.minted_at},
        ],
    }


def publish_badge_metadata(db: Session, badge_id: int) -> None:
    with atomic(db):
        _publish_badge_metadata_in_transaction(db, badge_id)


def _publish_badge_metadata_in_transaction(db: Session, badge_id: int) -> None:
    """Internal function to render metadata within a transaction."""
    badge = db.get(Badge, badge_id)
    if not badge:
        return
    badge.metadata_json = json.dumps(build_badge_metadata(badge), sort_keys=True)
    badge.metadata_status = MetadataStatus.PUBLISHED.value
