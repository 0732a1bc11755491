import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from badgemint.core import config, notifications
from badgemint.core.identity import normalize_identity
from badgemint.database.db import atomic
from badgemint.models import ClaimMethod, Event, EventClaimMethod, WhitelistEntry
from badgemint.services.errors import (
    AlreadyWhitelistedError,
    InvalidInputError,
    NotAuthorizedError,
)
from badgemint.services.events import get_event
from badgemint.services.locks import event_lock

logger = logging.getLogger(__name__)


def _require_organizer(db: Session, event_id: int, caller: str) -> Event:
    event = get_event(db, event_id)
    if normalize_identity(caller) != event.organizer:
        raise NotAuthorizedError("Only the organizer can manage this event's whitelist.")
    return event


def set_claim_method(db: Session, event_id: int, method: ClaimMethod | str, *, caller: str) -> ClaimMethod:
    try:
        method = ClaimMethod(method)
    except ValueError:
        raise InvalidInputError(f"Unknown claim method: {method!r}.")

    with atomic(db):
        _require_organizer(db, event_id, caller)
        setting = db.get(EventClaimMethod, event_id)
        if setting is None:
            db.add(EventClaimMethod(event_id=event_id, method=method.value))
        else:
            setting.method = method.value

    logger.info("Event %s claim method set to %s", event_id, method.value)
    return method


def get_claim_method(db: Session, event_id: int) -> ClaimMethod:
    get_event(db, event_id)
    setting = db.get(EventClaimMethod, event_id)
    if setting is None:
        return ClaimMethod.MANUAL
    return ClaimMethod(setting.method)


def whitelist_address(db: Session, event_id: int, identity: str | None, *, caller: str) -> str:
    with event_lock(event_id):
        with atomic(db):
            _require_organizer(db, event_id, caller)
            claimant = normalize_identity(identity)
            if claimant is None:
                raise InvalidInputError("Cannot whitelist the zero address.")
            if is_whitelisted(db, event_id, claimant):
                raise AlreadyWhitelistedError(f"{claimant} is already whitelisted for event {event_id}.")
            db.add(WhitelistEntry(event_id=event_id, identity=claimant))
            try:
                db.flush()
            except IntegrityError:
                raise AlreadyWhitelistedError(f"{claimant} is already whitelisted for event {event_id}.")

    notifications.emit(notifications.ADDRESS_WHITELISTED, event_id=event_id, identity=claimant)
    return claimant


def _whitelisted_identities(db: Session, event_id: int) -> set[str]:
    return set(db.scalars(select(WhitelistEntry.identity).where(WhitelistEntry.event_id == event_id)))


def _add_batch(db: Session, event_id: int, identities: list[str | None], caller: str) -> int:
    _require_organizer(db, event_id, caller)
    if not identities:
        raise InvalidInputError("Batch cannot be empty.")
    if len(identities) > config.MAX_BATCH_SIZE:
        raise InvalidInputError(f"Batch cannot exceed {config.MAX_BATCH_SIZE} addresses.")

    present = _whitelisted_identities(db, event_id)
    added = 0
    for raw in identities:
        claimant = normalize_identity(raw)
        if claimant is None or claimant in present:
            continue
        db.add(WhitelistEntry(event_id=event_id, identity=claimant))
        present.add(claimant)
        added += 1
    db.flush()
    return added


def whitelist_addresses_batch(
    db: Session, event_id: int, identities: list[str | None], *, caller: str
) -> int:
    """Whitelist up to ``MAX_BATCH_SIZE`` identities in one transaction.

    Null identities and ones already on the list (or repeated in the batch)
    are skipped rather than rejected. Returns how many were added.
    """
    with event_lock(event_id):
        for attempt in range(2):
            try:
                with atomic(db):
                    added = _add_batch(db, event_id, identities, caller)
                break
            except IntegrityError:
                # An entry landed between the read and the insert; re-read once
                if attempt:
                    raise AlreadyWhitelistedError(
                        f"Whitelist for event {event_id} changed during the batch, please retry."
                    )
                logger.warning("Event %s: whitelist batch conflicted, retrying", event_id)

    logger.info("Event %s: %d of %d addresses whitelisted", event_id, added, len(identities))
    notifications.emit(notifications.ADDRESSES_WHITELISTED_BATCH, event_id=event_id, count=added)
    return added


def is_whitelisted(db: Session, event_id: int, identity: str | None) -> bool:
    claimant = normalize_identity(identity)
    if claimant is None:
        return False
    entry_id = db.scalar(
        select(WhitelistEntry.id).where(
            WhitelistEntry.event_id == event_id,
            WhitelistEntry.identity == claimant,
        )
    )
    return entry_id is not None


def get_whitelisted_addresses(db: Session, event_id: int) -> list[str]:
    get_event(db, event_id)
    return list(
        db.scalars(
            select(WhitelistEntry.identity)
            .where(WhitelistEntry.event_id == event_id)
            .order_by(WhitelistEntry.id)
        )
    )


def count_whitelisted(db: Session, event_id: int) -> int:
    return int(
        db.scalar(select(func.count(WhitelistEntry.id)).where(WhitelistEntry.event_id == event_id)) or 0
    )
