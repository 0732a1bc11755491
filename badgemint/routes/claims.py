import contextlib

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from badgemint.database.db import get_db
from badgemint.models import Badge
from badgemint.routes.deps import get_caller
from badgemint.schemas.badges import BadgeOut, ClaimRequest, ClaimStatusOut, QRClaimRequest
from badgemint.services import badges as badge_service
from badgemint.services.errors import BadgeMintError
from badgemint.tasks import publish_badge_metadata_task

router = APIRouter(prefix="/claim", tags=["claims"])


def _enqueue_metadata(badge: Badge) -> None:
    # enqueue durable background work to publish the token metadata
    with contextlib.suppress(Exception):
        publish_badge_metadata_task.delay(badge.id)


@router.post("", response_model=BadgeOut)
def claim_badge(payload: ClaimRequest, caller: str = Depends(get_caller), db: Session = Depends(get_db)):
    try:
        badge = badge_service.claim_badge(db, payload.event_id, caller=caller)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    _enqueue_metadata(badge)
    db.refresh(badge)
    return badge


@router.post("/qr", response_model=BadgeOut)
def claim_badge_with_qr(
    payload: QRClaimRequest, caller: str = Depends(get_caller), db: Session = Depends(get_db)
):
    try:
        badge = badge_service.claim_badge_with_qr(db, payload.event_id, payload.claimant, caller=caller)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    _enqueue_metadata(badge)
    db.refresh(badge)
    return badge


@router.get("/{event_id}/{identity}", response_model=ClaimStatusOut)
def claim_status(event_id: int, identity: str, db: Session = Depends(get_db)):
    return {
        "event_id": event_id,
        "identity": identity.strip().lower(),
        "can_claim": badge_service.can_claim(db, event_id, identity),
        "has_claimed": badge_service.has_claimed(db, event_id, identity),
    }
