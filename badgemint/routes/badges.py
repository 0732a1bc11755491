import json

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from badgemint.database.db import get_db
from badgemint.models import MetadataStatus
from badgemint.routes.deps import get_caller
from badgemint.schemas.badges import BadgeOut, TransferRequest
from badgemint.services import badges as badge_service
from badgemint.services.errors import BadgeMintError

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("/owner/{identity}", response_model=list[BadgeOut])
def badges_for_owner(identity: str, db: Session = Depends(get_db)):
    return badge_service.get_badges_for_owner(db, identity)


@router.get("/{badge_id}", response_model=BadgeOut)
def get_badge(badge_id: int, db: Session = Depends(get_db)):
    try:
        return badge_service.get_badge(db, badge_id)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{badge_id}/metadata")
def badge_metadata(badge_id: int, db: Session = Depends(get_db)):
    """Token metadata document; falls back to a live render until publication."""
    try:
        badge = badge_service.get_badge(db, badge_id)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    if badge.metadata_status == MetadataStatus.PUBLISHED.value and badge.metadata_json:
        return json.loads(badge.metadata_json)
    return badge_service.build_badge_metadata(badge)


@router.post("/{badge_id}/transfer")
def transfer_badge(
    badge_id: int, payload: TransferRequest, caller: str = Depends(get_caller), db: Session = Depends(get_db)
):
    try:
        badge_service.transfer_badge(db, badge_id, caller=caller, to=payload.to)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
