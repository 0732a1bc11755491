from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from badgemint.database.db import get_db
from badgemint.routes.deps import get_caller
from badgemint.schemas.whitelist import (
    WhitelistAddressIn,
    WhitelistAddressOut,
    WhitelistBatchIn,
    WhitelistBatchOut,
    WhitelistOut,
    WhitelistStatusOut,
)
from badgemint.services import whitelist as whitelist_service
from badgemint.services.errors import BadgeMintError

router = APIRouter(prefix="/event/{event_id}/whitelist", tags=["whitelist"])


@router.post("", response_model=WhitelistAddressOut)
def whitelist_address(
    event_id: int, payload: WhitelistAddressIn, caller: str = Depends(get_caller), db: Session = Depends(get_db)
):
    try:
        identity = whitelist_service.whitelist_address(db, event_id, payload.identity, caller=caller)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"event_id": event_id, "identity": identity}


@router.post("/batch", response_model=WhitelistBatchOut)
def whitelist_addresses_batch(
    event_id: int, payload: WhitelistBatchIn, caller: str = Depends(get_caller), db: Session = Depends(get_db)
):
    try:
        count = whitelist_service.whitelist_addresses_batch(db, event_id, payload.identities, caller=caller)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"event_id": event_id, "count": count}


@router.get("", response_model=WhitelistOut)
def whitelisted_addresses(event_id: int, db: Session = Depends(get_db)):
    try:
        identities = whitelist_service.get_whitelisted_addresses(db, event_id)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"event_id": event_id, "identities": identities}


@router.get("/{identity}", response_model=WhitelistStatusOut)
def whitelist_status(event_id: int, identity: str, db: Session = Depends(get_db)):
    return {
        "event_id": event_id,
        "identity": identity.strip().lower(),
        "whitelisted": whitelist_service.is_whitelisted(db, event_id, identity),
    }
