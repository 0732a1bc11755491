from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from badgemint.database.db import get_db
from badgemint.routes.deps import get_caller
from badgemint.schemas.events import (
    ClaimableOut,
    ClaimMethodIn,
    ClaimMethodOut,
    EventCreate,
    EventOut,
    EventStatsOut,
    EventUpdate,
)
from badgemint.services import events as event_service
from badgemint.services import whitelist as whitelist_service
from badgemint.services.errors import BadgeMintError

router = APIRouter(prefix="/event", tags=["events"])


@router.post("", response_model=EventOut)
def create_event(payload: EventCreate, caller: str = Depends(get_caller), db: Session = Depends(get_db)):
    try:
        return event_service.create_event(
            db,
            organizer=caller,
            name=payload.name,
            description=payload.description,
            image_uri=payload.image_uri,
            start_time=payload.start_time,
            end_time=payload.end_time,
            max_attendees=payload.max_attendees,
        )
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/organizer/{identity}", response_model=list[EventOut])
def events_by_organizer(identity: str, db: Session = Depends(get_db)):
    return event_service.get_events_by_organizer(db, identity)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    try:
        return event_service.get_event(db, event_id)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int, payload: EventUpdate, caller: str = Depends(get_caller), db: Session = Depends(get_db)
):
    try:
        return event_service.update_event(
            db,
            event_id,
            caller=caller,
            name=payload.name,
            description=payload.description,
            image_uri=payload.image_uri,
        )
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{event_id}/deactivate", response_model=EventOut)
def deactivate_event(event_id: int, caller: str = Depends(get_caller), db: Session = Depends(get_db)):
    try:
        return event_service.deactivate_event(db, event_id, caller=caller)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{event_id}/claimable", response_model=ClaimableOut)
def event_claimable(event_id: int, db: Session = Depends(get_db)):
    return {"event_id": event_id, "claimable": event_service.is_claimable(db, event_id)}


@router.get("/{event_id}/stats", response_model=EventStatsOut)
def event_stats(event_id: int, db: Session = Depends(get_db)):
    try:
        return event_service.get_event_stats(db, event_id)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{event_id}/claim-method", response_model=ClaimMethodOut)
def set_claim_method(
    event_id: int, payload: ClaimMethodIn, caller: str = Depends(get_caller), db: Session = Depends(get_db)
):
    try:
        method = whitelist_service.set_claim_method(db, event_id, payload.method, caller=caller)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"event_id": event_id, "method": method}


@router.get("/{event_id}/claim-method", response_model=ClaimMethodOut)
def get_claim_method(event_id: int, db: Session = Depends(get_db)):
    try:
        method = whitelist_service.get_claim_method(db, event_id)
    except BadgeMintError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"event_id": event_id, "method": method}
