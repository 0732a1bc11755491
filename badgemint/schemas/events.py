from datetime import datetime

from pydantic import BaseModel, Field

from badgemint.models import ClaimMethod


# ---------- Event ----------
class EventCreate(BaseModel):
    name: str = Field(max_length=200)
    description: str = ""
    image_uri: str = Field(default="", max_length=500)
    start_time: int
    end_time: int
    max_attendees: int


class EventUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    image_uri: str | None = Field(default=None, max_length=500)


class EventOut(BaseModel):
    id: int
    name: str
    description: str
    image_uri: str
    organizer: str
    start_time: int
    end_time: int
    max_attendees: int
    claimed_count: int
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ClaimableOut(BaseModel):
    event_id: int
    claimable: bool


class EventStatsOut(BaseModel):
    event_id: int
    max_attendees: int
    claimed_count: int
    whitelisted_count: int
    badges_minted: int
    metadata_published: int
    is_active: bool


class ClaimMethodIn(BaseModel):
    method: ClaimMethod


class ClaimMethodOut(BaseModel):
    event_id: int
    method: ClaimMethod
