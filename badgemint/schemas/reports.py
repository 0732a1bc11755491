from pydantic import BaseModel


class ReportOut(BaseModel):
    total_events: int
    active_events: int
    total_capacity: int
    total_claimed: int
    total_badges: int

    class Config:
        from_attributes = True
