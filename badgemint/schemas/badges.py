from pydantic import BaseModel, Field


class ClaimRequest(BaseModel):
    event_id: int = Field(ge=1)


class QRClaimRequest(BaseModel):
    event_id: int = Field(ge=1)
    claimant: str | None = None


class TransferRequest(BaseModel):
    to: str


class BadgeOut(BaseModel):
    id: int
    event_id: int
    owner: str
    token_uri: str
    minted_at: int
    metadata_status: str

    class Config:
        from_attributes = True


class ClaimStatusOut(BaseModel):
    event_id: int
    identity: str
    can_claim: bool
    has_claimed: bool
