from pydantic import BaseModel


class WhitelistAddressIn(BaseModel):
    identity: str | None = None


class WhitelistBatchIn(BaseModel):
    identities: list[str | None]


class WhitelistAddressOut(BaseModel):
    event_id: int
    identity: str


class WhitelistBatchOut(BaseModel):
    event_id: int
    count: int


class WhitelistOut(BaseModel):
    event_id: int
    identities: list[str]


class WhitelistStatusOut(BaseModel):
    event_id: int
    identity: str
    whitelisted: bool
