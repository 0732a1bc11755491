import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from badgemint.database.db import Base


class ClaimMethod(str, enum.Enum):
    MANUAL = "manual"
    CODE = "code"
    SIGNATURE = "signature"


class WhitelistEntry(Base):
    __tablename__ = "whitelist_entries"
    __table_args__ = (UniqueConstraint("event_id", "identity", name="uq_whitelist_event_identity"),)

    # Insertion order of ids is the enumeration order of the whitelist
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    identity: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    event: Mapped["Event"] = relationship(back_populates="whitelist")


class EventClaimMethod(Base):
    __tablename__ = "event_claim_methods"

    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), primary_key=True)
    method: Mapped[str] = mapped_column(String(16), nullable=False, default=ClaimMethod.MANUAL.value)
