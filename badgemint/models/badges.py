import enum

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from badgemint.database.db import Base


class MetadataStatus(str, enum.Enum):
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"


class OwnerReassignmentError(Exception):
    """Raised when code tries to change the owner of a minted badge."""


class Badge(Base):
    __tablename__ = "badges"
    # One badge per (event, owner): this row is the claimed-status ledger
    __table_args__ = (UniqueConstraint("event_id", "owner", name="uq_badges_event_owner"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    owner: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    token_uri: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    minted_at: Mapped[int] = mapped_column(Integer, nullable=False)
    metadata_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=MetadataStatus.PENDING.value
    )
    metadata_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="badges")

    @validates("owner")
    def _validate_owner(self, key, value):
        # Soulbound: the only allowed assignment is the initial mint
        if self.owner is not None and value != self.owner:
            raise OwnerReassignmentError(f"Badge {self.id} is soulbound and cannot change owner.")
        return value
