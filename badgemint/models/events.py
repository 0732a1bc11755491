from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from badgemint.database.db import Base


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_events_window"),
        CheckConstraint("claimed_count >= 0 AND claimed_count <= max_attendees", name="ck_events_capacity"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_uri: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    organizer: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    start_time: Mapped[int] = mapped_column(Integer, nullable=False)
    end_time: Mapped[int] = mapped_column(Integer, nullable=False)
    max_attendees: Mapped[int] = mapped_column(Integer, nullable=False)
    claimed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    badges: Mapped[list["Badge"]] = relationship(back_populates="event")
    whitelist: Mapped[list["WhitelistEntry"]] = relationship(
        back_populates="event", order_by="WhitelistEntry.id"
    )
