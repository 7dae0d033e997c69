"""
Meetup model with its subscriber set.

Key design decisions:
- Subscribers live in the `subscriptions` join table, not an array column,
  so membership and date filtering compose in one indexed query
- `version` column enables optimistic locking: every subscriber-set write
  bumps it, and a write against a stale version affects zero rows
- Index on `date` for the conflict window and upcoming-listing range scans
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from meetups.db.base import Base, TimestampMixin


class Meetup(Base, TimestampMixin):
    __tablename__ = "meetups"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    location = Column(String(255), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    banner_id = Column(Integer, ForeignKey("files.id"), nullable=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    owner = relationship("User", lazy="selectin")
    banner = relationship("File", lazy="selectin")
    subscriptions = relationship(
        "Subscription",
        back_populates="meetup",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_meetups_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Meetup(id={self.id}, title={self.title}, date={self.date})>"
