"""
Subscription row: one user's membership in one meetup's subscriber set.

Unique constraint on (meetup_id, user_id) keeps the set duplicate-free even
if two writers slip past the application-level checks.
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from meetups.db.base import Base, TimestampMixin


class Subscription(Base, TimestampMixin):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    meetup_id = Column(Integer, ForeignKey("meetups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    meetup = relationship("Meetup", back_populates="subscriptions")

    __table_args__ = (
        UniqueConstraint("meetup_id", "user_id", name="uq_meetup_subscriber"),
    )

    def __repr__(self) -> str:
        return f"<Subscription(meetup={self.meetup_id}, user={self.user_id})>"
