"""
Uploaded file metadata (avatars, banners). The bytes live elsewhere.
"""

from sqlalchemy import Column, Integer, String

from meetups.core.config import get_settings
from meetups.db.base import Base, TimestampMixin


class File(Base, TimestampMixin):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    path = Column(String(255), nullable=False, unique=True)

    @property
    def url(self) -> str:
        return f"{get_settings().FILES_BASE_URL.rstrip('/')}/{self.path}"

    def __repr__(self) -> str:
        return f"<File(id={self.id}, path={self.path})>"
