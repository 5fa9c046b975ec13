"""Site setting model (runtime business configuration)."""
from sqlalchemy import Column, String, Text, JSON, ForeignKey, Uuid
import uuid

from quickfix.db.base import Base
from .base import TimestampMixin


class SiteSetting(Base, TimestampMixin):
    """One named setting; the value is stored as JSON so numbers and booleans keep their type."""

    __tablename__ = 'site_settings'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)
    updated_by = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    def __repr__(self) -> str:
        return f'<SiteSetting(name={self.name}, value={self.value!r})>'
