"""Setting model: one typed, string-valued configuration record per key."""

from sqlalchemy import Column, String, Text

from .base import Base, TimestampMixin, UUIDMixin


class Setting(UUIDMixin, TimestampMixin, Base):
    """Key/value settings table. ``type`` is fixed when a row is seeded."""

    __tablename__ = "settings"

    key = Column(String(150), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=True)
    type = Column(String(150), nullable=False, default="core")
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)

    def to_dict(self) -> dict:
        return {attr.key: getattr(self, attr.key) for attr in self.__mapper__.column_attrs}

    def __repr__(self) -> str:
        return f"<Setting(key='{self.key}', type='{self.type}')>"
