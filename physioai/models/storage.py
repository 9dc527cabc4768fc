from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from physioai.models.base import Base


class StorageEntry(Base):
    """
    Key/value storage medium for serialized application state.
    Values are written whole; there is no partial update or versioning.
    """

    __tablename__ = "storage_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
