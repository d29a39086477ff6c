"""Website model: one showcased site in the ``websites`` collection."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Website(Base):
    """Stored document. ``built_with`` may hold a string or a list."""

    __tablename__ = "websites"
    __table_args__ = (
        Index("ix_websites_uploaded_at_id", "uploaded_at", "id"),
        Index("ix_websites_views_id", "views", "id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    built_with: Mapped[Any] = mapped_column(JSONB, nullable=True)
    categories: Mapped[Any] = mapped_column(JSONB, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, insert_default=0)
    last_viewed: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def to_record(self) -> dict[str, Any]:
        """Raw record in stored field names, values left in store-native form."""
        return {
            "id": self.id,
            "name": self.name,
            "videoUrl": self.video_url,
            "url": self.url,
            "builtWith": self.built_with,
            "categories": self.categories,
            "uploadedAt": self.uploaded_at,
            "views": self.views,
        }
