"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.website import Website

__all__ = ["Base", "Website"]
