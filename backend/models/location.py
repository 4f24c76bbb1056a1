"""Touristic location model for DB persistence."""
import uuid
from typing import Any

from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from models import Base


class Location(Base):
    """Touristic location: coordinates, category, aggregate rating, weekly hours."""

    __tablename__ = "touristic_location"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("location_category.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Mean of all review ratings; NULL when the location has no reviews.
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    # List of "<Weekday>: <hours>" strings, or the string "N/A".
    opening_hours: Mapped[Any] = mapped_column(JSON(), nullable=False, default="N/A")
    # Image reference in the external object store / places API.
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    summarized_review: Mapped[str | None] = mapped_column(Text, nullable=True)

    category = relationship("LocationCategory", lazy="joined")
    aspect_ratings = relationship(
        "LocationAspectRating",
        back_populates="location",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
