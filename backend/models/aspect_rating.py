"""Per-location aspect rating model."""
import uuid
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models import Base


class LocationAspectRating(Base):
    """Rating of one aspect for one location; at most one per generation date."""

    __tablename__ = "location_aspect_rating"
    __table_args__ = (
        UniqueConstraint("location_id", "aspect_id", "generated_date", name="uq_aspect_rating_per_date"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    location_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("touristic_location.id", ondelete="CASCADE"),
        nullable=False,
    )
    aspect_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("aspect.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    generated_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    location = relationship("Location", back_populates="aspect_ratings")
    aspect = relationship("Aspect", lazy="joined")
