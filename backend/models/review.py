"""Site review model for DB persistence."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models import Base

# Review origin: submitted by a user of this app, or imported from the places provider.
SOURCE_USER = "USR"
SOURCE_EXTERNAL = "EXT"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base):
    """Review table: location, author (NULL for imported), rating 1-5, body, source, timestamp."""

    __tablename__ = "site_review"
    # One user-sourced review per author and location; imported reviews have no author.
    __table_args__ = (
        Index(
            "uq_site_review_user_location",
            "location_id",
            "user_id",
            unique=True,
            sqlite_where=text("source = 'USR'"),
            postgresql_where=text("source = 'USR'"),
        ),
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
        index=True,
    )
    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String(8), nullable=False, default=SOURCE_USER)
    extracted_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user = relationship("User", lazy="joined")
