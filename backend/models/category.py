"""Location category and aspect lookup tables."""
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models import Base


class LocationCategory(Base):
    """Category a location belongs to (museum, park, ...)."""

    __tablename__ = "location_category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class Aspect(Base):
    """Named dimension a location is rated on (cleanliness, safety, ...)."""

    __tablename__ = "aspect"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
