"""SQLAlchemy declarative base and models."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all DB models."""
    pass


# Register every model with Base so string relationships resolve.
from models import aspect_rating, category, location, report, review, user, user_location  # noqa: E402,F401
