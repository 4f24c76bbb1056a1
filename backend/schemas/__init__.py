# Schemas package
from .health import HealthResponse
from .locations import LocationDetail, LocationResponse, NamedItem
from .search import SearchLocation, SearchResponse

__all__ = [
    "HealthResponse",
    "LocationDetail",
    "LocationResponse",
    "NamedItem",
    "SearchLocation",
    "SearchResponse",
]
