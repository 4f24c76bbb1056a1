# Discovery core: opening hours, geo distance, response cache
from discovery_core.cache import TTLCache, app_cache
from discovery_core.geo import great_circle_km, haversine_km
from discovery_core.opening_hours import (
    NOT_AVAILABLE,
    HoursGroup,
    OpeningStatus,
    TimeRange,
    group_hours,
    is_open_now,
    opening_status,
    parse_time_range,
)

__all__ = [
    "NOT_AVAILABLE",
    "HoursGroup",
    "OpeningStatus",
    "TTLCache",
    "TimeRange",
    "app_cache",
    "great_circle_km",
    "group_hours",
    "haversine_km",
    "is_open_now",
    "opening_status",
    "parse_time_range",
]
