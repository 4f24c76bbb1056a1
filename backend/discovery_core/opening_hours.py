"""
Opening-hours evaluation for free-text weekly schedules.

Schedules come from the places provider as entries like
"Monday: 9:00 AM – 5:00 PM", "Tuesday: Closed" or "Sunday: Open 24 hours",
or as the sentinel "N/A" when hours are unknown. Status is always computed
in the city's time zone, not the caller's.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional, Union
from zoneinfo import ZoneInfo

from utils.config import CITY_TIMEZONE

NOT_AVAILABLE = "N/A"
CLOSED = "Closed"
OPEN_24_HOURS = "Open 24 hours"

DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

CITY_TZ = ZoneInfo(CITY_TIMEZONE)

Hours = Union[list[str], str, None]


class OpeningStatus(str, Enum):
    """Tri-state open/closed/unknown."""
    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"


class TimeRange(NamedTuple):
    """Opening window in minutes after midnight."""
    start: int
    end: int


@dataclass(frozen=True)
class HoursGroup:
    """Consecutive days sharing the same hours text."""
    days: tuple[str, ...]
    hours: str

    @property
    def label(self) -> str:
        if len(self.days) == 1:
            return self.days[0]
        return f"{self.days[0]} - {self.days[-1]}"


_SEP = r"\s*[–—-]\s*"
# Tried in order: both meridiems, shared trailing meridiem, no meridiem.
_FULL_RE = re.compile(r"(\d{1,2}):(\d{2})\s*([AP]M)" + _SEP + r"(\d{1,2}):(\d{2})\s*([AP]M)", re.IGNORECASE)
_SHARED_RE = re.compile(r"(\d{1,2}):(\d{2})" + _SEP + r"(\d{1,2}):(\d{2})\s*([AP]M)", re.IGNORECASE)
_BARE_RE = re.compile(r"(\d{1,2}):(\d{2})" + _SEP + r"(\d{1,2}):(\d{2})")


def _to_minutes(hour: str, minute: str, meridiem: str) -> int:
    h = int(hour)
    meridiem = meridiem.upper()
    if meridiem == "PM" and h != 12:
        h += 12
    if meridiem == "AM" and h == 12:
        h = 0
    return h * 60 + int(minute)


def parse_time_range(text: str) -> Optional[TimeRange]:
    """Parse "9:00 AM – 5:00 PM", "12:00 – 8:00 PM" or "12:00 – 8:00". Returns None if no shape matches."""
    m = _FULL_RE.search(text)
    if m:
        sh, sm, smer, eh, em, emer = m.groups()
        return TimeRange(_to_minutes(sh, sm, smer), _to_minutes(eh, em, emer))
    m = _SHARED_RE.search(text)
    if m:
        sh, sm, eh, em, mer = m.groups()
        return TimeRange(_to_minutes(sh, sm, mer), _to_minutes(eh, em, mer))
    m = _BARE_RE.search(text)
    if m:
        # No meridiem at all: assume afternoon for both ends.
        sh, sm, eh, em = m.groups()
        return TimeRange(_to_minutes(sh, sm, "PM"), _to_minutes(eh, em, "PM"))
    return None


def _city_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(CITY_TZ)
    if now.tzinfo is None:
        return now.replace(tzinfo=CITY_TZ)
    return now.astimezone(CITY_TZ)


def _split_entry(entry: str) -> tuple[str, Optional[str]]:
    day, sep, rest = entry.partition(": ")
    if not sep:
        return day.strip(), None
    rest = rest.strip()
    return day.strip(), rest or None


def _has_schedule(hours: Hours) -> bool:
    return isinstance(hours, list) and len(hours) > 0


def opening_status(hours: Hours, now: Optional[datetime] = None) -> OpeningStatus:
    """Open/closed/unknown for the given weekly schedule at `now` (default: current city time)."""
    if hours == NOT_AVAILABLE or not _has_schedule(hours):
        return OpeningStatus.UNKNOWN

    local = _city_now(now)
    today = DAYS_OF_WEEK[local.weekday()]
    entry = next((h for h in hours if isinstance(h, str) and h.startswith(today)), None)
    if entry is None:
        return OpeningStatus.CLOSED

    _, time_part = _split_entry(entry)
    if time_part is None:
        return OpeningStatus.UNKNOWN
    if time_part == CLOSED:
        return OpeningStatus.CLOSED
    if time_part == OPEN_24_HOURS:
        return OpeningStatus.OPEN

    window = parse_time_range(time_part)
    if window is None:
        return OpeningStatus.UNKNOWN

    minutes = local.hour * 60 + local.minute
    if window.end < window.start:
        # Past midnight, e.g. 6:00 PM – 2:00 AM.
        is_open = minutes >= window.start or minutes <= window.end
    else:
        is_open = window.start <= minutes <= window.end
    return OpeningStatus.OPEN if is_open else OpeningStatus.CLOSED


def is_open_now(hours: Hours, now: Optional[datetime] = None) -> bool:
    return opening_status(hours, now) is OpeningStatus.OPEN


def group_hours(hours: Hours) -> list[HoursGroup]:
    """Merge consecutive weekdays with identical hours text (missing days count as Closed)."""
    if not _has_schedule(hours):
        return []
    by_day: dict[str, str] = {}
    for entry in hours:
        if not isinstance(entry, str):
            continue
        day, time_part = _split_entry(entry)
        if day in DAYS_OF_WEEK and day not in by_day and time_part is not None:
            by_day[day] = time_part

    groups: list[HoursGroup] = []
    current_days: list[str] = []
    current_hours: Optional[str] = None
    for day in DAYS_OF_WEEK:
        day_hours = by_day.get(day, CLOSED)
        if day_hours == current_hours:
            current_days.append(day)
            continue
        if current_days:
            groups.append(HoursGroup(tuple(current_days), current_hours))
        current_days = [day]
        current_hours = day_hours
    groups.append(HoursGroup(tuple(current_days), current_hours))
    return groups
