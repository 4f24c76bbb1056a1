"""Parse CSV and JSON uploads for location/review import."""
import csv
import json
from io import StringIO
from typing import Any


def _normalize_key(k: str) -> str:
    """Strip and return key; empty after strip treated as missing."""
    return k.strip() if k else ""


def _normalize_row(row: dict[str, Any]) -> dict[str, Any]:
    """Strip keys and string values; drop empty keys."""
    out: dict[str, Any] = {}
    for k, v in row.items():
        key = _normalize_key(k)
        if not key:
            continue
        if isinstance(v, str):
            val = v.strip()
        else:
            val = v
        out[key] = val
    return out


def _split_opening_hours(value: str) -> list[str] | str:
    """CSV cell "Monday: 9:00 AM – 5:00 PM|Tuesday: Closed" -> list; "N/A" kept as-is."""
    if value.upper() == "N/A":
        return "N/A"
    return [part.strip() for part in value.split("|") if part.strip()]


def _split_aspect_ratings(value: str) -> dict[str, str]:
    """CSV cell "Cleanliness=4.5;Safety=3" -> {"Cleanliness": "4.5", "Safety": "3"}."""
    out: dict[str, str] = {}
    for part in value.split(";"):
        name, sep, rating = part.partition("=")
        if sep and name.strip():
            out[name.strip()] = rating.strip()
    return out


def _location_normalize(row: dict[str, Any]) -> dict[str, Any]:
    """Expand CSV-encoded list/object cells of a location row."""
    out = dict(row)
    hours = out.get("opening_hours")
    if isinstance(hours, str) and hours:
        out["opening_hours"] = _split_opening_hours(hours)
    aspects = out.get("aspect_ratings")
    if isinstance(aspects, str) and aspects:
        out["aspect_ratings"] = _split_aspect_ratings(aspects)
    return out


def parse_csv(content: bytes, location_format: bool = False) -> list[dict[str, Any]]:
    """Parse CSV bytes into list of dicts. Skip empty rows. If location_format, expand hours/aspect cells."""
    text = content.decode("utf-8-sig", errors="replace")
    reader = csv.DictReader(StringIO(text))
    rows: list[dict[str, Any]] = []
    for row in reader:
        normalized = _normalize_row(dict(row))
        if not normalized or not any(v not in ("", None) for v in normalized.values()):
            continue
        if location_format:
            normalized = _location_normalize(normalized)
        rows.append(normalized)
    return rows


def parse_json(content: bytes, location_format: bool = False) -> list[dict[str, Any]]:
    """Parse JSON bytes (expect list of objects) into list of dicts."""
    data = json.loads(content.decode("utf-8-sig"))
    if not isinstance(data, list):
        raise ValueError("JSON must be an array of objects")
    rows: list[dict[str, Any]] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Row {i + 1} is not an object")
        normalized = _normalize_row(item)
        if not normalized:
            continue
        if location_format:
            normalized = _location_normalize(normalized)
        rows.append(normalized)
    return rows


def parse_upload(content: bytes, filename: str | None, location_format: bool = False) -> list[dict[str, Any]]:
    """Detect format from filename or content and parse. Raises ValueError if invalid."""
    try:
        if filename and filename.lower().endswith(".json"):
            return parse_json(content, location_format=location_format)
        if filename and filename.lower().endswith(".csv"):
            return parse_csv(content, location_format=location_format)
        # Detect from content: JSON array starts with [
        stripped = content.lstrip()
        if stripped.startswith(b"["):
            return parse_json(content, location_format=location_format)
        return parse_csv(content, location_format=location_format)
    except (json.JSONDecodeError, UnicodeDecodeError, csv.Error) as e:
        raise ValueError(f"Could not parse upload: {e}") from e
