"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "8001"))

TESTING = os.environ.get("TESTING") == "true"

# When TESTING=true, use test DB URL so tests never touch production.
if TESTING:
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./discovery.db",
    )

RUN_MIGRATIONS_ON_STARTUP = os.environ.get(
    "RUN_MIGRATIONS_ON_STARTUP", "false" if TESTING else "true"
).lower() == "true"

CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]

# Business hours are evaluated in the city's zone, not the caller's.
CITY_TIMEZONE = os.environ.get("CITY_TIMEZONE", "America/Chicago")

CACHE_TTL_SECONDS = float(os.environ.get("CACHE_TTL_SECONDS", "300"))

# Identity provider JWTs (HS256 shared secret, audience "authenticated").
AUTH_JWT_SECRET = os.environ.get("AUTH_JWT_SECRET", "")
AUTH_JWT_ALGORITHM = os.environ.get("AUTH_JWT_ALGORITHM", "HS256")
AUTH_JWT_AUDIENCE = os.environ.get("AUTH_JWT_AUDIENCE", "authenticated")

# Catalogue import is disabled unless a key is configured.
IMPORT_API_KEY = os.environ.get("IMPORT_API_KEY", "")

DB_RETRY_ATTEMPTS = int(os.environ.get("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_DELAY_MS = int(os.environ.get("DB_RETRY_DELAY_MS", "100"))

# Search
SEARCH_MIN_REVIEWS = 4
ASPECT_MATCH_THRESHOLD = 5
SEARCH_DEFAULT_RADIUS_KM = 10.0
SEARCH_DEFAULT_PER_PAGE = 20
SEARCH_MAX_PER_PAGE = 100
