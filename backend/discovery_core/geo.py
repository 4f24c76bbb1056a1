"""Great-circle distance in Python and as a portable SQL expression."""
import math

from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement
from sqlalchemy.types import Float

EARTH_RADIUS_KM = 6371.0088


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two (lat, lon) points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Clamp against float drift for antipodal / identical points.
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


class great_circle_km(FunctionElement):
    """SQL expression: great_circle_km(lat1, lon1, lat2, lon2) in km."""

    type = Float()
    name = "great_circle_km"
    inherit_cache = True


@compiles(great_circle_km)
def _compile_great_circle_km(element, compiler, **kw):
    lat1, lon1, lat2, lon2 = (compiler.process(arg, **kw) for arg in element.clauses.clauses)
    return (
        f"(2 * {EARTH_RADIUS_KM} * asin(sqrt(least(1.0, greatest(0.0, "
        f"power(sin(radians(({lat2}) - ({lat1})) / 2), 2) "
        f"+ cos(radians({lat1})) * cos(radians({lat2})) "
        f"* power(sin(radians(({lon2}) - ({lon1})) / 2), 2))))))"
    )


@compiles(great_circle_km, "sqlite")
def _compile_great_circle_km_sqlite(element, compiler, **kw):
    # Registered per connection in db.register_sqlite_functions.
    return "haversine_km(%s)" % compiler.process(element.clauses, **kw)
