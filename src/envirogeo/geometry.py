"""Area selection and geographic validation.

An analysis runs for one area: a shape drawn on the map, a coordinate
pair, or a bounding box. Every selection is reduced to a GeoJSON
geometry plus a centre point; the centre is what the real-data
function is queried with and what the region check applies to.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from envirogeo.exceptions import InputError

if TYPE_CHECKING:
    from envirogeo.config import RegionBounds

logger = logging.getLogger(__name__)


def geometry_center(geometry: dict[str, Any]) -> tuple[float, float] | None:
    """Return the ``(lat, lon)`` centre of a Point or Polygon geometry.

    A Point is its own centre. A Polygon's centre is the mean of the
    vertices of its outer ring (the closing vertex included), which is
    what the map widget uses to place its marker.

    Args:
        geometry: GeoJSON geometry mapping.

    Returns:
        ``(lat, lon)``, or ``None`` for unsupported or malformed shapes.

    Example:
        >>> geometry_center({"type": "Point", "coordinates": [74.35, 31.52]})
        (31.52, 74.35)
    """
    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")
    try:
        if geom_type == "Point":
            lon, lat = float(coords[0]), float(coords[1])  # type: ignore[index]
            return (lat, lon)
        if geom_type == "Polygon" and coords and coords[0]:
            ring = coords[0]
            lat = sum(float(p[1]) for p in ring) / len(ring)
            lon = sum(float(p[0]) for p in ring) / len(ring)
            return (lat, lon)
    except (TypeError, ValueError, IndexError):
        logger.debug("Malformed %s geometry: %r", geom_type, coords)
    return None


@dataclass(frozen=True)
class AreaSelection:
    """A selected analysis area.

    Attributes:
        geometry: GeoJSON geometry of the area.
        geometry_type: Selection tag (``"point"``, ``"rectangle"``,
            ``"polygon"``, or the drawing tool's shape name).
        lat: Latitude of the area centre.
        lon: Longitude of the area centre.

    Example:
        >>> area = area_from_coordinates("31.52", "74.35")
        >>> area.geometry
        {'type': 'Point', 'coordinates': [74.35, 31.52]}
    """

    geometry: dict[str, Any]
    geometry_type: str
    lat: float
    lon: float


def _no_area_error() -> InputError:
    return InputError(
        what="No area selected",
        cause="No shape was drawn and no valid coordinates were entered",
        fix="Draw a shape on the map or enter coordinates",
    )


def _parse_number(value: str | float, label: str) -> float:
    """Parse a coordinate field, rejecting non-numeric and non-finite input."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InputError(
            what=f"Invalid {label}: {value!r}",
            cause=f"{label.capitalize()} must be a number",
            fix="Enter coordinates in decimal degrees, e.g. 30.3753",
        ) from None
    if not math.isfinite(number):
        raise InputError(
            what=f"Invalid {label}: {value!r}",
            cause=f"{label.capitalize()} must be a finite number",
            fix="Enter coordinates in decimal degrees, e.g. 30.3753",
        )
    return number


def area_from_geojson(
    geometry: dict[str, Any] | None,
    shape_type: str | None = None,
) -> AreaSelection:
    """Build a selection from a geometry drawn on the map.

    Args:
        geometry: GeoJSON Point or Polygon geometry.
        shape_type: Drawing tool's name for the shape (``"circle"``,
            ``"rectangle"``, ...). Defaults to the lower-cased GeoJSON type.

    Raises:
        InputError: If the geometry is missing or has no usable centre.
    """
    if not geometry:
        raise _no_area_error()
    center = geometry_center(geometry)
    if center is None:
        raise InputError(
            what="Unsupported area geometry",
            cause=f"Cannot derive a centre from a {geometry.get('type')!r} geometry",
            fix="Draw a point, rectangle or polygon",
        )
    lat, lon = center
    tag = shape_type or str(geometry.get("type", "")).lower()
    return AreaSelection(geometry=geometry, geometry_type=tag, lat=lat, lon=lon)


def area_from_coordinates(lat: str | float, lon: str | float) -> AreaSelection:
    """Build a point selection from typed-in coordinates.

    Raises:
        InputError: If either field is empty or not a number.
    """
    if lat == "" or lon == "" or lat is None or lon is None:
        raise _no_area_error()
    lat_f = _parse_number(lat, "latitude")
    lon_f = _parse_number(lon, "longitude")
    return AreaSelection(
        geometry={"type": "Point", "coordinates": [lon_f, lat_f]},
        geometry_type="point",
        lat=lat_f,
        lon=lon_f,
    )


def area_from_bbox(
    north: str | float,
    south: str | float,
    east: str | float,
    west: str | float,
) -> AreaSelection:
    """Build a rectangle selection from bounding box edges.

    The geometry is a closed Polygon ring starting at the north-west
    corner; the centre is the box midpoint.

    Raises:
        InputError: If any edge is empty or not a number.
    """
    if any(v == "" or v is None for v in (north, south, east, west)):
        raise _no_area_error()
    n = _parse_number(north, "north edge")
    s = _parse_number(south, "south edge")
    e = _parse_number(east, "east edge")
    w = _parse_number(west, "west edge")
    ring = [[w, n], [e, n], [e, s], [w, s], [w, n]]
    return AreaSelection(
        geometry={"type": "Polygon", "coordinates": [ring]},
        geometry_type="rectangle",
        lat=(n + s) / 2,
        lon=(e + w) / 2,
    )


def check_within_region(area: AreaSelection, region: RegionBounds) -> None:
    """Reject areas whose centre lies outside the supported region.

    Raises:
        InputError: If the centre is outside *region*.
    """
    if region.contains(area.lat, area.lon):
        return
    raise InputError(
        what=f"Location outside {region.name}",
        cause=(
            f"Area centre ({area.lat:.4f}, {area.lon:.4f}) is outside "
            f"{region.name} ({region.describe()})"
        ),
        fix=f"Select an area within {region.name}",
    )
