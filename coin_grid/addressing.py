"""Grid addressing helpers.

Pure conversions between continuous ``(lat, lng)`` coordinates and integer
:class:`CellId` addresses, plus the two distance measures the game uses.

Cells are addressed by flooring toward negative infinity, so the cell
containing ``-0.00005`` is ``-1`` and not ``0``. A coordinate lying exactly on
a cell edge belongs to the cell whose lower edge it is; the quotient is
rounded to ``EDGE_DECIMALS`` places first so that values such as ``3 * 1e-4``
(which is ``0.00030000000000000003`` in binary floating point) and ``0.0003``
land in the same cell.
"""

import math

from coin_grid.components import CellId
from coin_grid.errors import AddressingError
from coin_grid.types import LatLng

EARTH_RADIUS_METERS = 6_371_000.0
EDGE_DECIMALS = 9


def _floor_index(value: float, cell_degrees: float) -> int:
    if not math.isfinite(value):
        raise AddressingError(f"Coordinate is not finite: {value!r}")
    quotient = value / cell_degrees
    if not math.isfinite(quotient):
        raise AddressingError(f"Coordinate {value!r} overflows the grid")
    return math.floor(round(quotient, EDGE_DECIMALS))


def to_cell(lat: float, lng: float, cell_degrees: float) -> CellId:
    """Return the cell containing ``(lat, lng)``.

    Raises:
        AddressingError: If either coordinate is NaN, infinite, or too large
            to index a cell.
    """
    return CellId(_floor_index(lat, cell_degrees), _floor_index(lng, cell_degrees))


def to_center(cell: CellId, cell_degrees: float) -> LatLng:
    """Return the ``(lat, lng)`` midpoint of ``cell``."""
    return (
        cell.i * cell_degrees + cell_degrees / 2,
        cell.j * cell_degrees + cell_degrees / 2,
    )


def distance_meters(a: LatLng, b: LatLng) -> float:
    """Great-circle (haversine) distance between two coordinates in meters."""
    lat1, lng1 = math.radians(a[0]), math.radians(a[1])
    lat2, lng2 = math.radians(b[0]), math.radians(b[1])
    sin_dlat = math.sin((lat2 - lat1) / 2)
    sin_dlng = math.sin((lng2 - lng1) / 2)
    h = sin_dlat * sin_dlat + math.cos(lat1) * math.cos(lat2) * sin_dlng * sin_dlng
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def chebyshev(a: CellId, b: CellId) -> int:
    """Number of king moves between two cells."""
    return max(abs(a.i - b.i), abs(a.j - b.j))
