"""
Geographic Utility Functions
============================
Point coercion, planar and great-circle distances, distance matrices and
angular differences between compass bearings.
"""

import logging
from typing import Callable, NamedTuple, Optional

import numpy as np
import pandas as pd

from .exceptions import InvalidArgument

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371  # Earth's mean radius in km


class Point(NamedTuple):
    """A measurement or query location. x = longitude/easting, y = latitude/northing."""
    x: float
    y: float


def as_points(coords) -> np.ndarray:
    """
    Coerce coordinates to an ``N x 2`` float array.

    Accepts a sequence of (x, y) pairs, a numpy array or a DataFrame.
    Only the first two columns are used: first x/longitude, second
    y/latitude.
    """
    if isinstance(coords, pd.DataFrame):
        if coords.shape[1] < 2:
            raise InvalidArgument(f"Expected at least 2 coordinate columns, got {coords.shape[1]}")
        coords = coords.iloc[:, :2]

    try:
        arr = np.asarray(coords, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Coordinates are not numeric: {e}") from e

    if arr.size == 0:
        return arr.reshape(0, 2)
    if arr.ndim == 1 and arr.shape[0] == 2:
        arr = arr.reshape(1, 2)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise InvalidArgument(f"Coordinates must have shape (n, 2), got {arr.shape}")
    return arr[:, :2]


def haversine(lat1, lon1, lat2, lon2):
    """
    Calculate great-circle distance between two points.
    Works on scalars and on broadcastable numpy arrays.

    Parameters:
        lat1, lon1: First point (degrees)
        lat2, lon2: Second point (degrees)

    Returns:
        Distance in kilometers
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = np.radians(np.subtract(lat2, lat1))
    dlambda = np.radians(np.subtract(lon2, lon1))

    a = (np.sin(dphi / 2) ** 2 +
         np.cos(phi1) * np.cos(phi2) *
         np.sin(dlambda / 2) ** 2)
    # float error can push `a` just above 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)

    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_matrix(sources, targets, longlat: bool = False,
                    distance: Optional[Callable] = None) -> np.ndarray:
    """
    Distances between every target (rows) and every source (columns).

    Parameters:
        sources: N source locations
        targets: M query locations
        longlat: treat coordinates as lon/lat degrees and use haversine (km)
        distance: optional ``distance(a, b) -> float`` taking two Points;
            overrides ``longlat``

    Returns:
        M x N array
    """
    src = as_points(sources)
    tgt = as_points(targets)

    if distance is not None:
        d = np.array(
            [[distance(Point(*t), Point(*s)) for s in src] for t in tgt],
            dtype=float,
        ).reshape(len(tgt), len(src))
    elif longlat:
        d = haversine(tgt[:, None, 1], tgt[:, None, 0], src[None, :, 1], src[None, :, 0])
    else:
        diff = tgt[:, None, :] - src[None, :, :]
        d = np.hypot(diff[..., 0], diff[..., 1])

    logger.debug("Distance matrix %s (longlat=%s, custom=%s)", d.shape, longlat, distance is not None)
    return d


def angular_diff(angle1: float, angle2: float) -> float:
    """
    Calculate smallest angle between two bearings.
    Handles wrap-around (e.g., 350° to 10° = 20°, not 340°).

    Returns:
        Difference in degrees (0-180)
    """
    diff = abs(angle1 - angle2) % 360
    if diff > 180:
        diff = 360 - diff
    return diff


if __name__ == '__main__':
    # Merced to Pedregal, Mexico City
    dist = haversine(19.4246, -99.1196, 19.3252, -99.2041)
    print(f"Distance Merced to Pedregal: {dist:.1f} km")  # ~14 km
    print(f"Angular diff 355° vs 5°: {angular_diff(355, 5):.0f}°")  # 10
