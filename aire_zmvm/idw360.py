"""
Inverse Distance Weighting for Directional Data
================================================
IDW interpolation for values measured in compass degrees (e.g. wind
direction). Values are averaged as unit vectors, so the mean of 355° and
5° is 0°, not 180°.

Methodology:
1. Distance matrix between every grid point and every station
2. Weights = 1 / distance^idp
3. A grid point sitting exactly on one or more stations takes only the
   values of those stations (equal weight), all other stations get 0
4. Weighted mean of sin/cos components, recombined with atan2
"""

import logging
from numbers import Real
from typing import Callable, Optional

import numpy as np
import pandas as pd

from .exceptions import InvalidArgument
from .geo_utils import as_points, distance_matrix

logger = logging.getLogger(__name__)

DEFAULT_IDP = 2


def direction_to_components(direction_deg):
    """Unit-circle (x, y) components of a direction given in degrees."""
    theta = np.asarray(direction_deg, dtype=float) * (np.pi / 180)
    return np.cos(theta), np.sin(theta)


def _idw_weights(distances: np.ndarray, idp: float) -> np.ndarray:
    """
    Inverse distance weights with the coincident-point rule.

    Rows containing an infinite weight (zero distance) keep only those
    entries, set to 1; every finite weight in such a row becomes 0.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        w = 1 / (distances ** idp)

    for i in range(w.shape[0]):
        inf_mask = np.isinf(w[i])
        if inf_mask.any():
            w[i, ~inf_mask] = 0
            w[i, inf_mask] = 1
            logger.debug("Grid point %d coincides with %d station(s)", i, int(inf_mask.sum()))
    return w


def interpolate(values, sources, targets, power: float = DEFAULT_IDP,
                longlat: bool = False, distance: Optional[Callable] = None) -> np.ndarray:
    """
    Interpolate directional values at the target points.

    Parameters:
        values: degrees measured at each source point
        sources: N source locations (pairs, array or DataFrame; x first)
        targets: M locations to predict
        power: inverse distance weighting power
        longlat: coordinates are lon/lat degrees, use great-circle distance
        distance: optional ``distance(a, b)`` callable taking two Points

    Returns:
        Array of M directions in [0, 360). A target whose weights sum to
        zero gets NaN.
    """
    if isinstance(power, bool) or not isinstance(power, (Real, np.number)):
        raise InvalidArgument(f"power must be numeric, got {power!r}")

    try:
        values = np.asarray(values, dtype=float).ravel()
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"values are not numeric: {e}") from e

    src = as_points(sources)
    tgt = as_points(targets)
    if len(values) != len(src):
        raise InvalidArgument(
            f"Got {len(values)} values for {len(src)} source points"
        )

    w = _idw_weights(distance_matrix(src, tgt, longlat=longlat, distance=distance), power)
    x, y = direction_to_components(values)

    with np.errstate(divide='ignore', invalid='ignore'):
        w_sum = w.sum(axis=1)
        uy = (w @ y) / w_sum
        ux = (w @ x) / w_sum

    res = np.arctan2(uy, ux) * (180 / np.pi)
    res = np.where(res < 0, res + 360, res)
    # -1e-15 + 360 rounds to exactly 360.0
    res[res >= 360] = 0.0

    logger.debug("Interpolated %d grid points from %d stations (idp=%s)", len(tgt), len(src), power)
    return res


def idw360(values, coords, grid, idp: float = DEFAULT_IDP,
           longlat: bool = False, distance: Optional[Callable] = None) -> pd.DataFrame:
    """
    Data frame flavour of :func:`interpolate`.

    Returns a DataFrame with a single ``pred`` column, one row per grid
    point, indexed like ``grid`` when ``grid`` is a DataFrame.
    """
    pred = interpolate(values, coords, grid, power=idp, longlat=longlat, distance=distance)
    index = grid.index if isinstance(grid, pd.DataFrame) else None
    return pd.DataFrame({'pred': pred}, index=index)


if __name__ == '__main__':
    # Wind direction at two sensors, predicted on a 2x2 grid
    values = [55, 355]
    locations = pd.DataFrame({'lon': [1, 2], 'lat': [1, 2]})
    grid = pd.DataFrame({'lon': [1, 2, 1, 2], 'lat': [1, 2, 2, 1]})

    df = pd.concat([idw360(values, locations, grid), grid], axis=1)
    print(df)
