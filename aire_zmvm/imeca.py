"""
IMECA Conversion
================
Converts raw pollutant concentrations to the Mexico City air quality index
(Índice Metropolitano de la Calidad del Aire).

SOURCES:
========
1. NADF-009-AIRE-2006. Gaceta Oficial del Distrito Federal.
   http://www.aire.df.gob.mx/descargas/monitoreo/normatividad/NADF-009-AIRE-2006.pdf
   - O3, NO2, SO2, CO, PM2.5 and the 2006 PM10 curve
2. 2014 modification of NADF-009-AIRE-2006 (PM10 breakpoints)
   - Default PM10 curve

Expected input units:
- O3, NO2, SO2: ppb (divided by 1000 to ppm before applying the curve)
- CO: ppm
- PM10, PM2.5: µg/m³
"""

import logging
from enum import Enum
from typing import List, Optional

import numpy as np
import pandas as pd

from .exceptions import InvalidArgument

logger = logging.getLogger(__name__)


class Pollutant(Enum):
    O3 = 'O3'
    PM10 = 'PM10'
    PM2 = 'PM2'  # PM2.5
    NO2 = 'NO2'
    SO2 = 'SO2'
    CO = 'CO'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().upper().replace('.', '')
            if key == 'PM25':
                key = 'PM2'
            for member in cls:
                if member.value == key:
                    return member
        return None


# =============================================================================
# BREAKPOINT TABLES
# =============================================================================
# Each segment is (upper_bound, num, den, shift, offset):
#   index = (value - shift) * num / den + offset
# evaluated in that order, so half-way values like 5.4 * 5 / 6 = 4.5 stay
# exact before rounding.
# The first segment covers [0, upper], the following ones (previous upper,
# upper], and the last one (upper_bound None) is open-ended.
# Coefficients are copied verbatim from the norms; the gaps between
# segments (e.g. O3 0.070 -> 0.071) are part of the published tables.

IMECA_SEGMENTS = {
    # ppm, NADF-009-AIRE-2006
    'O3': [
        (0.070, 714.29, 1, 0, 0),
        (0.095, 2041.67, 1, 0.071, 51),
        (0.154, 844.83, 1, 0.096, 101),
        (0.204, 1000, 1, 0.155, 151),
        (None, 982.5, 1, 0, 0),
    ],
    # ppm, NADF-009-AIRE-2006
    'NO2': [
        (0.105, 50, 0.105, 0, 0),
        (0.210, 49, 0.104, 0, 1.058),
        (0.315, 49, 0.104, 0, 1.587),
        (0.420, 49, 0.104, 0, 2.115),
        (None, 201, 0.421, 0, 0),
    ],
    # ppm, NADF-009-AIRE-2006 (single linear formula)
    'SO2': [
        (None, 100, 0.13, 0, 0),
    ],
    # ppm, NADF-009-AIRE-2006
    'CO': [
        (5.50, 50, 5.50, 0, 0),
        (11.00, 49, 5.49, 0, 1.82),
        (16.50, 49, 5.49, 0, 2.73),
        (22.00, 49, 5.49, 0, 3.64),
        (None, 201, 22.01, 0, 0),
    ],
    # µg/m³, 2014 update
    'PM10_2014': [
        (40, 1.25, 1, 0, 0),
        (75, 1.44, 1, 41, 51),
        (214, 0.355, 1, 76, 101),
        (354, 0.353, 1, 215, 151),
        (None, 0.567, 1, 0, 0),
    ],
    # µg/m³, NADF-009-AIRE-2006
    'PM10_2006': [
        (120, 5, 6, 0, 0),
        (320, 0.5, 1, 0, 40),
        (None, 5, 8, 0, 0),
    ],
    # µg/m³, NADF-009-AIRE-2006
    'PM25_2006': [
        (15.4, 50, 15.4, 0, 0),
        (40.4, 49, 24.9, 0, 20.5),
        (65.4, 49, 24.9, 0, 21.3),
        (150.4, 49, 84.9, 0, 113.2),
        (None, 201, 150.5, 0, 0),
    ],
}

# Gases arrive in ppb, the tables are in ppm
GAS_SCALE = 1000


# =============================================================================
# PIECEWISE CURVES
# =============================================================================

def _piecewise(value: float, segments) -> Optional[int]:
    """Evaluate a breakpoint table and round. Negative input has no segment."""
    if value < 0:
        return None
    for upper, num, den, shift, offset in segments:
        if upper is None or value <= upper:
            return round((value - shift) * num / den + offset)
    return None


def o3_to_imeca(value: float) -> Optional[int]:
    """O3 in ppb."""
    return _piecewise(value / GAS_SCALE, IMECA_SEGMENTS['O3'])


def no2_to_imeca(value: float) -> Optional[int]:
    """NO2 in ppb."""
    return _piecewise(value / GAS_SCALE, IMECA_SEGMENTS['NO2'])


def so2_to_imeca(value: float) -> Optional[int]:
    """SO2 in ppb."""
    return _piecewise(value / GAS_SCALE, IMECA_SEGMENTS['SO2'])


def co_to_imeca(value: float) -> Optional[int]:
    """CO in ppm. Negative readings are reported as missing."""
    return _piecewise(value, IMECA_SEGMENTS['CO'])


def pm10_to_imeca_2014(value: float) -> Optional[int]:
    return _piecewise(value, IMECA_SEGMENTS['PM10_2014'])


def pm10_to_imeca_2006(value: float) -> Optional[int]:
    return _piecewise(value, IMECA_SEGMENTS['PM10_2006'])


def pm25_to_imeca_2006(value: float) -> Optional[int]:
    return _piecewise(value, IMECA_SEGMENTS['PM25_2006'])


_CONVERTERS = {
    Pollutant.O3: o3_to_imeca,
    Pollutant.PM10: pm10_to_imeca_2014,
    Pollutant.PM2: pm25_to_imeca_2006,
    Pollutant.NO2: no2_to_imeca,
    Pollutant.SO2: so2_to_imeca,
    Pollutant.CO: co_to_imeca,
}

_PM10_NORMS = {
    2014: pm10_to_imeca_2014,
    2006: pm10_to_imeca_2006,
}


# =============================================================================
# MAIN CONVERSION
# =============================================================================

def _is_missing(value) -> bool:
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def to_imeca(pollutant, value, strict: bool = False, pm10_norm: int = 2014) -> Optional[int]:
    """
    Convert one concentration to IMECA.

    Parameters:
        pollutant: ``Pollutant`` member or its code ('O3', 'PM10', 'PM2',
            'NO2', 'SO2', 'CO'; 'PM2.5' and 'PM25' also accepted)
        value: raw concentration, missing values give None
        strict: raise InvalidArgument for an unknown pollutant instead of
            returning None
        pm10_norm: 2014 (default) or 2006 PM10 breakpoints

    Returns:
        Integer index, or None when no conversion is available
    """
    try:
        kind = Pollutant(pollutant)
    except ValueError:
        if strict:
            raise InvalidArgument(f"Unknown pollutant {pollutant!r}") from None
        kind = None

    if _is_missing(value):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"Concentration must be numeric, got {value!r}") from e
    if not np.isfinite(value):
        return None

    if kind is None:
        logger.warning("No IMECA conversion for pollutant %r", pollutant)
        return None
    if kind is Pollutant.PM10:
        if pm10_norm not in _PM10_NORMS:
            raise InvalidArgument(f"Unknown PM10 norm {pm10_norm!r}, expected 2006 or 2014")
        return _PM10_NORMS[pm10_norm](value)
    return _CONVERTERS[kind](value)


def _is_single(x) -> bool:
    if isinstance(x, np.ndarray):
        return x.ndim == 0
    return _is_missing(x) or isinstance(x, (str, Pollutant)) or np.isscalar(x)


def convert_imeca(pollutants, values, strict: bool = False, pm10_norm: int = 2014) -> List[Optional[int]]:
    """
    Element-wise :func:`to_imeca`, preserving order and length.

    A single pollutant code is applied to every value, and a single value
    to every pollutant. Otherwise both sequences must have equal length.
    """
    single_pollutant = _is_single(pollutants)
    single_value = _is_single(values)

    if single_pollutant and single_value:
        return [to_imeca(pollutants, values, strict=strict, pm10_norm=pm10_norm)]

    pollutant_list = None if single_pollutant else list(pollutants)
    value_list = None if single_value else list(values)

    if pollutant_list is None:
        pollutant_list = [pollutants] * len(value_list)
    if value_list is None:
        value_list = [values] * len(pollutant_list)

    if len(pollutant_list) != len(value_list):
        raise InvalidArgument(
            f"Got {len(pollutant_list)} pollutants for {len(value_list)} values"
        )

    return [
        to_imeca(p, v, strict=strict, pm10_norm=pm10_norm)
        for p, v in zip(pollutant_list, value_list)
    ]


if __name__ == '__main__':
    for code, value in [('O3', 70), ('PM10', 75), ('PM2', 40.4), ('NO2', 210), ('SO2', 130), ('CO', -1)]:
        print(f"{code:5s} {value:>7}: {to_imeca(code, value)}")
