"""
Mexico City Air Quality Utilities
=================================

Modules:
- idw360: Inverse distance weighting for directional data (wind direction)
- imeca: Pollutant concentration to IMECA index conversion
- geo_utils: Points, distances, angular differences
"""
from .exceptions import InvalidArgument
from .geo_utils import Point, haversine, distance_matrix, angular_diff
from .idw360 import interpolate, idw360
from .imeca import Pollutant, to_imeca, convert_imeca

__all__ = [
    'InvalidArgument',
    'Point', 'haversine', 'distance_matrix', 'angular_diff',
    'interpolate', 'idw360',
    'Pollutant', 'to_imeca', 'convert_imeca',
]
