# wloc/utils/geo.py

"""
Geospatial utility functions.
"""

import math
from typing import Tuple

def to_unit_vector(lat: float, lon: float) -> Tuple[float, float, float]:
    """
    Project a point onto the unit sphere.

    Parameters
    ----------
    lat
        Latitude in decimal degrees.
    lon
        Longitude in decimal degrees.

    Returns
    -------
    tuple[float, float, float]
        Cartesian (x, y, z) on the unit sphere.
    """
    phi, lam = math.radians(lat), math.radians(lon)
    cos_phi = math.cos(phi)
    return cos_phi * math.cos(lam), cos_phi * math.sin(lam), math.sin(phi)

def from_vector(x: float, y: float, z: float) -> Tuple[float, float]:
    """
    Convert a (not necessarily unit) Cartesian vector back to
    (latitude, longitude) in decimal degrees.
    """
    hyp = math.hypot(x, y)
    return math.degrees(math.atan2(z, hyp)), math.degrees(math.atan2(y, x))

def map_url(lat: float, lon: float) -> str:
    return f"https://www.google.com/maps/place/{lat},{lon}"
