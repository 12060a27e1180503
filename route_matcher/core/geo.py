"""
Great-circle distance between planned stops.

Mathematical Definition:
    a = sin^2((lat2-lat1)/2) + cos(lat1)*cos(lat2)*sin^2((lng2-lng1)/2)
    c = 2 * arcsin(sqrt(a))
    d = R * c
"""

import math

import numpy as np

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_distance(
    lat1: float, lng1: float,
    lat2: float, lng2: float
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Inputs are decimal degrees and are not range-checked; out-of-range
    values give a defined but meaningless distance.

    Example:
        >>> haversine_distance(38.72, -9.14, 38.72, -9.14)
        0.0
    """
    lat1_rad = math.radians(lat1)
    lng1_rad = math.radians(lng1)
    lat2_rad = math.radians(lat2)
    lng2_rad = math.radians(lng2)

    dlat = lat2_rad - lat1_rad
    dlng = lng2_rad - lng1_rad

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    # Clamp for floating point drift near antipodes
    a = min(1.0, max(0.0, a))
    c = 2 * math.asin(math.sqrt(a))

    return EARTH_RADIUS_KM * c


def pairwise_haversine(lats_a: np.ndarray, lngs_a: np.ndarray,
                       lats_b: np.ndarray, lngs_b: np.ndarray) -> np.ndarray:
    """
    Vectorized haversine distance between every point of A and every point of B.

    Args:
        lats_a: Latitudes of the first point set in degrees
        lngs_a: Longitudes of the first point set in degrees
        lats_b: Latitudes of the second point set in degrees
        lngs_b: Longitudes of the second point set in degrees

    Returns:
        Array of shape (len(A), len(B)) with distances in kilometers
    """
    lat1 = np.radians(np.asarray(lats_a, dtype=np.float64))[:, np.newaxis]
    lng1 = np.radians(np.asarray(lngs_a, dtype=np.float64))[:, np.newaxis]
    lat2 = np.radians(np.asarray(lats_b, dtype=np.float64))[np.newaxis, :]
    lng2 = np.radians(np.asarray(lngs_b, dtype=np.float64))[np.newaxis, :]

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlng / 2) ** 2
    c = 2 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))

    return EARTH_RADIUS_KM * c
