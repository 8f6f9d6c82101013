"""
Geodesic computations on the WGS-84 ellipsoid, in nautical miles.

The direct and inverse problems are solved with Vincenty's formulae; a
spherical haversine distance is provided for coarse proximity filtering.
All angles are in decimal degrees.
"""

import math
from typing import Optional, Tuple

# Ellipsoid, expressed in nautical miles
EQUATORIAL_RADIUS = 3443.918
POLAR_RADIUS = 3432.3716599595
FLATTENING = 1 / 298.257223563

# Mean earth radius used for haversine distances
MEAN_RADIUS = 3440.07

CONVERGENCE = 1e-9
MAX_ITERATIONS = 100


def _coefficients(cos_sq_alpha: float) -> Tuple[float, float]:
    a, b = EQUATORIAL_RADIUS, POLAR_RADIUS
    u_sq = cos_sq_alpha * (a * a - b * b) / (b * b)
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    return big_a, big_b


def _delta_sigma(big_b: float, sin_sigma: float, cos_sigma: float, cos_2sigma_m: float) -> float:
    return big_b * sin_sigma * (
        cos_2sigma_m + big_b / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
            - big_b / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma ** 2) * (-3 + 4 * cos_2sigma_m ** 2)
        )
    )


def vincenty_direct(latitude: float, longitude: float, bearing: float, distance: float) -> Tuple[float, float]:
    """
    Project a point along a true bearing for a given distance.

    Args:
        latitude: Origin latitude in degrees
        longitude: Origin longitude in degrees
        bearing: True bearing in degrees
        distance: Distance in nautical miles

    Returns:
        (latitude, longitude) of the destination in degrees
    """
    f = FLATTENING
    b = POLAR_RADIUS

    phi1 = math.radians(latitude)
    alpha1 = math.radians(bearing)
    sin_alpha1, cos_alpha1 = math.sin(alpha1), math.cos(alpha1)

    u1 = math.atan((1 - f) * math.tan(phi1))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)

    sigma1 = math.atan2(math.tan(u1), cos_alpha1)
    sin_alpha = cos_u1 * sin_alpha1
    cos_sq_alpha = 1 - sin_alpha ** 2
    big_a, big_b = _coefficients(cos_sq_alpha)

    sigma = distance / (b * big_a)
    cos_2sigma_m = math.cos(2 * sigma1 + sigma)
    for _ in range(MAX_ITERATIONS):
        cos_2sigma_m = math.cos(2 * sigma1 + sigma)
        previous = sigma
        sigma = distance / (b * big_a) + _delta_sigma(big_b, math.sin(sigma), math.cos(sigma), cos_2sigma_m)
        if abs(sigma - previous) <= CONVERGENCE:
            break

    sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
    cos_2sigma_m = math.cos(2 * sigma1 + sigma)

    phi2 = math.atan2(
        sin_u1 * cos_sigma + cos_u1 * sin_sigma * cos_alpha1,
        (1 - f) * math.sqrt(sin_alpha ** 2 + (sin_u1 * sin_sigma - cos_u1 * cos_sigma * cos_alpha1) ** 2),
    )
    lam = math.atan2(sin_sigma * sin_alpha1, cos_u1 * cos_sigma - sin_u1 * sin_sigma * cos_alpha1)
    c = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
    big_l = lam - (1 - c) * f * sin_alpha * (
        sigma + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2))
    )

    return math.degrees(phi2), longitude + math.degrees(big_l)


def vincenty_inverse(lat1: float, lon1: float, lat2: float, lon2: float) -> Tuple[Optional[float], float]:
    """
    Initial true bearing and distance from the first point to the second.

    Returns:
        (bearing, distance): bearing in degrees, or None when the points
        coincide or the bearing is undefined; distance in nautical miles.
    """
    if lat1 == lat2 and lon1 == lon2:
        return None, 0.0

    f = FLATTENING
    b = POLAR_RADIUS

    u1 = math.atan((1 - f) * math.tan(math.radians(lat1)))
    u2 = math.atan((1 - f) * math.tan(math.radians(lat2)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    big_l = math.radians(lon2 - lon1)
    lam = big_l
    sin_sigma = cos_sigma = sigma = cos_sq_alpha = cos_2sigma_m = 0.0

    for _ in range(MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.sqrt((cos_u2 * sin_lam) ** 2 + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2)
        if sin_sigma == 0:
            return None, 0.0
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha ** 2
        # Equatorial lines have cos_sq_alpha == 0
        cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha if cos_sq_alpha != 0 else 0.0
        c = f / 16 * cos_sq_alpha * (4 + f * (4 - 3 * cos_sq_alpha))
        previous = lam
        lam = big_l + (1 - c) * f * sin_alpha * (
            sigma + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2))
        )
        if abs(lam - previous) <= CONVERGENCE:
            break

    big_a, big_b = _coefficients(cos_sq_alpha)
    distance = b * big_a * (sigma - _delta_sigma(big_b, sin_sigma, cos_sigma, cos_2sigma_m))
    alpha1 = math.atan2(cos_u2 * math.sin(lam), cos_u1 * sin_u2 - sin_u1 * cos_u2 * math.cos(lam))

    if math.isnan(distance):
        return None, 0.0
    if math.isnan(alpha1):
        return None, distance
    return math.degrees(alpha1), distance


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in nautical miles on a sphere of radius ``MEAN_RADIUS``."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (math.sin(dlat / 2) ** 2
         + math.sin(dlon / 2) ** 2 * math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)))
    a = min(1.0, max(0.0, a))
    return MEAN_RADIUS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
