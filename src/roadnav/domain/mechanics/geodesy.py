import math

import numpy as np

EARTH_RADIUS_MI = 3963.0

# keeps x finite on the meridians 90 degrees from the center
_B_MAX = 1.0 - 1e-15


def haversine_mi(
    lon1: float, lat1: float, lon2: float, lat2: float, radius: float = EARTH_RADIUS_MI
) -> float:
    """Great-circle distance in miles."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return radius * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def initial_bearing(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Initial great-circle bearing in degrees, in (-180, 180]; 0 is north, 90 east."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlambda = math.radians(lon2 - lon1)
    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)
    deg = math.degrees(math.atan2(y, x))
    # atan2(-0.0, x < 0) gives -180
    return 180.0 if deg == -180.0 else deg


def bearing_delta(prev: float, nxt: float) -> float:
    """Signed change of heading in (-180, 180]; negative turns left."""
    d = (nxt - prev) % 360.0
    return d - 360.0 if d > 180.0 else d


class TransverseMercator:
    """
    Spherical Transverse Mercator around (lon0, lat0), in earth radii.

    Distortion grows with distance from the central meridian; at city scale it
    is negligible, which is what lets the k-d tree prune with plain Euclidean
    distances. Points 90 degrees of longitude away from the center sit on the
    projection singularity and are clamped to a large finite x.
    """

    def __init__(self, lon0: float, lat0: float, k0: float = 1.0):
        self.lon0, self.lat0, self.k0 = float(lon0), float(lat0), float(k0)

    def __repr__(self) -> str:
        return f"TransverseMercator(lon0={self.lon0}, lat0={self.lat0}, k0={self.k0})"

    def project_many(self, lons, lats) -> tuple[np.ndarray, np.ndarray]:
        lons = np.asarray(lons, dtype=np.float64)
        lats = np.asarray(lats, dtype=np.float64)
        dlon = np.radians(lons - self.lon0)
        phi = np.radians(lats)
        b = np.clip(np.sin(dlon) * np.cos(phi), -_B_MAX, _B_MAX)
        with np.errstate(divide="ignore"):
            x = (self.k0 / 2) * np.log((1 + b) / (1 - b))
            y = self.k0 * (np.arctan(np.tan(phi) / np.cos(dlon)) - math.radians(self.lat0))
        return x, y

    def project(self, lon: float, lat: float) -> tuple[float, float]:
        x, y = self.project_many(lon, lat)
        return float(x), float(y)
