# personalization/distance.py
import math

EARTH_RADIUS_KM = 6371.0


def haversine(lat1, lon1, lat2, lon2):
    """Great-circle distance in km between two coordinates."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class DistanceCalculator:
    """Spherical (WGS84 approximation) distances between locations."""

    def distance_km(self, origin, target):
        """Both arguments are (lat, lng) pairs or objects with latitude/longitude."""
        lat1, lng1 = _coords(origin)
        lat2, lng2 = _coords(target)
        return haversine(lat1, lng1, lat2, lng2)

    def is_within_radius(self, center, target, radius_km):
        # inclusive boundary
        return self.distance_km(center, target) <= radius_km


def format_distance(distance_km):
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"


def _coords(point):
    if isinstance(point, (tuple, list)):
        return float(point[0]), float(point[1])
    return float(point.latitude), float(point.longitude)
