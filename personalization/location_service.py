# personalization/location_service.py
import logging
import threading
import time

import numpy as np
import requests

from personalization.distance import EARTH_RADIUS_KM, DistanceCalculator
from personalization.errors import LocationUnavailable
from personalization.models import Location

logger = logging.getLogger(__name__)

GEOLOCATION_URL = 'http://ip-api.com/json/'
LOCATION_TIMEOUT = 10        # seconds
LOCATION_MAX_AGE = 300       # one-shot fix
TRACKING_MAX_AGE = 60        # continuous tracking
TRACKING_INTERVAL = 30

KNOWN_CITIES = [
    {'lat': 35.6762, 'lng': 139.6503, 'city': 'Tokyo', 'country': 'Japan', 'timezone': 'Asia/Tokyo'},
    {'lat': 40.7128, 'lng': -74.0060, 'city': 'New York', 'country': 'USA', 'timezone': 'America/New_York'},
    {'lat': 51.5074, 'lng': -0.1278, 'city': 'London', 'country': 'UK', 'timezone': 'Europe/London'},
    {'lat': 48.8566, 'lng': 2.3522, 'city': 'Paris', 'country': 'France', 'timezone': 'Europe/Paris'},
    {'lat': -33.8688, 'lng': 151.2093, 'city': 'Sydney', 'country': 'Australia', 'timezone': 'Australia/Sydney'},
]


# =========================
# PROVIDERS
# =========================
class LocationProvider:
    def current_position(self, timeout=LOCATION_TIMEOUT):
        """Return a Location or raise LocationUnavailable."""
        raise NotImplementedError


class IpApiLocationProvider(LocationProvider):
    """Coarse position from the caller's public IP (ip-api.com JSON format)."""

    def __init__(self, url=GEOLOCATION_URL, session=None):
        self.url = url
        self.session = session or requests.Session()

    def current_position(self, timeout=LOCATION_TIMEOUT):
        try:
            response = self.session.get(self.url, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise LocationUnavailable(f"Geolocation request failed: {e}") from e

        if data.get('status') == 'fail' or data.get('lat') is None or data.get('lon') is None:
            raise LocationUnavailable(f"Geolocation returned no position: {data.get('message', 'unknown')}")

        return Location(
            latitude=float(data['lat']),
            longitude=float(data['lon']),
            city=data.get('city', ''),
            country=data.get('country'),
            timezone=data.get('timezone'),
        )


class StaticLocationProvider(LocationProvider):
    """Fixed position; None behaves like a denied permission."""

    def __init__(self, location=None):
        self.location = location

    def current_position(self, timeout=LOCATION_TIMEOUT):
        if self.location is None:
            raise LocationUnavailable("No location configured")
        return Location(**vars(self.location))


class NearestCityGeocoder:
    def __init__(self, cities=None):
        self.cities = cities or KNOWN_CITIES
        self.lats = np.radians([c['lat'] for c in self.cities])
        self.lngs = np.radians([c['lng'] for c in self.cities])

    def nearest(self, latitude, longitude):
        lat = np.radians(latitude)
        lng = np.radians(longitude)
        a = (np.sin((self.lats - lat) / 2) ** 2
             + np.cos(lat) * np.cos(self.lats) * np.sin((self.lngs - lng) / 2) ** 2)
        distances = EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
        return self.cities[int(np.argmin(distances))]

    def reverse_geocode(self, latitude, longitude):
        city = self.nearest(latitude, longitude)
        return Location(
            latitude=latitude,
            longitude=longitude,
            city=city['city'],
            country=city['country'],
            timezone=city['timezone'],
        )


# =========================
# SERVICE
# =========================
class LocationService:
    def __init__(self, provider, geocoder=None, timeout=LOCATION_TIMEOUT,
                 max_age=LOCATION_MAX_AGE, tracking_max_age=TRACKING_MAX_AGE,
                 clock=time.monotonic):
        self.provider = provider
        self.geocoder = geocoder or NearestCityGeocoder()
        self.timeout = timeout
        self.max_age = max_age
        self.tracking_max_age = tracking_max_age
        self.clock = clock
        self.calculator = DistanceCalculator()

        self.current_location = None
        self._fetched_at = None
        self._lock = threading.Lock()
        self._stop_event = None
        self._thread = None

    def get_current_location(self, max_age=None):
        """Cached fix if it is fresh enough, otherwise ask the provider."""
        max_age = self.max_age if max_age is None else max_age
        with self._lock:
            if self.current_location is not None and self.clock() - self._fetched_at <= max_age:
                return self.current_location

        location = self.provider.current_position(timeout=self.timeout)
        if not location.city or not location.country or not location.timezone:
            guess = self.geocoder.reverse_geocode(location.latitude, location.longitude)
            location.city = location.city or guess.city
            location.country = location.country or guess.country
            location.timezone = location.timezone or guess.timezone

        with self._lock:
            self.current_location = location
            self._fetched_at = self.clock()
        logger.debug(f"[Location] fix {location.latitude:.4f},{location.longitude:.4f} ({location.city})")
        return location

    def try_current_location(self):
        """get_current_location, or None when no fix can be had."""
        try:
            return self.get_current_location()
        except LocationUnavailable as e:
            logger.warning(f"[Location] unavailable: {e}")
            return None

    # -------------------------
    # TRACKING
    # -------------------------
    def start_tracking(self, callback, interval=TRACKING_INTERVAL):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._track, args=(callback, interval, self._stop_event), daemon=True
        )
        self._thread.start()
        logger.info(f"[Location] tracking started (every {interval}s)")

    def stop_tracking(self):
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=self.timeout)
        self._thread = None
        logger.info("[Location] tracking stopped")

    def _track(self, callback, interval, stop_event):
        while not stop_event.is_set():
            try:
                callback(self.get_current_location(max_age=self.tracking_max_age))
            except LocationUnavailable as e:
                logger.error(f"[Location] tracking error: {e}")
            stop_event.wait(interval)

    # -------------------------
    # DISTANCE HELPERS
    # -------------------------
    def get_distance(self, lat1, lng1, lat2, lng2):
        return self.calculator.distance_km((lat1, lng1), (lat2, lng2))

    def is_within_radius(self, center_lat, center_lng, target_lat, target_lng, radius_km):
        return self.calculator.is_within_radius((center_lat, center_lng), (target_lat, target_lng), radius_km)
