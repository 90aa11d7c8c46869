import threading

import pytest
import requests

from conftest import TOKYO
from personalization.errors import LocationUnavailable
from personalization.location_service import (IpApiLocationProvider, LocationService, NearestCityGeocoder,
                                              StaticLocationProvider)
from personalization.models import Location


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class CountingProvider(StaticLocationProvider):
    def __init__(self, location):
        super().__init__(location)
        self.calls = 0

    def current_position(self, timeout=10):
        self.calls += 1
        return super().current_position(timeout)


@pytest.mark.parametrize('lat, lng, city', [
    (48.85, 2.35, 'Paris'),
    (-33.9, 151.2, 'Sydney'),
    (34.69, 135.50, 'Tokyo'),     # Osaka
    (42.36, -71.06, 'New York'),  # Boston
    (53.48, -2.24, 'London'),     # Manchester
])
def test_nearest_city(lat, lng, city):
    location = NearestCityGeocoder().reverse_geocode(lat, lng)

    assert location.city == city
    assert (location.latitude, location.longitude) == (lat, lng)


def test_one_shot_fix_is_cached_for_five_minutes():
    clock = FakeClock()
    provider = CountingProvider(TOKYO)
    service = LocationService(provider, clock=clock)

    service.get_current_location()
    clock.now += 299
    service.get_current_location()
    assert provider.calls == 1

    clock.now += 2
    service.get_current_location()
    assert provider.calls == 2


def test_tracking_uses_shorter_max_age():
    clock = FakeClock()
    provider = CountingProvider(TOKYO)
    service = LocationService(provider, clock=clock)

    service.get_current_location()
    clock.now += 61
    service.get_current_location(max_age=service.tracking_max_age)
    assert provider.calls == 2


def test_missing_fields_filled_by_geocoder():
    service = LocationService(StaticLocationProvider(Location(48.86, 2.34)))
    location = service.get_current_location()

    assert (location.city, location.country, location.timezone) == ('Paris', 'France', 'Europe/Paris')


def test_unavailable_location():
    service = LocationService(StaticLocationProvider(None))

    with pytest.raises(LocationUnavailable):
        service.get_current_location()
    assert service.try_current_location() is None


def test_distance_helpers():
    service = LocationService(StaticLocationProvider(TOKYO))

    assert service.get_distance(35.0, 139.0, 35.0, 139.0) == 0
    assert service.is_within_radius(35.6762, 139.6503, 35.6694, 139.7018, 5)
    assert not service.is_within_radius(35.6762, 139.6503, 35.7149, 139.7969, 10)


def test_tracking_calls_back_until_stopped():
    service = LocationService(StaticLocationProvider(TOKYO))
    seen = []
    called = threading.Event()

    def callback(location):
        seen.append(location.city)
        called.set()

    service.start_tracking(callback, interval=0.01)
    try:
        assert called.wait(2)
    finally:
        service.stop_tracking()

    count = len(seen)
    assert seen[0] == 'Tokyo'
    assert len(seen) == count


# -------------------------
# IP provider
# -------------------------
class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.timeout = None

    def get(self, url, timeout=None):
        self.timeout = timeout
        if self.error:
            raise self.error
        return self.response


def test_ip_provider_parses_response():
    session = FakeSession(FakeResponse({
        'status': 'success', 'lat': 48.8566, 'lon': 2.3522,
        'city': 'Paris', 'country': 'France', 'timezone': 'Europe/Paris',
    }))
    location = IpApiLocationProvider(session=session).current_position(timeout=3)

    assert (location.latitude, location.longitude, location.city) == (48.8566, 2.3522, 'Paris')
    assert session.timeout == 3


@pytest.mark.parametrize('session', [
    FakeSession(FakeResponse({'status': 'fail', 'message': 'private range'})),
    FakeSession(FakeResponse({}, status_code=503)),
    FakeSession(error=requests.Timeout("timed out")),
])
def test_ip_provider_failures(session):
    with pytest.raises(LocationUnavailable):
        IpApiLocationProvider(session=session).current_position()
