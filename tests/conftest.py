import pytest

from app import create_app
from personalization.location_service import LocationService, StaticLocationProvider
from personalization.models import Location, TravelDNA
from personalization.seed_data import seed
from personalization.storage import TravelStorage
from settings import Settings

TOKYO = Location(35.6762, 139.6503, 'Tokyo', 'Japan', timezone='Asia/Tokyo')


def make_dna(adventure_seeker=50, spontaneous=50, cultural=50, social=50, active=50,
             personality='The Explorer'):
    return TravelDNA(adventure_seeker=adventure_seeker, spontaneous=spontaneous, cultural=cultural,
                     social=social, active=active, personality=personality)


@pytest.fixture
def settings():
    return Settings(tracker_autostart=False, ai_reply_delay=0, log_level='WARNING')


@pytest.fixture
def location_service():
    return LocationService(StaticLocationProvider(TOKYO))


@pytest.fixture
def app(settings, location_service):
    app = create_app(settings=settings, location_service=location_service)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['travelmate']


@pytest.fixture
def storage():
    return seed(TravelStorage.in_memory())
