# personalization/seed_data.py
"""Fixed sample data loaded into a fresh store (demo server and tests)."""
import logging
from datetime import datetime

from personalization.models import (CrowdData, ItineraryItem, LocalInsights, LocalPlace,
                                    Location, Recommendation)

logger = logging.getLogger(__name__)

DEMO_USER_ID = 'demo-user'
DEMO_USERNAME = 'demo'
DEMO_PASSWORD = 'demo'


def sample_recommendations():
    now = datetime.now().isoformat()
    return [
        Recommendation(
            id='rec1',
            title='Secret Waterfall Trail',
            description='A hidden oasis perfect for meditation and nature photography',
            image_url='https://images.unsplash.com/photo-1439066615861-d1af74d74000?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=200',
            rating=48,
            category='Nature',
            moods=['relax', 'explore'],
            tags=['Nature', 'Peaceful'],
            location=Location(35.6762, 139.6503, 'Tokyo', 'Japan',
                              address='Shibuya Forest Sanctuary', neighborhood='Shibuya'),
            crowd_data=CrowdData('low', ['10:00-12:00', '15:00-17:00'],
                                 'Early morning (7:00-9:00)', now),
            local_insights=LocalInsights(
                discovered_by='local',
                local_tips=['Bring water shoes for the stream crossing',
                            'Best photography light at golden hour'],
                seasonal_info='Most beautiful in autumn with fall colors',
                accessibility_info='Moderate hiking required',
            ),
        ),
        Recommendation(
            id='rec2',
            title='The Hidden Door',
            description='Exclusive speakeasy known only to locals, featuring craft cocktails',
            image_url='https://images.unsplash.com/photo-1514362545857-3bc16c4c7d1b?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=200',
            rating=46,
            category='Nightlife',
            moods=['party'],
            tags=['Nightlife', 'Cocktails'],
            location=Location(35.6694, 139.7018, 'Tokyo', 'Japan',
                              address='2-15-3 Ginza Underground', neighborhood='Ginza'),
            crowd_data=CrowdData('medium', ['20:00-23:00'], 'Weekdays after 18:00', now),
            local_insights=LocalInsights(
                discovered_by='local',
                local_tips=["Ask for the 'Tokyo Sunset' cocktail - not on menu",
                            'Reservation recommended on weekends'],
                accessibility_info='Basement level, stairs only',
            ),
        ),
        Recommendation(
            id='rec3',
            title='Forgotten Temple Ruins',
            description='Ancient architectural wonder with breathtaking sunrise views',
            image_url='https://images.unsplash.com/photo-1545558014-8692077e9b5c?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=200',
            rating=49,
            category='History',
            moods=['explore'],
            tags=['History', 'Adventure'],
            location=Location(35.7149, 139.7969, 'Tokyo', 'Japan',
                              address='Ueno Park Historic District', neighborhood='Ueno'),
            crowd_data=CrowdData('low', ['09:00-11:00', '14:00-16:00'], 'Sunrise (6:00-7:30)', now),
            local_insights=LocalInsights(
                discovered_by='traveler',
                local_tips=['Bring a flashlight for exploring inner chambers',
                            'Perfect for sunrise photography'],
                seasonal_info='Cherry blossoms frame the ruins in spring',
                accessibility_info='Some stairs and uneven ground',
            ),
        ),
    ]


def sample_local_places():
    return [
        LocalPlace(
            id='place1',
            name="Grandmother's Kitchen",
            category='Restaurant',
            location=Location(35.6586, 139.7454, 'Tokyo', 'Japan',
                              address='3-22-8 Shimbashi', neighborhood='Shimbashi'),
            discovered_by='local_tip',
            popularity=85,
            crowd_data=CrowdData('high', ['12:00-13:00', '19:00-21:00'],
                                 '14:00-17:00 for quiet dining', datetime.now().isoformat()),
            local_insights=LocalInsights(
                local_tips=["Order the daily special - it's always amazing", 'Cash only establishment'],
                price_range='budget',
                seasonal_info='Seasonal menu changes monthly',
            ),
            is_verified=True,
        ),
    ]


def demo_itinerary(user_id=DEMO_USER_ID):
    return [
        ItineraryItem(
            id='activity1', user_id=user_id, day=1,
            title='Sunrise hike to Mount Takao',
            description='Quiet forest trail with a view of Mount Fuji on clear mornings',
            start_time='06:30', end_time='09:00',
            category='adventure', cost=15, duration_minutes=150,
            tags=['Nature', 'Hiking'], activity_type='outdoor',
        ),
        ItineraryItem(
            id='activity2', user_id=user_id, day=1,
            title='Tsukiji Outer Market breakfast',
            description='Street food stalls run by the same families for generations',
            start_time='10:00', end_time='11:00',
            category='food', cost=25, duration_minutes=60,
            tags=['Food', 'Local'], activity_type='outdoor',
        ),
        ItineraryItem(
            id='activity3', user_id=user_id, day=1,
            title='Yanaka backstreet tea house',
            description='Traditional tea ceremony in a restored wooden house',
            start_time='14:00', end_time='15:30',
            category='culture', cost=30, duration_minutes=90,
            tags=['Culture', 'Tea'], activity_type='indoor',
        ),
        ItineraryItem(
            id='activity4', user_id=user_id, day=2,
            title='Shimokitazawa vintage crawl',
            description='Thrift shops and tiny live music bars',
            start_time='13:00', end_time='17:00',
            category='shopping', cost=40, duration_minutes=240,
            tags=['Shopping', 'Music'], activity_type='outdoor',
        ),
    ]


def seed(storage):
    """Load every sample record into an empty TravelStorage."""
    for rec in sample_recommendations():
        storage.add_recommendation(rec)
    for place in sample_local_places():
        storage.add_local_place(place)
    if storage.get_user(DEMO_USER_ID) is None:
        storage.create_user(DEMO_USERNAME, DEMO_PASSWORD, user_id=DEMO_USER_ID)
    for item in demo_itinerary():
        storage.create_itinerary_item(item)
    logger.info("Sample data loaded")
    return storage
