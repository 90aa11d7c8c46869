# app.py
import logging

from flask import Flask, jsonify

from personalization.adaptive_itinerary import AdaptiveItineraryAdjuster
from personalization.behavior_tracker import BehaviorTracker, StorageBehaviorSender
from personalization.chat_engine import ChatEngine
from personalization.filter import RecommendationFilter
from personalization.location_service import IpApiLocationProvider, LocationService
from personalization.response_selector import PersonalizedResponseSelector
from personalization.seed_data import seed
from personalization.storage import TravelStorage
from personalization.travel_dna import TravelDNACalculator
from routes.behavior import init_behavior_routes
from routes.chat import init_chat_routes
from routes.itinerary import init_itinerary_routes
from routes.places import init_places_routes
from routes.quiz import init_quiz_routes
from routes.recommendations import init_recommendation_routes
from routes.users import init_user_routes
from settings import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Services:
    """Everything the route groups share, created once per app."""

    def __init__(self, settings, storage, location_service, tracker, chat,
                 dna_calculator, adjuster, recommendation_filter):
        self.settings = settings
        self.storage = storage
        self.location_service = location_service
        self.tracker = tracker
        self.chat = chat
        self.dna_calculator = dna_calculator
        self.adjuster = adjuster
        self.recommendation_filter = recommendation_filter


# -------------------------
# Application factory
# -------------------------
def create_app(settings=None, storage=None, location_service=None):
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = Flask(__name__)
    app.secret_key = settings.secret_key

    recommendation_filter = RecommendationFilter(default_radius_km=settings.default_radius_km)
    selector = PersonalizedResponseSelector()

    if storage is None:
        store_kwargs = dict(
            recommendation_filter=recommendation_filter,
            response_selector=selector,
            local_places_radius_km=settings.local_places_radius_km,
        )
        if settings.storage == "sqlite":
            storage = TravelStorage.sqlite(settings.sqlite_path, **store_kwargs)
        else:
            storage = TravelStorage.in_memory(**store_kwargs)
        if settings.seed_data and not storage.get_recommendations():
            seed(storage)

    if location_service is None:
        location_service = LocationService(
            IpApiLocationProvider(settings.geolocation_url),
            timeout=settings.location_timeout,
            max_age=settings.location_max_age,
            tracking_max_age=settings.tracking_max_age,
        )

    tracker = BehaviorTracker(StorageBehaviorSender(storage), location_service,
                              flush_interval=settings.flush_interval)
    if settings.tracker_autostart:
        tracker.start()

    services = Services(
        settings=settings,
        storage=storage,
        location_service=location_service,
        tracker=tracker,
        chat=ChatEngine(storage, selector, reply_delay=settings.ai_reply_delay),
        dna_calculator=TravelDNACalculator(),
        adjuster=AdaptiveItineraryAdjuster(),
        recommendation_filter=recommendation_filter,
    )
    app.extensions["travelmate"] = services

    init_quiz_routes(app, services)
    init_recommendation_routes(app, services)
    init_itinerary_routes(app, services)
    init_chat_routes(app, services)
    init_behavior_routes(app, services)
    init_places_routes(app, services)
    init_user_routes(app, services)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok", "storage": settings.storage})

    logger.info(f"TravelMate ready ({settings.storage} storage)")
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
