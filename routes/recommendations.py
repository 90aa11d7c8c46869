# routes/recommendations.py
from flask import jsonify, request

from personalization.distance import format_distance
from routes.helpers import float_arg, handle_errors


def serialize(rec, calculator=None, origin=None):
    data = rec.to_dict()
    if origin is not None and rec.location is not None:
        distance = calculator.distance_km(origin, rec.location)
        data['distance'] = round(distance, 2)
        data['distanceLabel'] = format_distance(distance)
    return data


def init_recommendation_routes(app, services):
    storage = services.storage
    rec_filter = services.recommendation_filter

    @app.route('/api/recommendations')
    @handle_errors("Failed to fetch recommendations", "Invalid recommendation query")
    def recommendations():
        mood = request.args.get('mood')
        query = request.args.get('q')
        user_id = request.args.get('userId')
        lat = float_arg('lat')
        lng = float_arg('lng')
        radius = float_arg('radius')

        origin = (lat, lng) if lat is not None and lng is not None else None
        flags = storage.get_behavior_preferences(user_id) if user_id else None

        results = rec_filter.select(
            storage.get_recommendations(),
            mood=mood,
            location=origin,
            radius_km=radius,
            behavior_flags=flags,
            query=query,
        )
        if query and user_id:
            services.tracker.track_search(user_id, query, mood if mood != 'all' else None)

        return jsonify([serialize(rec, rec_filter.calculator, origin) for rec in results])

    @app.route('/api/recommendations/crowd-optimized')
    @handle_errors("Failed to fetch crowd-optimized recommendations")
    def crowd_optimized_recommendations():
        return jsonify([rec.to_dict() for rec in storage.get_recommendations_with_crowd_data()])

    @app.route('/api/recommendations/adaptive/<user_id>')
    @handle_errors("Failed to fetch adaptive recommendations")
    def adaptive_recommendations(user_id):
        return jsonify([rec.to_dict() for rec in storage.get_adaptive_recommendations(user_id)])
