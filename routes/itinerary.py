# routes/itinerary.py
from flask import jsonify, request

from personalization.adaptive_itinerary import day_stats
from personalization.errors import ValidationError
from personalization.models import CROWD_LEVELS, ItineraryItem, Weather
from routes.helpers import handle_errors, int_arg, json_body


def parse_crowd_levels(data):
    levels = data or {}
    if not isinstance(levels, dict):
        raise ValidationError("'crowdLevels' must map item id to crowd level")
    for item_id, level in levels.items():
        if level not in CROWD_LEVELS:
            raise ValidationError(f"Invalid crowd level '{level}' for {item_id}")
    return levels


def init_itinerary_routes(app, services):
    storage = services.storage
    tracker = services.tracker
    adjuster = services.adjuster

    @app.route('/api/itinerary/<user_id>')
    @handle_errors("Failed to fetch itinerary", "Invalid itinerary query")
    def itinerary(user_id):
        items = storage.get_user_itinerary(user_id, day=int_arg('day'))
        return jsonify([item.to_dict() for item in items])

    @app.route('/api/itinerary/<item_id>', methods=['PUT'])
    @handle_errors("Failed to update itinerary item", "Invalid itinerary update")
    def update_itinerary_item(item_id):
        changes = ItineraryItem.changes_from_dict(json_body())
        storage.update_itinerary_item(item_id, changes)
        return jsonify({'success': True})

    @app.route('/api/itinerary/<item_id>/skip', methods=['POST'])
    @handle_errors("Failed to skip itinerary item")
    def skip_itinerary_item(item_id):
        item = storage.get_itinerary_item(item_id)
        if item is None:
            return jsonify({'success': False})
        tracker.track_skip(item.user_id, item_id, 'itinerary_item', 'User chose to skip activity')
        item = storage.skip_itinerary_item(item_id)
        return jsonify({'success': True, 'item': item.to_dict()})

    @app.route('/api/itinerary/<item_id>/favorite', methods=['POST'])
    @handle_errors("Failed to favorite itinerary item")
    def favorite_itinerary_item(item_id):
        item = storage.get_itinerary_item(item_id)
        if item is None:
            return jsonify({'success': False})
        if not item.is_favorited:
            tracker.track_favorite(item.user_id, item_id, 'itinerary_item')
        item = storage.toggle_itinerary_favorite(item_id)
        return jsonify({'success': True, 'item': item.to_dict()})

    @app.route('/api/itinerary/<user_id>/adaptive', methods=['POST'])
    @handle_errors("Failed to adapt itinerary", "Invalid adaptive itinerary request")
    def adaptive_itinerary(user_id):
        data = request.get_json(silent=True) or {}
        day = data.get('day')
        if day is not None:
            try:
                day = int(day)
            except (TypeError, ValueError):
                raise ValidationError("'day' must be an integer")

        weather = Weather.from_dict(data.get('weather'))
        crowd_levels = parse_crowd_levels(data.get('crowdLevels'))
        user = storage.get_user(user_id)
        dna = user.travel_dna if user else None

        items = storage.get_user_itinerary(user_id, day=day)
        adapted = []
        for item, adjustment in adjuster.adapt_day(items, crowd_levels, weather, dna):
            entry = item.to_dict()
            entry.update(adjustment.to_dict())
            adapted.append(entry)

        result = {'items': adapted}
        result.update(day_stats(items))
        return jsonify(result)
