# routes/places.py
from flask import jsonify, request

from personalization.errors import ValidationError
from personalization.models import LocalPlace
from routes.helpers import bad_request, float_arg, handle_errors, json_body


def init_places_routes(app, services):
    storage = services.storage

    @app.route('/api/places/local')
    @handle_errors("Failed to fetch local places", "Invalid local places query")
    def local_places():
        if not request.args.get('lat') or not request.args.get('lng'):
            return bad_request("Latitude and longitude required")
        places = storage.get_local_places(float_arg('lat'), float_arg('lng'),
                                          request.args.get('category'))
        return jsonify([place.to_dict() for place in places])

    @app.route('/api/places/local', methods=['POST'])
    @handle_errors("Failed to add local place", "Invalid place data")
    def add_local_place():
        place = LocalPlace.from_dict(json_body())
        return jsonify(storage.add_local_place(place).to_dict())

    @app.route('/api/places/<place_id>/crowd-data', methods=['PUT'])
    @handle_errors("Failed to update crowd data", "Invalid crowd data")
    def update_crowd_data(place_id):
        crowd_data = json_body().get('crowdData')
        if not isinstance(crowd_data, dict):
            raise ValidationError("Missing required field 'crowdData'")
        updated = storage.update_crowd_data(place_id, crowd_data)
        return jsonify({'success': True, 'updated': updated})
