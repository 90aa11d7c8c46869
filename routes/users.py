# routes/users.py
from flask import jsonify

from personalization.errors import NotFound, ValidationError
from personalization.models import Location
from personalization.travel_dna import DEFAULT_DISPLAY_PROFILE
from routes.helpers import handle_errors, json_body


def init_user_routes(app, services):
    storage = services.storage

    @app.route('/api/users', methods=['POST'])
    @handle_errors("Failed to create user", "Invalid user data")
    def create_user():
        data = json_body()
        username = (data.get('username') or '').strip()
        password = data.get('password') or ''
        if not username or not password:
            raise ValidationError("username and password are required")
        if storage.get_user_by_username(username):
            raise ValidationError(f"Username '{username}' already exists")
        user = storage.create_user(username, password)
        return jsonify(user.to_dict()), 201

    @app.route('/api/user/<user_id>')
    @handle_errors("Failed to fetch user")
    def get_user(user_id):
        user = storage.get_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        data = user.to_dict()
        data['isDefault'] = user.travel_dna is None
        if user.travel_dna is None:
            data['travelDNA'] = DEFAULT_DISPLAY_PROFILE.to_dict()
        return jsonify(data)

    @app.route('/api/user/<user_id>/location', methods=['PUT'])
    @handle_errors("Failed to update user location", "Invalid location")
    def update_user_location(user_id):
        location = Location.from_dict(json_body().get('location'))
        if location is None:
            raise ValidationError("Missing required field 'location'")
        storage.update_user_location(user_id, location)
        return jsonify({'success': True})
