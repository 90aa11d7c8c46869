# routes/quiz.py
import logging

from flask import jsonify, request

from personalization.errors import ValidationError
from personalization.models import QuizResponse, TravelDNA
from routes.helpers import handle_errors, json_body

logger = logging.getLogger(__name__)


def init_quiz_routes(app, services):
    storage = services.storage
    calculator = services.dna_calculator

    @app.route('/api/quiz/response', methods=['POST'])
    @handle_errors("Failed to save quiz response", "Invalid quiz response data")
    def save_quiz_response():
        response = QuizResponse.from_dict(json_body())
        return jsonify(storage.save_quiz_response(response).to_dict())

    @app.route('/api/quiz/responses/<user_id>')
    @handle_errors("Failed to fetch quiz responses")
    def quiz_responses(user_id):
        return jsonify([r.to_dict() for r in storage.get_user_quiz_responses(user_id)])

    @app.route('/api/quiz/<user_id>/complete', methods=['POST'])
    @handle_errors("Failed to compute travel DNA", "Invalid quiz answers")
    def complete_quiz(user_id):
        data = request.get_json(silent=True) or {}
        answers = data.get('answers')
        if answers is None:
            answers = storage.latest_quiz_answers(user_id)
        elif not isinstance(answers, dict):
            raise ValidationError("'answers' must map question index to answer")

        dna = calculator.compute(answers)
        saved = storage.update_user_travel_dna(user_id, dna)
        if not saved:
            logger.warning(f"Travel DNA computed for unknown user {user_id}, not stored")
        return jsonify({'travelDNA': dna.to_dict(), 'saved': saved})

    @app.route('/api/user/<user_id>/travel-dna', methods=['POST'])
    @handle_errors("Failed to update travel DNA", "Invalid travel DNA")
    def update_travel_dna(user_id):
        data = json_body()
        if data.get('travelDNA') is None:
            raise ValidationError("Missing required field 'travelDNA'")
        storage.update_user_travel_dna(user_id, TravelDNA.from_dict(data['travelDNA']))
        return jsonify({'success': True})
