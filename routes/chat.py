# routes/chat.py
from flask import jsonify, request

from personalization.models import ChatMessage
from routes.helpers import handle_errors, json_body


def init_chat_routes(app, services):
    storage = services.storage
    chat = services.chat

    @app.route('/api/chat/<user_id>/history')
    @handle_errors("Failed to fetch chat history")
    def chat_history(user_id):
        return jsonify([m.to_dict() for m in storage.get_chat_history(user_id)])

    @app.route('/api/chat/message', methods=['POST'])
    @handle_errors("Failed to save message", "Invalid message data")
    def chat_message():
        message = ChatMessage.from_dict(json_body())
        return jsonify(chat.send_message(message).to_dict())

    @app.route('/api/chat/personalized/<user_id>', methods=['POST'])
    @handle_errors("Failed to generate personalized response")
    def personalized_response(user_id):
        data = request.get_json(silent=True) or {}
        response = chat.personalized_response(user_id, data.get('message', ''), data.get('context'))
        return jsonify({'response': response})

    @app.route('/api/chat/<user_id>/persona')
    @handle_errors("Failed to build chat persona")
    def chat_persona(user_id):
        return jsonify(chat.persona(user_id))

    @app.route('/api/chat/<user_id>/start', methods=['POST'])
    @handle_errors("Failed to start conversation")
    def start_conversation(user_id):
        seeded = chat.start_conversation(user_id)
        return jsonify({
            'started': seeded is not None,
            'message': seeded.to_dict() if seeded else None,
            'state': chat.state(user_id),
        })
