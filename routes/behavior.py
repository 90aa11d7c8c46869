# routes/behavior.py
import pandas as pd
from flask import jsonify

from personalization.models import UserBehavior
from routes.helpers import handle_errors, json_body

SUMMARY_COLUMNS = ['actionType', 'itemType', 'itemCategory', 'mood', 'timeOfDay', 'companionType']


def summarize(behaviors):
    """Counts per action/mood/time of day over a user's behavior log."""
    df = pd.DataFrame([b.to_dict() for b in behaviors], columns=SUMMARY_COLUMNS)
    summary = {'total': int(len(df))}
    for column, key in (('actionType', 'byAction'), ('mood', 'byMood'),
                        ('timeOfDay', 'byTimeOfDay'), ('companionType', 'byCompanion')):
        counts = df[column].dropna().value_counts()
        summary[key] = {str(k): int(v) for k, v in counts.items()}
    return summary


def init_behavior_routes(app, services):
    storage = services.storage

    @app.route('/api/behavior/track', methods=['POST'])
    @handle_errors("Failed to track behavior", "Invalid behavior data")
    def track_behavior():
        behavior = UserBehavior.from_dict(json_body())
        return jsonify(storage.track_user_behavior(behavior).to_dict())

    @app.route('/api/behavior/<user_id>/patterns')
    @handle_errors("Failed to fetch behavior patterns")
    def behavior_patterns(user_id):
        behaviors = storage.get_user_behavior_patterns(user_id)
        return jsonify({
            'behaviors': [b.to_dict() for b in behaviors],
            'summary': summarize(behaviors),
        })

    @app.route('/api/behavior/<user_id>/preferences')
    @handle_errors("Failed to analyze behavior")
    def behavior_preferences(user_id):
        return jsonify(storage.get_behavior_preferences(user_id).to_dict())
