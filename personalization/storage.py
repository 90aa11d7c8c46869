# personalization/storage.py
"""
Record storage for TravelMate.

A Repository is a keyed table of dataclass records with predicate listing.
InMemoryRepository backs the tests and the demo server, SqliteRepository
keeps the same records as JSON rows. TravelStorage is the domain facade
the routes talk to.
"""
import dataclasses
import json
import logging
import sqlite3
import threading
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from personalization.behavior_analyzer import BehaviorAnalyzer
from personalization.filter import LOCAL_PLACES_RADIUS_KM, RecommendationFilter
from personalization.models import (ChatMessage, CrowdData, ItineraryItem, LocalPlace,
                                    QuizResponse, Recommendation, User, UserBehavior)
from personalization.response_selector import PersonalizedResponseSelector

logger = logging.getLogger(__name__)


# =========================
# REPOSITORIES
# =========================
class Repository:
    def get(self, record_id):
        raise NotImplementedError

    def list(self, predicate=None):
        """Records in insertion order, optionally filtered."""
        raise NotImplementedError

    def add(self, record):
        raise NotImplementedError

    def update(self, record_id, changes):
        """Merge attribute changes into a record; False when the id is unknown."""
        raise NotImplementedError

    def all(self):
        return self.list()


def _apply_changes(record, changes):
    fields = {f.name for f in dataclasses.fields(record)}
    known = {k: v for k, v in changes.items() if k in fields and k != 'id'}
    return dataclasses.replace(record, **known)


class InMemoryRepository(Repository):
    def __init__(self):
        self.records = {}

    def get(self, record_id):
        return self.records.get(record_id)

    def list(self, predicate=None):
        records = list(self.records.values())
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def add(self, record):
        self.records[record.id] = record
        return record

    def update(self, record_id, changes):
        record = self.records.get(record_id)
        if record is None:
            return False
        self.records[record_id] = _apply_changes(record, changes)
        return True


class SqliteRepository(Repository):
    """
    One table per entity: (id, position, body). body is the record's JSON
    as produced by ``dump`` and read back with ``model.from_dict``.
    """

    def __init__(self, connection, table, model, lock=None, dump=None):
        self.conn = connection
        self.table = table
        self.model = model
        self.lock = lock or threading.Lock()
        self.dump = dump or (lambda record: record.to_dict())

        with self.lock:
            self.conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self.table} "
                f"(id TEXT PRIMARY KEY, position INTEGER, body TEXT)"
            )
            self.conn.commit()

    def _load(self, body):
        return self.model.from_dict(json.loads(body))

    def get(self, record_id):
        with self.lock:
            row = self.conn.execute(
                f"SELECT body FROM {self.table} WHERE id = ?", (record_id,)
            ).fetchone()
        return self._load(row[0]) if row else None

    def list(self, predicate=None):
        with self.lock:
            rows = self.conn.execute(
                f"SELECT body FROM {self.table} ORDER BY position"
            ).fetchall()
        records = [self._load(body) for (body,) in rows]
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def add(self, record):
        body = json.dumps(self.dump(record))
        with self.lock:
            cursor = self.conn.cursor()
            cursor.execute(f"SELECT COALESCE(MAX(position), -1) + 1 FROM {self.table}")
            position = cursor.fetchone()[0]
            cursor.execute(
                f"INSERT INTO {self.table} (id, position, body) VALUES (?, ?, ?) "
                f"ON CONFLICT(id) DO UPDATE SET body = excluded.body",
                (record.id, position, body),
            )
            self.conn.commit()
        return record

    def update(self, record_id, changes):
        record = self.get(record_id)
        if record is None:
            return False
        record = _apply_changes(record, changes)
        with self.lock:
            self.conn.execute(
                f"UPDATE {self.table} SET body = ? WHERE id = ?",
                (json.dumps(self.dump(record)), record_id),
            )
            self.conn.commit()
        return True


# =========================
# DOMAIN FACADE
# =========================
class TravelStorage:
    def __init__(self, users, quiz_responses, recommendations, itinerary_items,
                 chat_messages, behaviors, local_places,
                 recommendation_filter=None, analyzer=None, response_selector=None,
                 local_places_radius_km=LOCAL_PLACES_RADIUS_KM):
        self.users = users
        self.quiz_responses = quiz_responses
        self.recommendations = recommendations
        self.itinerary_items = itinerary_items
        self.chat_messages = chat_messages
        self.behaviors = behaviors
        self.local_places = local_places

        self.recommendation_filter = recommendation_filter or RecommendationFilter()
        self.analyzer = analyzer or BehaviorAnalyzer()
        self.response_selector = response_selector or PersonalizedResponseSelector()
        self.local_places_radius_km = local_places_radius_km

    @classmethod
    def in_memory(cls, **kwargs):
        return cls(*(InMemoryRepository() for _ in range(7)), **kwargs)

    @classmethod
    def sqlite(cls, path, **kwargs):
        conn = sqlite3.connect(path, check_same_thread=False)
        lock = threading.Lock()

        def repo(table, model, dump=None):
            return SqliteRepository(conn, table, model, lock=lock, dump=dump)

        logger.info(f"Using sqlite storage at {path}")
        return cls(
            repo('users', User, dump=lambda user: user.to_dict(include_password=True)),
            repo('quiz_responses', QuizResponse),
            repo('recommendations', Recommendation),
            repo('itinerary_items', ItineraryItem),
            repo('chat_messages', ChatMessage),
            repo('user_behavior', UserBehavior),
            repo('local_places', LocalPlace),
            **kwargs,
        )

    # -------------------------
    # USERS
    # -------------------------
    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_username(self, username):
        matches = self.users.list(lambda u: u.username == username)
        return matches[0] if matches else None

    def create_user(self, username, password, user_id=None):
        user = User(username=username, password=generate_password_hash(password))
        if user_id:
            user.id = user_id
        return self.users.add(user)

    def check_user_password(self, username, password):
        user = self.get_user_by_username(username)
        if user and check_password_hash(user.password, password):
            return user
        return None

    def update_user_travel_dna(self, user_id, travel_dna):
        return self.users.update(user_id, {'travel_dna': travel_dna})

    def update_user_location(self, user_id, location):
        return self.users.update(user_id, {'current_location': location})

    # -------------------------
    # QUIZ
    # -------------------------
    def save_quiz_response(self, response):
        return self.quiz_responses.add(response)

    def get_user_quiz_responses(self, user_id):
        return self.quiz_responses.list(lambda r: r.user_id == user_id)

    def latest_quiz_answers(self, user_id):
        """question index -> most recently saved answer"""
        answers = {}
        for response in self.get_user_quiz_responses(user_id):
            answers[response.question_index] = response.answer
        return answers

    # -------------------------
    # RECOMMENDATIONS
    # -------------------------
    def get_recommendation(self, rec_id):
        return self.recommendations.get(rec_id)

    def get_recommendations(self):
        return self.recommendations.all()

    def add_recommendation(self, recommendation):
        return self.recommendations.add(recommendation)

    def get_recommendations_with_crowd_data(self):
        return self.recommendation_filter.with_crowd_data(self.get_recommendations())

    def get_adaptive_recommendations(self, user_id):
        flags = self.get_behavior_preferences(user_id)
        return self.recommendation_filter.select(self.get_recommendations(), behavior_flags=flags)

    # -------------------------
    # ITINERARY
    # -------------------------
    def get_itinerary_item(self, item_id):
        return self.itinerary_items.get(item_id)

    def get_user_itinerary(self, user_id, day=None):
        items = self.itinerary_items.list(
            lambda item: item.user_id == user_id and (day is None or item.day == day)
        )
        return sorted(items, key=lambda item: item.day)

    def create_itinerary_item(self, item):
        return self.itinerary_items.add(item)

    def update_itinerary_item(self, item_id, changes):
        return self.itinerary_items.update(item_id, changes)

    def skip_itinerary_item(self, item_id):
        if not self.itinerary_items.update(item_id, {'is_completed': True}):
            return None
        return self.itinerary_items.get(item_id)

    def toggle_itinerary_favorite(self, item_id):
        item = self.itinerary_items.get(item_id)
        if item is None:
            return None
        self.itinerary_items.update(item_id, {'is_favorited': not item.is_favorited})
        return self.itinerary_items.get(item_id)

    # -------------------------
    # CHAT
    # -------------------------
    def get_chat_history(self, user_id):
        messages = self.chat_messages.list(lambda m: m.user_id == user_id)
        return sorted(messages, key=lambda m: m.timestamp)

    def save_chat_message(self, message):
        message.timestamp = datetime.now()
        return self.chat_messages.add(message)

    def get_personalized_chat_response(self, user_id, message=None, context=None):
        user = self.get_user(user_id)
        dna = user.travel_dna if user else None
        return self.response_selector.canned_response(dna)

    # -------------------------
    # BEHAVIOR
    # -------------------------
    def track_user_behavior(self, behavior):
        return self.behaviors.add(behavior)

    def get_user_behavior_patterns(self, user_id):
        return self.behaviors.list(lambda b: b.user_id == user_id)

    def get_behavior_preferences(self, user_id):
        return self.analyzer.analyze(self.get_user_behavior_patterns(user_id), self.item_categories())

    def item_categories(self):
        """item id -> category across everything a behavior can point at"""
        categories = {}
        for repo in (self.recommendations, self.local_places, self.itinerary_items):
            for record in repo.all():
                categories[record.id] = record.category
        return categories

    # -------------------------
    # LOCAL PLACES
    # -------------------------
    def get_local_place(self, place_id):
        return self.local_places.get(place_id)

    def get_local_places(self, latitude, longitude, category=None):
        return self.recommendation_filter.local_places(
            self.local_places.all(), latitude, longitude, category,
            radius_km=self.local_places_radius_km,
        )

    def add_local_place(self, place):
        return self.local_places.add(place)

    def update_crowd_data(self, record_id, crowd_data):
        """
        Merge crowd fields into a local place (or a recommendation with the
        same id) and stamp lastUpdated. Unknown ids are a no-op.
        """
        for repo in (self.local_places, self.recommendations):
            record = repo.get(record_id)
            if record is None:
                continue
            merged = record.crowd_data.to_dict() if record.crowd_data else {}
            merged.update(crowd_data or {})
            merged['lastUpdated'] = datetime.now().isoformat()
            repo.update(record_id, {'crowd_data': CrowdData.from_dict(merged)})
            logger.info(f"Crowd data updated for {record_id}: {merged.get('crowdLevel')}")
            return True
        logger.warning(f"Crowd data update for unknown id {record_id}")
        return False
