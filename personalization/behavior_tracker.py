# personalization/behavior_tracker.py
"""
Queued behavior tracking.

Events are enriched (location, time of day, companion type), queued, and
flushed to a sender every few seconds. favorite/rate/skip flush right
away. Only one flush runs at a time; a flush that finds another one in
progress returns without doing anything. A failed flush puts the whole
batch back at the front of the queue, so events can be delivered twice.
"""
import logging
import threading
from collections import OrderedDict, deque
from datetime import datetime

import requests

from personalization.errors import LocationUnavailable, QueueFlushFailure
from personalization.models import Location, UserBehavior

logger = logging.getLogger(__name__)

FLUSH_INTERVAL = 5  # seconds
IMMEDIATE_ACTIONS = ('favorite', 'rate', 'skip')
DEFAULT_COMPANION = 'solo'
MAX_REMEMBERED_USERS = 10000


def time_of_day(hour):
    if hour < 6:
        return 'night'
    if hour < 12:
        return 'morning'
    if hour < 18:
        return 'afternoon'
    return 'evening'


# =========================
# SENDERS
# =========================
class BehaviorSender:
    def send(self, behavior):
        """Deliver one event; any exception means the event was not delivered."""
        raise NotImplementedError


class StorageBehaviorSender(BehaviorSender):
    """Writes straight into the local store (server-side tracking)."""

    def __init__(self, storage):
        self.storage = storage

    def send(self, behavior):
        self.storage.track_user_behavior(behavior)


class HttpBehaviorSender(BehaviorSender):
    """POSTs events to a TravelMate server's /api/behavior/track."""

    def __init__(self, base_url, session=None, timeout=10):
        self.url = base_url.rstrip('/') + '/api/behavior/track'
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, behavior):
        try:
            response = self.session.post(self.url, json=behavior.to_dict(), timeout=self.timeout)
        except requests.RequestException as e:
            raise QueueFlushFailure(f"Failed to send behavior to server: {e}") from e
        if not response.ok:
            raise QueueFlushFailure(f"Failed to track behavior (HTTP {response.status_code})")


# =========================
# TRACKER
# =========================
class BehaviorTracker:
    def __init__(self, sender, location_service=None, flush_interval=FLUSH_INTERVAL,
                 clock=datetime.now):
        self.sender = sender
        self.location_service = location_service
        self.flush_interval = flush_interval
        self.clock = clock

        self.queue = deque()
        self.is_processing = False
        self._lock = threading.Lock()
        self._companions = OrderedDict()   # user id -> last declared companion type
        self._stop_event = None
        self._thread = None

    # -------------------------
    # TRACKING
    # -------------------------
    def track(self, behavior):
        enriched = self.enrich(behavior)
        with self._lock:
            self.queue.append(enriched)
        if enriched.action_type in IMMEDIATE_ACTIONS:
            self.flush()
        return enriched

    def enrich(self, behavior):
        with self._lock:
            if behavior.companion_type:
                self._companions[behavior.user_id] = behavior.companion_type
                self._companions.move_to_end(behavior.user_id)
                if len(self._companions) > MAX_REMEMBERED_USERS:
                    self._companions.popitem(last=False)
            companion = self._companions.get(behavior.user_id, DEFAULT_COMPANION)

        if behavior.location is None and self.location_service is not None:
            try:
                current = self.location_service.get_current_location()
                behavior.location = Location(current.latitude, current.longitude, current.city)
            except LocationUnavailable:
                logger.warning("Location not available for behavior tracking")

        if not behavior.time_of_day:
            behavior.time_of_day = time_of_day(self.clock().hour)

        if not behavior.companion_type:
            behavior.companion_type = companion
        return behavior

    def pending(self):
        with self._lock:
            return len(self.queue)

    # -------------------------
    # FLUSH
    # -------------------------
    def flush(self):
        """Send everything queued; returns the number of events delivered."""
        with self._lock:
            if self.is_processing or not self.queue:
                return 0
            self.is_processing = True
            batch = list(self.queue)
            self.queue.clear()

        try:
            for behavior in batch:
                self.sender.send(behavior)
        except Exception as e:
            with self._lock:
                self.queue.extendleft(reversed(batch))
            logger.warning(f"Error processing behavior queue, {len(batch)} events requeued: {e}")
            return 0
        finally:
            with self._lock:
                self.is_processing = False

        logger.info(f"Behavior queue flushed: {len(batch)} events")
        return len(batch)

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop_event,), daemon=True)
        self._thread.start()
        logger.info(f"Behavior tracker started (flush every {self.flush_interval}s)")

    def stop(self, flush=True):
        if self._thread is not None:
            self._stop_event.set()
            self._thread.join(timeout=self.flush_interval)
            self._thread = None
        if flush:
            self.flush()

    def _run(self, stop_event):
        while not stop_event.wait(self.flush_interval):
            self.flush()

    # -------------------------
    # CONVENIENCE
    # -------------------------
    def track_view(self, user_id, item_id, item_type):
        return self.track(UserBehavior(action_type='view', item_type=item_type,
                                       user_id=user_id, item_id=item_id))

    def track_favorite(self, user_id, item_id, item_type, rating=None):
        return self.track(UserBehavior(action_type='favorite', item_type=item_type,
                                       user_id=user_id, item_id=item_id, rating=rating))

    def track_skip(self, user_id, item_id, item_type, feedback=None):
        return self.track(UserBehavior(action_type='skip', item_type=item_type,
                                       user_id=user_id, item_id=item_id, feedback=feedback))

    def track_search(self, user_id, search_query, mood=None):
        logger.debug(f"Search by {user_id}: {search_query!r}")
        return self.track(UserBehavior(action_type='search', item_type='recommendation',
                                       user_id=user_id, mood=mood))

    def track_rating(self, user_id, item_id, item_type, rating, feedback=None):
        return self.track(UserBehavior(action_type='rate', item_type=item_type, user_id=user_id,
                                       item_id=item_id, rating=rating, feedback=feedback))
