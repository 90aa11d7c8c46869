# personalization/filter.py
import logging

import pandas as pd

from personalization.distance import DistanceCalculator

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 10
LOCAL_PLACES_RADIUS_KM = 5

FRAME_COLUMNS = ['position', 'title', 'description', 'category', 'moods',
                 'latitude', 'longitude', 'crowd_level']


def build_frame(items):
    """One row per recommendation/place; 'position' points back into the input list."""
    rows = []
    for position, item in enumerate(items):
        location = getattr(item, 'location', None)
        crowd = getattr(item, 'crowd_data', None)
        rows.append({
            'position': position,
            'title': getattr(item, 'title', None) or getattr(item, 'name', ''),
            'description': getattr(item, 'description', ''),
            'category': item.category,
            'moods': list(getattr(item, 'moods', None) or []),
            'latitude': location.latitude if location else None,
            'longitude': location.longitude if location else None,
            'crowd_level': crowd.crowd_level if crowd else None,
        })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def filter_by_location(df, latitude, longitude, radius_km=DEFAULT_RADIUS_KM, calculator=None):
    """
    Keep rows within radius_km (inclusive) of the given point.
    Rows without coordinates never match.
    """
    if latitude is None or longitude is None or df.empty:
        return df
    calculator = calculator or DistanceCalculator()
    origin = (latitude, longitude)

    def distance(row):
        if pd.isna(row['latitude']) or pd.isna(row['longitude']):
            return float('nan')
        return calculator.distance_km(origin, (row['latitude'], row['longitude']))

    distances = df.apply(distance, axis=1)
    return df[distances <= radius_km]


def filter_by_mood(df, mood):
    if not mood or mood == 'all' or df.empty:
        return df
    return df[df['moods'].apply(lambda moods: mood in moods)]


def filter_by_behavior(df, flags):
    """Apply the behavior-derived exclusions; loved Nature items are always kept."""
    if flags is None or df.empty:
        return df

    drop_cultural = (df['category'] == 'Cultural') & flags.skips_cultural
    force_keep = (df['category'] == 'Nature') & flags.loves_nature
    drop_crowded = (df['crowd_level'] == 'high') & flags.prefers_quiet_places

    keep = ~drop_cultural & (force_keep | ~drop_crowded)
    return df[keep]


def filter_by_text(df, query):
    """Case-insensitive substring match on title or description."""
    if not query or df.empty:
        return df
    in_title = df['title'].fillna('').str.contains(query, case=False, regex=False)
    in_description = df['description'].fillna('').str.contains(query, case=False, regex=False)
    return df[in_title | in_description]


def filter_by_category(df, category):
    if not category or df.empty:
        return df
    return df[df['category'].str.lower() == str(category).lower()]


class RecommendationFilter:
    def __init__(self, calculator=None, default_radius_km=DEFAULT_RADIUS_KM):
        self.calculator = calculator or DistanceCalculator()
        self.default_radius_km = default_radius_km

    def select(self, recommendations, mood=None, location=None, radius_km=None,
               behavior_flags=None, query=None):
        """
        Location radius -> mood -> behavior flags -> text search. Every stage
        is skipped when its input is missing; input order is preserved.
        """
        recommendations = list(recommendations)
        df = build_frame(recommendations)
        total = len(df)

        if location is not None:
            latitude, longitude = _point(location)
            radius = self.default_radius_km if radius_km is None else radius_km
            df = filter_by_location(df, latitude, longitude, radius, self.calculator)
            logger.debug(f"[Filter] location ({radius} km): {total} -> {len(df)}")

        df = filter_by_mood(df, mood)
        df = filter_by_behavior(df, behavior_flags)
        df = filter_by_text(df, query)
        logger.debug(f"[Filter] mood={mood} query={query!r}: {total} -> {len(df)}")

        return [recommendations[position] for position in df['position']]

    def with_crowd_data(self, recommendations):
        return [rec for rec in recommendations if rec.crowd_data]

    def local_places(self, places, latitude, longitude, category=None,
                     radius_km=LOCAL_PLACES_RADIUS_KM):
        places = list(places)
        df = build_frame(places)
        df = filter_by_location(df, latitude, longitude, radius_km, self.calculator)
        df = filter_by_category(df, category)
        return [places[position] for position in df['position']]


def _point(location):
    if isinstance(location, (tuple, list)):
        return float(location[0]), float(location[1])
    return float(location.latitude), float(location.longitude)
