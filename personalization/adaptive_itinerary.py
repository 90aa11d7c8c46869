# personalization/adaptive_itinerary.py
import math
import re
from dataclasses import dataclass

DEFAULT_DURATION_MINUTES = 60

CROWD_MULTIPLIERS = {
    'low': 0.8,     # 20% less time needed
    'medium': 1.0,
    'high': 1.3,    # 30% more time needed
}

TIP_OUTDOOR_WEATHER = 'Perfect weather for this outdoor activity!'
TIP_ADVENTURE_MATCH = 'This matches your adventurous spirit perfectly!'
TIP_AVOID_CROWDS = 'Consider visiting earlier or later to avoid crowds'


@dataclass
class AdaptiveAdjustment:
    estimated_time: int
    tip: str
    crowd_level: str

    def to_dict(self):
        return {
            'estimatedTime': self.estimated_time,
            'adaptiveRecommendation': self.tip,
            'crowdLevel': self.crowd_level,
        }


# =========================
# DURATION
# =========================
def format_duration(minutes):
    minutes = int(minutes)
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{hours}h {rest}m"


def parse_duration(value):
    """'2 hours', '1h 30m', '45 min' or a bare number of minutes -> minutes."""
    if value is None or value == '':
        return DEFAULT_DURATION_MINUTES
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).lower().strip()
    if text.isdigit():
        return int(text)

    hours = re.search(r'(\d+(?:\.\d+)?)\s*(?:h|hr|hrs|hour|hours)\b', text)
    minutes = re.search(r'(\d+)\s*(?:m|min|mins|minute|minutes)\b', text)
    if not hours and not minutes:
        return DEFAULT_DURATION_MINUTES

    total = 0.0
    if hours:
        total += float(hours.group(1)) * 60
    if minutes:
        total += int(minutes.group(1))
    return int(round(total))


def round_half_up(value):
    return int(math.floor(value + 0.5))


# =========================
# ADJUSTER
# =========================
class AdaptiveItineraryAdjuster:
    def __init__(self):
        # first matching rule gives the tip
        self.tip_rules = [
            (self._is_outdoor_weather, TIP_OUTDOOR_WEATHER),
            (self._is_adventure_match, TIP_ADVENTURE_MATCH),
            (self._is_crowded, TIP_AVOID_CROWDS),
        ]

    def estimate_time(self, base_minutes, crowd_level):
        multiplier = CROWD_MULTIPLIERS.get(crowd_level, 1.0)
        return round_half_up(base_minutes * multiplier)

    def adjust(self, item, crowd_level, weather=None, dna=None):
        crowd_level = crowd_level or 'medium'
        tip = ''
        for rule, message in self.tip_rules:
            if rule(item, crowd_level, weather, dna):
                tip = message
                break
        return AdaptiveAdjustment(
            estimated_time=self.estimate_time(item.duration_minutes, crowd_level),
            tip=tip,
            crowd_level=crowd_level,
        )

    def adapt_day(self, items, crowd_levels=None, weather=None, dna=None):
        """Adjust every item of a day; unknown crowd levels count as medium."""
        crowd_levels = crowd_levels or {}
        return [(item, self.adjust(item, crowd_levels.get(item.id, 'medium'), weather, dna))
                for item in items]

    def _is_outdoor_weather(self, item, crowd_level, weather, dna):
        if weather is None:
            return False
        return weather.condition == 'sunny' and (item.activity_type or '').lower() == 'outdoor'

    def _is_adventure_match(self, item, crowd_level, weather, dna):
        if dna is None:
            return False
        return dna.adventure_seeker > 70 and item.category.lower() == 'adventure'

    def _is_crowded(self, item, crowd_level, weather, dna):
        return crowd_level == 'high'


def day_stats(items):
    return {
        'totalCost': sum(item.cost for item in items),
        'totalActivities': len(items),
    }
