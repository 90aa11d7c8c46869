# personalization/behavior_analyzer.py
from collections import Counter

from personalization.models import PreferenceFlags


class BehaviorAnalyzer:
    def __init__(self):
        self.cultural_skip_threshold = 2
        self.cultural_category = 'Cultural'
        self.nature_category = 'Nature'

    def analyze(self, behavior_log, item_categories=None):
        """
        Count skips, favorites and moods over the whole log and derive the
        three preference flags. item_categories maps item ids to their
        category for behaviors that do not carry one themselves.
        """
        item_categories = item_categories or {}

        skipped = Counter()
        favorited = Counter()
        moods = Counter()
        for behavior in behavior_log:
            category = self._category_of(behavior, item_categories)
            if behavior.action_type == 'skip':
                skipped[category] += 1
            elif behavior.action_type == 'favorite':
                favorited[category] += 1
            if behavior.mood:
                moods[behavior.mood] += 1

        return PreferenceFlags(
            skips_cultural=skipped[self.cultural_category] > self.cultural_skip_threshold,
            loves_nature=favorited[self.nature_category] > 0,
            prefers_quiet_places=moods['relax'] > moods['party'],
        )

    def _category_of(self, behavior, item_categories):
        if behavior.item_category:
            return behavior.item_category
        if behavior.item_id in item_categories:
            return item_categories[behavior.item_id]
        # older clients put the category straight into itemType
        return behavior.item_type
