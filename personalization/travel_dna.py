# personalization/travel_dna.py
import logging

from personalization.models import TravelDNA, clamp_score

logger = logging.getLogger(__name__)

DIMENSIONS = ('adventure_seeker', 'spontaneous', 'cultural', 'social', 'active')
BASELINE = 25

# Shown on the profile page when a user has not taken the quiz yet
DEFAULT_DISPLAY_PROFILE = TravelDNA(
    adventure_seeker=75,
    spontaneous=85,
    cultural=70,
    social=60,
    active=90,
    personality='The Explorer',
    preferences=[],
)


class TravelDNACalculator:
    def __init__(self):
        # question index -> answer value -> score deltas
        self.answer_weights = {
            0: {  # ideal vacation vibe
                'adventure': {'adventure_seeker': 30, 'active': 25},
                'relaxation': {'adventure_seeker': 10, 'active': 5},
                'culture': {'cultural': 30, 'adventure_seeker': 15},
                'nightlife': {'social': 30, 'active': 20},
            },
            1: {  # discovery style
                'planned': {'spontaneous': 5},
                'spontaneous': {'spontaneous': 30, 'adventure_seeker': 20},
                'local': {'social': 25, 'cultural': 20},
                'hidden': {'adventure_seeker': 25, 'spontaneous': 15},
            },
            2: {  # budget style
                'budget': {'adventure_seeker': 10},
                'midrange': {'adventure_seeker': 15},
                'luxury': {'social': 15},
                'flexible': {'spontaneous': 20},
            },
            3: {  # social style
                'social': {'social': 30},
                'smallgroup': {'social': 20},
                'solo': {'social': 5, 'adventure_seeker': 15},
                'flexible': {'social': 15, 'spontaneous': 10},
            },
            4: {  # motivation
                'instagram': {'social': 20},
                'authentic': {'cultural': 25, 'adventure_seeker': 20},
                'learning': {'cultural': 30},
                'relaxation': {'active': 5},
            },
        }

        # first match wins
        self.personality_rules = [
            ('adventure_seeker', 'The Adventurer'),
            ('cultural', 'The Culture Seeker'),
            ('social', 'The Social Butterfly'),
            ('spontaneous', 'The Free Spirit'),
        ]
        self.personality_threshold = 70
        self.default_personality = 'The Explorer'

    @property
    def question_count(self):
        return len(self.answer_weights)

    def compute(self, answers):
        """Quiz answers {question index: option value} -> TravelDNA"""
        answers = _normalize_keys(answers or {})

        scores = {dim: 0 for dim in DIMENSIONS}
        for index, table in self.answer_weights.items():
            deltas = table.get(answers.get(index), {})
            for dim, delta in deltas.items():
                scores[dim] += delta

        scores = {dim: clamp_score(value + BASELINE) for dim, value in scores.items()}
        personality = self._determine_personality(scores)

        dna = TravelDNA(
            personality=personality,
            preferences=[answers[i] for i in sorted(answers)],
            **scores,
        )
        logger.info(f"Travel DNA computed: {personality} ({scores})")
        return dna

    def _determine_personality(self, scores):
        for dim, label in self.personality_rules:
            if scores[dim] >= self.personality_threshold:
                return label
        return self.default_personality


def _normalize_keys(answers):
    # JSON bodies arrive with string keys ("0".."4")
    normalized = {}
    for key, value in answers.items():
        try:
            normalized[int(key)] = value
        except (TypeError, ValueError):
            continue
    return normalized
