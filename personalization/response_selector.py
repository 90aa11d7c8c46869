# personalization/response_selector.py
"""
Scripted response selection for the travel assistant.

Everything here is a table lookup keyed by thresholds on the Travel DNA;
there is no generative model and no randomness. The tone rules check
adventure before culture; the canned-response rules check culture first.
"""
from personalization.models import PersonaTone

CANNED_RESPONSES = [
    "Based on your love for authentic experiences, I'd recommend these local favorites...",
    "Since you enjoy cultural exploration, here are some hidden temples and art spaces...",
    "Given your adventurous spirit, let me suggest some off-the-beaten-path activities...",
    "Considering your social nature, here are great spots to meet locals and fellow travelers...",
]

MOOD_KEYWORDS = [
    ('relax', ['relax', 'calm', 'peaceful', 'quiet', 'spa', 'beach']),
    ('party', ['party', 'nightlife', 'bar', 'club', 'fun', 'drink']),
    ('explore', ['explore', 'adventure', 'hike', 'discover', 'new']),
]

SEED_OUTREACH_MESSAGE = "Hello! I'm interested in visiting Japan, but I want to avoid the typical tourist spots"


class PersonalizedResponseSelector:
    def __init__(self):
        self.default_tone = PersonaTone(tone='casual', expertise=75, empathy=85)
        # (dimension, threshold, persona) - first match wins
        self.tone_rules = [
            ('adventure_seeker', 80, PersonaTone(tone='enthusiastic', expertise=90, empathy=85)),
            ('cultural', 80, PersonaTone(tone='formal', expertise=95, empathy=90)),
            ('social', 80, PersonaTone(tone='humorous', expertise=75, empathy=95)),
        ]
        # (dimension, threshold, index into CANNED_RESPONSES)
        self.response_rules = [
            ('cultural', 70, 1),
            ('adventure_seeker', 70, 2),
            ('social', 70, 3),
        ]

        self.adaptive_intros = {
            'enthusiastic': "AMAZING choice! Your adventurous spirit is calling, and I've got some incredible discoveries for you:",
            'formal': "Excellent selection. Given your appreciation for cultural authenticity, I recommend these distinguished experiences:",
            'humorous': "Ooh, I love where your head's at! Your social radar is pinging, and I've got some spots that'll blow your mind:",
            'casual': "Great choice! Based on your travel style, here are some perfect matches:",
        }
        self.follow_ups = {
            'enthusiastic': "Which one's calling your name? I can create an epic itinerary around any of these! 🚀",
            'formal': "Would you prefer a detailed itinerary for any of these experiences? I can provide comprehensive planning assistance.",
            'humorous': "So... which one's making your travel heart skip a beat? Let's make some magic happen! ✨",
            'casual': "Interested in any of these? I can help plan the perfect experience around your choice!",
        }
        self.suggestion_cards = [
            ('adventure_seeker', [
                {'emoji': '🏔️', 'name': 'Hidden Alpine Routes', 'description': 'Secret mountain trails locals use'},
                {'emoji': '🏄', 'name': 'Underground Surf Spots', 'description': 'Waves only locals know about'},
            ]),
            ('cultural', [
                {'emoji': '🏛️', 'name': 'Artisan Workshops', 'description': 'Learn from master craftspeople'},
                {'emoji': '🎭', 'name': 'Private Cultural Tours', 'description': 'Behind-scenes cultural experiences'},
            ]),
            ('social', [
                {'emoji': '🍻', 'name': 'Local Hangout Spots', 'description': 'Where locals actually socialize'},
                {'emoji': '🎪', 'name': 'Community Events', 'description': 'Festivals & gatherings happening now'},
            ]),
            ('spontaneous', [
                {'emoji': '🎲', 'name': 'Mystery Adventures', 'description': 'Surprise experiences based on your mood'},
                {'emoji': '🚪', 'name': 'Pop-up Experiences', 'description': 'Limited-time local events'},
            ]),
        ]
        self.default_suggestions = [
            {'emoji': '🏔️', 'name': 'Kumano Kodo', 'description': 'Ancient pilgrimage trails'},
            {'emoji': '🏠', 'name': 'Shirakawa-go', 'description': 'Traditional villages'},
            {'emoji': '🌊', 'name': 'Naoshima Island', 'description': 'Art & nature fusion'},
        ]
        self.quick_reply_sets = [
            ('adventure_seeker', ["Show me adventure spots", "What about outdoor activities?"]),
            ('cultural', ["Cultural experiences nearby", "Local art & history"]),
            ('social', ["Where do locals hang out?", "Social events this week"]),
        ]

    # -------------------------
    # TONE / CANNED RESPONSE
    # -------------------------
    def select_tone(self, dna=None):
        if dna is not None:
            for dim, threshold, persona in self.tone_rules:
                if getattr(dna, dim) > threshold:
                    return PersonaTone(persona.tone, persona.expertise, persona.empathy)
        return PersonaTone(self.default_tone.tone, self.default_tone.expertise, self.default_tone.empathy)

    def select_canned_response(self, dna=None):
        """Index into CANNED_RESPONSES"""
        if dna is not None:
            for dim, threshold, index in self.response_rules:
                if getattr(dna, dim) > threshold:
                    return index
        return 0

    def canned_response(self, dna=None):
        return CANNED_RESPONSES[self.select_canned_response(dna)]

    # -------------------------
    # CHAT PAGE HEURISTICS
    # -------------------------
    def welcome_message(self, dna=None, tone=None):
        if dna is None:
            return ("Hey there! I'm your AI travel twin. I've learned your preferences and I'm here "
                    "to help plan your perfect trip. What destination are you thinking about?")

        tone = tone or self.select_tone(dna).tone
        personality = dna.personality
        if tone == 'enthusiastic' and dna.adventure_seeker > 70:
            return (f"🎉 Hey adventure seeker! I can tell you're all about those epic experiences! "
                    f"As {personality}, I'm super excited to help you discover some incredible hidden gems "
                    f"and off-the-beaten-path adventures. Where should we explore next?")
        if tone == 'formal' and dna.cultural > 70:
            return (f"Greetings! I understand you appreciate cultural depth and authentic experiences. "
                    f"As {personality}, I'm delighted to assist you in discovering meaningful destinations "
                    f"that align with your sophisticated travel preferences. Which region interests you most?")
        if tone == 'humorous' and dna.social > 70:
            return (f"Hey there, social butterfly! 🦋 I see you're {personality} - basically the life of "
                    f"the travel party! I'm here to help you find the coolest spots where you can meet amazing "
                    f"people and have unforgettable experiences. Ready to make some travel magic happen?")
        return (f"Hi! I'm your personalized AI travel twin. I've analyzed your travel DNA and see you're "
                f"{personality}. I'm here to suggest experiences that match your unique style. "
                f"What kind of adventure are you in the mood for?")

    def adaptive_intro(self, dna=None, tone=None):
        if dna is None:
            return "Perfect! Based on your interests, I'd recommend:"
        tone = tone or self.select_tone(dna).tone
        return self.adaptive_intros.get(tone, self.adaptive_intros['casual'])

    def follow_up_question(self, tone='casual'):
        return self.follow_ups.get(tone, self.follow_ups['casual'])

    def suggestions(self, dna=None, limit=3):
        if dna is None:
            return [dict(card) for card in self.default_suggestions]
        cards = []
        for dim, dim_cards in self.suggestion_cards:
            if getattr(dna, dim) > 70:
                cards.extend(dict(card) for card in dim_cards)
        return cards[:limit]

    def quick_replies(self, dna=None, limit=4):
        if dna is None:
            return ["Tell me about Kumano Kodo", "Create full itinerary", "Budget considerations"]
        replies = []
        for dim, dim_replies in self.quick_reply_sets:
            if getattr(dna, dim) > 70:
                replies.extend(dim_replies)
        replies.extend(["Create personalized itinerary", "Best time to visit?"])
        return replies[:limit]


def infer_mood(text):
    """relax -> party -> explore keyword sets, first hit wins; otherwise 'all'."""
    text_lower = (text or '').lower()
    for mood, keywords in MOOD_KEYWORDS:
        if any(keyword in text_lower for keyword in keywords):
            return mood
    return 'all'
