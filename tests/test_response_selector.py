import pytest

from conftest import make_dna
from personalization.response_selector import CANNED_RESPONSES, PersonalizedResponseSelector, infer_mood


@pytest.fixture
def selector():
    return PersonalizedResponseSelector()


def test_default_tone(selector):
    assert selector.select_tone(None).to_dict() == {'tone': 'casual', 'expertise': 75, 'empathy': 85}
    assert selector.select_tone(make_dna()).tone == 'casual'


@pytest.mark.parametrize('overrides, expected', [
    ({'adventure_seeker': 81}, ('enthusiastic', 90, 85)),
    ({'cultural': 81}, ('formal', 95, 90)),
    ({'social': 81}, ('humorous', 75, 95)),
    ({'adventure_seeker': 80, 'cultural': 80, 'social': 80}, ('casual', 75, 85)),
])
def test_tone_rules(selector, overrides, expected):
    tone = selector.select_tone(make_dna(**overrides))
    assert (tone.tone, tone.expertise, tone.empathy) == expected


@pytest.mark.parametrize('overrides, index', [
    ({}, 0),
    ({'cultural': 71}, 1),
    ({'adventure_seeker': 71}, 2),
    ({'social': 71}, 3),
    ({'cultural': 70, 'adventure_seeker': 70, 'social': 70}, 0),
])
def test_canned_response_rules(selector, overrides, index):
    assert selector.select_canned_response(make_dna(**overrides)) == index


def test_tone_and_canned_priorities_differ(selector):
    dna = make_dna(adventure_seeker=85, cultural=85)

    assert selector.select_tone(dna).tone == 'enthusiastic'
    assert selector.canned_response(dna) == CANNED_RESPONSES[1]


def test_canned_response_without_dna(selector):
    assert selector.canned_response(None) == CANNED_RESPONSES[0]


@pytest.mark.parametrize('text, mood', [
    ("I want to relax at the beach", 'relax'),
    ("let's hit a club", 'party'),
    ("Let's go on an ADVENTURE", 'explore'),
    ("a quiet bar", 'relax'),
    ("What time is it?", 'all'),
    ("", 'all'),
])
def test_infer_mood(text, mood):
    assert infer_mood(text) == mood


def test_welcome_follows_tone(selector):
    adventurer = make_dna(adventure_seeker=90, personality='The Adventurer')

    assert selector.welcome_message(adventurer).startswith('🎉 Hey adventure seeker!')
    assert 'The Adventurer' in selector.welcome_message(adventurer)
    assert selector.welcome_message(None).startswith("Hey there! I'm your AI travel twin.")
    assert selector.welcome_message(make_dna()).startswith("Hi! I'm your personalized AI travel twin.")


def test_adaptive_intro_and_follow_up(selector):
    assert selector.adaptive_intro(make_dna(cultural=90)).startswith('Excellent selection.')
    assert selector.adaptive_intro(None) == "Perfect! Based on your interests, I'd recommend:"
    assert selector.follow_up_question('unknown') == selector.follow_up_question('casual')


def test_quick_replies_are_capped(selector):
    replies = selector.quick_replies(make_dna(adventure_seeker=90, cultural=90, social=90))

    assert len(replies) == 4
    assert replies[:2] == ["Show me adventure spots", "What about outdoor activities?"]


def test_quick_replies_without_traits(selector):
    assert selector.quick_replies(make_dna()) == ["Create personalized itinerary", "Best time to visit?"]


def test_suggestions(selector):
    cards = selector.suggestions(make_dna(cultural=90, spontaneous=90, social=90))

    assert len(cards) == 3
    assert [c['name'] for c in cards] == ['Artisan Workshops', 'Private Cultural Tours', 'Local Hangout Spots']
    assert len(selector.suggestions(None)) == 3
    assert selector.suggestions(make_dna()) == []
