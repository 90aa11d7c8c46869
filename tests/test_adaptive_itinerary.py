import pytest

from conftest import make_dna
from personalization.adaptive_itinerary import (TIP_ADVENTURE_MATCH, TIP_AVOID_CROWDS, TIP_OUTDOOR_WEATHER,
                                                AdaptiveItineraryAdjuster, day_stats, format_duration,
                                                parse_duration, round_half_up)
from personalization.models import ItineraryItem, Weather


def item(item_id='a1', minutes=60, category='food', activity_type=None, cost=10):
    return ItineraryItem(id=item_id, day=1, title='Activity', description='', start_time='09:00',
                         end_time='10:00', category=category, cost=cost, duration_minutes=minutes,
                         activity_type=activity_type)


@pytest.fixture
def adjuster():
    return AdaptiveItineraryAdjuster()


@pytest.mark.parametrize('crowd, expected', [('high', 78), ('low', 48), ('medium', 60), ('unknown', 60)])
def test_crowd_multiplier(adjuster, crowd, expected):
    assert adjuster.adjust(item(minutes=60), crowd).estimated_time == expected


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2


def test_sunny_outdoor_tip(adjuster):
    result = adjuster.adjust(item(activity_type='outdoor'), 'high', Weather('sunny', 24))
    assert result.tip == TIP_OUTDOOR_WEATHER


def test_adventure_tip(adjuster):
    result = adjuster.adjust(item(category='adventure', activity_type='indoor'), 'medium',
                             Weather('rainy'), make_dna(adventure_seeker=80))
    assert result.tip == TIP_ADVENTURE_MATCH


def test_adventure_tip_needs_more_than_70(adjuster):
    result = adjuster.adjust(item(category='adventure'), 'medium', Weather('rainy'),
                             make_dna(adventure_seeker=70))
    assert result.tip == ''


def test_crowd_tip_without_weather_or_dna(adjuster):
    assert adjuster.adjust(item(), 'high').tip == TIP_AVOID_CROWDS


def test_no_tip(adjuster):
    assert adjuster.adjust(item(activity_type='outdoor'), 'low', Weather('cloudy')).tip == ''


def test_adjustment_json(adjuster):
    assert adjuster.adjust(item(minutes=90), 'low').to_dict() == {
        'estimatedTime': 72,
        'adaptiveRecommendation': '',
        'crowdLevel': 'low',
    }


def test_adapt_day_defaults_to_medium(adjuster):
    items = [item('a1', minutes=100), item('a2', minutes=100)]
    adjusted = adjuster.adapt_day(items, {'a1': 'high'})

    assert [(i.id, a.estimated_time, a.crowd_level) for i, a in adjusted] == [
        ('a1', 130, 'high'),
        ('a2', 100, 'medium'),
    ]


def test_day_stats():
    assert day_stats([item(cost=15), item(cost=25)]) == {'totalCost': 40, 'totalActivities': 2}
    assert day_stats([]) == {'totalCost': 0, 'totalActivities': 0}


@pytest.mark.parametrize('minutes, text', [(45, '45 min'), (60, '1 hour'), (120, '2 hours'), (90, '1h 30m')])
def test_format_duration(minutes, text):
    assert format_duration(minutes) == text


@pytest.mark.parametrize('text, minutes', [
    ('2 hours', 120),
    ('1h 30m', 90),
    ('45 min', 45),
    ('1.5 hours', 90),
    ('75', 75),
    (30, 30),
    ('whenever', 60),
    (None, 60),
])
def test_parse_duration(text, minutes):
    assert parse_duration(text) == minutes
