import sqlite3

import pytest

from conftest import make_dna
from personalization.errors import ValidationError
from personalization.models import ChatMessage, Location, QuizResponse, Recommendation, UserBehavior
from personalization.seed_data import seed
from personalization.storage import InMemoryRepository, SqliteRepository, TravelStorage


@pytest.fixture(params=['memory', 'sqlite'])
def store(request, tmp_path):
    if request.param == 'memory':
        return seed(TravelStorage.in_memory())
    return seed(TravelStorage.sqlite(str(tmp_path / 'travelmate.db')))


# -------------------------
# Repository contract
# -------------------------
@pytest.fixture(params=['memory', 'sqlite'])
def repo(request, tmp_path):
    if request.param == 'memory':
        return InMemoryRepository()
    return SqliteRepository(sqlite3.connect(str(tmp_path / 'repo.db')), 'recommendations', Recommendation)


def make_rec(rec_id, category='Nature'):
    return Recommendation(id=rec_id, title=rec_id, description='', rating=40, category=category)


def test_repository_add_get_list(repo):
    repo.add(make_rec('b'))
    repo.add(make_rec('a', category='Food'))

    assert repo.get('a').category == 'Food'
    assert repo.get('missing') is None
    assert [r.id for r in repo.all()] == ['b', 'a']
    assert [r.id for r in repo.list(lambda r: r.category == 'Nature')] == ['b']


def test_repository_update(repo):
    repo.add(make_rec('a'))

    assert repo.update('a', {'rating': 49, 'not_a_field': 1}) is True
    assert repo.get('a').rating == 49
    assert repo.update('missing', {'rating': 1}) is False


# -------------------------
# TravelStorage
# -------------------------
def test_seeded_store(store):
    assert [r.id for r in store.get_recommendations()] == ['rec1', 'rec2', 'rec3']
    assert store.get_local_place('place1').crowd_data.crowd_level == 'high'
    assert store.get_user('demo-user').username == 'demo'


def test_password_is_hashed(store):
    user = store.create_user('aiko', 's3cret')

    assert user.password != 's3cret'
    assert store.check_user_password('aiko', 's3cret').id == user.id
    assert store.check_user_password('aiko', 'wrong') is None
    assert store.check_user_password('nobody', 's3cret') is None


def test_travel_dna_replaced(store):
    store.update_user_travel_dna('demo-user', make_dna(cultural=90))
    store.update_user_travel_dna('demo-user', make_dna(social=90))

    dna = store.get_user('demo-user').travel_dna
    assert dna.social == 90
    assert dna.cultural == 50


def test_update_missing_user_is_noop(store):
    assert store.update_user_location('ghost', Location(1.0, 2.0)) is False


def test_latest_quiz_answers(store):
    store.save_quiz_response(QuizResponse(question_index=0, answer='culture', user_id='demo-user'))
    store.save_quiz_response(QuizResponse(question_index=1, answer='local', user_id='demo-user'))
    store.save_quiz_response(QuizResponse(question_index=0, answer='adventure', user_id='demo-user'))

    assert store.latest_quiz_answers('demo-user') == {0: 'adventure', 1: 'local'}
    assert len(store.get_user_quiz_responses('demo-user')) == 3


def test_itinerary_sorted_by_day(store):
    items = store.get_user_itinerary('demo-user')
    assert [i.day for i in items] == [1, 1, 1, 2]
    assert [i.id for i in store.get_user_itinerary('demo-user', day=2)] == ['activity4']


def test_skip_and_favorite(store):
    assert store.skip_itinerary_item('activity1').is_completed is True
    assert store.toggle_itinerary_favorite('activity2').is_favorited is True
    assert store.toggle_itinerary_favorite('activity2').is_favorited is False
    assert store.skip_itinerary_item('missing') is None
    assert store.toggle_itinerary_favorite('missing') is None


def test_update_itinerary_item(store):
    assert store.update_itinerary_item('activity1', {'duration_minutes': 30}) is True
    assert store.get_itinerary_item('activity1').duration == '30 min'
    assert store.update_itinerary_item('missing', {'cost': 1}) is False


def test_crowd_data_merge(store):
    before = store.get_local_place('place1').crowd_data

    assert store.update_crowd_data('place1', {'crowdLevel': 'low'}) is True
    after = store.get_local_place('place1').crowd_data
    assert after.crowd_level == 'low'
    assert after.peak_hours == before.peak_hours
    assert after.last_updated is not None


def test_crowd_data_on_recommendation(store):
    assert store.update_crowd_data('rec2', {'crowdLevel': 'high', 'peakHours': ['21:00-23:00']}) is True
    assert store.get_recommendation('rec2').crowd_data.peak_hours == ['21:00-23:00']


def test_crowd_data_unknown_id(store):
    assert store.update_crowd_data('nowhere', {'crowdLevel': 'low'}) is False


def test_crowd_data_invalid_level(store):
    with pytest.raises(ValidationError):
        store.update_crowd_data('place1', {'crowdLevel': 'packed'})


def test_adaptive_recommendations(store):
    store.add_recommendation(make_rec('rec4', category='Cultural'))
    assert 'rec4' in [r.id for r in store.get_adaptive_recommendations('demo-user')]

    for _ in range(3):
        store.track_user_behavior(UserBehavior(action_type='skip', item_type='recommendation',
                                               user_id='demo-user', item_id='rec4'))

    assert store.get_behavior_preferences('demo-user').skips_cultural is True
    assert [r.id for r in store.get_adaptive_recommendations('demo-user')] == ['rec1', 'rec2', 'rec3']


def test_chat_history_and_canned_response(store):
    store.save_chat_message(ChatMessage(message='first', sender='user', user_id='demo-user'))
    store.save_chat_message(ChatMessage(message='second', sender='ai', user_id='demo-user'))
    store.save_chat_message(ChatMessage(message='elsewhere', sender='user', user_id='other'))

    assert [m.message for m in store.get_chat_history('demo-user')] == ['first', 'second']

    store.update_user_travel_dna('demo-user', make_dna(cultural=75))
    assert store.get_personalized_chat_response('demo-user', 'hi').startswith('Since you enjoy cultural')
    assert store.get_personalized_chat_response('ghost', 'hi').startswith('Based on your love')


def test_local_places_query(store):
    assert [p.id for p in store.get_local_places(35.6586, 139.7454)] == ['place1']
    assert store.get_local_places(35.6762, 139.6503) == []
