from personalization.models import Recommendation


def ids(response):
    return [r['id'] for r in response.get_json()]


def test_all_recommendations(client):
    response = client.get('/api/recommendations')

    assert response.status_code == 200
    body = response.get_json()
    assert [r['id'] for r in body] == ['rec1', 'rec2', 'rec3']
    assert body[0]['displayRating'] == '4.8'
    assert 'distance' not in body[0]


def test_mood_filter(client):
    assert ids(client.get('/api/recommendations?mood=party')) == ['rec2']
    assert ids(client.get('/api/recommendations?mood=all')) == ['rec1', 'rec2', 'rec3']


def test_location_filter_adds_distance(client):
    body = client.get('/api/recommendations?lat=35.6762&lng=139.6503').get_json()

    assert [r['id'] for r in body] == ['rec1', 'rec2']
    assert body[0]['distance'] == 0
    assert body[0]['distanceLabel'] == '0m'
    assert body[1]['distanceLabel'].endswith('km')


def test_location_with_radius_and_mood(client):
    assert ids(client.get('/api/recommendations?lat=35.6762&lng=139.6503&radius=20')) == ['rec1', 'rec2', 'rec3']
    assert ids(client.get('/api/recommendations?lat=35.6762&lng=139.6503&radius=20&mood=explore')) == ['rec1', 'rec3']


def test_text_search_is_tracked(client, services):
    assert ids(client.get('/api/recommendations?q=TEMPLE&userId=demo-user')) == ['rec3']
    assert services.tracker.pending() == 1


def test_user_behavior_flags_applied(client, services):
    services.storage.add_recommendation(Recommendation(id='rec4', title='Old Shrine', description='',
                                                       rating=41, category='Cultural'))
    for _ in range(3):
        client.post('/api/behavior/track', json={'userId': 'demo-user', 'actionType': 'skip',
                                                 'itemType': 'recommendation', 'itemId': 'rec4'})

    assert 'rec4' in ids(client.get('/api/recommendations'))
    assert 'rec4' not in ids(client.get('/api/recommendations?userId=demo-user'))
    assert 'rec4' not in ids(client.get('/api/recommendations/adaptive/demo-user'))


def test_bad_coordinates(client):
    response = client.get('/api/recommendations?lat=north&lng=139.6')
    assert response.status_code == 400
    assert 'lat' in response.get_json()['error']


def test_crowd_optimized(client, services):
    services.storage.add_recommendation(Recommendation(id='rec5', title='Quiet Garden', description='',
                                                       rating=40, category='Nature'))
    assert ids(client.get('/api/recommendations/crowd-optimized')) == ['rec1', 'rec2', 'rec3']


def test_server_error_is_generic(client, services, monkeypatch):
    def broken():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(services.storage, 'get_recommendations', broken)
    response = client.get('/api/recommendations')

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to fetch recommendations'}
