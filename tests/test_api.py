import pytest
from pymongo.errors import PyMongoError


def new_game(client, **body):
    response = client.post('/api/new_game', json=body)
    assert response.status_code == 200
    return response.get_json()['game_id']


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


def test_health(client):
    data = client.get('/api/health').get_json()
    assert data['status'] == 'healthy'
    assert data['players_available'] is True


def test_categories(client):
    data = client.get('/api/categories').get_json()
    assert [category['id'] for category in data['categories']] == ['food', 'places', 'singlish', 'all']


def test_new_game_hides_answer(client):
    response = client.post('/api/new_game', json={'category': 'food'})
    data = response.get_json()

    assert data['success'] is True
    assert data['state']['answer'] is None
    assert data['state']['word_length'] == 5
    assert data['state']['category'] == 'food'


def test_new_game_unknown_category(client):
    response = client.post('/api/new_game', json={'category': 'durian'})
    assert response.status_code == 400
    assert response.get_json()['error_type'] == 'UnknownCategory'


def test_guess_flow_to_win(client):
    game_id = new_game(client, stats={'played': 2, 'won': 1, 'streak': 1, 'max_streak': 1})

    first = client.post(f'/api/game/{game_id}/guess', json={'guess': 'tasty'}).get_json()
    assert [tile['state'] for tile in first['state']['board'][0]] == \
        ['present', 'correct', 'present', 'absent', 'correct']

    final = client.post(f'/api/game/{game_id}/guess', json={'guess': 'SATAY'}).get_json()['state']
    assert final['won'] is True
    assert final['answer'] == 'SATAY'
    assert final['stats'] == {'played': 3, 'won': 2, 'streak': 2, 'max_streak': 2}
    assert final['reaction'] == 'Wah, steady lah!'


def test_guess_errors(client):
    game_id = new_game(client)

    missing = client.post(f'/api/game/{game_id}/guess', json={})
    assert missing.status_code == 400

    short = client.post(f'/api/game/{game_id}/guess', json={'guess': 'SAT'})
    assert short.status_code == 400
    assert short.get_json()['error_type'] == 'LengthMismatch'

    client.post(f'/api/game/{game_id}/guess', json={'guess': 'SATAY'})
    over = client.post(f'/api/game/{game_id}/guess', json={'guess': 'TASTY'})
    assert over.status_code == 409
    assert over.get_json()['error_type'] == 'RoundTerminated'


def test_unknown_game(client):
    assert client.get('/api/game/nope/state').status_code == 404
    assert client.post('/api/game/nope/guess', json={'guess': 'SATAY'}).status_code == 404
    assert client.post('/api/game/nope/key', json={'key': 'A'}).status_code == 404
    assert client.delete('/api/game/nope').status_code == 404


def test_key_presses_auto_submit(client):
    game_id = new_game(client)
    for letter in 'SATA':
        state = client.post(f'/api/game/{game_id}/key', json={'key': letter}).get_json()['state']
    assert state['current_guess'] == 'SATA'

    state = client.post(f'/api/game/{game_id}/key', json={'key': 'Y'}).get_json()['state']
    assert state['won'] is True
    assert state['current_attempt'] == 1


def test_enter_on_short_row(client):
    game_id = new_game(client)
    client.post(f'/api/game/{game_id}/key', json={'key': 'S'})
    response = client.post(f'/api/game/{game_id}/key', json={'key': 'ENTER'})
    assert response.status_code == 400
    assert response.get_json()['error_type'] == 'LengthMismatch'


def test_hint_and_post_round_text(client):
    game_id = new_game(client)

    hint = client.post(f'/api/game/{game_id}/hint').get_json()
    assert hint['hint'] == 'A test hint'

    early = client.post(f'/api/game/{game_id}/explain')
    assert early.status_code == 409
    assert early.get_json()['error_type'] == 'RoundInProgress'

    client.post(f'/api/game/{game_id}/guess', json={'guess': 'SATAY'})
    assert client.post(f'/api/game/{game_id}/explain').get_json() == {'success': True, 'response': 'Wah, steady lah!'}
    assert client.post(f'/api/game/{game_id}/funfact').get_json()['response'] == 'Wah, steady lah!'


def test_chat(client):
    game_id = new_game(client)
    assert client.post(f'/api/game/{game_id}/chat', json={}).status_code == 400

    data = client.post(f'/api/game/{game_id}/chat', json={'message': 'Got meat?'}).get_json()
    assert data['reply'] == 'Wah, steady lah!'
    assert [entry['role'] for entry in data['chat']] == ['user', 'merlion']


def test_delete_game(client):
    game_id = new_game(client)
    assert client.delete(f'/api/game/{game_id}').get_json() == {'success': True}
    assert client.get(f'/api/game/{game_id}/state').status_code == 404


def test_player_profile_flow(client):
    created = client.post('/api/players', json={'nickname': 'KopiKing'})
    assert created.status_code == 201
    token = created.get_json()['token']

    taken = client.post('/api/players', json={'nickname': 'kopiking'})
    assert taken.status_code == 409

    too_short = client.post('/api/players', json={'nickname': 'ab'})
    assert too_short.status_code == 400

    login = client.post('/api/players/login', json={'nickname': 'KOPIKING'})
    assert login.status_code == 200
    assert client.post('/api/players/login', json={'nickname': 'ghost'}).status_code == 404

    response = client.post('/api/new_game', json={}, headers=auth_header(token))
    game_id = response.get_json()['game_id']
    assert response.get_json()['state']['player_id'] is not None
    client.post(f'/api/game/{game_id}/guess', json={'guess': 'SATAY'})

    me = client.get('/api/players/me', headers=auth_header(token)).get_json()
    assert me['player']['nickname'] == 'KopiKing'
    assert me['stats'] == {'games_played': 1, 'games_won': 1, 'win_rate': 100}

    board = client.get('/api/leaderboard').get_json()
    assert board['entries'][0]['nickname'] == 'KopiKing'
    assert board['entries'][0]['rank'] == 1


def test_me_requires_token(client):
    assert client.get('/api/players/me').status_code == 401
    assert client.get('/api/players/me', headers=auth_header('junk')).status_code == 401


def test_new_game_rejects_bad_token(client):
    response = client.post('/api/new_game', json={}, headers=auth_header('junk'))
    assert response.status_code == 401


def test_leaderboard_bad_sort(client):
    response = client.get('/api/leaderboard?sort=streak')
    assert response.status_code == 400


@pytest.mark.parametrize('body, status, error', [
    ({'type': 'poem', 'word': 'SATAY', 'category': 'food'}, 400, 'Invalid request type'),
    ({'type': 'hint'}, 400, 'word and category are required'),
])
def test_ai_endpoint_validation(client, body, status, error):
    response = client.post('/api/ai', json=body)
    assert response.status_code == status
    assert response.get_json() == {'error': error}


def test_ai_endpoint(client):
    response = client.post('/api/ai', json={
        'type': 'reaction', 'word': 'SATAY', 'category': 'food', 'guessNumber': 2, 'won': True
    })
    assert response.get_json() == {'response': 'Wah, steady lah!'}


def test_ai_endpoint_without_key(client):
    from guesssg.services.ai_service import initialize_ai_service

    initialize_ai_service(None)
    response = client.post('/api/ai', json={'type': 'hint', 'word': 'SATAY', 'category': 'food'})
    assert response.status_code == 500
    assert response.get_json() == {'error': 'API key not configured'}


def test_categories_include_keyboard_layout(client):
    rows = client.get('/api/categories').get_json()['keyboard_rows']
    assert rows[2][0] == 'ENTER'
    assert rows[2][-1] == '⌫'


def test_non_string_key_is_a_client_error(client):
    game_id = new_game(client)
    response = client.post(f'/api/game/{game_id}/key', json={'key': 5})
    assert response.status_code == 400
    assert response.get_json()['error_type'] == 'InvalidGuess'


def test_daily_flag_must_be_boolean(client):
    response = client.post('/api/new_game', json={'daily': 'false'})
    assert response.status_code == 400
    assert response.get_json()['success'] is False

    practice = client.post('/api/new_game', json={'daily': False}).get_json()
    assert practice['state']['daily'] is False


def test_finished_round_wins_over_bad_guess(client):
    game_id = new_game(client)
    client.post(f'/api/game/{game_id}/guess', json={'guess': 'SATAY'})

    response = client.post(f'/api/game/{game_id}/guess', json={'guess': '12345'})
    assert response.status_code == 409
    assert response.get_json()['error_type'] == 'RoundTerminated'


def test_final_state_has_no_pending_reaction(client):
    game_id = new_game(client)
    state = client.post(f'/api/game/{game_id}/guess', json={'guess': 'SATAY'}).get_json()['state']
    assert state['reaction'] == 'Wah, steady lah!'
    assert state['reaction_pending'] is False


def test_storage_failures_use_error_envelope(client, player_service, monkeypatch):
    token = client.post('/api/players', json={'nickname': 'KopiKing'}).get_json()['token']

    def broken_find(*args, **kwargs):
        raise PyMongoError('connection reset')

    monkeypatch.setattr(player_service.results_collection, 'find', broken_find)
    me = client.get('/api/players/me', headers=auth_header(token))
    assert me.status_code == 500
    assert me.get_json()['success'] is False
    assert me.get_json()['error'].startswith('Database error')

    board = client.get('/api/leaderboard')
    assert board.status_code == 500
    assert board.get_json()['success'] is False

    monkeypatch.setattr(player_service.players_collection, 'find_one', broken_find)
    lookup = client.post('/api/new_game', json={}, headers=auth_header(token))
    assert lookup.status_code == 500
    assert lookup.get_json()['error'].startswith('Database error')
