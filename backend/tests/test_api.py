def create_game(client, **payload):
    res = client.post('/api/games/create', json=payload)
    assert res.status_code == 201
    return res.get_json()


def answer_for(registry, code):
    return registry.get(code).controller.current_lyric.answer


def wrong_option_for(registry, code):
    lyric = registry.get(code).controller.current_lyric
    return next(o for o in lyric.options if o != lyric.answer)


def test_create_quick_game(client):
    game = create_game(client)
    assert len(game['game_code']) == 4
    assert game['game_mode'] == 'quick-game'
    session = game['session']
    assert session['is_game_started'] is True
    assert session['game_config']['genre'] == 'Pop'
    assert session['game_config']['difficulty'] == 'Easy'
    assert session['time_left'] == 300
    assert session['score'] == 0
    assert session['max_rounds'] == 3
    current = game['round']['current_lyric']
    assert game['round']['phase'] == 'round_active'
    assert current['text']
    assert len(current['options']) == 3
    # The answer stays hidden until the round is answered
    assert 'title' not in current
    assert game['round']['correct_option'] is None
    assert game['round']['next_lyric'] is not None


def test_create_single_player_with_custom_config(client):
    game = create_game(client, game_mode='single-player', genre='Folk', difficulty='Hard',
                       duration=45, timer_scope='round', odds=3, wager_amount=2)
    config = game['session']['game_config']
    assert config['genre'] == 'Folk'
    assert config['timer_scope'] == 'round'
    assert config['pot_win'] == 6.0
    assert game['session']['time_left'] == 45
    assert len(game['round']['current_lyric']['options']) == 5


def test_create_rejects_invalid_config(client):
    res = client.post('/api/games/create', json={'max_rounds': 0, 'passing_score': 0})
    assert res.status_code == 400
    assert 'max_rounds' in res.get_json()['error']

    res = client.post('/api/games/create', json={'genre': 'Polka'})
    assert res.status_code == 400

    res = client.post('/api/games/create', json={'game_mode': 'tournament'})
    assert res.status_code == 400


def test_single_player_requires_a_genre(client):
    res = client.post('/api/games/create', json={'game_mode': 'single-player', 'difficulty': 'Easy',
                                                 'duration': 60})
    assert res.status_code == 400


def test_unknown_game_is_404(client):
    assert client.get('/api/games/ZZZZ/state').status_code == 404
    assert client.post('/api/games/ZZZZ/select', json={'title': 'a', 'artist': 'b'}).status_code == 404
    assert client.post('/api/games/ZZZZ/reset').status_code == 404


def test_select_locks_round(client, registry):
    code = create_game(client)['game_code']
    answer = answer_for(registry, code)

    res = client.post(f'/api/games/{code}/select', json={'title': answer.title, 'artist': answer.artist, 'index': 0})
    assert res.status_code == 200
    body = res.get_json()
    assert body['committed'] is True
    assert body['state']['session']['score'] == 1
    assert body['state']['session']['round_index'] == 1
    assert body['state']['round']['phase'] == 'revealed'
    assert body['state']['round']['correct_option'] == {'title': answer.title, 'artist': answer.artist}

    res = client.post(f'/api/games/{code}/select', json={'title': 'Other', 'artist': 'Someone', 'index': 1})
    body = res.get_json()
    assert body['committed'] is False
    assert body['state']['round']['selected_option'] == {'title': answer.title, 'artist': answer.artist}
    assert body['state']['session']['score'] == 1


def test_select_requires_title_and_artist(client):
    code = create_game(client)['game_code']
    res = client.post(f'/api/games/{code}/select', json={'title': 'Daisy Bell'})
    assert res.status_code == 400
    res = client.post(f'/api/games/{code}/select', json={'title': 'Daisy Bell', 'artist': 'Harry Dacre', 'index': 'x'})
    assert res.status_code == 400


def test_full_game_flow(client, registry):
    code = create_game(client)['game_code']
    for _ in range(3):
        answer = answer_for(registry, code)
        res = client.post(f'/api/games/{code}/select', json={'title': answer.title, 'artist': answer.artist})
        assert res.get_json()['committed'] is True
        registry.scheduler.run_until_idle()

    state = client.get(f'/api/games/{code}/state').get_json()
    assert state['round']['phase'] == 'finished'
    assert state['round']['game_result']['is_win'] is True
    assert state['session']['is_game_started'] is False
    assert state['session']['score'] == 3
    assert state['session']['result']['score'] == 3


def test_round_advances_after_reveal(client, registry):
    code = create_game(client)['game_code']
    first_text = client.get(f'/api/games/{code}/state').get_json()['round']['current_lyric']['text']
    wrong = wrong_option_for(registry, code)
    client.post(f'/api/games/{code}/select', json=wrong.to_dict())
    registry.scheduler.run_pending()
    flipped = client.get(f'/api/games/{code}/state').get_json()
    assert flipped['round']['is_card_flipped'] is True
    registry.scheduler.run_pending()
    state = client.get(f'/api/games/{code}/state').get_json()
    assert state['round']['phase'] == 'round_active'
    assert state['round']['is_card_flipped'] is False
    assert state['round']['current_lyric']['text'] != first_text
    assert state['session']['score'] == 0
    assert state['session']['round_index'] == 1


def test_reset_and_restart(client, registry):
    code = create_game(client)['game_code']
    answer = answer_for(registry, code)
    client.post(f'/api/games/{code}/select', json={'title': answer.title, 'artist': answer.artist})

    state = client.post(f'/api/games/{code}/reset').get_json()
    assert state['session']['is_game_started'] is False
    assert state['session']['score'] == 0
    assert state['session']['round_index'] == 0
    assert state['round']['phase'] == 'idle'
    assert state['round']['current_lyric'] is None

    state = client.post(f'/api/games/{code}/restart').get_json()
    assert state['session']['is_game_started'] is True
    assert state['session']['game_config']['genre'] == 'Pop'
    assert state['round']['phase'] == 'round_active'


def test_retry_without_failure_is_conflict(client):
    code = create_game(client)['game_code']
    assert client.post(f'/api/games/{code}/retry').status_code == 409


def test_leave_forgets_game(client, registry):
    code = create_game(client)['game_code']
    res = client.post(f'/api/games/{code}/leave')
    assert res.status_code == 200
    assert registry.get(code) is None
    assert client.get(f'/api/games/{code}/state').status_code == 404


def test_catalogue_routes(client):
    assert client.get('/').status_code == 200
    genres = client.get('/api/genres').get_json()
    assert 'Pop' in genres and 'Folk' in genres
    modes = client.get('/api/game-modes').get_json()
    assert modes == ['quick-game', 'single-player', 'multi-player']


def test_lyrics_catalog_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['lyrics-catalog', '--genre', 'gospel'])
    assert result.exit_code == 0
    assert 'Gospel' in result.output
    assert 'Amazing Grace - John Newton' in result.output
    assert 'Pop' not in result.output


def test_create_rejects_non_finite_stakes(client):
    res = client.post('/api/games/create', json={'odds': 'nan'})
    assert res.status_code == 400
    res = client.post('/api/games/create', json={'odds': 2, 'wager_amount': 'inf'})
    assert res.status_code == 400
    assert 'finite' in res.get_json()['error']


def test_select_outside_current_options_is_not_committed(client, registry):
    code = create_game(client)['game_code']
    res = client.post(f'/api/games/{code}/select', json={'title': 'Not A Song', 'artist': 'Nobody', 'index': 0})
    body = res.get_json()
    assert body['committed'] is False
    assert body['state']['round']['phase'] == 'round_active'
    assert body['state']['session']['round_index'] == 0

    answer = answer_for(registry, code)
    res = client.post(f'/api/games/{code}/select', json={'title': answer.title, 'artist': answer.artist})
    assert res.get_json()['committed'] is True


def test_idle_games_are_evicted_on_create(client, registry):
    stale_code = create_game(client)['game_code']
    registry.get(stale_code).last_seen -= 601
    fresh_code = create_game(client)['game_code']

    assert registry.get(stale_code) is None
    assert client.get(f'/api/games/{stale_code}/state').status_code == 404
    assert registry.get(fresh_code) is not None


def test_recently_used_games_survive_eviction(client, registry):
    code = create_game(client)['game_code']
    assert registry.evict_idle() == []
    assert registry.get(code) is not None
