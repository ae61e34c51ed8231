def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'healthy'


def test_stats_empty(client):
    res = client.get('/api/stats')
    assert res.get_json() == {'connectedPlayers': 0, 'activeLobbies': 0, 'lobbies': []}


def test_stats_counts_connections_and_lobbies(client, connect_player):
    x, _ = connect_player()
    y, _ = connect_player()
    connect_player()
    x.emit('create_lobby')
    code = [p for p in x.get_received() if p['name'] == 'lobby_created'][0]['args'][0]['code']
    y.emit('join_lobby', {'code': code})

    data = client.get('/api/stats').get_json()

    assert data['connectedPlayers'] == 3
    assert data['activeLobbies'] == 1
    assert len(data['lobbies']) == 1
    summary = data['lobbies'][0]
    assert summary['code'] == code
    assert summary['playerCount'] == 2
    assert summary['gameState'] == 'waiting'
    assert 'createdAt' in summary


def test_lobby_view(client, connect_player):
    x, x_sid = connect_player()
    x.emit('create_lobby')
    code = [p for p in x.get_received() if p['name'] == 'lobby_created'][0]['args'][0]['code']

    res = client.get(f'/api/lobby/{code}')

    assert res.status_code == 200
    view = res.get_json()
    assert view['code'] == code
    assert view['playerCount'] == 1
    assert view['maxPlayers'] == 2
    assert view['players'][0]['id'] == x_sid
    assert view['canStart'] is False


def test_lobby_not_found(client):
    res = client.get('/api/lobby/0999')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Lobby not found'}


def test_unknown_route_returns_json_404(client):
    res = client.get('/api/nothing-here')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Not found'}
