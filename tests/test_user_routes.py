def test_create_user_starts_session(client, app):
    resp = client.post('/api/create-user', json={'username': 'dana', 'password': 'hunter22'})
    assert resp.status_code == 201

    current = client.get('/api/current-user').get_json()
    assert current['username'] == 'dana'


def test_create_user_validation(client, sample):
    assert client.post('/api/create-user', json={'username': '', 'password': 'hunter22'}).status_code == 400
    assert client.post('/api/create-user', json={'username': 'erin', 'password': 'x'}).status_code == 400
    assert client.post('/api/create-user', json={'username': 'alice', 'password': 'hunter22'}).status_code == 400


def test_set_user_checks_password(client, sample):
    assert client.post(f'/api/set-user/{sample.alice}', json={'password': 'wrong'}).status_code == 401

    resp = client.post(f'/api/set-user/{sample.alice}', json={'password': 'secret-pass'})
    assert resp.get_json()['user_id'] == sample.alice

    client.post('/api/logout')
    assert client.get('/api/current-user').get_json()['user_id'] is None


def test_set_user_unknown_id(client, sample):
    resp = client.post('/api/set-user/9999', json={'password': 'secret-pass'})
    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Not found'}


def test_shared_key_headers_authenticate(client, sample):
    headers = {'X-API-Key': 'test-shared-key', 'X-User-Id': str(sample.bob)}
    assert client.get('/api/current-user', headers=headers).get_json()['user_id'] == sample.bob

    headers['X-API-Key'] = 'nope'
    assert client.get('/api/current-user', headers=headers).get_json()['user_id'] is None


def test_create_user_rejects_non_string_fields(client, sample):
    resp = client.post('/api/create-user', json={'username': 42, 'password': 'hunter22'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Invalid username'}

    resp = client.post('/api/create-user', json={'username': 'dana', 'name': {'first': 'D'}, 'password': 'hunter22'})
    assert resp.status_code == 400
    assert client.post('/api/create-user', json=['dana']).status_code == 400
