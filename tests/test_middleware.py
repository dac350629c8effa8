from conftest import PASSWORD


def test_unknown_route_uses_error_shape(client):
    response = client.get('/api/does-not-exist')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Not found - /api/does-not-exist'}


def test_method_not_allowed(client):
    response = client.delete('/api/articles')
    assert response.status_code == 405
    assert response.get_json()['success'] is False


def test_debug_adds_stack(app, client):
    app.debug = True
    body = client.get('/api/categories/nowhere').get_json()
    assert body['error'] == 'Category not found'
    assert 'stack' in body
    assert body['details']['name'] == 'NotFound'


def test_security_headers(client):
    response = client.get('/api/live')
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'DENY'
    assert response.headers['Referrer-Policy'] == 'no-referrer'
    # HSTS is production only
    assert 'Strict-Transport-Security' not in response.headers


def test_cors_allows_frontend_origin(app, client):
    origin = app.config['FRONTEND_URL']
    response = client.get('/api/categories', headers={'Origin': origin})
    assert response.headers['Access-Control-Allow-Origin'] == origin


def test_cors_ignores_other_origins(client):
    response = client.get('/api/categories', headers={'Origin': 'https://evil.example'})
    assert 'Access-Control-Allow-Origin' not in response.headers


def test_global_rate_limit(app, client):
    app.config.update(RATE_LIMIT_ENABLED=True, RATE_LIMIT_MAX_REQUESTS=3)
    for _ in range(3):
        assert client.get('/api/categories').status_code == 200

    response = client.get('/api/categories')
    assert response.status_code == 429
    assert response.get_json() == {
        'success': False,
        'error': 'Too many requests from this IP, please try again later.',
    }
    # probes are exempt
    assert client.get('/api/health').status_code == 200


def test_rate_limit_is_per_client(app, client):
    app.config.update(RATE_LIMIT_ENABLED=True, RATE_LIMIT_MAX_REQUESTS=1)
    assert client.get('/api/categories', headers={'X-Forwarded-For': '10.0.0.1'}).status_code == 200
    assert client.get('/api/categories', headers={'X-Forwarded-For': '10.0.0.1'}).status_code == 429
    assert client.get('/api/categories', headers={'X-Forwarded-For': '10.0.0.2, 10.0.0.1'}).status_code == 200


def test_auth_limiter_counts_only_failures(app, client, admin):
    app.config.update(RATE_LIMIT_ENABLED=True, AUTH_RATE_LIMIT=(3, 900))
    good = {'email': admin['email'], 'password': PASSWORD}
    bad = {'email': admin['email'], 'password': 'Wrong1234'}

    for _ in range(5):
        assert client.post('/api/auth/login', json=good).status_code == 200
    for _ in range(3):
        assert client.post('/api/auth/login', json=bad).status_code == 401

    response = client.post('/api/auth/login', json=good)
    assert response.status_code == 429
    assert response.get_json()['error'] == 'Too many authentication attempts, please try again later'


def test_admin_limiter(app, client, admin_headers):
    app.config.update(RATE_LIMIT_ENABLED=True, ADMIN_RATE_LIMIT=(2, 60))
    assert client.get('/api/admin/articles', headers=admin_headers).status_code == 200
    assert client.get('/api/admin/articles', headers=admin_headers).status_code == 200
    assert client.get('/api/admin/articles', headers=admin_headers).status_code == 429


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    body = response.get_json()
    assert body['status'] == 'ok'
    assert body['database'] == {'status': 'connected', 'operational': True}
    assert set(body['cache']) == {'totalEntries', 'validEntries', 'expiredEntries'}


def test_health_counts_cached_entries(client, category):
    client.get('/api/categories')
    assert client.get('/api/health').get_json()['cache']['validEntries'] >= 1


def test_ready_and_live(client):
    assert client.get('/api/ready').get_json()['status'] == 'ready'
    assert client.get('/api/live').get_json()['status'] == 'alive'
