from dominica_news.extensions import db
from dominica_news.models import Category


def test_list_is_ordered_by_display_order_then_name(client, make_category):
    make_category('World', display_order=2)
    make_category('Economy', display_order=1)
    make_category('Dominica', display_order=1)

    body = client.get('/api/categories').get_json()
    assert body['success'] is True
    assert body['data']['count'] == 3
    assert [c['name'] for c in body['data']['categories']] == ['Dominica', 'Economy', 'World']
    assert set(body['data']['categories'][0]) >= {'id', 'name', 'slug', 'description', 'displayOrder', 'createdAt'}


def test_get_by_slug(client, category):
    body = client.get(f"/api/categories/{category['slug']}").get_json()
    assert body['data']['category']['name'] == 'Sports'


def test_get_unknown_slug(client):
    response = client.get('/api/categories/nowhere')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Category not found'}


def test_category_articles_lists_only_published(client, category, make_article):
    make_article('Cricket final tonight', category)
    make_article('Unfinished draft piece', category, status='draft')

    data = client.get(f"/api/categories/{category['slug']}/articles").get_json()['data']
    assert data['category']['slug'] == 'sports'
    assert [a['title'] for a in data['articles']] == ['Cricket final tonight']
    assert data['pagination']['totalArticles'] == 1


def test_public_list_is_cached(app, client, category):
    assert client.get('/api/categories').get_json()['data']['count'] == 1

    # written behind the service's back, so nothing invalidates the cache
    with app.app_context():
        db.session.add(Category(name='Hidden', slug='hidden', display_order=0))
        db.session.commit()

    assert client.get('/api/categories').get_json()['data']['count'] == 1


def test_create(client, admin_headers):
    response = client.post('/api/categories', headers=admin_headers,
                           json={'name': 'Arts & Culture', 'description': 'Festivals', 'displayOrder': 3})
    assert response.status_code == 201
    category = response.get_json()['data']['category']
    assert category['slug'] == 'arts-culture'
    assert category['displayOrder'] == 3


def test_create_invalidates_public_list(client, admin_headers, category):
    assert client.get('/api/categories').get_json()['data']['count'] == 1
    client.post('/api/categories', headers=admin_headers, json={'name': 'Weather'})
    assert client.get('/api/categories').get_json()['data']['count'] == 2


def test_create_requires_admin(client, reader_headers):
    anonymous = client.post('/api/categories', json={'name': 'Weather'})
    assert anonymous.status_code == 401
    assert anonymous.get_json()['error'] == 'Access token is required'

    reader = client.post('/api/categories', headers=reader_headers, json={'name': 'Weather'})
    assert reader.status_code == 403
    assert reader.get_json()['error'] == 'Insufficient permissions'


def test_create_duplicate_name(client, admin_headers, category):
    response = client.post('/api/categories', headers=admin_headers, json={'name': 'Sports'})
    assert response.status_code == 409


def test_create_validation(client, admin_headers):
    response = client.post('/api/categories', headers=admin_headers,
                           json={'name': 'Bad <Name>', 'displayOrder': -1})
    assert response.status_code == 400
    error = response.get_json()['error']
    assert 'name: Category name can only contain' in error
    assert 'displayOrder: Display order must be a non-negative integer' in error


def test_rename_regenerates_slug(client, admin_headers, category):
    response = client.put(f"/api/categories/{category['id']}", headers=admin_headers,
                          json={'name': 'Sport and Fitness'})
    assert response.status_code == 200
    assert response.get_json()['data']['category']['slug'] == 'sport-and-fitness'


def test_update_without_rename_keeps_slug(client, admin_headers, category):
    response = client.put(f"/api/categories/{category['id']}", headers=admin_headers,
                          json={'name': 'Sports', 'description': None, 'displayOrder': 5})
    data = response.get_json()['data']['category']
    assert data['slug'] == 'sports'
    assert data['description'] is None
    assert data['displayOrder'] == 5


def test_rename_avoids_taken_slug(client, admin_headers, make_category):
    make_category('Football')
    other = make_category('Soccer')
    response = client.put(f"/api/categories/{other['id']}", headers=admin_headers, json={'name': 'FOOTBALL'})
    assert response.get_json()['data']['category']['slug'] == 'football-1'


def test_rename_differing_only_in_case_keeps_slug(client, admin_headers, category):
    response = client.put(f"/api/categories/{category['id']}", headers=admin_headers, json={'name': 'SPORTS'})
    assert response.status_code == 200
    data = response.get_json()['data']['category']
    assert data['name'] == 'SPORTS'
    assert data['slug'] == 'sports'


def test_create_next_to_taken_slug(app, client, admin_headers):
    with app.app_context():
        db.session.add(Category(name='Tech News', slug='technology'))
        db.session.commit()
    response = client.post('/api/categories', headers=admin_headers, json={'name': 'Technology'})
    assert response.status_code == 201
    assert response.get_json()['data']['category']['slug'] == 'technology-1'


def test_update_unknown(client, admin_headers):
    response = client.put('/api/categories/999', headers=admin_headers, json={'name': 'Nothing'})
    assert response.status_code == 404


def test_delete(client, admin_headers, category):
    response = client.delete(f"/api/categories/{category['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"/api/categories/{category['slug']}").status_code == 404


def test_delete_with_articles_is_blocked(client, admin_headers, category, make_article):
    make_article('Cricket final tonight', category)
    response = client.delete(f"/api/categories/{category['id']}", headers=admin_headers)
    assert response.status_code == 409
    body = response.get_json()
    assert body['error'] == 'Cannot delete category with existing articles'
    assert body['dependents'] == {'articles': 1}
