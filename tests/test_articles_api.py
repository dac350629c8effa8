from datetime import timedelta

import pytest

from dominica_news.models import Article
from dominica_news.models.base import utc_now

from conftest import LONG_CONTENT


@pytest.fixture
def newsroom(category, make_category, make_article):
    """Three published sports stories, one draft, one story in another section"""
    now = utc_now()
    economy = make_category('Economy', display_order=2)
    return {
        'oldest': make_article('Cricket season opens in Roseau', category, published_at=now - timedelta(days=2)),
        'middle': make_article('Windies squad announced today', category, published_at=now - timedelta(days=1)),
        'newest': make_article('Marathon route through Portsmouth', category, published_at=now),
        'draft': make_article('Unfinished sports feature', category, status='draft'),
        'economy': make_article('Banana exports rise again', economy, published_at=now - timedelta(hours=1)),
    }


def test_listing_shows_published_newest_first(client, newsroom):
    data = client.get('/api/articles').get_json()['data']
    titles = [a['title'] for a in data['articles']]
    assert titles == [
        'Marathon route through Portsmouth',
        'Banana exports rise again',
        'Windies squad announced today',
        'Cricket season opens in Roseau',
    ]
    assert data['pagination'] == {
        'currentPage': 1,
        'totalPages': 1,
        'totalArticles': 4,
        'hasNextPage': False,
        'hasPrevPage': False,
        'limit': 10,
    }


def test_listing_omits_content_and_embeds_refs(client, newsroom):
    article = client.get('/api/articles').get_json()['data']['articles'][0]
    assert 'content' not in article
    assert article['category']['slug'] == 'sports'
    assert article['author']['fullName'] == 'Admin User'
    assert 'categoryId' not in article


def test_listing_pagination_and_limit_cap(client, newsroom):
    data = client.get('/api/articles?page=2&limit=3').get_json()['data']
    assert len(data['articles']) == 1
    assert data['pagination']['hasPrevPage'] is True
    assert data['pagination']['totalPages'] == 2

    capped = client.get('/api/articles?limit=500').get_json()['data']
    assert capped['pagination']['limit'] == 50


def test_listing_by_category(client, newsroom):
    by_query = client.get('/api/articles?category=economy').get_json()['data']['articles']
    by_path = client.get('/api/articles/category/economy').get_json()['data']['articles']
    assert [a['title'] for a in by_query] == ['Banana exports rise again']
    assert by_path == by_query


def test_listing_unknown_category(client, newsroom):
    response = client.get('/api/articles?category=nowhere')
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Category not found'


def test_get_published_article(client, newsroom):
    article = client.get(f"/api/articles/{newsroom['newest']['slug']}").get_json()['data']['article']
    assert article['content'] == LONG_CONTENT
    assert article['category']['description'] == 'Sports news and athletic achievements'
    assert article['status'] == 'published'


def test_draft_is_not_public(client, newsroom):
    response = client.get(f"/api/articles/{newsroom['draft']['slug']}")
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Article not found'}


def test_related_articles(client, newsroom):
    slug = newsroom['middle']['slug']
    related = client.get(f'/api/articles/{slug}/related').get_json()['data']['articles']
    assert [a['title'] for a in related] == ['Marathon route through Portsmouth', 'Cricket season opens in Roseau']

    limited = client.get(f'/api/articles/{slug}/related?limit=1').get_json()['data']['articles']
    assert len(limited) == 1


# ---- admin -----------------------------------------------------------------

def _create(client, headers, category, **fields):
    payload = {'title': 'Budget debate opens in parliament', 'content': LONG_CONTENT, 'categoryId': category['id']}
    payload.update(fields)
    return client.post('/api/admin/articles', headers=headers, json=payload)


def test_create_defaults_to_draft(client, admin_headers, category):
    response = _create(client, admin_headers, category)
    assert response.status_code == 201
    article = response.get_json()['data']['article']
    assert article['slug'] == 'budget-debate-opens-in-parliament'
    assert article['status'] == 'draft'
    assert article['publishedAt'] is None
    assert article['author']['fullName'] == 'Admin User'


def test_create_published_is_stamped(client, admin_headers, category):
    article = _create(client, admin_headers, category, status='published').get_json()['data']['article']
    assert article['publishedAt'] is not None


def test_create_with_explicit_publish_date(client, admin_headers, category):
    article = _create(client, admin_headers, category, status='published',
                      publishedAt='2023-11-03T09:00:00Z').get_json()['data']['article']
    assert article['publishedAt'] == '2023-11-03T09:00:00Z'


def test_timestamps_are_utc_instants(client, admin_headers, category):
    article = _create(client, admin_headers, category, status='published').get_json()['data']['article']
    for field in ('publishedAt', 'createdAt', 'updatedAt'):
        assert article[field].endswith('Z')
        assert '+' not in article[field]


def test_rename_differing_only_in_case_keeps_slug(client, admin_headers, category):
    article_id = _create(client, admin_headers, category).get_json()['data']['article']['id']
    response = client.put(f'/api/admin/articles/{article_id}', headers=admin_headers,
                          json={'title': 'BUDGET DEBATE OPENS IN PARLIAMENT'})
    assert response.status_code == 200
    assert response.get_json()['data']['article']['slug'] == 'budget-debate-opens-in-parliament'


def test_too_short_title_is_rejected_before_any_write(app, client, admin_headers, category):
    response = _create(client, admin_headers, category, title='Hi')
    assert response.status_code == 400
    with app.app_context():
        assert Article.query.count() == 0


def test_same_title_gets_numbered_slug(client, admin_headers, category):
    _create(client, admin_headers, category)
    second = _create(client, admin_headers, category).get_json()['data']['article']
    third = _create(client, admin_headers, category).get_json()['data']['article']
    assert second['slug'] == 'budget-debate-opens-in-parliament-1'
    assert third['slug'] == 'budget-debate-opens-in-parliament-2'


def test_create_validation_errors(client, admin_headers, category):
    response = _create(client, admin_headers, category, content='Too short')
    assert response.status_code == 400
    assert 'at least 50 characters' in response.get_json()['error']

    response = _create(client, admin_headers, category, status='archived')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'status: Status must be either draft or published'

    response = client.post('/api/admin/articles', headers=admin_headers,
                           json={'title': 'No category given', 'content': LONG_CONTENT})
    assert response.status_code == 400
    assert 'categoryId' in response.get_json()['error']


def test_create_with_unknown_category(client, admin_headers, category):
    response = _create(client, admin_headers, {'id': 9999})
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Category not found'


def test_create_strips_script_tags(client, admin_headers, category):
    content = LONG_CONTENT + '<script>alert("x")</script>'
    article = _create(client, admin_headers, category, content=content).get_json()['data']['article']
    assert '<script>' not in article['content']
    assert article['content'].startswith('<p>')


def test_admin_requires_admin_role(client, reader_headers, category):
    assert client.get('/api/admin/articles').status_code == 401
    assert client.get('/api/admin/articles', headers=reader_headers).status_code == 403
    assert _create(client, reader_headers, category).status_code == 403


def test_admin_list_includes_drafts_and_filters(client, admin_headers, newsroom):
    data = client.get('/api/admin/articles', headers=admin_headers).get_json()['data']
    assert data['pagination']['totalArticles'] == 5

    drafts = client.get('/api/admin/articles?status=draft', headers=admin_headers).get_json()['data']
    assert [a['title'] for a in drafts['articles']] == ['Unfinished sports feature']

    economy = client.get('/api/admin/articles?category=economy', headers=admin_headers).get_json()['data']
    assert economy['pagination']['totalArticles'] == 1


def test_admin_get_shows_drafts(client, admin_headers, newsroom):
    response = client.get(f"/api/admin/articles/{newsroom['draft']['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['data']['article']['status'] == 'draft'
    assert client.get('/api/admin/articles/9999', headers=admin_headers).status_code == 404


def test_publication_lifecycle(client, admin_headers, category):
    article_id = _create(client, admin_headers, category).get_json()['data']['article']['id']
    url = f'/api/admin/articles/{article_id}'

    published = client.put(url, headers=admin_headers, json={'status': 'published'}).get_json()['data']['article']
    first_published_at = published['publishedAt']
    assert first_published_at is not None

    retitled = client.put(url, headers=admin_headers,
                          json={'title': 'Budget debate closes in parliament'}).get_json()['data']['article']
    assert retitled['slug'] == 'budget-debate-closes-in-parliament'
    assert retitled['publishedAt'] == first_published_at
    assert retitled['content'] == LONG_CONTENT

    drafted = client.put(url, headers=admin_headers, json={'status': 'draft'}).get_json()['data']['article']
    assert drafted['status'] == 'draft'
    assert drafted['publishedAt'] is None


def test_update_keeping_title_keeps_slug(client, admin_headers, category):
    article = _create(client, admin_headers, category).get_json()['data']['article']
    updated = client.put(f"/api/admin/articles/{article['id']}", headers=admin_headers,
                         json={'title': article['title'], 'excerpt': 'New summary'}).get_json()['data']['article']
    assert updated['slug'] == article['slug']
    assert updated['excerpt'] == 'New summary'


def test_update_rejects_invalid_content(client, admin_headers, category):
    article = _create(client, admin_headers, category).get_json()['data']['article']
    response = client.put(f"/api/admin/articles/{article['id']}", headers=admin_headers, json={'content': 'short'})
    assert response.status_code == 400


def test_update_invalidates_public_cache(client, admin_headers, newsroom):
    slug = newsroom['newest']['slug']
    assert client.get(f'/api/articles/{slug}').get_json()['data']['article']['excerpt'] == 'Short summary'
    assert client.get('/api/articles').get_json()['data']['articles'][0]['excerpt'] == 'Short summary'

    client.put(f"/api/admin/articles/{newsroom['newest']['id']}", headers=admin_headers,
               json={'excerpt': 'Route changes announced'})

    assert client.get(f'/api/articles/{slug}').get_json()['data']['article']['excerpt'] == 'Route changes announced'
    assert client.get('/api/articles').get_json()['data']['articles'][0]['excerpt'] == 'Route changes announced'


def test_delete(client, admin_headers, newsroom):
    url = f"/api/admin/articles/{newsroom['newest']['id']}"
    assert client.delete(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 404
    assert client.get(f"/api/articles/{newsroom['newest']['slug']}").status_code == 404
