from flask import current_app, request

from dominica_news.extensions import cache
from dominica_news.blueprints.articles import articles_bp
from dominica_news.services.article_service import ArticleService
from dominica_news.utils.cache import cache_key, is_successful_payload, has_authorization
from dominica_news.utils.pagination import page_args, pagination_meta


def _listing(category_slug=None):
    page, limit = page_args(current_app.config['ARTICLES_PER_PAGE'],
                            current_app.config['MAX_ARTICLES_PER_PAGE'])
    pagination = ArticleService.published(page, limit, category_slug)
    return {
        'success': True,
        'data': {
            'articles': [article.to_dict(include_content=False) for article in pagination.items],
            'pagination': pagination_meta(pagination, 'totalArticles'),
        },
    }


@articles_bp.route('')
@cache.cached(timeout=300, key_prefix=cache_key('public'),
              response_filter=is_successful_payload, unless=has_authorization)
def list_articles():
    """Published articles, newest first; ?category=<slug> narrows the list"""
    return _listing(request.args.get('category') or None)


@articles_bp.route('/category/<slug>')
@cache.cached(timeout=300, key_prefix=cache_key('public'),
              response_filter=is_successful_payload, unless=has_authorization)
def list_by_category(slug):
    return _listing(slug)


@articles_bp.route('/<slug>')
@cache.cached(timeout=600, key_prefix=cache_key('article'),
              response_filter=is_successful_payload, unless=has_authorization)
def get_article(slug):
    article = ArticleService.get_published(slug)
    return {'success': True, 'data': {'article': article.to_dict(category_description=True)}}


@articles_bp.route('/<slug>/related')
@cache.cached(timeout=600, key_prefix=cache_key('article'),
              response_filter=is_successful_payload, unless=has_authorization)
def related_articles(slug):
    """Other published articles from the same category"""
    config = current_app.config
    limit = request.args.get('limit', config['RELATED_ARTICLES_DEFAULT'], type=int) \
        or config['RELATED_ARTICLES_DEFAULT']
    limit = max(1, min(limit, config['MAX_RELATED_ARTICLES']))
    articles = ArticleService.related(slug, limit)
    return {
        'success': True,
        'data': {'articles': [article.to_dict(include_content=False) for article in articles]},
    }
