from flask import current_app

from dominica_news.extensions import cache
from dominica_news.blueprints.categories import categories_bp
from dominica_news.blueprints.categories.forms import CategoryForm, CategoryUpdateForm
from dominica_news.services.category_service import CategoryService
from dominica_news.utils.audit import audit_log
from dominica_news.utils.cache import cache_key, is_successful_payload, has_authorization
from dominica_news.utils.pagination import page_args, pagination_meta
from dominica_news.utils.permissions import admin_required
from dominica_news.utils.rate_limit import rate_limit


@categories_bp.route('')
@cache.cached(timeout=900, key_prefix=cache_key('category'),
              response_filter=is_successful_payload, unless=has_authorization)
def list_categories():
    """All categories by display order, then name"""
    categories = [category.to_dict() for category in CategoryService.list_categories()]
    return {'success': True, 'data': {'categories': categories, 'count': len(categories)}}


@categories_bp.route('/<slug>')
@cache.cached(timeout=900, key_prefix=cache_key('category'),
              response_filter=is_successful_payload, unless=has_authorization)
def get_category(slug):
    category = CategoryService.get_by_slug(slug)
    return {'success': True, 'data': {'category': category.to_dict()}}


@categories_bp.route('/<slug>/articles')
@cache.cached(timeout=300, key_prefix=cache_key('public'),
              response_filter=is_successful_payload, unless=has_authorization)
def category_articles(slug):
    """Published articles of one category, newest first, without content"""
    page, limit = page_args(current_app.config['ARTICLES_PER_PAGE'],
                            current_app.config['MAX_ARTICLES_PER_PAGE'])
    category, pagination = CategoryService.published_articles(slug, page, limit)
    return {
        'success': True,
        'data': {
            'category': category.to_dict(),
            'articles': [article.to_dict(include_content=False) for article in pagination.items],
            'pagination': pagination_meta(pagination, 'totalArticles'),
        },
    }


# ---- admin ---------------------------------------------------------------

@categories_bp.route('', methods=['POST'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('CATEGORY_CREATE')
def create_category():
    form = CategoryForm().validate_or_raise()
    category = CategoryService.create(
        name=form.name.data,
        description=form.value('description'),
        display_order=form.display_order.data,
    )
    return {
        'success': True,
        'message': 'Category created successfully',
        'data': {'category': category.to_dict()},
    }, 201


@categories_bp.route('/<int:category_id>', methods=['PUT'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('CATEGORY_UPDATE')
def update_category(category_id):
    form = CategoryUpdateForm().validate_or_raise()
    category = CategoryService.update(
        category_id, form.changes('name', 'description', 'display_order')
    )
    return {
        'success': True,
        'message': 'Category updated successfully',
        'data': {'category': category.to_dict()},
    }


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('CATEGORY_DELETE')
def delete_category(category_id):
    CategoryService.delete(category_id)
    return {'success': True, 'message': 'Category deleted successfully'}
