from flask import current_app, request
from flask_login import current_user

from dominica_news.blueprints.admin import admin_bp
from dominica_news.blueprints.admin.forms import ArticleForm, ArticleUpdateForm, ARTICLE_FIELDS
from dominica_news.services.article_service import ArticleService
from dominica_news.services.image_service import ImageService
from dominica_news.utils.audit import audit_log
from dominica_news.utils.pagination import page_args, pagination_meta
from dominica_news.utils.permissions import admin_required
from dominica_news.utils.rate_limit import rate_limit


# ---- articles --------------------------------------------------------------

@admin_bp.route('/articles')
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
def list_articles():
    """All articles, drafts included, most recently edited first"""
    page, limit = page_args(current_app.config['ARTICLES_PER_PAGE'],
                            current_app.config['MAX_ARTICLES_PER_PAGE'])
    pagination = ArticleService.admin_list(
        page, limit,
        status=request.args.get('status') or None,
        category_slug=request.args.get('category') or None,
    )
    return {
        'success': True,
        'data': {
            'articles': [article.to_dict(include_content=False) for article in pagination.items],
            'pagination': pagination_meta(pagination, 'totalArticles'),
        },
    }


@admin_bp.route('/articles/<int:article_id>')
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
def get_article(article_id):
    article = ArticleService.get(article_id)
    return {'success': True, 'data': {'article': article.to_dict()}}


@admin_bp.route('/articles', methods=['POST'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('ARTICLE_CREATE')
def create_article():
    form = ArticleForm().validate_or_raise()
    article = ArticleService.create(form.changes(*ARTICLE_FIELDS), current_user._get_current_object())
    return {
        'success': True,
        'message': 'Article created successfully',
        'data': {'article': article.to_dict()},
    }, 201


@admin_bp.route('/articles/<int:article_id>', methods=['PUT'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('ARTICLE_UPDATE')
def update_article(article_id):
    form = ArticleUpdateForm().validate_or_raise()
    article = ArticleService.update(article_id, form.changes(*ARTICLE_FIELDS))
    return {
        'success': True,
        'message': 'Article updated successfully',
        'data': {'article': article.to_dict()},
    }


@admin_bp.route('/articles/<int:article_id>', methods=['DELETE'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('ARTICLE_DELETE')
def delete_article(article_id):
    ArticleService.delete(article_id)
    return {'success': True, 'message': 'Article deleted successfully'}


# ---- images ----------------------------------------------------------------

@admin_bp.route('/images/upload', methods=['POST'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('IMAGE_UPLOAD')
def upload_image():
    """Multipart upload, field name ``image``"""
    image = ImageService.upload(request.files.get('image'), current_user._get_current_object())
    return {
        'success': True,
        'message': 'Image uploaded successfully',
        'data': {'image': image.to_dict()},
    }, 201


@admin_bp.route('/images')
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
def list_images():
    page, limit = page_args(current_app.config['IMAGES_PER_PAGE'],
                            current_app.config['MAX_IMAGES_PER_PAGE'])
    pagination = ImageService.list_images(page, limit)
    return {
        'success': True,
        'data': {
            'images': [image.to_dict() for image in pagination.items],
            'pagination': pagination_meta(pagination, 'totalImages'),
        },
    }


@admin_bp.route('/images/<int:image_id>')
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
def get_image(image_id):
    return {'success': True, 'data': {'image': ImageService.get(image_id).to_dict()}}


@admin_bp.route('/images/<int:image_id>', methods=['DELETE'])
@admin_required
@rate_limit('admin', config_key='ADMIN_RATE_LIMIT')
@audit_log('IMAGE_DELETE')
def delete_image(image_id):
    ImageService.delete(image_id)
    return {'success': True, 'message': 'Image deleted successfully'}
