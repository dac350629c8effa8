import logging

from dominica_news.extensions import db
from dominica_news.exceptions import NotFound, Conflict
from dominica_news.models.content import Category, Article, STATUS_PUBLISHED
from dominica_news.services.integrity import ensure_deletable
from dominica_news.services.lifecycle import validate_category
from dominica_news.services.store import commit_or_conflict
from dominica_news.utils.cache import invalidate_cache
from dominica_news.utils.slugify import slugify, generate_unique_slug

logger = logging.getLogger(__name__)

# Category names are embedded in article payloads, so article views go too
CACHE_PATTERNS = ('^category:', '^article:', '^public:')


def _slug_taken(exclude_id=None):
    def exists(candidate):
        query = Category.query.filter(Category.slug == candidate)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None
    return exists


def _invalidate():
    for pattern in CACHE_PATTERNS:
        invalidate_cache(pattern)


class CategoryService:
    @staticmethod
    def list_categories():
        return Category.query.order_by(Category.display_order.asc(), Category.name.asc()).all()

    @staticmethod
    def get(category_id):
        category = db.session.get(Category, category_id)
        if category is None:
            raise NotFound('Category not found')
        return category

    @staticmethod
    def get_by_slug(slug):
        category = Category.query.filter_by(slug=slug).first()
        if category is None:
            raise NotFound('Category not found')
        return category

    @staticmethod
    def published_articles(slug, page, limit):
        """(category, pagination) of the category's published articles"""
        category = CategoryService.get_by_slug(slug)
        pagination = (Article.query
                      .filter_by(category_id=category.id, status=STATUS_PUBLISHED)
                      .order_by(Article.published_at.desc())
                      .paginate(page=page, per_page=limit, error_out=False))
        return category, pagination

    @staticmethod
    def create(name, description=None, display_order=None):
        name = name.strip() if name else name
        if Category.query.filter_by(name=name).first():
            raise Conflict('Category name already exists')

        slug = generate_unique_slug(slugify(name), _slug_taken())
        display_order = display_order or 0
        validate_category(name, slug, description, display_order)

        category = Category(name=name, slug=slug, description=description, display_order=display_order)
        db.session.add(category)
        commit_or_conflict('Category name or slug already exists')
        _invalidate()
        logger.info('Category created: %s', category.slug)
        return category

    @staticmethod
    def update(category_id, changes):
        """
        Apply the provided fields; the slug is regenerated only when the name
        actually changes, and the category's own slug never counts as taken.
        """
        category = CategoryService.get(category_id)

        name = category.name
        slug = category.slug
        if changes.get('name') is not None:
            name = changes['name'].strip()
            if name != category.name:
                clash = Category.query.filter(Category.name == name, Category.id != category.id).first()
                if clash:
                    raise Conflict('Category name already exists')
                slug = generate_unique_slug(slugify(name), _slug_taken(exclude_id=category.id))

        description = changes['description'] if 'description' in changes else category.description
        display_order = category.display_order
        if changes.get('display_order') is not None:
            display_order = changes['display_order']

        validate_category(name, slug, description, display_order)

        category.name = name
        category.slug = slug
        category.description = description
        category.display_order = display_order
        commit_or_conflict('Category name or slug already exists')
        _invalidate()
        logger.info('Category updated: %s', category.slug)
        return category

    @staticmethod
    def delete(category_id):
        category = CategoryService.get(category_id)
        ensure_deletable(category)
        db.session.delete(category)
        db.session.commit()
        _invalidate()
        logger.info('Category deleted: %s', category.slug)
