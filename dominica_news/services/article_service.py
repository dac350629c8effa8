import logging

from dominica_news.extensions import db
from dominica_news.exceptions import NotFound
from dominica_news.models.content import Article, Category, STATUS_DRAFT, STATUS_PUBLISHED, ARTICLE_STATUSES
from dominica_news.services.category_service import CategoryService
from dominica_news.services.lifecycle import apply_status_rules, validate_article
from dominica_news.services.store import commit_or_conflict
from dominica_news.utils.cache import invalidate_cache
from dominica_news.utils.slugify import slugify, generate_unique_slug

logger = logging.getLogger(__name__)

CACHE_PATTERNS = ('^article:', '^public:')

# Fields an editor may set directly
EDITABLE_FIELDS = ('title', 'excerpt', 'content', 'featured_image')


def _slug_taken(exclude_id=None):
    def exists(candidate):
        query = Article.query.filter(Article.slug == candidate)
        if exclude_id is not None:
            query = query.filter(Article.id != exclude_id)
        return query.first() is not None
    return exists


def _invalidate():
    for pattern in CACHE_PATTERNS:
        invalidate_cache(pattern)


def _require_category(category_id):
    category = db.session.get(Category, category_id) if category_id is not None else None
    if category is None:
        raise NotFound('Category not found')
    return category


class ArticleService:
    # -- public reads ----------------------------------------------------

    @staticmethod
    def published(page, limit, category_slug=None):
        query = Article.query.filter_by(status=STATUS_PUBLISHED)
        if category_slug:
            category = CategoryService.get_by_slug(category_slug)
            query = query.filter_by(category_id=category.id)
        return query.order_by(Article.published_at.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def get_published(slug):
        article = Article.query.filter_by(slug=slug, status=STATUS_PUBLISHED).first()
        if article is None:
            raise NotFound('Article not found')
        return article

    @staticmethod
    def related(slug, limit):
        """Newest published articles in the same category, excluding itself"""
        article = ArticleService.get_published(slug)
        return (Article.query
                .filter(Article.category_id == article.category_id,
                        Article.status == STATUS_PUBLISHED,
                        Article.id != article.id)
                .order_by(Article.published_at.desc())
                .limit(limit)
                .all())

    # -- admin -----------------------------------------------------------

    @staticmethod
    def admin_list(page, limit, status=None, category_slug=None):
        query = Article.query
        if status in ARTICLE_STATUSES:
            query = query.filter_by(status=status)
        if category_slug:
            category = CategoryService.get_by_slug(category_slug)
            query = query.filter_by(category_id=category.id)
        return query.order_by(Article.updated_at.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def get(article_id):
        article = db.session.get(Article, article_id)
        if article is None:
            raise NotFound('Article not found')
        return article

    @staticmethod
    def create(data, author):
        """
        Create an article from validated form data.
        Articles start as drafts unless a status is given.
        """
        title = (data.get('title') or '').strip()
        slug = generate_unique_slug(slugify(title), _slug_taken())
        validate_article(title, data.get('content'), slug, data.get('excerpt'))
        category = _require_category(data.get('category_id'))

        article = Article(
            title=title,
            slug=slug,
            excerpt=data.get('excerpt'),
            content=data.get('content'),
            featured_image=data.get('featured_image') or None,
            category=category,
            author=author,
        )
        # an explicit (historical) publish date survives the transition
        article.published_at = data.get('published_at')
        apply_status_rules(article, None, data.get('status') or STATUS_DRAFT)

        db.session.add(article)
        commit_or_conflict('Article slug already exists')
        _invalidate()
        logger.info('Article created: %s (%s)', article.slug, article.status)
        return article

    @staticmethod
    def update(article_id, changes):
        """Apply only the fields present in ``changes``"""
        article = ArticleService.get(article_id)

        title = article.title
        slug = article.slug
        if changes.get('title') is not None:
            title = changes['title'].strip()
            if title != article.title:
                slug = generate_unique_slug(slugify(title), _slug_taken(exclude_id=article.id))

        values = {field: getattr(article, field) for field in EDITABLE_FIELDS}
        for field in EDITABLE_FIELDS:
            if field in changes and field != 'title':
                values[field] = changes[field]
        values['title'] = title

        validate_article(title, values['content'], slug, values['excerpt'])

        category = None
        if changes.get('category_id') is not None:
            category = _require_category(changes['category_id'])

        with db.session.no_autoflush:
            for field, value in values.items():
                setattr(article, field, value)
            article.featured_image = article.featured_image or None
            article.slug = slug
            if category is not None:
                article.category = category

            previous_status = article.status
            if changes.get('published_at') is not None:
                article.published_at = changes['published_at']
            apply_status_rules(article, previous_status, changes.get('status') or previous_status)

        commit_or_conflict('Article slug already exists')
        _invalidate()
        logger.info('Article updated: %s (%s -> %s)', article.slug, previous_status, article.status)
        return article

    @staticmethod
    def delete(article_id):
        """Articles have no dependents; deletion is unconditional"""
        article = ArticleService.get(article_id)
        db.session.delete(article)
        db.session.commit()
        _invalidate()
        logger.info('Article deleted: %s', article.slug)
