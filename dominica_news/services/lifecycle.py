"""
Content lifecycle rules
Write-time validation for articles/categories and the publication-date
state transition. Nothing here touches the database.
"""
import re

from dominica_news.exceptions import ValidationFailure
from dominica_news.models.base import utc_now
from dominica_news.models.content import STATUS_DRAFT, STATUS_PUBLISHED, ARTICLE_STATUSES

SLUG_RE = re.compile(r'^[a-z0-9]+(-[a-z0-9]+)*$')

TITLE_MIN, TITLE_MAX = 5, 500
CONTENT_MIN = 50
EXCERPT_MAX = 500
CATEGORY_NAME_MIN, CATEGORY_NAME_MAX = 2, 100
DESCRIPTION_MAX = 500

SLUG_MESSAGE = 'Slug must contain only lowercase letters, numbers, and hyphens'


def apply_status_rules(entity, previous_status, new_status, now=None):
    """
    Move ``entity`` to ``new_status`` and keep ``published_at`` consistent.

    - to published: stamp ``published_at`` only if it is unset, so an
      explicit or earlier publish date survives later edits
    - to draft: clear ``published_at``, even if it carried a date
    ``previous_status`` is None for a brand-new entity.
    """
    if new_status not in ARTICLE_STATUSES:
        raise ValidationFailure('Status must be either "draft" or "published"')

    entity.status = new_status
    if new_status == STATUS_DRAFT:
        entity.published_at = None
    elif entity.published_at is None:
        entity.published_at = now or utc_now()
    return entity


def _length(value):
    return len(value.strip()) if value else 0


def article_errors(title, content, slug, excerpt=None):
    errors = []
    if not TITLE_MIN <= _length(title) <= TITLE_MAX:
        errors.append(f'Article title must be between {TITLE_MIN} and {TITLE_MAX} characters')
    if _length(content) < CONTENT_MIN:
        errors.append(f'Article content must be at least {CONTENT_MIN} characters long')
    if excerpt is not None and _length(excerpt) > EXCERPT_MAX:
        errors.append(f'Article excerpt cannot exceed {EXCERPT_MAX} characters')
    if not slug or not SLUG_RE.match(slug):
        errors.append(SLUG_MESSAGE)
    return errors


def validate_article(title, content, slug, excerpt=None):
    """Raise ValidationFailure listing every broken rule"""
    errors = article_errors(title, content, slug, excerpt)
    if errors:
        raise ValidationFailure('. '.join(errors))


def validate_category(name, slug, description=None, display_order=0):
    errors = []
    if not CATEGORY_NAME_MIN <= _length(name) <= CATEGORY_NAME_MAX:
        errors.append(
            f'Category name must be between {CATEGORY_NAME_MIN} and {CATEGORY_NAME_MAX} characters'
        )
    if not slug or not SLUG_RE.match(slug):
        errors.append(SLUG_MESSAGE)
    if description is not None and _length(description) > DESCRIPTION_MAX:
        errors.append(f'Category description cannot exceed {DESCRIPTION_MAX} characters')
    if display_order is None or display_order < 0:
        errors.append('Display order must be a non-negative integer')
    if errors:
        raise ValidationFailure('. '.join(errors))

