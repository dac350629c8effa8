"""
Referential-integrity policy
One table says which dependents block deleting a parent. Parents not listed
are deleted unconditionally.
"""
from dominica_news.exceptions import Conflict
from dominica_news.models import User, Category, Article, Image

# parent model -> [(dependent model, foreign key column name, label)]
RESTRICTED_BY = {
    Category: [(Article, 'category_id', 'articles')],
    User: [(Article, 'author_id', 'articles'), (Image, 'uploaded_by', 'images')],
}


def blocking_dependents(entity):
    """{label: count} for each dependent kind that still references entity"""
    blocking = {}
    for model, column, label in RESTRICTED_BY.get(type(entity), []):
        count = model.query.filter(getattr(model, column) == entity.id).count()
        if count:
            blocking[label] = count
    return blocking


def ensure_deletable(entity):
    """Raise Conflict when a restricting dependent exists"""
    blocking = blocking_dependents(entity)
    if blocking:
        kind = type(entity).__name__.lower()
        labels = ' and '.join(sorted(blocking))
        raise Conflict(f'Cannot delete {kind} with existing {labels}', payload={'dependents': blocking})
