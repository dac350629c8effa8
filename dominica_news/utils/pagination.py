"""
Pagination helpers shared by the list endpoints
"""
from flask import request


def page_args(default_limit, max_limit):
    """(page, limit) from the query string, clamped"""
    page = request.args.get('page', 1, type=int) or 1
    limit = request.args.get('limit', default_limit, type=int) or default_limit
    return max(page, 1), max(1, min(limit, max_limit))


def pagination_meta(pagination, total_key):
    """Pagination block in the shape the frontend expects"""
    return {
        'currentPage': pagination.page,
        'totalPages': pagination.pages,
        total_key: pagination.total,
        'hasNextPage': pagination.has_next,
        'hasPrevPage': pagination.has_prev,
        'limit': pagination.per_page,
    }
