"""
Audit trail
Successful admin and auth actions are written to the 'dominica_news.audit'
logger, one record per action.
"""
import json
import logging
from functools import wraps

from flask import request, make_response
from flask_login import current_user

from dominica_news.utils.rate_limit import get_client_identifier

audit_logger = logging.getLogger('dominica_news.audit')


def log_action(action, status_code, details=None):
    """
    Write one audit record
    :param action: action name (e.g. 'USER_LOGIN', 'ARTICLE_CREATE')
    :param status_code: HTTP status of the response
    :param details: extra info (dict)
    """
    user = None
    if current_user and current_user.is_authenticated:
        user = {'id': current_user.id, 'email': current_user.email}
    record = {
        'action': action,
        'user': user,
        'ip': get_client_identifier(),
        'method': request.method,
        'url': request.full_path.rstrip('?'),
        'statusCode': status_code,
    }
    if details:
        record['details'] = details
    audit_logger.info('AUDIT %s', json.dumps(record, ensure_ascii=False, default=str))


def audit_log(action):
    """
    Audit decorator, logs only 2xx responses
    Usage:
    @audit_log('ARTICLE_CREATE')
    def create_article():
        pass
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            rv = f(*args, **kwargs)
            response = make_response(rv)
            if 200 <= response.status_code < 300:
                log_action(action, response.status_code, kwargs or None)
            return response
        return decorated_function
    return decorator
