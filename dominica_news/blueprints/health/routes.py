import os
import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from dominica_news.extensions import db, cache
from dominica_news.blueprints.health import health_bp
from dominica_news.models.base import utc_now, isoformat_utc

STARTED_AT = time.monotonic()


def _database_ok():
    try:
        db.session.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError as e:
        current_app.logger.error(f'Health check database ping failed: {e}')
        db.session.rollback()
        return False


def _now():
    return isoformat_utc(utc_now())


@health_bp.route('/health')
def health():
    """Liveness plus database and cache status; 503 when the database is down"""
    operational = _database_ok()
    body = {
        'status': 'ok' if operational else 'error',
        'timestamp': _now(),
        'uptime': round(time.monotonic() - STARTED_AT, 3),
        'environment': os.environ.get('FLASK_ENV', 'development'),
        'database': {'status': 'connected' if operational else 'disconnected', 'operational': operational},
        'cache': cache.cache.stats(),
    }
    if not operational:
        body['message'] = 'Database not operational'
        return body, 503
    return body


@health_bp.route('/ready')
def ready():
    if not _database_ok():
        return {'status': 'not ready', 'message': 'Database not ready'}, 503
    return {'status': 'ready', 'timestamp': _now()}


@health_bp.route('/live')
def live():
    return {'status': 'alive', 'timestamp': _now()}
