import atexit
import logging
import traceback

import colorlog
from flask import Flask, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import config
from dominica_news.exceptions import NewsException
from dominica_news.extensions import db, migrate, login_manager, cache, cors, rate_limiter

from dominica_news import commands

# Liveness probes are never rate limited
RATE_LIMIT_EXEMPT = frozenset({'health.health', 'health.ready', 'health.live'})


def create_app(config_name='default'):
    """Dominica News application factory"""
    app = Flask(__name__)

    # 1. Load configuration
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. Initialise extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cache.init_app(app)
    cors.init_app(app, resources={r'/api/*': {'origins': app.config['FRONTEND_URL']}},
                  supports_credentials=True)

    # 3. Logging
    configure_logging(app)

    # 4. Blueprints
    register_blueprints(app)

    # 5. Error handlers
    register_error_handlers(app)

    # 6. Request hooks (rate limit, security headers)
    register_request_hooks(app)

    # 7. CLI commands
    register_commands(app)

    # 8. Background cache sweeper
    start_cache_sweeper(app)

    # 9. Create tables outside production (production uses migrations)
    if config_name != 'production':
        with app.app_context():
            from dominica_news import models  # noqa: F401
            db.create_all()

    return app


def register_blueprints(app):
    """Register the API blueprints"""
    # Health checks
    from dominica_news.blueprints.health import health_bp
    app.register_blueprint(health_bp, url_prefix='/api')

    # Authentication
    from dominica_news.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    # Categories (public reads, admin writes)
    from dominica_news.blueprints.categories import categories_bp
    app.register_blueprint(categories_bp, url_prefix='/api/categories')

    # Published articles
    from dominica_news.blueprints.articles import articles_bp
    app.register_blueprint(articles_bp, url_prefix='/api/articles')

    # Admin: article and image management
    from dominica_news.blueprints.admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    # Image files
    from dominica_news.blueprints.images import images_bp
    app.register_blueprint(images_bp, url_prefix='/api/images')


def _error_response(app, message, code, exc=None, payload=None):
    body = dict(payload or ())
    body['success'] = False
    body['error'] = message
    if app.debug and exc is not None:
        body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        body['details'] = {'name': type(exc).__name__, 'originalMessage': str(exc)}
    return jsonify(body), code


def register_error_handlers(app):
    @app.errorhandler(NewsException)
    def handle_news_exception(e):
        if e.code >= 500:
            app.logger.error(f'{e.code} {request.method} {request.path}: {e.message}')
        return _error_response(app, e.message, e.code, e, e.to_dict())

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        if e.code == 404:
            message = f'Not found - {request.path}'
        elif e.code == 413:
            message = 'File size too large'
        else:
            message = e.description or e.name
        return _error_response(app, message, e.code, e)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        app.logger.warning(f'Integrity error on {request.method} {request.path}: {e.orig}')
        return _error_response(app, 'Resource already exists', 409, e)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        app.logger.exception(f'Unhandled error on {request.method} {request.path}')
        return _error_response(app, 'Internal server error', 500, e)


def register_request_hooks(app):
    from dominica_news.utils.rate_limit import get_client_identifier
    from dominica_news.utils.security import apply_security_headers

    @app.before_request
    def global_rate_limit():
        if not app.config.get('RATE_LIMIT_ENABLED', True) or request.endpoint in RATE_LIMIT_EXEMPT:
            return None
        allowed = rate_limiter.is_allowed(
            f'global:{get_client_identifier()}',
            app.config['RATE_LIMIT_MAX_REQUESTS'],
            app.config['RATE_LIMIT_WINDOW_SECONDS'],
        )
        if not allowed:
            return _error_response(app, 'Too many requests from this IP, please try again later.', 429)
        return None

    @app.after_request
    def security_headers(response):
        return apply_security_headers(response, production=not (app.debug or app.testing))


def register_commands(app):
    """Register Flask CLI commands"""
    app.cli.add_command(commands.status)
    app.cli.add_command(commands.seed)
    app.cli.add_command(commands.create_admin)
    app.cli.add_command(commands.delete_user)
    app.cli.add_command(commands.prune_images)


def start_cache_sweeper(app):
    if not app.config.get('CACHE_SWEEPER_ENABLED'):
        return
    backend = app.extensions['cache'][cache]
    if not backend.running:
        backend.start(app.config['CACHE_SWEEP_INTERVAL'])
        atexit.register(backend.stop)


def configure_logging(app):
    """Coloured console logging in development"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(cyan)s%(name)s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        # app.logger is the "dominica_news" logger, so module loggers propagate to it
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.DEBUG)
    else:
        app.logger.setLevel(logging.INFO)
