import os
import tempfile
from dotenv import load_dotenv

# 加载 .env 环境变量
load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))


def _env_int(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'hard-to-guess-string'

    # Database
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_RECORD_QUERIES = True

    # JWT
    JWT_SECRET = os.environ.get('JWT_SECRET') or 'fallback-secret-key'
    JWT_EXPIRES_IN = os.environ.get('JWT_EXPIRES_IN', '24h')
    JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')

    # CORS: the React frontend is the only browser client
    FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:5173')

    # Uploads
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    MAX_FILE_SIZE = _env_int('MAX_FILE_SIZE', 5 * 1024 * 1024)
    # multipart overhead on top of the image itself
    MAX_CONTENT_LENGTH = MAX_FILE_SIZE + 64 * 1024
    ALLOWED_IMAGE_TYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/webp'}
    THUMBNAIL_SIZE = (300, 300)
    THUMBNAIL_QUALITY = 80
    OPTIMIZE_QUALITY = 85

    # Rate limiting
    RATE_LIMIT_ENABLED = True
    RATE_LIMIT_WINDOW_SECONDS = _env_int('RATE_LIMIT_WINDOW_SECONDS', 15 * 60)
    RATE_LIMIT_MAX_REQUESTS = _env_int('RATE_LIMIT_MAX_REQUESTS', 100)
    AUTH_RATE_LIMIT = (5, 15 * 60)
    ADMIN_RATE_LIMIT = (30, 60)

    # Response cache (process-local TTL cache, swept on a timer)
    CACHE_TYPE = 'dominica_news.utils.cache.TTLResponseCache'
    CACHE_DEFAULT_TIMEOUT = _env_int('CACHE_DEFAULT_TIMEOUT', 300)
    CACHE_SWEEP_INTERVAL = _env_int('CACHE_SWEEP_INTERVAL', 300)
    CACHE_SWEEPER_ENABLED = True

    # Pagination caps
    ARTICLES_PER_PAGE = 10
    MAX_ARTICLES_PER_PAGE = 50
    IMAGES_PER_PAGE = 20
    MAX_IMAGES_PER_PAGE = 50
    RELATED_ARTICLES_DEFAULT = 5
    MAX_RELATED_ARTICLES = 10

    @staticmethod
    def init_app(app):
        # 确保上传目录存在
        upload_folder = app.config['UPLOAD_FOLDER']
        os.makedirs(os.path.join(upload_folder, 'thumbnails'), exist_ok=True)


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'dominica_news.db')

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)
        os.makedirs(os.path.join(basedir, 'instance'), exist_ok=True)


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    DATABASE_URL = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'dominica_news_prod.db')
    # Heroku/Railway style postgres:// URLs
    if DATABASE_URL and DATABASE_URL.startswith('postgres://'):
        DATABASE_URL = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = DATABASE_URL

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    REQUIRED_ENV_VARS = ('DATABASE_URL', 'JWT_SECRET')

    @classmethod
    def init_app(cls, app):
        missing = [name for name in cls.REQUIRED_ENV_VARS if not os.environ.get(name)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )
        Config.init_app(app)


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET = 'testing-secret'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'dominica_news_test_uploads')
    RATE_LIMIT_ENABLED = False
    CACHE_SWEEPER_ENABLED = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
