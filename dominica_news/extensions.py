from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_caching import Cache
from flask_cors import CORS

from dominica_news.utils.rate_limit import InMemoryRateLimiter

# Extension objects are created unbound and initialised in create_app
db = SQLAlchemy()
migrate = Migrate()
cache = Cache()
cors = CORS()
login_manager = LoginManager()
rate_limiter = InMemoryRateLimiter()
