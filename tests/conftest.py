import io
import os

import pytest
from PIL import Image as PILImage

from dominica_news import create_app
from dominica_news.extensions import db, rate_limiter
from dominica_news.models import User, Category, Article
from dominica_news.models.base import utc_now
from dominica_news.models.content import STATUS_PUBLISHED
from dominica_news.utils.permissions import ROLE_ADMIN, ROLE_USER
from dominica_news.utils.tokens import generate_token

PASSWORD = 'Password123'
LONG_CONTENT = '<p>' + 'Dominica is known as the Nature Island of the Caribbean. ' * 3 + '</p>'


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    upload_folder = tmp_path / 'uploads'
    os.makedirs(upload_folder / 'thumbnails')
    app.config['UPLOAD_FOLDER'] = str(upload_folder)
    rate_limiter.reset()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
    rate_limiter.reset()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(app, email, role, full_name='Test Editor'):
    with app.app_context():
        user = User(email=email, password=PASSWORD, full_name=full_name, role=role)
        db.session.add(user)
        db.session.commit()
        return {'id': user.id, 'email': user.email, 'token': generate_token(user)}


@pytest.fixture
def admin(app):
    return _make_user(app, 'admin@dominica-news.com', ROLE_ADMIN, 'Admin User')


@pytest.fixture
def admin_headers(admin):
    return {'Authorization': f"Bearer {admin['token']}"}


@pytest.fixture
def reader(app):
    return _make_user(app, 'reader@dominica-news.com', ROLE_USER, 'Plain Reader')


@pytest.fixture
def reader_headers(reader):
    return {'Authorization': f"Bearer {reader['token']}"}


@pytest.fixture
def make_category(app):
    def _make(name='Sports', description=None, display_order=0):
        with app.app_context():
            category = Category(name=name, slug=name.lower().replace(' ', '-'),
                                description=description, display_order=display_order)
            db.session.add(category)
            db.session.commit()
            return {'id': category.id, 'slug': category.slug, 'name': category.name}
    return _make


@pytest.fixture
def category(make_category):
    return make_category('Sports', 'Sports news and athletic achievements', 1)


@pytest.fixture
def make_article(app, admin):
    def _make(title, category, status=STATUS_PUBLISHED, published_at=None, slug=None):
        with app.app_context():
            article = Article(
                title=title,
                slug=slug or title.lower().replace(' ', '-'),
                excerpt='Short summary',
                content=LONG_CONTENT,
                category_id=category['id'],
                author_id=admin['id'],
                status=status,
                published_at=(published_at or utc_now()) if status == STATUS_PUBLISHED else None,
            )
            db.session.add(article)
            db.session.commit()
            return {'id': article.id, 'slug': article.slug}
    return _make


def image_bytes(fmt='PNG', size=(640, 480), color=(200, 30, 30)):
    """Encoded in-memory test image"""
    buf = io.BytesIO()
    PILImage.new('RGB', size, color).save(buf, format=fmt)
    buf.seek(0)
    return buf


@pytest.fixture
def image_file():
    return image_bytes
