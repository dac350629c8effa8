from flask import g
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from dominica_news.exceptions import Unauthorized
from dominica_news.extensions import db, login_manager
from dominica_news.utils.permissions import Identity, ROLE_ADMIN, ROLES
from dominica_news.utils.tokens import verify_token
from .base import BaseModel


class User(UserMixin, BaseModel):
    """Editor account"""
    __tablename__ = 'news_users'
    __hidden__ = frozenset({'password_hash'})

    email = db.Column(db.String(255), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    # Every registered account is an editor for now
    role = db.Column(db.Enum(*ROLES, name='user_role'), nullable=False, default=ROLE_ADMIN)

    articles = db.relationship('Article', back_populates='author', lazy='dynamic')
    images = db.relationship('Image', back_populates='uploader', lazy='dynamic')

    @property
    def password(self):
        raise AttributeError('password is not a readable attribute')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def identity(self):
        return Identity(user_id=self.id, email=self.email, role=self.role)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def __repr__(self):
        return f'<User {self.email}>'


@login_manager.request_loader
def load_user_from_request(request):
    """
    Resolve ``Authorization: Bearer <token>`` into a User.
    Failures leave the reason in ``g.auth_error`` and return None, so public
    endpoints still work with a bad header.
    """
    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer ') or not header[7:].strip():
        g.auth_error = 'Access token is required'
        return None

    try:
        payload = verify_token(header[7:].strip())
        user_id = int(payload.get('userId'))
    except Unauthorized as e:
        g.auth_error = e.message
        return None
    except (TypeError, ValueError):
        g.auth_error = 'Invalid authentication token'
        return None

    user = db.session.get(User, user_id)
    if user is None:
        g.auth_error = 'User not found'
    return user


@login_manager.unauthorized_handler
def unauthorized():
    raise Unauthorized(g.get('auth_error') or 'Authentication required')
