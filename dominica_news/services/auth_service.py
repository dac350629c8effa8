import logging

from dominica_news.extensions import db
from dominica_news.exceptions import Conflict, Unauthorized, NotFound
from dominica_news.models.auth import User
from dominica_news.services.store import commit_or_conflict
from dominica_news.utils.permissions import ROLE_ADMIN
from dominica_news.utils.tokens import generate_token

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def register(email, password, full_name, role=ROLE_ADMIN):
        """Create an account and return (user, token)"""
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            raise Conflict('User already exists with this email')

        user = User(email=email, password=password, full_name=full_name.strip(), role=role)
        db.session.add(user)
        commit_or_conflict('User already exists with this email')
        logger.info('User registered: %s', user.email)
        return user, generate_token(user)

    @staticmethod
    def login(email, password):
        user = User.query.filter_by(email=(email or '').strip().lower()).first()
        # Same message for unknown email and wrong password
        if user is None or not user.verify_password(password or ''):
            raise Unauthorized('Invalid credentials')
        return user, generate_token(user)

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, int(user_id))
        if user is None:
            raise NotFound('User not found')
        return user
