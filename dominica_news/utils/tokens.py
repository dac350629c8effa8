"""
JWT issuance and verification (PyJWT)
"""
import re
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from dominica_news.exceptions import Unauthorized

_DURATION_RE = re.compile(r'^\s*(\d+)\s*([smhd]?)\s*$')
_UNITS = {'': 1, 's': 1, 'm': 60, 'h': 3600, 'd': 86400}


def parse_duration(value):
    """'24h' / '30m' / '7d' / '3600' -> seconds"""
    if isinstance(value, (int, float)):
        return int(value)
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f'Invalid duration: {value!r}')
    amount, unit = match.groups()
    return int(amount) * _UNITS[unit]


def generate_token(user, now=None):
    """Sign an access token carrying userId, email and role"""
    now = now or datetime.now(timezone.utc)
    expires_in = parse_duration(current_app.config['JWT_EXPIRES_IN'])
    payload = {
        'userId': str(user.id),
        'email': user.email,
        'role': user.role,
        'iat': now,
        'exp': now + timedelta(seconds=expires_in),
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def verify_token(token):
    """Decode a token or raise Unauthorized with the reason"""
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized('Authentication token has expired')
    except jwt.InvalidTokenError:
        raise Unauthorized('Invalid authentication token')
