from datetime import datetime, timezone
from dominica_news.extensions import db


def utc_now():
    """Current UTC time as a naive datetime (how timestamps are stored)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value):
    """ISO 8601 UTC instant with a trailing Z"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + 'Z'


def camel_case(name):
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


class BaseModel(db.Model):
    """
    Model base class
    Integer primary key, created/updated timestamps, persistence helpers and
    JSON serialisation with camelCase keys (the frontend's naming).
    """
    __abstract__ = True
    # Columns never serialised
    __hidden__ = frozenset()

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, default=utc_now, index=True)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    def save(self):
        """Persist and commit"""
        db.session.add(self)
        db.session.commit()
        return self

    def delete(self):
        db.session.delete(self)
        db.session.commit()

    def to_dict(self, exclude=()):
        """
        Serialise mapped columns for API responses.
        Skips columns starting with '_' and anything in __hidden__/exclude.
        """
        data = {}
        for c in self.__table__.columns:
            if c.name.startswith('_') or c.name in self.__hidden__ or c.name in exclude:
                continue
            val = getattr(self, c.name)
            if isinstance(val, datetime):
                data[camel_case(c.name)] = isoformat_utc(val)
            else:
                data[camel_case(c.name)] = val
        return data
