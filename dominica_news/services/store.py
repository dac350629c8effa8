from sqlalchemy.exc import IntegrityError

from dominica_news.extensions import db
from dominica_news.exceptions import Conflict


def commit_or_conflict(message):
    """
    Commit the session; a uniqueness violation raised by the database
    (e.g. two writers racing for the same slug) becomes a Conflict.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(message)
