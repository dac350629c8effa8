"""
Form validators
"""
from urllib.parse import urlsplit

from wtforms.validators import ValidationError
import re

from dominica_news.utils.security import check_password_strength


def validate_full_name(form, field):
    """Letters and spaces only"""
    if field.data:
        if not re.match(r'^[a-zA-Z\s]+$', field.data.strip()):
            raise ValidationError('Full name can only contain letters and spaces')


def validate_category_name(form, field):
    """Letters, numbers, spaces, ampersands and hyphens"""
    if field.data:
        if not re.match(r'^[a-zA-Z0-9\s&-]+$', field.data.strip()):
            raise ValidationError(
                'Category name can only contain letters, numbers, spaces, ampersands, and hyphens'
            )


def validate_password_strength(form, field):
    passed, message = check_password_strength(field.data)
    if not passed:
        raise ValidationError(message)


def validate_image_reference(form, field):
    """Absolute http(s) URL, or a path served by this API"""
    if not field.data:
        return
    value = field.data.strip()
    if value.startswith('/api/images/'):
        return
    parts = urlsplit(value)
    if parts.scheme not in ('http', 'https') or not parts.netloc:
        raise ValidationError('Featured image must be a valid URL')


def validate_non_negative(form, field):
    if field.data is not None and field.data < 0:
        raise ValidationError('Display order must be a non-negative integer')
