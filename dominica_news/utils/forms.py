"""
JSON request forms
API forms are fed from the sanitised JSON body instead of form data.
"""
from datetime import datetime, timezone

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import Field
from wtforms.widgets import TextInput

from dominica_news.exceptions import ValidationFailure
from dominica_news.utils.security import sanitize_payload


def request_payload():
    """Sanitised JSON object from the request body"""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailure('Request body must be a JSON object')
    return sanitize_payload(payload)


def _formdata(payload):
    formdata = MultiDict()
    for key, value in payload.items():
        # null means "not provided" to WTForms; the route reads it from payload
        if value is None:
            continue
        formdata.add(key, value if isinstance(value, str) else str(value))
    return formdata


class JsonForm(FlaskForm):
    """FlaskForm over a JSON body, no CSRF (bearer-token API)"""

    class Meta:
        csrf = False

    def __init__(self, payload=None, **kwargs):
        self.payload = request_payload() if payload is None else payload
        super().__init__(formdata=_formdata(self.payload), **kwargs)

    def provided(self, field_name):
        """Was the field's JSON key present in the body (even as null)?"""
        return getattr(self, field_name).name in self.payload

    def value(self, field_name):
        """Field data, or None when the JSON value was null"""
        field = getattr(self, field_name)
        if self.payload.get(field.name) is None:
            return None
        return field.data

    def changes(self, *field_names):
        """{field_name: value} for the fields present in the body"""
        return {name: self.value(name) for name in field_names if self.provided(name)}

    def validate_or_raise(self):
        if not self.validate():
            raise ValidationFailure(self.error_message())
        return self

    def error_message(self):
        messages = []
        for field in self:
            for error in field.errors:
                messages.append(f'{field.name}: {error}')
        return '. '.join(messages) or 'Validation failed'


class IsoDateTimeField(Field):
    """ISO 8601 timestamp (``2024-01-31T10:00:00Z``), stored as naive UTC"""
    widget = TextInput()

    def _value(self):
        return self.data.isoformat() if self.data else ''

    def process_formdata(self, valuelist):
        if not valuelist or not valuelist[0]:
            return
        raw = valuelist[0].strip()
        if raw.endswith('Z'):
            raw = raw[:-1] + '+00:00'
        try:
            value = datetime.fromisoformat(raw)
        except ValueError:
            self.data = None
            raise ValueError('Not a valid ISO 8601 date')
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        self.data = value
