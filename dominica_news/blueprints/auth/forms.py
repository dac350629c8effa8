from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Length, Email

from dominica_news.utils.forms import JsonForm
from dominica_news.utils.validators import validate_full_name, validate_password_strength


class LoginForm(JsonForm):
    """Sign-in"""
    email = StringField('Email', validators=[
        DataRequired(message='Please provide a valid email address'),
        Email(message='Please provide a valid email address')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])


class RegisterForm(JsonForm):
    """Editor registration"""
    email = StringField('Email', validators=[
        DataRequired(message='Please provide a valid email address'),
        Email(message='Please provide a valid email address')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password must be at least 8 characters long'),
        validate_password_strength
    ])
    full_name = StringField('Full name', name='fullName', validators=[
        DataRequired(message='Full name must be between 2 and 100 characters'),
        Length(min=2, max=100, message='Full name must be between 2 and 100 characters'),
        validate_full_name
    ])
