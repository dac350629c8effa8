from wtforms import StringField, TextAreaField, IntegerField
from wtforms.validators import DataRequired, Length, Optional

from dominica_news.utils.forms import JsonForm
from dominica_news.utils.validators import validate_category_name, validate_non_negative

NAME_MESSAGE = 'Category name must be between 2 and 100 characters'


class CategoryForm(JsonForm):
    """Create a category"""
    name = StringField('Name', validators=[
        DataRequired(message=NAME_MESSAGE),
        Length(min=2, max=100, message=NAME_MESSAGE),
        validate_category_name
    ])
    description = TextAreaField('Description', validators=[
        Optional(), Length(max=500, message='Category description cannot exceed 500 characters')
    ])
    display_order = IntegerField('Display order', name='displayOrder', validators=[
        Optional(), validate_non_negative
    ])


class CategoryUpdateForm(CategoryForm):
    """Partial update: every field optional"""
    name = StringField('Name', validators=[
        Optional(),
        Length(min=2, max=100, message=NAME_MESSAGE),
        validate_category_name
    ])
