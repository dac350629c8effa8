from wtforms import StringField, TextAreaField, IntegerField
from wtforms.validators import DataRequired, InputRequired, Optional, AnyOf

from dominica_news.models.content import ARTICLE_STATUSES
from dominica_news.utils.forms import JsonForm, IsoDateTimeField
from dominica_news.utils.validators import validate_image_reference

STATUS_MESSAGE = 'Status must be either draft or published'

# Form attribute -> service field, in the order the service expects
ARTICLE_FIELDS = ('title', 'excerpt', 'content', 'featured_image', 'category_id', 'status', 'published_at')


class ArticleForm(JsonForm):
    """
    Article editor payload
    Lengths and the slug are checked by the lifecycle rules when saving.
    """
    title = StringField('Title', validators=[DataRequired(message='Article title is required')])
    excerpt = TextAreaField('Excerpt', validators=[Optional()])
    content = TextAreaField('Content', validators=[DataRequired(message='Article content is required')])
    featured_image = StringField('Featured image', name='featuredImage', validators=[
        Optional(), validate_image_reference
    ])
    category_id = IntegerField('Category', name='categoryId', validators=[
        InputRequired(message='Please provide a valid category ID')
    ])
    status = StringField('Status', validators=[Optional(), AnyOf(ARTICLE_STATUSES, message=STATUS_MESSAGE)])
    published_at = IsoDateTimeField('Published at', name='publishedAt', validators=[Optional()])


class ArticleUpdateForm(ArticleForm):
    title = StringField('Title', validators=[Optional()])
    content = TextAreaField('Content', validators=[Optional()])
    category_id = IntegerField('Category', name='categoryId', validators=[Optional()])
