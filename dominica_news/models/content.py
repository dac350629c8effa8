from dominica_news.extensions import db
from .base import BaseModel

STATUS_DRAFT = 'draft'
STATUS_PUBLISHED = 'published'
ARTICLE_STATUSES = (STATUS_DRAFT, STATUS_PUBLISHED)


class Category(BaseModel):
    """News section (World, Dominica, Sports, ...)"""
    __tablename__ = 'news_categories'

    name = db.Column(db.String(100), unique=True, nullable=False)
    slug = db.Column(db.String(120), unique=True, index=True, nullable=False)
    description = db.Column(db.String(500))
    display_order = db.Column(db.Integer, nullable=False, default=0)

    articles = db.relationship('Article', back_populates='category', lazy='dynamic')

    __table_args__ = (
        db.CheckConstraint('display_order >= 0', name='ck_category_display_order'),
    )

    def to_ref(self, with_description=False):
        ref = {'id': self.id, 'name': self.name, 'slug': self.slug}
        if with_description:
            ref['description'] = self.description
        return ref

    def __repr__(self):
        return f'<Category {self.slug}>'


class Article(BaseModel):
    """News article"""
    __tablename__ = 'news_articles'

    title = db.Column(db.String(500), nullable=False)
    slug = db.Column(db.String(520), unique=True, index=True, nullable=False)
    excerpt = db.Column(db.String(500))
    content = db.Column(db.Text, nullable=False)  # HTML
    featured_image = db.Column(db.String(1024))

    category_id = db.Column(db.Integer, db.ForeignKey('news_categories.id'), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('news_users.id'), nullable=False, index=True)

    status = db.Column(db.Enum(*ARTICLE_STATUSES, name='article_status'),
                       nullable=False, default=STATUS_DRAFT, index=True)
    published_at = db.Column(db.DateTime, index=True)

    category = db.relationship('Category', back_populates='articles')
    author = db.relationship('User', back_populates='articles')

    __table_args__ = (
        db.Index('ix_articles_status_published', 'status', 'published_at'),
        db.Index('ix_articles_category_status_published', 'category_id', 'status', 'published_at'),
    )

    @property
    def is_published(self):
        return self.status == STATUS_PUBLISHED

    def to_dict(self, include_content=True, category_description=False):
        """Article with its category and author embedded"""
        exclude = {'category_id', 'author_id'}
        if not include_content:
            exclude.add('content')
        data = super().to_dict(exclude=exclude)
        data['category'] = self.category.to_ref(category_description) if self.category else None
        data['author'] = {'id': self.author.id, 'fullName': self.author.full_name} if self.author else None
        return data

    def __repr__(self):
        return f'<Article {self.slug}>'


class Image(BaseModel):
    """Uploaded image; the file and its thumbnail live under UPLOAD_FOLDER"""
    __tablename__ = 'news_images'

    filename = db.Column(db.String(255), unique=True, index=True, nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    file_path = db.Column(db.String(1024), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    mime_type = db.Column(db.String(32), nullable=False, index=True)
    width = db.Column(db.Integer)
    height = db.Column(db.Integer)

    uploaded_by = db.Column(db.Integer, db.ForeignKey('news_users.id'), nullable=False, index=True)
    uploader = db.relationship('User', back_populates='images')

    @property
    def thumbnail_name(self):
        return f'thumb-{self.filename}'

    def to_dict(self):
        data = super().to_dict(exclude={'uploaded_by', 'updated_at'})
        data['uploader'] = {'id': self.uploader.id, 'fullName': self.uploader.full_name} if self.uploader else None
        data['url'] = f'/api/images/{self.filename}'
        data['thumbnailUrl'] = f'/api/images/thumbnails/{self.thumbnail_name}'
        return data

    def __repr__(self):
        return f'<Image {self.filename}>'
