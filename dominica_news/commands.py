import os
import random
from datetime import timedelta

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from dominica_news.extensions import db, cache
from dominica_news.exceptions import NewsException
from dominica_news.models.auth import User
from dominica_news.models.base import utc_now
from dominica_news.models.content import Category, Article, Image, STATUS_PUBLISHED, STATUS_DRAFT
from dominica_news.services.auth_service import AuthService
from dominica_news.services.image_service import ImageService
from dominica_news.services.integrity import ensure_deletable
from dominica_news.utils.fake_gen import fake
from dominica_news.utils.permissions import ROLE_ADMIN
from dominica_news.utils.slugify import slugify, generate_unique_slug

DEFAULT_CATEGORIES = [
    ('World', 'International news and global events'),
    ('Dominica', 'Local news from the Nature Island of the Caribbean'),
    ('Economy', 'Economic news and business developments'),
    ('Agriculture', 'Agricultural news and farming updates'),
    ('Education', 'Educational news and academic developments'),
    ('Entertainment', 'Entertainment news and cultural events'),
    ('Lifestyle', 'Lifestyle, health, and wellness news'),
    ('Sports', 'Sports news and athletic achievements'),
]


@click.command('status')
@with_appcontext
def status():
    """Row counts per table"""
    click.echo(click.style('Dominica News database status:', fg='cyan', bold=True))

    try:
        click.echo(f" - Users: \t\t{User.query.count()}")
        click.echo(f" - Categories: \t\t{Category.query.count()}")
        click.echo(f" - Articles: \t\t{Article.query.count()}")
        click.echo(f"   (published: \t{Article.query.filter_by(status=STATUS_PUBLISHED).count()})")
        click.echo(f" - Images: \t\t{Image.query.count()}")
    except SQLAlchemyError as e:
        click.echo(click.style(f'Database read failed: {e}', fg='red'))
        click.echo("Run 'flask db upgrade' first")
        raise SystemExit(1)


@click.command('seed')
@click.option('--with-samples', is_flag=True, help='Also generate Faker sample articles')
@click.option('--count', default=12, show_default=True, help='Number of sample articles')
@with_appcontext
def seed(with_samples, count):
    """
    Create the default categories and an admin account.
    Existing rows are left alone, so running it twice is harmless.
    """
    click.echo(click.style('Seeding Dominica News...', fg='cyan', bold=True))

    # 1. Categories
    for order, (name, description) in enumerate(DEFAULT_CATEGORIES, start=1):
        if Category.query.filter_by(name=name).first():
            click.echo(f' = category {name} exists')
            continue
        db.session.add(Category(name=name, slug=slugify(name), description=description, display_order=order))
        click.echo(f' + category {name}')
    db.session.commit()

    # 2. Admin
    email = os.environ.get('ADMIN_EMAIL', 'admin@dominica-news.com').lower()
    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(
            email=email,
            password=os.environ.get('ADMIN_PASSWORD', 'Password123'),
            full_name=os.environ.get('ADMIN_NAME', 'Admin User'),
            role=ROLE_ADMIN,
        )
        db.session.add(admin)
        db.session.commit()
        click.echo(f' + admin {email}')
    else:
        click.echo(f' = admin {email} exists')

    # 3. Sample articles
    if with_samples:
        init_samples(admin, count)

    cache.clear()
    click.echo(click.style('Seeding complete.', fg='green'))


def init_samples(author, count):
    categories = Category.query.all()
    taken = {slug for (slug,) in db.session.query(Article.slug)}
    now = utc_now()

    for i in range(count):
        title = fake.news_headline()
        slug = generate_unique_slug(slugify(title), lambda candidate: candidate in taken)
        taken.add(slug)
        published = random.random() < 0.8
        db.session.add(Article(
            title=title,
            slug=slug,
            excerpt=fake.news_excerpt(),
            content=fake.news_body(),
            category=random.choice(categories),
            author=author,
            status=STATUS_PUBLISHED if published else STATUS_DRAFT,
            published_at=now - timedelta(hours=6 * i) if published else None,
        ))
    db.session.commit()
    click.echo(f' + {count} sample articles')


@click.command('create-admin')
@click.option('--email', prompt=True)
@click.option('--full-name', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_admin(email, full_name, password):
    """Create an admin account"""
    try:
        user, _ = AuthService.register(email, password, full_name, role=ROLE_ADMIN)
    except NewsException as e:
        raise click.ClickException(e.message)
    click.echo(click.style(f'Admin {user.email} created (id {user.id})', fg='green'))


@click.command('delete-user')
@click.argument('email')
@with_appcontext
def delete_user(email):
    """Delete an account that owns no articles or images"""
    user = User.query.filter_by(email=email.strip().lower()).first()
    if user is None:
        raise click.ClickException(f'No user with email {email}')
    try:
        ensure_deletable(user)
    except NewsException as e:
        raise click.ClickException(e.message)
    db.session.delete(user)
    db.session.commit()
    click.echo(click.style(f'User {email} deleted', fg='green'))


@click.command('prune-images')
@click.option('--dry-run', is_flag=True, help='Only report what would be removed')
@with_appcontext
def prune_images(dry_run):
    """Remove image files without a record and records without a file"""
    orphan_files, dangling = ImageService.find_orphans()
    for name in orphan_files:
        click.echo(f' - orphan file {name}')
    for image in dangling:
        click.echo(f' - record {image.id} ({image.filename}) has no file')

    if dry_run:
        click.echo(click.style(
            f'{len(orphan_files)} file(s), {len(dangling)} record(s) would be removed', fg='yellow'))
        return

    files, rows = ImageService.prune_orphans()
    click.echo(click.style(f'Removed {files} file(s) and {rows} record(s)', fg='green'))

