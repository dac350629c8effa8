"""
Slug helpers
Turn titles/names into URL tokens and pick a free variant of a token
"""
import re

_WHITESPACE_RE = re.compile(r'\s+')
# Anything outside the ASCII slug alphabet, accented letters included
_INVALID_RE = re.compile(r'[^a-z0-9-]+')
_MULTI_HYPHEN_RE = re.compile(r'-{2,}')


def slugify(text):
    """
    Normalize free text into a lowercase, hyphen-delimited token.

    Non-ASCII letters are dropped, not transliterated:
    ``slugify("Café Life")`` is ``"caf-life"``.
    """
    if text is None:
        return ''
    slug = str(text).lower().strip()
    slug = _WHITESPACE_RE.sub('-', slug)
    slug = _INVALID_RE.sub('', slug)
    slug = _MULTI_HYPHEN_RE.sub('-', slug)
    return slug.strip('-')


def generate_unique_slug(base_slug, exists):
    """
    Return the first of ``base``, ``base-1``, ``base-2``, ... for which
    ``exists(candidate)`` is false.

    ``exists`` is called exactly once per candidate, in that order.
    An empty base is not special-cased: it yields ``""``, ``"-1"``, ...
    """
    slug = base_slug
    counter = 1
    while exists(slug):
        slug = f'{base_slug}-{counter}'
        counter += 1
    return slug
