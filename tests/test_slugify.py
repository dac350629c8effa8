import re

import pytest

from dominica_news.utils.slugify import slugify, generate_unique_slug


@pytest.mark.parametrize('text, expected', [
    ('Hello World', 'hello-world'),
    ('  Breaking   News  ', 'breaking-news'),
    ('Arts & Culture', 'arts-culture'),
    ("Dominica's Tourism Industry", 'dominicas-tourism-industry'),
    ('Café Life', 'caf-life'),
    ('--Already-slugged--', 'already-slugged'),
    ('snake_case title', 'snakecase-title'),
    ('COVID-19 Updates & Analysis!', 'covid-19-updates-analysis'),
    ('', ''),
    (None, ''),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_slugify_output_is_idempotent():
    once = slugify('Hurricane Season: What to Expect in 2024!')
    assert slugify(once) == once


def test_unique_slug_free_base_is_used_as_is():
    assert generate_unique_slug('world', lambda s: False) == 'world'


def test_unique_slug_counts_up_and_checks_in_order():
    taken = {'sports', 'sports-1', 'sports-2'}
    asked = []

    def exists(candidate):
        asked.append(candidate)
        return candidate in taken

    assert generate_unique_slug('sports', exists) == 'sports-3'
    assert asked == ['sports', 'sports-1', 'sports-2', 'sports-3']


def test_unique_slug_skips_only_taken_suffixes():
    taken = {'news', 'news-2'}
    assert generate_unique_slug('news', taken.__contains__) == 'news-1'


def test_unique_slug_with_empty_base():
    taken = {'', '-1', '-2'}
    asked = []

    def exists(candidate):
        asked.append(candidate)
        return candidate in taken

    assert generate_unique_slug('', exists) == '-3'
    assert asked == ['', '-1', '-2', '-3']


SLUG_ALPHABET = re.compile(r'^[a-z0-9-]*$')


@pytest.mark.parametrize('text', [
    'Hello World',
    '  --Leading and trailing--  ',
    'Tabs\tand\nnewlines',
    'Ünïcödé Wörds Ñ',
    '100% Pure *Nature* Island!!!',
    'a - - b',
    '___',
    '日本語のタイトル',
    'Roseau–Portsmouth highway',
    '-',
])
def test_slugify_output_alphabet(text):
    slug = slugify(text)
    assert SLUG_ALPHABET.match(slug)
    assert not slug.startswith('-')
    assert not slug.endswith('-')
    assert '--' not in slug
    assert slugify(slug) == slug
