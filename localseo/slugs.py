"""
Slug normalization for LocalSEO rows and URL segments.

The same transform pre-fills a row's legacy slug at creation and, at request
time, compares /service/<service>/<city>/ segments against stored values.

Accented characters are not transliterated: "ø" is dropped, not mapped to "oe".
Rows whose city or service rely on such characters should be stored in their
pre-slugified form.
"""
import re

_WHITESPACE = re.compile(r'\s+')
_DISALLOWED = re.compile(r'[^a-z0-9-]')
_HYPHENS = re.compile(r'-{2,}')


def normalize(text) -> str:
    """
    Lowercase, turn whitespace runs into hyphens, drop anything outside
    [a-z0-9-], collapse repeated hyphens and trim hyphens from both ends.

    Total and idempotent: normalize(normalize(s)) == normalize(s).
    """
    if not text:
        return ''
    slug = str(text).lower()
    slug = _WHITESPACE.sub('-', slug)
    slug = _DISALLOWED.sub('', slug)
    slug = _HYPHENS.sub('-', slug)
    return slug.strip('-')
