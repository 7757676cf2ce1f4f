"""
Virtual route resolver for LocalSEO landing pages.

Two URL shapes are recognised, in this order:

  1. /service/<service-slug>/<city-slug>/   canonical; rendered in place (200)
  2. /localseo/<slug>/                      legacy; 301 to the canonical path

Anything else is not a LocalSEO route and passes through untouched
(``resolve()`` returns None). A recognised shape without a matching row
resolves to NOT_FOUND, which the caller answers with a non-cacheable 404.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from .models import LocalPage
from .slugs import normalize

logger = logging.getLogger(__name__)

# Patterns are written against paths without the leading slash so the same
# strings work in Django's re_path() and in resolve().
SERVICE_ROUTE = r'^service/(?P<service>[^/]+)/(?P<city>[^/]+)/?$'
LEGACY_ROUTE = r'^localseo/(?P<slug>[^/]+)/?$'

_SERVICE_RE = re.compile(SERVICE_ROUTE)
_LEGACY_RE = re.compile(LEGACY_ROUTE)

MATCH_SERVICE_CITY = 'service_city'
MATCH_LEGACY_SLUG = 'legacy_slug'

SERVE = 'serve'
REDIRECT = 'redirect'
NOT_FOUND = 'not_found'


@dataclass(frozen=True)
class RouteMatch:
    kind: str
    service: str = ''
    city: str = ''
    slug: str = ''


@dataclass(frozen=True)
class Resolution:
    outcome: str
    match: RouteMatch
    page: Optional[LocalPage] = None
    location: Optional[str] = None
    status_code: int = 200


def canonical_path(page) -> str:
    """
    /service/<normalize(service_keyword)>/<normalize(city)>/

    Falls back to the site root when either part normalizes to an empty
    string. Never raises, so a degenerate row cannot break rendering.
    """
    service = normalize(getattr(page, 'service_keyword', ''))
    city = normalize(getattr(page, 'city', ''))
    if not service or not city:
        return '/'
    return f'/service/{service}/{city}/'


def match_route(path: str) -> Optional[RouteMatch]:
    """Match a request path against the two LocalSEO shapes."""
    relative = (path or '').lstrip('/')

    m = _SERVICE_RE.match(relative)
    if m:
        return RouteMatch(kind=MATCH_SERVICE_CITY, service=m.group('service'), city=m.group('city'))

    m = _LEGACY_RE.match(relative)
    if m:
        return RouteMatch(kind=MATCH_LEGACY_SLUG, slug=m.group('slug'))

    return None


def resolve(path: str) -> Optional[Resolution]:
    """
    Resolve a request path to a serve / redirect / not-found decision.

    Returns None when the path is not a LocalSEO route at all.
    """
    match = match_route(path)
    if match is None:
        return None

    if match.kind == MATCH_SERVICE_CITY:
        page = LocalPage.objects.get_by_service_city_slugs(match.service, match.city)
    else:
        page = LocalPage.objects.get_by_slug(match.slug)

    if page is None:
        logger.debug(f"No LocalPage for {path}")
        return Resolution(outcome=NOT_FOUND, match=match, status_code=404)

    if match.kind == MATCH_LEGACY_SLUG:
        location = canonical_path(page)
        logger.debug(f"Legacy URL {path} → {location}")
        return Resolution(outcome=REDIRECT, match=match, page=page, location=location, status_code=301)

    return Resolution(outcome=SERVE, match=match, page=page)
