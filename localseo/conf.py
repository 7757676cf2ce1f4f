"""
Plugin options for LocalSEO.

Values come from ``settings.LOCALSEO`` (populated from the environment in
settings.py); anything not configured falls back to ``DEFAULTS``.
"""
from django.conf import settings

DEFAULT_SYSTEM_PROMPT = (
    'You are an SEO expert for a local service company. Write a 50-word intro for '
    '{service} in {city} ({zip}). Focus on local expertise and trust.'
)

DEFAULTS = {
    'API_PROVIDER': 'openai',
    'API_KEY': '',
    'SYSTEM_PROMPT': DEFAULT_SYSTEM_PROMPT,
    'BUSINESS_NAME': '',
    'BUSINESS_PHONE': '',
    'OG_IMAGE': '',
    'ROBOTS': 'index, follow',
    'SCHEMA_ENABLED': True,
    'SCHEMA_TYPE': 'LocalBusiness',
    'SITEMAP_ENABLED': True,
    'RESPONSE_TIME': '60',
    'CUSTOMER_COUNT_TEXT': '',
    'REDIRECT_CACHE_TIMEOUT': 60 * 60,
    'AI_BULK_DELAY': 0.5,
}


def get_option(name):
    """Return a LocalSEO option; empty strings fall back to the default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown LocalSEO option: {name}")
    configured = getattr(settings, 'LOCALSEO', {}) or {}
    value = configured.get(name)
    if value is None or value == '':
        return DEFAULTS[name]
    return value
