"""
Block bindings: template keys → LocalPage values.

Stored fields come from a static table; ``phone_url`` and ``cta_label`` are
computed from the business phone option. Unknown keys bind to "".
"""
import re

from .conf import get_option

FIELD_MAP = {
    'city': 'city',
    'zip': 'zip',
    'service': 'service_keyword',
    'service_keyword': 'service_keyword',
    'intro': 'ai_intro',
    'intro_text': 'ai_intro',
    'ai_generated_intro': 'ai_intro',
    'meta_title': 'meta_title',
    'meta_description': 'meta_description',
    'slug': 'slug',
    'nearby_cities': 'nearby_cities',
    'local_landmarks': 'local_landmarks',
}

PHONE_URL = 'phone_url'
CTA_LABEL = 'cta_label'
COMPUTED_KEYS = (PHONE_URL, CTA_LABEL)

_PHONE_STRIP = re.compile(r'[^+\d]')


def binding_value(page, key) -> str:
    if page is None or not key:
        return ''

    if key == PHONE_URL:
        phone = get_option('BUSINESS_PHONE')
        return f"tel:{_PHONE_STRIP.sub('', phone)}" if phone else ''

    if key == CTA_LABEL:
        phone = get_option('BUSINESS_PHONE')
        if phone:
            return f"Call your local expert in {page.city} – {phone}"
        return 'Contact us today'

    field = FIELD_MAP.get(key)
    if field is None:
        return ''
    return getattr(page, field) or ''
