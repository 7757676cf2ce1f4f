"""
JSON-LD (schema.org) for LocalSEO landing pages: LocalBusiness-style entity
with address, service area and a two-level breadcrumb.
"""
import json

from django.utils.safestring import mark_safe

from .conf import get_option
from .routing import canonical_path
from .seo_tags import service_in_city

LOCAL_BUSINESS_TYPES = ('LocalBusiness', 'Service', 'ProfessionalService', 'HomeAndConstructionBusiness')

_JSON_SCRIPT_ESCAPES = {
    ord('>'): '\\u003E',
    ord('<'): '\\u003C',
    ord('&'): '\\u0026',
}


def build_schema(ctx):
    """Schema dict for the page, or None when disabled or the row is degenerate."""
    page = ctx.page
    if not get_option('SCHEMA_ENABLED'):
        return None
    if canonical_path(page) == '/':
        return None

    schema_type = get_option('SCHEMA_TYPE')
    business_name = get_option('BUSINESS_NAME') or ctx.site_name
    phone = get_option('BUSINESS_PHONE')
    og_image = get_option('OG_IMAGE')

    schema = {
        '@context': 'https://schema.org',
        '@type': schema_type,
        'name': f"{business_name} – {page.service_keyword}".strip(),
        'url': ctx.canonical_url,
    }
    if page.meta_description:
        schema['description'] = page.meta_description
    if og_image:
        schema['image'] = og_image

    schema['address'] = {
        '@type': 'PostalAddress',
        'addressLocality': page.city,
    }
    if page.zip:
        schema['address']['postalCode'] = page.zip
    if phone:
        schema['telephone'] = phone

    if schema_type in LOCAL_BUSINESS_TYPES:
        schema['areaServed'] = {'@type': 'City', 'name': page.city}

    schema['breadcrumb'] = {
        '@type': 'BreadcrumbList',
        'itemListElement': [
            {'@type': 'ListItem', 'position': 1, 'name': ctx.site_name, 'item': ctx.home_url},
            {'@type': 'ListItem', 'position': 2, 'name': service_in_city(page) or page.slug,
             'item': ctx.canonical_url},
        ],
    }
    return schema


def schema_json(ctx):
    """Serialized schema safe to drop inside <script type="application/ld+json">."""
    schema = build_schema(ctx)
    if schema is None:
        return ''
    payload = json.dumps(schema, ensure_ascii=False, indent=2)
    return mark_safe(payload.translate(_JSON_SCRIPT_ESCAPES))
