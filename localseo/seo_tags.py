"""
Document title and <head> tags (description, canonical, robots, Open Graph,
Twitter Card) for LocalSEO landing pages.
"""
from .conf import get_option


def service_in_city(page) -> str:
    service = (page.service_keyword or '').strip()
    city = (page.city or '').strip()
    if service and city:
        return f"{service} in {city}"
    return service or city


def document_title(page) -> str:
    """The row's meta title, else "<service> in <city>"."""
    if page.meta_title:
        return page.meta_title
    return service_in_city(page)


def build_head_tags(ctx) -> dict:
    """
    Returns {'title', 'description', 'canonical', 'robots', 'meta'} where
    'meta' is a list of {'attr', 'key', 'content'} entries rendered as
    <meta {attr}="{key}" content="{content}">.
    """
    page = ctx.page
    title = document_title(page)
    description = page.meta_description or ''
    og_image = get_option('OG_IMAGE')

    meta = [
        _tag('property', 'og:type', 'website'),
        _tag('property', 'og:title', title),
        _tag('property', 'og:url', ctx.canonical_url),
        _tag('property', 'og:site_name', ctx.site_name),
    ]
    if description:
        meta.append(_tag('property', 'og:description', description))
    if og_image:
        meta.append(_tag('property', 'og:image', og_image))

    meta.append(_tag('name', 'twitter:card', 'summary_large_image' if og_image else 'summary'))
    meta.append(_tag('name', 'twitter:title', title))
    if description:
        meta.append(_tag('name', 'twitter:description', description))
    if og_image:
        meta.append(_tag('name', 'twitter:image', og_image))

    return {
        'title': title,
        'description': description,
        'canonical': ctx.canonical_url,
        'robots': get_option('ROBOTS'),
        'meta': meta,
    }


def _tag(attr, key, content):
    return {'attr': attr, 'key': key, 'content': content}
