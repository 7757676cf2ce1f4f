"""
Public LocalSEO landing pages.

  GET /service/<service>/<city>/  → rendered landing page (200)
  GET /localseo/<slug>/           → 301 to the canonical /service/ URL
  unknown row on either shape     → 404, never cached
"""
import logging

from django.http import HttpResponsePermanentRedirect
from django.shortcuts import render
from django.utils.cache import add_never_cache_headers
from django.views.decorators.http import require_safe

from . import routing
from .conf import get_option
from .context import PageContext
from .schema import schema_json
from .seo_tags import build_head_tags

logger = logging.getLogger(__name__)


@require_safe
def landing_page(request, **kwargs):
    resolution = routing.resolve(request.path_info)

    if resolution is None or resolution.outcome == routing.NOT_FOUND:
        response = render(request, 'localseo/not_found.html', status=404)
        add_never_cache_headers(response)
        return response

    if resolution.outcome == routing.REDIRECT:
        return HttpResponsePermanentRedirect(resolution.location)

    ctx = PageContext.from_request(request, resolution.page)
    return render(request, 'localseo/landing_page.html', {
        'localseo': ctx,
        'page': ctx.page,
        'head': build_head_tags(ctx),
        'schema_json': schema_json(ctx),
        'business_phone': get_option('BUSINESS_PHONE'),
        'response_time': get_option('RESPONSE_TIME'),
        'customer_count_text': get_option('CUSTOMER_COUNT_TEXT'),
    })
