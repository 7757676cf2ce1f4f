"""
Redirect Table middleware.

Runs before URL resolution so a matching rule wins over every view,
including the LocalSEO landing pages.
"""
import logging

from django.http import HttpResponsePermanentRedirect, HttpResponseRedirect

from . import redirects

logger = logging.getLogger(__name__)

SKIPPED_PREFIXES = ('/admin/', '/api/')


class RedirectMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.process_redirect(request)
        if response is not None:
            return response
        return self.get_response(request)

    def process_redirect(self, request):
        path = request.path_info
        if not path or path.startswith(SKIPPED_PREFIXES):
            return None

        rule = redirects.lookup(path)
        if rule is None:
            return None

        redirects.record_hit(rule)
        code = redirects.normalize_redirect_type(rule.redirect_type)
        logger.debug(f"Redirect rule {rule.id}: {path} → {rule.target_url} ({code})")

        response_class = HttpResponsePermanentRedirect if code == 301 else HttpResponseRedirect
        return response_class(rule.target_url)
