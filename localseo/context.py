"""
Request-scoped page data handed to the rendering layer.

Built once the resolver has found a row, read-only afterwards and dropped
with the request. Everything the landing template, head tags, JSON-LD and
block bindings need comes from here.
"""
from dataclasses import dataclass

from .conf import get_option
from .models import LocalPage
from .routing import canonical_path


@dataclass(frozen=True)
class PageContext:
    page: LocalPage
    canonical_url: str
    home_url: str
    site_name: str

    @classmethod
    def from_request(cls, request, page):
        return cls(
            page=page,
            canonical_url=request.build_absolute_uri(canonical_path(page)),
            home_url=request.build_absolute_uri('/'),
            site_name=get_option('BUSINESS_NAME') or request.get_host(),
        )
