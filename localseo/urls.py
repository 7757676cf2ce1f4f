"""
Public URL shapes for LocalSEO landing pages.
"""
from django.urls import re_path

from .landing_views import landing_page
from .routing import LEGACY_ROUTE, SERVICE_ROUTE

urlpatterns = [
    re_path(SERVICE_ROUTE, landing_page, name='localseo-service'),
    re_path(LEGACY_ROUTE, landing_page, name='localseo-legacy'),
]
