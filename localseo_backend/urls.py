"""
URL configuration for localseo_backend project.
"""
from django.contrib import admin
from django.contrib.sitemaps.views import sitemap
from django.urls import path, include

from localseo.conf import get_option
from localseo.sitemaps import LocalPageSitemap

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('localseo_backend.api_urls')),
]

if get_option('SITEMAP_ENABLED'):
    urlpatterns.append(
        path('sitemap.xml', sitemap, {'sitemaps': {'localseo-pages': LocalPageSitemap}},
             name='django.contrib.sitemaps.views.sitemap'),
    )

# Virtual landing pages: /service/<service>/<city>/ and legacy /localseo/<slug>/
urlpatterns.append(path('', include('localseo.urls')))

# Custom error handlers - return JSON instead of HTML
handler404 = 'localseo_backend.views.custom_404'
handler500 = 'localseo_backend.views.custom_500'
