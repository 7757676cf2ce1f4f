from django.contrib.sitemaps import Sitemap

from .models import LocalPage
from .routing import canonical_path


class LocalPageSitemap(Sitemap):
    """Canonical /service/<service>/<city>/ URL of every routable row."""
    changefreq = 'weekly'
    limit = 2000

    def items(self):
        # Rows whose service or city normalizes to nothing fall back to "/"
        return [
            page for page in LocalPage.objects.routable().order_by('id')
            if canonical_path(page) != '/'
        ]

    def lastmod(self, page):
        return page.updated_at
