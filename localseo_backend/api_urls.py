"""
API URL routing for localseo_backend.
All API endpoints are prefixed with /api/v1/
"""
from django.urls import path, include
from django.views.decorators.csrf import csrf_exempt

from .views import health_check


def _lazy(module, attr):
    """Lazy view import to avoid AppRegistryNotReady."""
    def view(*args, **kwargs):
        import importlib
        mod = importlib.import_module(module)
        return getattr(mod, attr)(*args, **kwargs)
    return csrf_exempt(view)


urlpatterns = [
    # Health check (no auth) - GET /api/v1/health/
    path('health/', health_check),
    # Admin authentication
    path('auth/', include('accounts.urls')),
    # --- Redirect Manager ---
    path('redirects/', _lazy('localseo.redirect_views', 'redirect_list_create')),
    path('redirects/<int:rule_id>/', _lazy('localseo.redirect_views', 'redirect_delete')),
    # --- LocalSEO data grid (CRUD, AI generation, CSV) ---
    path('local-pages/', include('localseo.api_urls')),
]
