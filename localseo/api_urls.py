"""
API routes for LocalSEO rows, mounted at /api/v1/local-pages/.
"""
from rest_framework.routers import SimpleRouter

from .views import LocalPageViewSet

router = SimpleRouter()
router.register(r'', LocalPageViewSet, basename='local-page')

urlpatterns = router.urls
