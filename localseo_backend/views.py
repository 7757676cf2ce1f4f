"""
Project-level views (health check, JSON error handlers).
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET


@require_GET
def health_check(request):
    """
    Liveness check for load balancers and monitoring.
    GET /api/v1/health/ - returns 200 if the app is running.
    No authentication required.
    """
    return JsonResponse({"status": "ok", "service": "localseo-backend"})


def custom_404(request, exception=None):
    """Return JSON for 404 errors instead of HTML."""
    return JsonResponse({
        'error': {
            'code': 'NOT_FOUND',
            'message': 'The requested resource was not found.',
            'status': 404,
        }
    }, status=404)


def custom_500(request):
    """Return JSON for 500 errors instead of HTML."""
    return JsonResponse({
        'error': {
            'code': 'SERVER_ERROR',
            'message': 'An unexpected error occurred.',
            'status': 500,
        }
    }, status=500)
