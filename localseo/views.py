"""
LocalSEO admin API — CRUD over LocalPage rows plus AI generation and CSV
import/export.
"""
import logging

from django.http import Http404, HttpResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from ai.generation import generate_for_page, generate_missing
from ai.providers import AIProviderError

from .csv_io import CSVImportError, export_pages, import_pages
from .exceptions import ConstraintViolation, LocalSEOError
from .models import LocalPage
from .serializers import LocalPageSerializer

logger = logging.getLogger(__name__)

EXPORT_FILENAME = 'localseo-data.csv'


def error_response(code, message, http_status):
    return Response(
        {'error': {'code': code, 'message': message, 'status': http_status}},
        status=http_status,
    )


def _localseo_error_response(exc):
    if isinstance(exc, ConstraintViolation):
        return error_response(exc.code, str(exc), status.HTTP_409_CONFLICT)
    return error_response(exc.code, str(exc), status.HTTP_400_BAD_REQUEST)


class LargeResultsSetPagination(PageNumberPagination):
    """The data grid shows every row on one screen for typical sites."""
    page_size = 100
    page_size_query_param = 'page_size'
    max_page_size = 1000


class LocalPageViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing LocalSEO rows (staff only).

    list: GET /api/v1/local-pages/ - List rows, newest first
    create: POST /api/v1/local-pages/ - Create a row (slug derived from service + city)
    retrieve: GET /api/v1/local-pages/{id}/ - Get a row
    update: PUT/PATCH /api/v1/local-pages/{id}/ - Patch the given fields
    destroy: DELETE /api/v1/local-pages/{id}/ - Delete a row
    """
    serializer_class = LocalPageSerializer
    permission_classes = [IsAdminUser]
    pagination_class = LargeResultsSetPagination
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return LocalPage.objects.get_all()

    def handle_exception(self, exc):
        # Unknown ids answer with the same error envelope as the other failures
        if isinstance(exc, (Http404, LocalPage.DoesNotExist)):
            return error_response('NOT_FOUND', 'LocalPage not found.', status.HTTP_404_NOT_FOUND)
        return super().handle_exception(exc)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            self.perform_create(serializer)
        except LocalSEOError as e:
            return _localseo_error_response(e)
        headers = self.get_success_headers(serializer.data)
        return Response(serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):
        # PUT and PATCH both patch only the fields sent
        kwargs['partial'] = True
        try:
            return super().update(request, *args, **kwargs)
        except LocalSEOError as e:
            return _localseo_error_response(e)

    def perform_destroy(self, instance):
        LocalPage.objects.delete_page(instance.pk)
        logger.info(f"Deleted LocalPage {instance.pk}")

    # =========================================================================
    # AI content
    # =========================================================================

    @action(detail=True, methods=['post'], url_path='generate-ai')
    def generate_ai(self, request, pk=None):
        """
        Generate intro/meta copy for one row and store it.

        POST /api/v1/local-pages/{id}/generate-ai/
        """
        page = self.get_object()
        try:
            page = generate_for_page(page)
        except AIProviderError as e:
            return error_response('AI_PROVIDER_ERROR', str(e), status.HTTP_502_BAD_GATEWAY)
        return Response(self.get_serializer(page).data)

    @action(detail=False, methods=['post'], url_path='generate-ai-bulk')
    def generate_ai_bulk(self, request):
        """
        Generate copy for every row missing an intro, meta title or description.

        POST /api/v1/local-pages/generate-ai-bulk/
        Returns: {"success": int, "failed": int, "errors": [{"id", "message"}]}
        """
        return Response(generate_missing())

    # =========================================================================
    # CSV
    # =========================================================================

    @action(detail=False, methods=['post'], url_path='import-csv')
    def import_csv(self, request):
        """
        POST /api/v1/local-pages/import-csv/
        Body: {"csv": "city,service_keyword,zip\\n..."}
        """
        try:
            result = import_pages(request.data.get('csv', ''))
        except CSVImportError as e:
            return error_response(e.code, str(e), status.HTTP_400_BAD_REQUEST)
        return Response(result)

    @action(detail=False, methods=['get'], url_path='export-csv')
    def export_csv(self, request):
        """GET /api/v1/local-pages/export-csv/ - UTF-8 CSV download."""
        content = export_pages(LocalPage.objects.order_by('id'))
        response = HttpResponse(content, content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="{EXPORT_FILENAME}"'
        return response
