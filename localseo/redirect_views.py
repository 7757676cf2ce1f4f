"""
API endpoints for the Redirect Manager (staff only).
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from . import redirects
from .exceptions import ConstraintViolation

logger = logging.getLogger(__name__)


def _serialize_redirect(r):
    return {
        'id': r.id,
        'source_path': r.source_path,
        'target_url': r.target_url,
        'redirect_type': r.redirect_type,
        'hits': r.hits,
        'created_at': r.created_at.isoformat() if r.created_at else None,
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAdminUser])
def redirect_list_create(request):
    """
    GET  /api/v1/redirects/  — List redirect rules, newest first.
    POST /api/v1/redirects/  — Create a rule. Body: {source_path, target_url, redirect_type}
    """
    if request.method == 'GET':
        rules = redirects.list_rules()
        return Response({
            'data': [_serialize_redirect(r) for r in rules],
            'meta': {'total': len(rules)},
        })
    return _create_redirect(request)


def _create_redirect(request):
    source_path = request.data.get('source_path')
    target_url = request.data.get('target_url')
    redirect_type = request.data.get('redirect_type', 301)

    try:
        rule = redirects.create_rule(source_path, target_url, redirect_type)
    except ValueError as e:
        return Response(
            {'error': {'code': 'VALIDATION_ERROR', 'message': str(e), 'status': 400}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    except ConstraintViolation as e:
        return Response(
            {'error': {'code': e.code, 'message': str(e), 'status': 409}},
            status=status.HTTP_409_CONFLICT,
        )

    return Response({'data': _serialize_redirect(rule)}, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAdminUser])
def redirect_delete(request, rule_id):
    """DELETE /api/v1/redirects/{id}/ — Remove a rule."""
    if not redirects.delete_rule(rule_id):
        return Response(
            {'error': {'code': 'NOT_FOUND', 'message': 'Redirect not found', 'status': 404}},
            status=status.HTTP_404_NOT_FOUND,
        )
    return Response(status=status.HTTP_204_NO_CONTENT)
