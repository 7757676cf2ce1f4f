"""
Authentication views for admin users.
Handles login, logout and the current user profile.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import LoginSerializer, UserSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Admin login endpoint.

    POST /api/v1/auth/login/
    Body: { "email": "admin@example.com", "password": "password123" }

    Returns: { "token": "...", "refresh_token": "...", "user": {...} }
    """
    serializer = LoginSerializer(data=request.data)

    if serializer.is_valid():
        user = serializer.validated_data['user']

        refresh = RefreshToken.for_user(user)

        return Response({
            'message': 'Login successful',
            'token': str(refresh.access_token),
            'refresh_token': str(refresh),
            'user': UserSerializer(user).data
        }, status=status.HTTP_200_OK)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    Logout endpoint; blacklists the refresh token when one is supplied.

    POST /api/v1/auth/logout/
    Headers: Authorization: Bearer <token>
    """
    refresh_token = request.data.get('refresh_token')
    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            logger.warning(f"Logout failed: {e}")
            return Response({'error': 'Logout failed'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'message': 'Logged out successfully'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Get current authenticated user.

    GET /api/v1/auth/me/
    """
    return Response({
        'user': UserSerializer(request.user).data
    })
