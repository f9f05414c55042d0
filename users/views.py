# users/views.py
import logging

from django.contrib.auth import authenticate, login as django_login, logout
from rest_framework import status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .mixins import AdminRequired
from .models import User
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def authenticate_user(request, username, password):
    """
    Check credentials and start a session.
    Returns the logged-in user, or None when the credentials do not match.
    """
    if not username or not password:
        return None
    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.info("Failed login attempt for %s", username)
        return None
    django_login(request, user)
    logger.info("User %s logged in", user.username)
    return user


# =====================================================
# Login / logout
# =====================================================
@api_view(["POST"])
@permission_classes([AllowAny])
def login_view(request):
    user = authenticate_user(
        request,
        request.data.get("username"),
        request.data.get("password"),
    )
    if not user:
        return Response({"detail": "Invalid credentials."}, status=status.HTTP_401_UNAUTHORIZED)
    return Response(UserSerializer(user).data)


@api_view(["POST"])
@permission_classes([AllowAny])
def logout_view(request):
    logout(request)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(UserSerializer(request.user).data)


# =====================================================
# User management (admins only)
# =====================================================
class UserViewSet(viewsets.ModelViewSet):
    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [AdminRequired]

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info("%s created user %s", self.request.user.username, user.username)

    def perform_destroy(self, instance):
        logger.info("%s deleted user %s", self.request.user.username, instance.username)
        instance.delete()
