from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from core.responses import ok_response
from .serializers import CustomObtainTokenPairSerializer, ListUserSerializer


class CustomObtainTokenPairView(TokenObtainPairView):
    """Login with email and password"""

    serializer_class = CustomObtainTokenPairSerializer


class MeView(APIView):
    """The acting user, as seen by audit fields."""

    permission_classes = [IsAuthenticated]
    serializer_class = ListUserSerializer

    def get(self, request):
        return ok_response(ListUserSerializer(request.user).data)
