from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import CustomObtainTokenPairView, MeView

app_name = "user"

urlpatterns = [
    path("login/", CustomObtainTokenPairView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
]
