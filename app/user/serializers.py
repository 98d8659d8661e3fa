from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers, exceptions
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class ListUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = [
            "id",
            "firstname",
            "lastname",
            "email",
            "roles",
            "verified",
            "last_login",
            "created_at",
        ]


class CustomObtainTokenPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        if not user.verified:
            raise exceptions.AuthenticationFailed(
                _("Account not yet verified."), code="authentication"
            )
        token = super().get_token(user)
        token["email"] = user.email
        token["roles"] = user.roles
        if user.firstname and user.lastname:
            token["firstname"] = user.firstname
            token["lastname"] = user.lastname
        user.save_last_login()
        return token
