from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from core.models import AuditableModel
from .enums import EMPLOYEE, SUPERADMIN


def default_role():
    return [EMPLOYEE]


class CustomUserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email).lower().strip()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("verified", True)
        extra_fields.setdefault("roles", [SUPERADMIN])
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin, AuditableModel):
    email = models.EmailField(max_length=255, unique=True)
    firstname = models.CharField(max_length=255, blank=True, null=True)
    lastname = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    roles = models.JSONField(default=default_role)
    verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"

    class Meta:
        ordering = ("email",)

    def __str__(self):
        if self.firstname and self.lastname:
            return f"{self.firstname} {self.lastname}"
        return self.email

    def save_last_login(self):
        self.last_login = timezone.now()
        self.save(update_fields=["last_login"])
