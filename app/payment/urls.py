from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import PaymentHeaderViewSets, PaymentRecordViewSets, ReconciliationViewSets

app_name = "payments"
router = DefaultRouter()
router.register("headers", PaymentHeaderViewSets, basename="headers")
router.register("records", PaymentRecordViewSets, basename="records")
router.register("reconciliation", ReconciliationViewSets, basename="reconciliation")

urlpatterns = [
    path("", include(router.urls)),
]
