from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import ExpenseClaimViewSets, ApproverDirectoryView

app_name = "claims"
router = DefaultRouter()
router.register("expense", ExpenseClaimViewSets, basename="expense")

urlpatterns = [
    path("approvers/", ApproverDirectoryView.as_view(), name="approver-list"),
    path("", include(router.urls)),
]
