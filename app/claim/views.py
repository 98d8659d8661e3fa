from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.responses import ok_response
from payment.reconciliation import ReconciliationService
from payment.serializers import PaymentHeaderDetailSerializer
from user.permissions import IsEmployee, IsFinanceAdmin, IsNotSuperAdmin
from . import services
from .filters import ExpenseClaimFilter
from .models import ExpenseClaim
from .serializers import (
    ApproverSerializer,
    ExpenseClaimSerializer,
    ClaimSubmitSerializer,
    ClaimUpdateSerializer,
    ClaimApproveSerializer,
    ClaimRejectSerializer,
    ClaimStatisticsSerializer,
)
from .utils import list_approvers


class ApproverDirectoryView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses=ApproverSerializer(many=True))
    def get(self, request):
        return ok_response(list_approvers())


class ExpenseClaimViewSets(viewsets.ModelViewSet):
    queryset = ExpenseClaim.objects.select_related("approver", "payment_header")
    serializer_class = ExpenseClaimSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "patch", "delete"]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = ExpenseClaimFilter
    search_fields = ["claim_number", "requester_name", "purpose"]
    ordering_fields = [
        "submission_date",
        "created_at",
        "claim_number",
        "amount_requested",
        "status",
    ]

    def get_serializer_class(self):
        if self.action == "create":
            return ClaimSubmitSerializer
        elif self.action == "partial_update":
            return ClaimUpdateSerializer
        elif self.action == "approve":
            return ClaimApproveSerializer
        elif self.action == "reject":
            return ClaimRejectSerializer
        elif self.action == "statistics":
            return ClaimStatisticsSerializer
        elif self.action == "payment":
            return PaymentHeaderDetailSerializer
        return self.serializer_class

    def get_permissions(self):
        permission_classes = self.permission_classes
        if self.action in ["create", "partial_update", "destroy"]:
            permission_classes = [IsAuthenticated, IsNotSuperAdmin, IsEmployee | IsFinanceAdmin]
        elif self.action in ["approve", "reject"]:
            permission_classes = [IsAuthenticated, IsFinanceAdmin]
        return [permission() for permission in permission_classes]

    def _read(self, claim):
        return ExpenseClaimSerializer(claim, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        claim = services.submit_claim(serializer.validated_data, submitted_by=request.user)
        return ok_response(self._read(claim), "Claim submitted.", status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        claim = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        claim = services.update_claim(claim.pk, serializer.validated_data)
        return ok_response(self._read(claim), "Claim updated.")

    def destroy(self, request, *args, **kwargs):
        claim = self.get_object()
        services.delete_claim(claim.pk)
        return ok_response(None, "Claim deleted.")

    def retrieve(self, request, *args, **kwargs):
        return ok_response(self._read(self.get_object()))

    @action(methods=["POST"], detail=True)
    def approve(self, request, pk=None):
        claim = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        approval_data = dict(serializer.validated_data)
        receipt = approval_data.pop("receipt", None)
        claim, _ = ReconciliationService(user=request.user).approve_and_open_ledger(
            claim.pk, approval_data, receipt=receipt
        )
        return ok_response(self._read(claim), "Claim approved.")

    @action(methods=["POST"], detail=True)
    def reject(self, request, pk=None):
        claim = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        claim = services.reject_claim(
            claim.pk, serializer.validated_data["reason"], reviewed_by=request.user
        )
        return ok_response(self._read(claim), "Claim rejected.")

    @action(methods=["GET"], detail=True)
    def payment(self, request, pk=None):
        """The claim's payment header with its installments and balance."""
        claim = self.get_object()
        header = ReconciliationService(user=request.user).header_for_claim(claim.pk)
        data = PaymentHeaderDetailSerializer(
            header, context=self.get_serializer_context()
        ).data
        return ok_response(data)

    @action(methods=["GET"], detail=False)
    def statistics(self, request):
        data = ClaimStatisticsSerializer(services.claim_statistics()).data
        return ok_response(data)
