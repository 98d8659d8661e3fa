from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from core.responses import ok_response
from user.permissions import IsFinanceAdmin
from . import ledger
from .filters import PaymentHeaderFilter
from .models import PaymentHeader, PaymentRecord
from .reconciliation import ReconciliationService, build_summary
from .serializers import (
    PaymentHeaderSerializer,
    PaymentHeaderDetailSerializer,
    PaymentRecordSerializer,
    PurchaseHeaderCreateSerializer,
    PostPaymentSerializer,
    PaymentSummarySerializer,
    PaymentStatisticsSerializer,
)

WRITE_ACTIONS = ["create", "destroy", "payments", "installments", "remove_installment"]


class FinanceWritePermissionMixin:
    def get_permissions(self):
        permission_classes = [IsAuthenticated]
        if self.action in WRITE_ACTIONS:
            permission_classes = [IsAuthenticated, IsFinanceAdmin]
        return [permission() for permission in permission_classes]


class PaymentHeaderViewSets(FinanceWritePermissionMixin, viewsets.ModelViewSet):
    queryset = PaymentHeader.objects.select_related("claim")
    serializer_class = PaymentHeaderSerializer
    http_method_names = ["get", "post"]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_class = PaymentHeaderFilter
    search_fields = ["reference", "claim__requester_name"]
    ordering_fields = ["due_date", "created_at", "total_billed", "payment_status"]

    def get_serializer_class(self):
        if self.action == "create":
            return PurchaseHeaderCreateSerializer
        elif self.action == "retrieve":
            return PaymentHeaderDetailSerializer
        elif self.action == "payments":
            return PostPaymentSerializer
        elif self.action == "summary":
            return PaymentSummarySerializer
        elif self.action == "statistics":
            return PaymentStatisticsSerializer
        return self.serializer_class

    def _read(self, header):
        header = PaymentHeader.objects.select_related("claim").get(pk=header.pk)
        return PaymentHeaderDetailSerializer(
            header, context=self.get_serializer_context()
        ).data

    def retrieve(self, request, *args, **kwargs):
        return ok_response(self._read(self.get_object()))

    def create(self, request, *args, **kwargs):
        """Register a purchase bill for reconciliation."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        header = ledger.open_header_for_purchase(**serializer.validated_data)
        return ok_response(self._read(header), "Payment header opened.", status.HTTP_201_CREATED)

    @action(methods=["POST"], detail=True)
    def payments(self, request, pk=None):
        header = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        header = ledger.post_payment(
            header.pk,
            data["amount"],
            data["payment_date"],
            note=data.get("note", ""),
            proof=data.get("proof"),
            created_by=request.user,
        )
        return ok_response(self._read(header), "Payment posted.", status.HTTP_201_CREATED)

    @action(methods=["GET"], detail=True)
    def summary(self, request, pk=None):
        data = PaymentSummarySerializer(build_summary(self.get_object())).data
        return ok_response(data)

    @action(methods=["GET"], detail=False)
    def statistics(self, request):
        data = PaymentStatisticsSerializer(ledger.payment_statistics()).data
        return ok_response(data)


class PaymentRecordViewSets(FinanceWritePermissionMixin, viewsets.ModelViewSet):
    queryset = PaymentRecord.objects.select_related("header")
    serializer_class = PaymentRecordSerializer
    http_method_names = ["get", "delete"]
    filterset_fields = ["header"]

    def retrieve(self, request, *args, **kwargs):
        return ok_response(self.get_serializer(self.get_object()).data)

    @extend_schema(responses=PaymentHeaderDetailSerializer)
    def destroy(self, request, *args, **kwargs):
        header = ledger.delete_payment(kwargs["pk"])
        data = PaymentHeaderDetailSerializer(
            header, context=self.get_serializer_context()
        ).data
        return ok_response(data, "Payment deleted.")


class ReconciliationViewSets(FinanceWritePermissionMixin, viewsets.ViewSet):
    """Ledger operations addressed by claim number or purchase reference."""

    lookup_field = "reference"
    lookup_value_regex = "[^/]+"
    serializer_class = PaymentSummarySerializer

    def _service(self):
        return ReconciliationService(user=self.request.user)

    @extend_schema(responses=PaymentSummarySerializer)
    def retrieve(self, request, reference=None):
        data = PaymentSummarySerializer(self._service().summary(reference)).data
        return ok_response(data)

    @extend_schema(request=PostPaymentSerializer, responses=PaymentSummarySerializer)
    @action(methods=["POST"], detail=True)
    def installments(self, request, reference=None):
        serializer = PostPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = self._service()
        header = service.post_installment(
            reference,
            data["amount"],
            data["payment_date"],
            note=data.get("note", ""),
            proof=data.get("proof"),
        )
        summary = PaymentSummarySerializer(build_summary(header)).data
        return ok_response(summary, "Payment posted.", status.HTTP_201_CREATED)

    @extend_schema(request=None, responses=PaymentSummarySerializer)
    @action(
        methods=["DELETE"],
        detail=True,
        url_path=r"installments/(?P<record_id>[^/.]+)",
    )
    def remove_installment(self, request, reference=None, record_id=None):
        header = self._service().remove_installment(reference, record_id)
        summary = PaymentSummarySerializer(build_summary(header)).data
        return ok_response(summary, "Payment deleted.")
