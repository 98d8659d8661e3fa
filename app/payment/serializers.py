from rest_framework import serializers
from core.serializers import StrictFieldsMixin
from .models import PaymentHeader, PaymentRecord


class PaymentRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentRecord
        fields = (
            "id",
            "header",
            "amount",
            "payment_date",
            "note",
            "proof_attachment",
            "created_by",
            "created_at",
        )
        read_only_fields = fields


class PaymentHeaderSerializer(serializers.ModelSerializer):
    remaining = serializers.DecimalField(max_digits=19, decimal_places=2, read_only=True)
    status_label = serializers.CharField(source="get_payment_status_display", read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)
    claim_number = serializers.CharField(source="claim.claim_number", default=None, read_only=True)

    class Meta:
        model = PaymentHeader
        fields = (
            "id",
            "reference",
            "owner_type",
            "claim",
            "claim_number",
            "total_billed",
            "total_paid",
            "remaining",
            "payment_status",
            "status_label",
            "due_date",
            "settlement_date",
            "is_overdue",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PaymentHeaderDetailSerializer(PaymentHeaderSerializer):
    records = PaymentRecordSerializer(many=True, read_only=True)

    class Meta(PaymentHeaderSerializer.Meta):
        fields = PaymentHeaderSerializer.Meta.fields + ("records",)
        read_only_fields = fields


class PurchaseHeaderCreateSerializer(StrictFieldsMixin, serializers.Serializer):
    reference = serializers.CharField(max_length=100)
    total_billed = serializers.DecimalField(max_digits=18, decimal_places=2)
    due_date = serializers.DateField(required=False, allow_null=True)


class PostPaymentSerializer(StrictFieldsMixin, serializers.Serializer):
    amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    payment_date = serializers.DateField()
    note = serializers.CharField(required=False, allow_blank=True)
    proof = serializers.FileField(required=False, allow_null=True)


class PaymentSummarySerializer(serializers.Serializer):
    reference = serializers.CharField()
    total_billed = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=18, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=19, decimal_places=2)
    status = serializers.CharField()
    status_label = serializers.CharField()


class PaymentStatisticsSerializer(serializers.Serializer):
    settled = serializers.IntegerField()
    pending = serializers.IntegerField()
    overdue = serializers.IntegerField()
    overpaid = serializers.IntegerField()
