from rest_framework import serializers
from core.serializers import StrictFieldsMixin
from .models import Approver, ExpenseClaim


class ApproverSerializer(serializers.ModelSerializer):
    class Meta:
        model = Approver
        fields = ["id", "name"]


class ExpenseClaimSerializer(serializers.ModelSerializer):
    approver_name = serializers.CharField(source="approver.name", default=None, read_only=True)
    payment_header = serializers.SerializerMethodField()

    def get_payment_header(self, obj):
        header = getattr(obj, "payment_header", None)
        return str(header.pk) if header else None

    class Meta:
        model = ExpenseClaim
        fields = "__all__"
        read_only_fields = [field.name for field in ExpenseClaim._meta.fields]


class ClaimSubmitSerializer(StrictFieldsMixin, serializers.Serializer):
    claim_number = serializers.CharField(max_length=30, required=False)
    requester_name = serializers.CharField(max_length=50)
    division = serializers.CharField(max_length=100, required=False, allow_blank=True)
    purpose = serializers.CharField(max_length=150)
    amount_requested = serializers.DecimalField(max_digits=18, decimal_places=2)
    submission_date = serializers.DateField(required=False)
    note = serializers.CharField(required=False, allow_blank=True)


class ClaimUpdateSerializer(StrictFieldsMixin, serializers.Serializer):
    requester_name = serializers.CharField(max_length=50, required=False)
    division = serializers.CharField(max_length=100, required=False, allow_blank=True)
    purpose = serializers.CharField(max_length=150, required=False)
    amount_requested = serializers.DecimalField(
        max_digits=18, decimal_places=2, required=False
    )
    submission_date = serializers.DateField(required=False)
    note = serializers.CharField(required=False, allow_blank=True)


class ClaimApproveSerializer(StrictFieldsMixin, serializers.Serializer):
    approved_amount = serializers.DecimalField(max_digits=18, decimal_places=2)
    approver = serializers.PrimaryKeyRelatedField(
        queryset=Approver.objects.filter(is_active=True)
    )
    recipient_name = serializers.CharField(max_length=100)
    payment_date = serializers.DateField()
    payment_city = serializers.CharField(max_length=100)
    approval_note = serializers.CharField(required=False, allow_blank=True)
    due_date = serializers.DateField(required=False, allow_null=True)
    receipt = serializers.FileField(required=False, allow_null=True)


class ClaimRejectSerializer(StrictFieldsMixin, serializers.Serializer):
    reason = serializers.CharField(allow_blank=True, trim_whitespace=True)


class CountNominalSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    nominal = serializers.DecimalField(max_digits=20, decimal_places=2)


class ClaimStatisticsSerializer(serializers.Serializer):
    pending = CountNominalSerializer()
    today = CountNominalSerializer()
    this_week = CountNominalSerializer()
    this_month = CountNominalSerializer()
    this_year = CountNominalSerializer()
