from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from core.models import AuditableModel
from . import calculator
from .enums import (
    PAYMENT_STATUS_OPTIONS,
    OWNER_TYPE_OPTIONS,
    OPEN_PAYMENT_STATUSES,
    UNPAID,
    CLAIM_OWNER,
    PURCHASE_OWNER,
)


class PaymentHeaderQuerySet(models.QuerySet):
    def overdue(self, today=None):
        today = today or timezone.localdate()
        return self.filter(
            due_date__lt=today, payment_status__in=OPEN_PAYMENT_STATUSES
        )


class PaymentHeader(AuditableModel):
    reference = models.CharField(max_length=100, unique=True)
    owner_type = models.CharField(max_length=20, choices=OWNER_TYPE_OPTIONS)
    claim = models.OneToOneField(
        "claim.ExpenseClaim",
        on_delete=models.PROTECT,
        related_name="payment_header",
        null=True,
        blank=True,
    )
    total_billed = models.DecimalField(max_digits=18, decimal_places=2)
    total_paid = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    due_date = models.DateField(null=True, blank=True)
    settlement_date = models.DateField(null=True, blank=True)
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_OPTIONS, default=UNPAID
    )

    objects = PaymentHeaderQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at",)
        constraints = [
            models.CheckConstraint(
                condition=Q(total_billed__gt=0), name="header_total_billed_positive"
            ),
            models.CheckConstraint(
                condition=Q(total_paid__gte=0), name="header_total_paid_not_negative"
            ),
            models.CheckConstraint(
                condition=(
                    Q(owner_type=CLAIM_OWNER, claim__isnull=False)
                    | Q(owner_type=PURCHASE_OWNER, claim__isnull=True)
                ),
                name="header_owner_matches_type",
            ),
        ]

    def __str__(self):
        return self.reference

    @property
    def remaining(self):
        return calculator.remaining(self.total_billed, self.total_paid)

    @property
    def is_overdue(self):
        return bool(
            self.due_date
            and self.due_date < timezone.localdate()
            and self.payment_status in OPEN_PAYMENT_STATUSES
        )


class PaymentRecord(AuditableModel):
    header = models.ForeignKey(
        PaymentHeader, on_delete=models.PROTECT, related_name="records"
    )
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    payment_date = models.DateField()
    note = models.TextField(blank=True)
    proof_attachment = models.FileField(
        upload_to="payment/proofs/", max_length=255, null=True, blank=True
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="payment_records",
        null=True,
        blank=True,
    )

    class Meta:
        ordering = ("payment_date", "created_at")
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0), name="payment_record_amount_positive"
            ),
        ]

    def __str__(self):
        return f"{self.header.reference} - {self.amount}"
