from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from core.models import AuditableModel
from .enums import CLAIM_STATUS_OPTIONS, PENDING, APPROVED, REJECTED


class Approver(AuditableModel):
    name = models.CharField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name


class ExpenseClaimQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=PENDING)

    def approved(self):
        return self.filter(status=APPROVED)

    def rejected(self):
        return self.filter(status=REJECTED)


class ExpenseClaim(AuditableModel):
    claim_number = models.CharField(max_length=30, unique=True)
    requester_name = models.CharField(max_length=50)
    division = models.CharField(max_length=100, blank=True)
    purpose = models.CharField(max_length=150)
    amount_requested = models.DecimalField(max_digits=18, decimal_places=2)
    submission_date = models.DateField(default=timezone.localdate)
    note = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=CLAIM_STATUS_OPTIONS, default=PENDING)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="submitted_claims",
        null=True,
        blank=True,
    )

    # set only on approval
    approved_amount = models.DecimalField(
        max_digits=18, decimal_places=2, null=True, blank=True
    )
    approver = models.ForeignKey(
        Approver,
        on_delete=models.PROTECT,
        related_name="approved_claims",
        null=True,
        blank=True,
    )
    recipient_name = models.CharField(max_length=100, blank=True)
    payment_date = models.DateField(null=True, blank=True)
    payment_city = models.CharField(max_length=100, blank=True)
    approval_note = models.TextField(blank=True)
    approval_receipt = models.FileField(
        upload_to="expense_claim/receipts/", max_length=255, null=True, blank=True
    )

    # set only on rejection
    rejection_reason = models.TextField(null=True, blank=True)

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="claim_reviews",
        null=True,
        blank=True,
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    objects = ExpenseClaimQuerySet.as_manager()

    class Meta:
        ordering = ("-submission_date", "-created_at")
        constraints = [
            models.CheckConstraint(
                condition=Q(amount_requested__gt=0),
                name="claim_amount_requested_positive",
            ),
            models.CheckConstraint(
                condition=Q(approved_amount__isnull=True) | Q(approved_amount__gt=0),
                name="claim_approved_amount_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(
                        status=PENDING,
                        approved_amount__isnull=True,
                        rejection_reason__isnull=True,
                    )
                    | Q(
                        status=APPROVED,
                        approved_amount__isnull=False,
                        rejection_reason__isnull=True,
                    )
                    | Q(
                        status=REJECTED,
                        approved_amount__isnull=True,
                        rejection_reason__isnull=False,
                    )
                ),
                name="claim_decision_fields_match_status",
            ),
        ]

    def __str__(self):
        return self.claim_number

    @property
    def is_pending(self):
        return self.status == PENDING

    @property
    def is_approved(self):
        return self.status == APPROVED
