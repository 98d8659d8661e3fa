import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Approver",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, unique=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="ExpenseClaim",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("claim_number", models.CharField(max_length=30, unique=True)),
                ("requester_name", models.CharField(max_length=50)),
                ("division", models.CharField(blank=True, max_length=100)),
                ("purpose", models.CharField(max_length=150)),
                ("amount_requested", models.DecimalField(decimal_places=2, max_digits=18)),
                ("submission_date", models.DateField(default=django.utils.timezone.localdate)),
                ("note", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "PENDING"), ("APPROVED", "APPROVED"), ("REJECTED", "REJECTED")],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("approved_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ("recipient_name", models.CharField(blank=True, max_length=100)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("payment_city", models.CharField(blank=True, max_length=100)),
                ("approval_note", models.TextField(blank=True)),
                (
                    "approval_receipt",
                    models.FileField(blank=True, max_length=255, null=True, upload_to="expense_claim/receipts/"),
                ),
                ("rejection_reason", models.TextField(blank=True, null=True)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "approver",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="approved_claims",
                        to="claim.approver",
                    ),
                ),
                (
                    "reviewed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="claim_reviews",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "submitted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="submitted_claims",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("-submission_date", "-created_at"),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount_requested__gt", 0)),
                        name="claim_amount_requested_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("approved_amount__isnull", True), ("approved_amount__gt", 0), _connector="OR"),
                        name="claim_approved_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("approved_amount__isnull", True),
                                ("rejection_reason__isnull", True),
                                ("status", "PENDING"),
                            ),
                            models.Q(
                                ("approved_amount__isnull", False),
                                ("rejection_reason__isnull", True),
                                ("status", "APPROVED"),
                            ),
                            models.Q(
                                ("approved_amount__isnull", True),
                                ("rejection_reason__isnull", False),
                                ("status", "REJECTED"),
                            ),
                            _connector="OR",
                        ),
                        name="claim_decision_fields_match_status",
                    ),
                ],
            },
        ),
    ]
