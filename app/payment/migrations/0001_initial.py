import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("claim", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentHeader",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("reference", models.CharField(max_length=100, unique=True)),
                (
                    "owner_type",
                    models.CharField(choices=[("CLAIM", "CLAIM"), ("PURCHASE", "PURCHASE")], max_length=20),
                ),
                ("total_billed", models.DecimalField(decimal_places=2, max_digits=18)),
                ("total_paid", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("settlement_date", models.DateField(blank=True, null=True)),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("UNPAID", "Unpaid"),
                            ("PARTIAL", "Partial"),
                            ("PAID", "Paid"),
                            ("OVERPAID", "Overpaid"),
                        ],
                        default="UNPAID",
                        max_length=20,
                    ),
                ),
                (
                    "claim",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment_header",
                        to="claim.expenseclaim",
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at",),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_billed__gt", 0)),
                        name="header_total_billed_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_paid__gte", 0)),
                        name="header_total_paid_not_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("claim__isnull", False), ("owner_type", "CLAIM")),
                            models.Q(("claim__isnull", True), ("owner_type", "PURCHASE")),
                            _connector="OR",
                        ),
                        name="header_owner_matches_type",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("payment_date", models.DateField()),
                ("note", models.TextField(blank=True)),
                (
                    "proof_attachment",
                    models.FileField(blank=True, max_length=255, null=True, upload_to="payment/proofs/"),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payment_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "header",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="records",
                        to="payment.paymentheader",
                    ),
                ),
            ],
            options={
                "ordering": ("payment_date", "created_at"),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="payment_record_amount_positive",
                    ),
                ],
            },
        ),
    ]
