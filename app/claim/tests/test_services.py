import datetime
from decimal import Decimal
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings

from claim import services
from claim.enums import PENDING, APPROVED, REJECTED
from claim.models import Approver, ExpenseClaim
from core.exceptions import InvalidStateError, NotFoundError, ValidationError
from payment import ledger

PAY_DATE = datetime.date(2024, 3, 1)


class ClaimServiceTestCase(TestCase):
    def setUp(self):
        self.approver = Approver.objects.create(name="Head of Finance")

    def submit(self, **overrides):
        data = {
            "requester_name": "Budi Santoso",
            "division": "Operations",
            "purpose": "Site visit to Surabaya",
            "amount_requested": Decimal("5000000"),
            **overrides,
        }
        return services.submit_claim(data)

    def approval(self, **overrides):
        return {
            "approved_amount": Decimal("5000000"),
            "approver": self.approver,
            "recipient_name": "Budi Santoso",
            "payment_date": PAY_DATE,
            "payment_city": "Jakarta",
            **overrides,
        }


class SubmitClaimTests(ClaimServiceTestCase):
    def test_claims_are_numbered_in_sequence(self):
        first = self.submit()
        second = self.submit()
        self.assertEqual(first.claim_number, "PNG-001")
        self.assertEqual(second.claim_number, "PNG-002")
        self.assertEqual(first.status, PENDING)

    @override_settings(CLAIM_NUMBER_PREFIX="EXP")
    def test_prefix_is_configurable(self):
        self.assertEqual(self.submit().claim_number, "EXP-001")

    def test_explicit_claim_number_is_kept(self):
        self.assertEqual(self.submit(claim_number="PNG-100").claim_number, "PNG-100")
        with self.assertRaises(ValidationError):
            self.submit(claim_number="PNG-100")

    def test_number_used_by_purchase_header_is_refused(self):
        ledger.open_header_for_purchase("PNG-100", Decimal("999"))
        with self.assertRaises(ValidationError) as ctx:
            self.submit(claim_number="PNG-100")
        self.assertIn("claim_number", ctx.exception.detail)

    def test_generated_number_skips_purchase_references(self):
        ledger.open_header_for_purchase("PNG-001", Decimal("999"))
        self.assertEqual(self.submit().claim_number, "PNG-002")

    def test_non_string_text_is_a_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            self.submit(requester_name=5, note=["a"])
        self.assertIn("requester_name", ctx.exception.detail)
        self.assertIn("note", ctx.exception.detail)
        self.assertFalse(ExpenseClaim.objects.exists())

    def test_invalid_fields_are_reported_together(self):
        with self.assertRaises(ValidationError) as ctx:
            self.submit(requester_name="  ", amount_requested=Decimal("0"))
        self.assertIn("requester_name", ctx.exception.detail)
        self.assertIn("amount_requested", ctx.exception.detail)
        self.assertFalse(ExpenseClaim.objects.exists())


class UpdateDeleteClaimTests(ClaimServiceTestCase):
    def test_pending_claim_can_be_updated(self):
        claim = self.submit()
        claim = services.update_claim(claim.pk, {"purpose": "Audit visit"})
        self.assertEqual(claim.purpose, "Audit visit")

    def test_decided_claim_cannot_be_updated_or_deleted(self):
        claim = self.submit()
        services.reject_claim(claim.pk, "Budget exhausted")
        with self.assertRaises(InvalidStateError):
            services.update_claim(claim.pk, {"purpose": "Audit visit"})
        with self.assertRaises(InvalidStateError):
            services.delete_claim(claim.pk)

    def test_pending_claim_can_be_deleted(self):
        claim = self.submit()
        services.delete_claim(claim.pk)
        self.assertFalse(ExpenseClaim.objects.filter(pk=claim.pk).exists())

    def test_unknown_claim_is_not_found(self):
        with self.assertRaises(NotFoundError):
            services.get_claim("6f1c4a53-8b7e-4c1a-9a55-0d1d2f3e4a5b")
        with self.assertRaises(NotFoundError):
            services.get_claim("PNG-001")


class ApproveClaimTests(ClaimServiceTestCase):
    def test_approval_records_decision(self):
        claim = services.approve_claim(self.submit().pk, self.approval(approval_note=" ok "))
        self.assertEqual(claim.status, APPROVED)
        self.assertEqual(claim.approved_amount, Decimal("5000000"))
        self.assertEqual(claim.approver, self.approver)
        self.assertEqual(claim.approval_note, "ok")
        self.assertIsNotNone(claim.reviewed_at)
        self.assertIsNone(claim.rejection_reason)

    def test_approved_amount_may_differ_from_request(self):
        claim = services.approve_claim(
            self.submit().pk, self.approval(approved_amount=Decimal("4500000"))
        )
        self.assertEqual(claim.payment_header.total_billed, Decimal("4500000"))

    def test_invalid_approval_leaves_claim_pending(self):
        claim = self.submit()
        invalid = [
            self.approval(approved_amount=Decimal("0")),
            self.approval(approved_amount=Decimal("-1")),
            self.approval(approver=None),
            self.approval(recipient_name=""),
            self.approval(payment_date=None),
            self.approval(payment_city=" "),
        ]
        for approval_data in invalid:
            with self.assertRaises(ValidationError):
                services.approve_claim(claim.pk, approval_data)
        claim.refresh_from_db()
        self.assertEqual(claim.status, PENDING)
        self.assertIsNone(claim.approved_amount)

    def test_claim_is_decided_only_once(self):
        claim = self.submit()
        services.approve_claim(claim.pk, self.approval())
        with self.assertRaises(InvalidStateError):
            services.approve_claim(claim.pk, self.approval())
        with self.assertRaises(InvalidStateError):
            services.reject_claim(claim.pk, "Changed our mind")
        claim.refresh_from_db()
        self.assertEqual(claim.status, APPROVED)

    def test_decided_claim_reports_state_before_receipt(self):
        claim = self.submit()
        services.approve_claim(claim.pk, self.approval())
        receipt = SimpleUploadedFile("r.gif", b"gif", content_type="image/gif")
        with self.assertRaises(InvalidStateError):
            services.approve_claim(claim.pk, self.approval(), receipt=receipt)

    def test_non_string_approval_field_is_a_validation_error(self):
        claim = self.submit()
        with self.assertRaises(ValidationError) as ctx:
            services.approve_claim(claim.pk, self.approval(payment_city=42))
        self.assertIn("payment_city", ctx.exception.detail)
        claim.refresh_from_db()
        self.assertEqual(claim.status, PENDING)

    def test_receipt_is_stored(self):
        store = mock.Mock(**{"put.return_value": "expense_claim/receipts/abc-r.png"})
        receipt = SimpleUploadedFile("r.png", b"png", content_type="image/png")
        claim = services.approve_claim(
            self.submit().pk, self.approval(), receipt=receipt, store=store
        )
        self.assertEqual(claim.approval_receipt.name, "expense_claim/receipts/abc-r.png")
        store.put.assert_called_once()

    def test_receipt_of_wrong_type_is_rejected(self):
        claim = self.submit()
        store = mock.Mock()
        receipt = SimpleUploadedFile("r.gif", b"gif", content_type="image/gif")
        with self.assertRaises(ValidationError):
            services.approve_claim(claim.pk, self.approval(), receipt=receipt, store=store)
        store.put.assert_not_called()
        claim.refresh_from_db()
        self.assertEqual(claim.status, PENDING)

    @override_settings(ATTACHMENT_MAX_SIZE=10)
    def test_oversized_receipt_is_rejected(self):
        claim = self.submit()
        receipt = SimpleUploadedFile("r.pdf", b"x" * 11, content_type="application/pdf")
        with self.assertRaises(ValidationError):
            services.approve_claim(claim.pk, self.approval(), receipt=receipt)
        claim.refresh_from_db()
        self.assertEqual(claim.status, PENDING)


class RejectClaimTests(ClaimServiceTestCase):
    def test_rejection_stores_reason(self):
        claim = services.reject_claim(self.submit().pk, "Dana tidak tersedia")
        self.assertEqual(claim.status, REJECTED)
        self.assertEqual(claim.rejection_reason, "Dana tidak tersedia")
        self.assertIsNone(claim.approved_amount)

    def test_short_reason_leaves_claim_pending(self):
        claim = self.submit()
        for reason in ("no", "", "   short   ", None, 12345678901):
            with self.assertRaises(ValidationError):
                services.reject_claim(claim.pk, reason)
        claim.refresh_from_db()
        self.assertEqual(claim.status, PENDING)
        self.assertIsNone(claim.rejection_reason)


class ClaimStatisticsTests(ClaimServiceTestCase):
    def test_counts_and_nominal_per_period(self):
        today = datetime.date(2024, 5, 15)  # Wednesday
        self.submit(submission_date=today, amount_requested=Decimal("100"))
        self.submit(submission_date=datetime.date(2024, 5, 13), amount_requested=Decimal("200"))
        self.submit(submission_date=datetime.date(2024, 5, 2), amount_requested=Decimal("300"))
        decided = self.submit(
            submission_date=datetime.date(2024, 1, 10), amount_requested=Decimal("400")
        )
        services.reject_claim(decided.pk, "Outside of policy")
        self.submit(submission_date=datetime.date(2023, 12, 31), amount_requested=Decimal("500"))

        stats = services.claim_statistics(today=today)

        self.assertEqual(stats["pending"], {"count": 4, "nominal": Decimal("1100")})
        self.assertEqual(stats["today"], {"count": 1, "nominal": Decimal("100")})
        self.assertEqual(stats["this_week"], {"count": 2, "nominal": Decimal("300")})
        self.assertEqual(stats["this_month"], {"count": 3, "nominal": Decimal("600")})
        self.assertEqual(stats["this_year"], {"count": 4, "nominal": Decimal("1000")})
