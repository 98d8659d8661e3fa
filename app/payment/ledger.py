"""
Payment ledger.

A PaymentHeader's ``total_paid`` and ``payment_status`` are never trusted on
their own: every installment insert or delete re-sums the header's records
and rewrites both fields in the same transaction. The header row is locked
with ``select_for_update`` first, so concurrent posts against one header are
serialized instead of overwriting each other's recomputation.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Max, Sum

from claim.enums import APPROVED
from claim.models import ExpenseClaim
from core import attachments
from core.exceptions import (
    ConsistencyError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from . import calculator
from .enums import CLAIM_OWNER, PURCHASE_OWNER, PAID, OVERPAID, OPEN_PAYMENT_STATUSES
from .models import PaymentHeader, PaymentRecord

logger = logging.getLogger(__name__)

PROOF_FOLDER = "payment/proofs"


def _positive_amount(value, field):
    if value in (None, ""):
        raise ValidationError({field: "This field is required."})
    try:
        amount = calculator.to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: "A valid number is required."})
    if not amount.is_finite() or amount <= 0:
        raise ValidationError({field: "Amount must be greater than zero."})
    return amount


def _lock_header(header_id):
    try:
        return (
            PaymentHeader.objects.select_for_update(of=("self",))
            .select_related("claim")
            .get(pk=header_id)
        )
    except (PaymentHeader.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(f"Payment header {header_id} does not exist.")


def _ensure_accepts_payments(header):
    if header.owner_type != CLAIM_OWNER:
        return
    if header.claim is None or header.claim.status != APPROVED:
        raise InvalidStateError(
            "Payments can only be posted against an approved claim."
        )


def _sum_records(header):
    return header.records.aggregate(total=Sum("amount"))["total"] or Decimal("0")


def recompute(header):
    """Re-derive total_paid, payment_status and settlement_date from the records.

    Must be called inside the transaction holding the header lock.
    """
    total_paid = _sum_records(header)
    if total_paid < 0:
        logger.error(
            "Negative total_paid %s recomputed for header %s", total_paid, header.pk
        )
        raise ConsistencyError(
            f"Recomputed total paid for {header.reference} is negative."
        )

    previous_status = header.payment_status
    header.total_paid = total_paid
    header.payment_status = calculator.header_status(header.total_billed, total_paid)
    if header.payment_status == PAID:
        header.settlement_date = header.records.aggregate(
            latest=Max("payment_date")
        )["latest"]
    else:
        header.settlement_date = None
    header.save(
        update_fields=["total_paid", "payment_status", "settlement_date", "updated_at"]
    )

    if header.payment_status == OVERPAID and previous_status != OVERPAID:
        logger.warning(
            "Header %s is overpaid: billed %s, paid %s",
            header.reference,
            header.total_billed,
            header.total_paid,
        )
    return header


def open_header_for_claim(claim, due_date=None):
    """Open the ledger for a claim that has just been approved."""
    if claim.status != APPROVED:
        raise InvalidStateError("A payment ledger can only be opened for an approved claim.")
    if PaymentHeader.objects.filter(claim=claim).exists():
        raise ConsistencyError(f"Claim {claim.claim_number} already has a payment header.")
    if PaymentHeader.objects.filter(reference=claim.claim_number).exists():
        raise ConsistencyError(
            f"Reference {claim.claim_number} is already used by another payment header."
        )
    header = PaymentHeader.objects.create(
        reference=claim.claim_number,
        owner_type=CLAIM_OWNER,
        claim=claim,
        total_billed=claim.approved_amount,
        total_paid=Decimal("0"),
        due_date=due_date,
        payment_status=calculator.header_status(claim.approved_amount, 0),
    )
    logger.info(
        "Opened payment header %s for claim %s (billed %s)",
        header.pk,
        claim.claim_number,
        header.total_billed,
    )
    return header


@transaction.atomic
def open_header_for_purchase(reference, total_billed, due_date=None):
    """Register a purchase bill for reconciliation."""
    reference = (reference or "").strip()
    if not reference:
        raise ValidationError({"reference": "This field may not be blank."})
    total_billed = _positive_amount(total_billed, "total_billed")
    if PaymentHeader.objects.filter(reference=reference).exists():
        raise ValidationError({"reference": "A payment header with this reference already exists."})
    if ExpenseClaim.objects.filter(claim_number=reference).exists():
        raise ValidationError({"reference": "This reference is already used as a claim number."})
    header = PaymentHeader.objects.create(
        reference=reference,
        owner_type=PURCHASE_OWNER,
        total_billed=total_billed,
        total_paid=Decimal("0"),
        due_date=due_date,
        payment_status=calculator.header_status(total_billed, 0),
    )
    logger.info("Opened payment header %s for purchase %s", header.pk, reference)
    return header


@transaction.atomic
def post_payment(
    header_id, amount, payment_date, note="", proof=None, created_by=None, store=None
):
    amount = _positive_amount(amount, "amount")
    if payment_date is None:
        raise ValidationError({"payment_date": "This field is required."})
    if proof is not None:
        attachments.validate(attachments.AttachmentMetadata.from_upload(proof))

    header = _lock_header(header_id)
    _ensure_accepts_payments(header)

    proof_path = attachments.store_upload(proof, PROOF_FOLDER, store=store)
    record = PaymentRecord.objects.create(
        header=header,
        amount=amount,
        payment_date=payment_date,
        note=note or "",
        proof_attachment=proof_path,
        created_by=created_by,
    )
    recompute(header)
    logger.info(
        "Posted payment %s of %s on header %s; paid %s of %s (%s)",
        record.pk,
        amount,
        header.reference,
        header.total_paid,
        header.total_billed,
        header.payment_status,
    )
    return header


@transaction.atomic
def delete_payment(record_id, store=None):
    try:
        header_id = PaymentRecord.objects.values_list("header_id", flat=True).get(
            pk=record_id
        )
    except (PaymentRecord.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(f"Payment record {record_id} does not exist.")

    header = _lock_header(header_id)
    # re-read under the header lock; a concurrent delete may have won
    try:
        record = header.records.get(pk=record_id)
    except PaymentRecord.DoesNotExist:
        raise NotFoundError(f"Payment record {record_id} does not exist.")

    proof_path = record.proof_attachment.name if record.proof_attachment else None
    record.delete()
    recompute(header)

    if proof_path:
        store = store or attachments.AttachmentStore()
        transaction.on_commit(lambda: store.delete(proof_path))

    logger.info(
        "Deleted payment %s from header %s; paid %s of %s (%s)",
        record_id,
        header.reference,
        header.total_paid,
        header.total_billed,
        header.payment_status,
    )
    return header


def payment_statistics(today=None):
    headers = PaymentHeader.objects.all()
    return {
        "settled": headers.filter(payment_status=PAID).count(),
        "pending": headers.filter(payment_status__in=OPEN_PAYMENT_STATUSES).count(),
        "overdue": headers.overdue(today).count(),
        "overpaid": headers.filter(payment_status=OVERPAID).count(),
    }
