"""
Expense claim lifecycle.

PENDING is the only non-terminal status. A claim moves exactly once, to
APPROVED or REJECTED, while its row is locked; approval opens the claim's
payment ledger in the same transaction.
"""
import logging
from decimal import InvalidOperation

from dateutil.relativedelta import relativedelta, MO
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from core import attachments
from core.exceptions import InvalidStateError, NotFoundError, ValidationError
from payment import calculator
from payment.ledger import open_header_for_claim
from payment.models import PaymentHeader
from .enums import APPROVED, REJECTED, MIN_REJECTION_REASON_LENGTH
from .models import ExpenseClaim

logger = logging.getLogger(__name__)

RECEIPT_FOLDER = "expense_claim/receipts"

EDITABLE_FIELDS = (
    "requester_name",
    "division",
    "purpose",
    "amount_requested",
    "submission_date",
    "note",
)


def _text(data, field, errors):
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        errors[field] = "Not a valid string."
        return ""
    return value.strip()


def _required_text(data, field, errors):
    value = _text(data, field, errors)
    if not value and field not in errors:
        errors[field] = "This field may not be blank."
    return value


def _positive_amount(data, field, errors):
    value = data.get(field)
    if value in (None, ""):
        errors[field] = "This field is required."
        return None
    try:
        amount = calculator.to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        errors[field] = "A valid number is required."
        return None
    if not amount.is_finite() or amount <= 0:
        errors[field] = "Amount must be greater than zero."
        return None
    return amount


def _validate_claim_fields(data, errors):
    cleaned = {}
    if "requester_name" in data:
        cleaned["requester_name"] = _required_text(data, "requester_name", errors)
    if "purpose" in data:
        cleaned["purpose"] = _required_text(data, "purpose", errors)
    if "amount_requested" in data:
        cleaned["amount_requested"] = _positive_amount(data, "amount_requested", errors)
    if "division" in data:
        cleaned["division"] = _text(data, "division", errors)
    if "note" in data:
        cleaned["note"] = _text(data, "note", errors)
    if data.get("submission_date"):
        cleaned["submission_date"] = data["submission_date"]
    return cleaned


def claim_number_taken(claim_number):
    """Claim numbers share one namespace with purchase header references."""
    return (
        ExpenseClaim.objects.filter(claim_number=claim_number).exists()
        or PaymentHeader.objects.filter(reference=claim_number).exists()
    )


def next_claim_number():
    prefix = settings.CLAIM_NUMBER_PREFIX
    existing = ExpenseClaim.objects.filter(claim_number__startswith=f"{prefix}-").count()
    sequence = existing + 1
    while claim_number_taken(f"{prefix}-{sequence:03d}"):
        sequence += 1
    return f"{prefix}-{sequence:03d}"


def get_claim(claim_id, for_update=False):
    queryset = ExpenseClaim.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=claim_id)
    except (ExpenseClaim.DoesNotExist, DjangoValidationError, ValueError, TypeError):
        raise NotFoundError(f"Expense claim {claim_id} does not exist.")


def _ensure_pending(claim, action):
    if not claim.is_pending:
        raise InvalidStateError(
            f"Only pending claims can be {action}; claim {claim.claim_number} "
            f"is {claim.status.lower()}."
        )


@transaction.atomic
def submit_claim(data, submitted_by=None):
    errors = {}
    data = {"requester_name": None, "purpose": None, "amount_requested": None, **data}
    cleaned = _validate_claim_fields(data, errors)

    claim_number = _text(data, "claim_number", errors)
    if claim_number and claim_number_taken(claim_number):
        errors["claim_number"] = "A claim or payment header with this number already exists."
    if errors:
        raise ValidationError(errors)

    claim = ExpenseClaim.objects.create(
        claim_number=claim_number or next_claim_number(),
        submitted_by=submitted_by,
        **cleaned,
    )
    logger.info(
        "Claim %s submitted by %s for %s", claim.claim_number, claim.requester_name, claim.amount_requested
    )
    return claim


@transaction.atomic
def update_claim(claim_id, data):
    claim = get_claim(claim_id, for_update=True)
    _ensure_pending(claim, "updated")

    errors = {}
    cleaned = _validate_claim_fields(
        {key: value for key, value in data.items() if key in EDITABLE_FIELDS}, errors
    )
    if errors:
        raise ValidationError(errors)

    for field, value in cleaned.items():
        setattr(claim, field, value)
    claim.save()
    logger.info("Claim %s updated", claim.claim_number)
    return claim


@transaction.atomic
def delete_claim(claim_id):
    claim = get_claim(claim_id, for_update=True)
    _ensure_pending(claim, "deleted")
    claim_number = claim.claim_number
    claim.delete()
    logger.info("Claim %s deleted", claim_number)


@transaction.atomic
def approve_claim(claim_id, approval_data, receipt=None, reviewed_by=None, store=None):
    """Approve a pending claim and open its payment header."""
    claim = get_claim(claim_id, for_update=True)
    _ensure_pending(claim, "approved")
    if receipt is not None:
        attachments.validate(attachments.AttachmentMetadata.from_upload(receipt))

    errors = {}
    approved_amount = _positive_amount(approval_data, "approved_amount", errors)
    approver = approval_data.get("approver")
    if approver is None:
        errors["approver"] = "This field is required."
    recipient_name = _required_text(approval_data, "recipient_name", errors)
    payment_date = approval_data.get("payment_date")
    if not payment_date:
        errors["payment_date"] = "This field is required."
    payment_city = _required_text(approval_data, "payment_city", errors)
    approval_note = _text(approval_data, "approval_note", errors)
    if errors:
        raise ValidationError(errors)

    claim.status = APPROVED
    claim.approved_amount = approved_amount
    claim.approver = approver
    claim.recipient_name = recipient_name
    claim.payment_date = payment_date
    claim.payment_city = payment_city
    claim.approval_note = approval_note
    claim.approval_receipt = attachments.store_upload(receipt, RECEIPT_FOLDER, store=store)
    claim.reviewed_by = reviewed_by
    claim.reviewed_at = timezone.now()
    claim.save()

    open_header_for_claim(claim, due_date=approval_data.get("due_date"))
    logger.info(
        "Claim %s approved for %s by %s", claim.claim_number, approved_amount, approver
    )
    return claim


@transaction.atomic
def reject_claim(claim_id, reason, reviewed_by=None):
    claim = get_claim(claim_id, for_update=True)
    _ensure_pending(claim, "rejected")

    reason = reason.strip() if isinstance(reason, str) else ""
    if len(reason) < MIN_REJECTION_REASON_LENGTH:
        raise ValidationError(
            {
                "reason": f"Rejection reason must be at least "
                f"{MIN_REJECTION_REASON_LENGTH} characters."
            }
        )

    claim.status = REJECTED
    claim.rejection_reason = reason
    claim.reviewed_by = reviewed_by
    claim.reviewed_at = timezone.now()
    claim.save(update_fields=["status", "rejection_reason", "reviewed_by", "reviewed_at", "updated_at"])
    logger.info("Claim %s rejected", claim.claim_number)
    return claim


def _count_and_nominal(queryset):
    totals = queryset.aggregate(count=Count("id"), nominal=Sum("amount_requested"))
    return {"count": totals["count"], "nominal": totals["nominal"] or 0}


def claim_statistics(today=None):
    today = today or timezone.localdate()
    claims = ExpenseClaim.objects.all()
    week_start = today + relativedelta(weekday=MO(-1))
    month_start = today + relativedelta(day=1)
    year_start = today + relativedelta(month=1, day=1)
    return {
        "pending": _count_and_nominal(claims.pending()),
        "today": _count_and_nominal(claims.filter(submission_date=today)),
        "this_week": _count_and_nominal(
            claims.filter(submission_date__gte=week_start, submission_date__lte=today)
        ),
        "this_month": _count_and_nominal(
            claims.filter(submission_date__gte=month_start, submission_date__lte=today)
        ),
        "this_year": _count_and_nominal(
            claims.filter(submission_date__gte=year_start, submission_date__lte=today)
        ),
    }
