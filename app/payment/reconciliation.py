import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from claim import services as claim_services
from claim.enums import APPROVED, REJECTED
from claim.models import ExpenseClaim
from core.exceptions import InvalidStateError, NotFoundError
from . import calculator, ledger
from .enums import PURCHASE_OWNER
from .models import PaymentHeader

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Claim approval and installment posting, addressed by claim or header reference.

    ``reference`` is the header's opaque reference: the claim number for a
    claim header, the purchase reference otherwise.
    """

    def __init__(self, user=None, store=None):
        self.user = user
        self.store = store

    @transaction.atomic
    def approve_and_open_ledger(self, claim_id, approval_data, receipt=None):
        claim = claim_services.approve_claim(
            claim_id,
            approval_data,
            receipt=receipt,
            reviewed_by=self.user,
            store=self.store,
        )
        header = claim.payment_header
        logger.info("Ledger %s open for claim %s", header.reference, claim.claim_number)
        return claim, header

    def resolve_header(self, reference):
        """A claim number resolves through its claim, anything else to a purchase header."""
        claim = ExpenseClaim.objects.filter(claim_number=reference).first()
        if claim is None:
            try:
                return PaymentHeader.objects.get(
                    reference=reference, owner_type=PURCHASE_OWNER
                )
            except PaymentHeader.DoesNotExist:
                raise NotFoundError(
                    f"No claim or payment header with reference {reference}."
                )

        if claim.status == REJECTED:
            raise InvalidStateError(
                f"Claim {reference} was rejected; no payments are possible."
            )
        if claim.status != APPROVED:
            raise InvalidStateError(
                f"Claim {reference} is not approved; it has no payment ledger."
            )
        header = PaymentHeader.objects.select_related("claim").filter(claim=claim).first()
        if header is None:
            raise NotFoundError(f"Claim {reference} has no payment header.")
        return header

    def header_for_claim(self, claim_id):
        claim = claim_services.get_claim(claim_id)
        header = PaymentHeader.objects.filter(claim=claim).first()
        if header is None:
            raise InvalidStateError(
                f"Claim {claim.claim_number} is {claim.status.lower()}; it has no payment ledger."
            )
        return header

    def post_installment(self, reference, amount, payment_date, note="", proof=None):
        header = self.resolve_header(reference)
        return ledger.post_payment(
            header.pk,
            amount,
            payment_date,
            note=note,
            proof=proof,
            created_by=self.user,
            store=self.store,
        )

    def remove_installment(self, reference, record_id):
        header = self.resolve_header(reference)
        try:
            belongs = header.records.filter(pk=record_id).exists()
        except (DjangoValidationError, ValueError, TypeError):
            belongs = False
        if not belongs:
            raise NotFoundError(
                f"Payment record {record_id} does not belong to {reference}."
            )
        return ledger.delete_payment(record_id, store=self.store)

    def summary(self, reference):
        return build_summary(self.resolve_header(reference))


def build_summary(header):
    """Display-ready totals, always read fresh from the database."""
    header = PaymentHeader.objects.get(pk=header.pk)
    remaining = calculator.remaining(header.total_billed, header.total_paid)
    return {
        "reference": header.reference,
        "total_billed": header.total_billed,
        "total_paid": header.total_paid,
        "remaining": remaining,
        "status": header.payment_status,
        "status_label": header.get_payment_status_display(),
    }
