import datetime
import threading
import unittest
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase

from claim import services as claim_services
from claim.enums import APPROVED
from claim.models import Approver, ExpenseClaim
from core.exceptions import InvalidStateError
from payment import ledger
from payment.enums import PAID
from payment.models import PaymentHeader
from payment.reconciliation import ReconciliationService

PAY_DATE = datetime.date(2024, 3, 1)


def run_together(target, count):
    """Start ``count`` threads on ``target`` at once; return each outcome."""
    barrier = threading.Barrier(count, timeout=10)
    outcomes = [None] * count

    def worker(index):
        try:
            barrier.wait()
            outcomes[index] = target()
        except Exception as exc:
            outcomes[index] = exc
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return outcomes


@unittest.skipUnless(
    connection.vendor == "postgresql", "row locks need a database with select_for_update"
)
class ConcurrentLedgerTests(TransactionTestCase):
    def setUp(self):
        self.approver = Approver.objects.create(name="Head of Finance")
        self.claim = claim_services.submit_claim(
            {"requester_name": "Budi", "purpose": "Site visit", "amount_requested": 800}
        )
        self.approval = {
            "approved_amount": Decimal("800"),
            "approver": self.approver,
            "recipient_name": "Budi",
            "payment_date": PAY_DATE,
            "payment_city": "Jakarta",
        }

    def test_parallel_installments_are_all_counted(self):
        _, header = ReconciliationService().approve_and_open_ledger(
            self.claim.pk, self.approval
        )

        outcomes = run_together(
            lambda: ledger.post_payment(header.pk, Decimal("100"), PAY_DATE), 8
        )

        errors = [outcome for outcome in outcomes if isinstance(outcome, Exception)]
        self.assertEqual(errors, [])
        header.refresh_from_db()
        self.assertEqual(header.records.count(), 8)
        self.assertEqual(header.total_paid, Decimal("800"))
        self.assertEqual(header.payment_status, PAID)

    def test_parallel_approvals_decide_once(self):
        service = ReconciliationService()

        outcomes = run_together(
            lambda: service.approve_and_open_ledger(self.claim.pk, self.approval), 2
        )

        approved = [outcome for outcome in outcomes if isinstance(outcome, tuple)]
        refused = [
            outcome for outcome in outcomes if isinstance(outcome, InvalidStateError)
        ]
        self.assertEqual(len(approved), 1)
        self.assertEqual(len(refused), 1)
        self.assertEqual(ExpenseClaim.objects.get(pk=self.claim.pk).status, APPROVED)
        self.assertEqual(PaymentHeader.objects.filter(claim=self.claim).count(), 1)
