from decimal import Decimal

from django.test import SimpleTestCase

from payment import calculator
from payment.enums import UNPAID, PARTIAL, PAID, OVERPAID


class RemainingTests(SimpleTestCase):
    def test_remaining_is_billed_minus_paid(self):
        self.assertEqual(
            calculator.remaining(Decimal("5000000"), Decimal("3000000")),
            Decimal("2000000"),
        )

    def test_remaining_goes_negative_when_overpaid(self):
        self.assertEqual(calculator.remaining(1000000, 1200000), Decimal("-200000"))

    def test_float_input_is_exact(self):
        self.assertEqual(calculator.remaining(0.3, 0.1), Decimal("0.2"))


class StatusTests(SimpleTestCase):
    def test_zero_remaining_is_paid(self):
        self.assertEqual(calculator.status(Decimal("0.00")), PAID)

    def test_positive_remaining_is_partial(self):
        self.assertEqual(calculator.status(Decimal("0.01")), PARTIAL)

    def test_negative_remaining_is_overpaid(self):
        self.assertEqual(calculator.status(Decimal("-0.01")), OVERPAID)

    def test_nothing_paid_is_unpaid(self):
        self.assertEqual(calculator.header_status(Decimal("5000000"), 0), UNPAID)

    def test_header_status_follows_remaining_once_paid(self):
        self.assertEqual(calculator.header_status(5000000, 3000000), PARTIAL)
        self.assertEqual(calculator.header_status(5000000, 5000000), PAID)
        self.assertEqual(calculator.header_status(1000000, 1200000), OVERPAID)
