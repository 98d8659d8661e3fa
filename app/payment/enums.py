PAYMENT_STATUS_OPTIONS = (
    ("UNPAID", "Unpaid"),
    ("PARTIAL", "Partial"),
    ("PAID", "Paid"),
    ("OVERPAID", "Overpaid"),
)

UNPAID = "UNPAID"
PARTIAL = "PARTIAL"
PAID = "PAID"
OVERPAID = "OVERPAID"

OPEN_PAYMENT_STATUSES = (UNPAID, PARTIAL)

OWNER_TYPE_OPTIONS = (
    ("CLAIM", "CLAIM"),
    ("PURCHASE", "PURCHASE"),
)

CLAIM_OWNER = "CLAIM"
PURCHASE_OWNER = "PURCHASE"
