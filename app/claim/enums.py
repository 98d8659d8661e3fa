CLAIM_STATUS_OPTIONS = (
    ("PENDING", "PENDING"),
    ("APPROVED", "APPROVED"),
    ("REJECTED", "REJECTED"),
)

PENDING = "PENDING"
APPROVED = "APPROVED"
REJECTED = "REJECTED"

MIN_REJECTION_REASON_LENGTH = 10
