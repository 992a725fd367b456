from enum import StrEnum


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'


class PaymentMethod(StrEnum):
    CREDIT_CARD = 'credit_card'
    PAYPAL = 'paypal'
