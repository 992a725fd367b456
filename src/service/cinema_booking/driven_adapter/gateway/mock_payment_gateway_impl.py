from decimal import Decimal
import random
import string
from typing import Any, Mapping

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.payment_dto import ChargeResult
from src.service.cinema_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus


class MockPaymentGatewayImpl(IPaymentGateway):
    """
    Stand-in payment provider.

    Card numbers ending with `declined_card_suffix` are declined, everything
    else is charged. PayPal payments need the payer email.
    """

    def __init__(self, *, declined_card_suffix: str = '0002') -> None:
        self.declined_card_suffix = declined_card_suffix

    @Logger.io
    async def charge(
        self, *, amount: Decimal, method: PaymentMethod, payment_details: Mapping[str, Any]
    ) -> ChargeResult:
        reference = f'PAY_MOCK_{"".join(random.choices(string.ascii_uppercase + string.digits, k=8))}'

        if method == PaymentMethod.CREDIT_CARD:
            card_number = str(payment_details.get('card_number') or '').replace(' ', '')
            if not card_number:
                raise DomainError('Card number is required for payment')
            if card_number.endswith(self.declined_card_suffix):
                return ChargeResult(
                    status=PaymentStatus.FAILED,
                    reference=reference,
                    failure_reason='Card declined',
                )
        elif method == PaymentMethod.PAYPAL:
            if not payment_details.get('paypal_email'):
                raise DomainError('PayPal email is required for payment')

        Logger.base.info(f'💳 [MOCK-GATEWAY] Charged {amount} via {method} ({reference})')
        return ChargeResult(status=PaymentStatus.COMPLETED, reference=reference)
