from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Mapping

from src.service.cinema_booking.app.dto.payment_dto import ChargeResult
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod


class IPaymentGateway(ABC):
    @abstractmethod
    async def charge(
        self, *, amount: Decimal, method: PaymentMethod, payment_details: Mapping[str, Any]
    ) -> ChargeResult:
        """
        Charge the customer. Declines are returned as a failed ChargeResult;
        exceptions mean the gateway could not be reached.
        """
        pass
