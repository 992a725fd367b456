from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from src.service.cinema_booking.domain.entity.payment_entity import Payment


class IPaymentRepo(ABC):
    """One payment record per reservation (latest attempt wins until it is terminal)."""

    @abstractmethod
    async def get_by_reservation(self, *, reservation_id: UUID) -> Payment | None:
        pass

    @abstractmethod
    async def save(self, *, payment: Payment) -> Payment:
        """Insert or replace the payment of `payment.reservation_id`"""
        pass

    @abstractmethod
    async def claim_charge(self, *, reservation_id: UUID, now: datetime) -> bool:
        """
        Mark the pending payment as being charged.

        Returns False when there is no pending payment or another caller
        already holds the claim.
        """
        pass

    @abstractmethod
    async def release_charge(self, *, reservation_id: UUID) -> None:
        """Drop the claim of a charge that never reached the gateway"""
        pass
