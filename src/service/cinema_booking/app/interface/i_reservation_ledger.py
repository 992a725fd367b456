"""
Reservation Ledger Interface

Source of truth for who holds which seats. Reservations are never deleted
through normal operation; expired and cancelled ones stay for lookup.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List
from uuid import UUID

from src.service.cinema_booking.app.dto.rejection import (
    InvalidTransition,
    NotFound,
    SeatsUnavailable,
)
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus


class IReservationLedger(ABC):
    @abstractmethod
    async def create(self, *, reservation: Reservation) -> Reservation | SeatsUnavailable:
        """
        Insert a new holding reservation.

        Rejected with SeatsUnavailable when any of its seats is already
        referenced by an active (holding, awaiting payment or confirmed) reservation.
        """
        pass

    @abstractmethod
    async def get(self, *, reservation_id: UUID) -> Reservation | None:
        pass

    @abstractmethod
    async def transition(
        self,
        *,
        reservation_id: UUID,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
        now: datetime,
        **changes: Any,
    ) -> Reservation | InvalidTransition | NotFound:
        """
        Compare-and-swap the reservation status.

        Applies only when the current status equals `from_status` and the edge
        is part of the reservation state machine. `changes` are extra fields
        written in the same step (confirmation code, total price, ...).
        """
        pass

    @abstractmethod
    async def find_by_seat(self, *, seat_id: int) -> Reservation | None:
        """Active reservation referencing the seat, if any"""
        pass

    @abstractmethod
    async def find_by_confirmation_code(self, *, code: str) -> Reservation | None:
        pass

    @abstractmethod
    async def list_expired(
        self, *, now: datetime, screening_id: int | None = None
    ) -> List[Reservation]:
        """Holding / awaiting-payment reservations whose hold window has passed"""
        pass

    @abstractmethod
    async def list_by_screening(self, *, screening_id: int) -> List[Reservation]:
        pass

    @abstractmethod
    async def purge_inactive(self, *, screening_id: int) -> int:
        """Delete expired and cancelled reservations of a screening; returns the count"""
        pass
