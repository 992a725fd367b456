from datetime import datetime
import threading
from typing import Any, Dict, List
from uuid import UUID

from src.service.cinema_booking.app.dto.rejection import (
    InvalidTransition,
    NotFound,
    SeatsUnavailable,
)
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.reservation_state_machine import is_transition_allowed


class ReservationLedgerMemoryImpl(IReservationLedger):
    """
    Process-local reservation ledger.

    Keeps a seat -> active reservation index so `create` can refuse a seat that
    an active reservation already references.
    """

    def __init__(self) -> None:
        self._reservations: Dict[UUID, Reservation] = {}
        self._active_by_seat: Dict[int, UUID] = {}
        self._by_confirmation_code: Dict[str, UUID] = {}
        self._mutex = threading.Lock()

    async def create(self, *, reservation: Reservation) -> Reservation | SeatsUnavailable:
        with self._mutex:
            taken = [seat_id for seat_id in reservation.seat_ids if seat_id in self._active_by_seat]
            if taken:
                return SeatsUnavailable(seat_ids=taken)

            self._reservations[reservation.id] = reservation
            for seat_id in reservation.seat_ids:
                self._active_by_seat[seat_id] = reservation.id
            return reservation

    async def get(self, *, reservation_id: UUID) -> Reservation | None:
        with self._mutex:
            return self._reservations.get(reservation_id)

    async def transition(
        self,
        *,
        reservation_id: UUID,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
        now: datetime,
        **changes: Any,
    ) -> Reservation | InvalidTransition | NotFound:
        with self._mutex:
            current = self._reservations.get(reservation_id)
            if current is None:
                return NotFound(entity='Reservation', key=str(reservation_id))
            if current.status != from_status or not is_transition_allowed(from_status, to_status):
                return InvalidTransition(
                    reservation_id=reservation_id,
                    from_status=from_status,
                    to_status=to_status,
                    current_status=current.status,
                )

            updated = current.transition_to(to_status, now=now, **changes)
            self._reservations[reservation_id] = updated

            if not to_status.is_active:
                for seat_id in updated.seat_ids:
                    if self._active_by_seat.get(seat_id) == reservation_id:
                        del self._active_by_seat[seat_id]
            if updated.confirmation_code:
                self._by_confirmation_code[updated.confirmation_code] = reservation_id
            return updated

    async def find_by_seat(self, *, seat_id: int) -> Reservation | None:
        with self._mutex:
            reservation_id = self._active_by_seat.get(seat_id)
            return self._reservations[reservation_id] if reservation_id else None

    async def find_by_confirmation_code(self, *, code: str) -> Reservation | None:
        with self._mutex:
            reservation_id = self._by_confirmation_code.get(code)
            return self._reservations[reservation_id] if reservation_id else None

    async def list_expired(
        self, *, now: datetime, screening_id: int | None = None
    ) -> List[Reservation]:
        with self._mutex:
            overdue = [
                reservation
                for reservation in self._reservations.values()
                if reservation.is_overdue(now)
                and (screening_id is None or reservation.screening_id == screening_id)
            ]
        return sorted(overdue, key=lambda reservation: reservation.expires_at)

    async def list_by_screening(self, *, screening_id: int) -> List[Reservation]:
        with self._mutex:
            reservations = [
                reservation
                for reservation in self._reservations.values()
                if reservation.screening_id == screening_id
            ]
        return sorted(reservations, key=lambda reservation: reservation.expires_at)

    async def purge_inactive(self, *, screening_id: int) -> int:
        with self._mutex:
            inactive = [
                reservation_id
                for reservation_id, reservation in self._reservations.items()
                if reservation.screening_id == screening_id
                and reservation.status in (ReservationStatus.EXPIRED, ReservationStatus.CANCELLED)
            ]
            for reservation_id in inactive:
                del self._reservations[reservation_id]
            return len(inactive)
