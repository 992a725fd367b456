from datetime import datetime, timezone
import itertools
import threading
from typing import Dict, List, Sequence

import attrs

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.rejection import HasActiveHolds, SeatStatusChange
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.domain.value_object.seat_position import SeatPosition


class SeatInventoryMemoryImpl(ISeatInventory):
    """
    Process-local seat inventory.

    A threading.Lock guards every read-modify-write so a batch compare-and-swap
    is atomic even when request handlers run on several threads.
    """

    def __init__(self) -> None:
        self._seats: Dict[int, Seat] = {}
        self._seat_ids_by_screening: Dict[int, List[int]] = {}
        self._ids = itertools.count(1)
        self._mutex = threading.Lock()

    async def initialize_seats(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat]:
        with self._mutex:
            if self._seat_ids_by_screening.get(screening_id):
                raise ConflictError(f'Screening {screening_id} already has seats')
            return self._create_seats(screening_id=screening_id, positions=positions)

    async def seats_for(self, *, screening_id: int) -> List[Seat]:
        with self._mutex:
            seats = [
                attrs.evolve(self._seats[seat_id])
                for seat_id in self._seat_ids_by_screening.get(screening_id, [])
            ]
        return sorted(seats, key=lambda seat: (seat.row, seat.number))

    async def get_seats(self, *, seat_ids: Sequence[int]) -> List[Seat]:
        with self._mutex:
            return [
                attrs.evolve(self._seats[seat_id]) for seat_id in seat_ids if seat_id in self._seats
            ]

    async def seat_status(self, *, seat_id: int) -> SeatStatus | None:
        with self._mutex:
            seat = self._seats.get(seat_id)
            return seat.status if seat else None

    async def set_status(
        self, *, seat_ids: Sequence[int], from_status: SeatStatus, to_status: SeatStatus
    ) -> SeatStatusChange:
        with self._mutex:
            conflicting = [
                seat_id
                for seat_id in seat_ids
                if seat_id not in self._seats or self._seats[seat_id].status != from_status
            ]
            if conflicting:
                return SeatStatusChange(applied=False, conflicting_seat_ids=conflicting)

            now = datetime.now(timezone.utc)
            for seat_id in seat_ids:
                self._seats[seat_id] = attrs.evolve(
                    self._seats[seat_id], status=to_status, updated_at=now
                )
            return SeatStatusChange(applied=True)

    async def regenerate(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat] | HasActiveHolds:
        with self._mutex:
            current_ids = self._seat_ids_by_screening.get(screening_id, [])
            active = [
                seat_id
                for seat_id in current_ids
                if self._seats[seat_id].status != SeatStatus.AVAILABLE
            ]
            if active:
                return HasActiveHolds(screening_id=screening_id, seat_ids=active)

            for seat_id in current_ids:
                del self._seats[seat_id]
            self._seat_ids_by_screening[screening_id] = []
            Logger.base.info(
                f'🗑️ [INVENTORY] Dropped {len(current_ids)} seats of screening {screening_id}'
            )
            return self._create_seats(screening_id=screening_id, positions=positions)

    def _create_seats(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat]:
        now = datetime.now(timezone.utc)
        created = []
        for position in positions:
            seat = Seat(
                id=next(self._ids),
                screening_id=screening_id,
                row=position.row,
                number=position.number,
                status=SeatStatus.AVAILABLE,
                updated_at=now,
            )
            self._seats[seat.id] = seat
            created.append(seat)
        self._seat_ids_by_screening[screening_id] = [seat.id for seat in created]
        return [attrs.evolve(seat) for seat in created]
