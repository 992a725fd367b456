"""
Seat Inventory Interface

Per-screening seats and their status. The only mutation is a batch
compare-and-swap; callers outside the booking coordinator may only read.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from src.service.cinema_booking.app.dto.rejection import HasActiveHolds, SeatStatusChange
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.domain.value_object.seat_position import SeatPosition


class ISeatInventory(ABC):
    @abstractmethod
    async def initialize_seats(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat]:
        """
        Create the seat set of a new screening, all available.

        Raises:
            DomainError: When the screening already has seats
        """
        pass

    @abstractmethod
    async def seats_for(self, *, screening_id: int) -> List[Seat]:
        """Seats of a screening ordered by row then number (empty when unknown)"""
        pass

    @abstractmethod
    async def get_seats(self, *, seat_ids: Sequence[int]) -> List[Seat]:
        """Seats with the given ids; unknown ids are left out"""
        pass

    @abstractmethod
    async def seat_status(self, *, seat_id: int) -> SeatStatus | None:
        pass

    @abstractmethod
    async def set_status(
        self, *, seat_ids: Sequence[int], from_status: SeatStatus, to_status: SeatStatus
    ) -> SeatStatusChange:
        """
        Atomically move every seat from `from_status` to `to_status`.

        Either all seats change or none do. When any seat is unknown or not in
        `from_status` the result lists those seats in `conflicting_seat_ids`.
        """
        pass

    @abstractmethod
    async def regenerate(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat] | HasActiveHolds:
        """
        Replace the full seat set of a screening.

        Refused with HasActiveHolds while any seat is held or sold; the
        existing seats are left untouched in that case.
        """
        pass
