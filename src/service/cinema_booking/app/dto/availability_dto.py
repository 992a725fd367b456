from datetime import datetime
from typing import Dict, List, Optional

import attrs

from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus


@attrs.frozen
class ScreeningAvailability:
    screening: Screening
    available_seats: int
    held_seats: int
    sold_seats: int

    @property
    def is_fully_booked(self) -> bool:
        return self.available_seats == 0

    @classmethod
    def from_seats(cls, *, screening: Screening, seats: List[Seat]) -> 'ScreeningAvailability':
        counts = {status: 0 for status in SeatStatus}
        for seat in seats:
            counts[seat.status] += 1
        return cls(
            screening=screening,
            available_seats=counts[SeatStatus.AVAILABLE],
            held_seats=counts[SeatStatus.HELD],
            sold_seats=counts[SeatStatus.SOLD],
        )


@attrs.frozen
class SeatMap:
    """Seat map of one screening; `updated_at` lets clients poll cheaply."""

    availability: ScreeningAvailability
    rows: Dict[str, List[Seat]]
    updated_at: Optional[datetime] = None

    @property
    def screening(self) -> Screening:
        return self.availability.screening
