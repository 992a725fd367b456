from datetime import datetime
from typing import Optional

import attrs

from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.domain.value_object.seat_position import SeatPosition


@attrs.define
class Seat:
    """
    A seat of one screening.

    `status` mirrors the reservation ledger and is only written together with
    the matching reservation transition.
    """

    screening_id: int
    row: str
    number: int
    status: SeatStatus = SeatStatus.AVAILABLE
    id: Optional[int] = None
    updated_at: Optional[datetime] = None

    @property
    def label(self) -> str:
        return f'{self.row}{self.number}'

    @property
    def position(self) -> SeatPosition:
        return SeatPosition(row=self.row, number=self.number)

    @property
    def is_available(self) -> bool:
        return self.status == SeatStatus.AVAILABLE
