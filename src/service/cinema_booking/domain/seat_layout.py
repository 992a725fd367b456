import math
from typing import Sequence

from src.platform.exception.exceptions import DomainError
from src.service.cinema_booking.domain.value_object.seat_position import SeatPosition


def build_seat_layout(*, total_seats: int, row_labels: Sequence[str]) -> list[SeatPosition]:
    """
    Spread total_seats over the given rows, filling row by row.

    Every row gets ceil(total_seats / len(row_labels)) seats except the last
    filled row, which takes the remainder; trailing rows may stay empty.

    >>> [p.label for p in build_seat_layout(total_seats=5, row_labels=['A', 'B'])]
    ['A1', 'A2', 'A3', 'B1', 'B2']
    """
    if total_seats <= 0:
        raise DomainError('total_seats must be positive')
    if not row_labels:
        raise DomainError('At least one seat row label is required')
    if len(set(row_labels)) != len(row_labels):
        raise DomainError('Seat row labels must be unique')

    seats_per_row = math.ceil(total_seats / len(row_labels))
    positions: list[SeatPosition] = []
    for row in row_labels:
        seats_to_create = min(seats_per_row, total_seats - len(positions))
        if seats_to_create <= 0:
            break
        positions.extend(SeatPosition(row=row, number=n) for n in range(1, seats_to_create + 1))
    return positions
