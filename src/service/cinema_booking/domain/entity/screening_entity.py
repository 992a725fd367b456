from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger


@attrs.define
class Screening:
    film_title: str
    room: str
    start_time: datetime
    price: Decimal
    total_seats: int
    film_id: Optional[int] = None
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        film_title: str,
        room: str,
        start_time: datetime,
        price: Decimal | int | float | str,
        total_seats: int,
        film_id: Optional[int] = None,
        is_active: bool = True,
        now: datetime,
    ) -> 'Screening':
        if not film_title or not film_title.strip():
            raise DomainError('film_title is required')
        if not room or not room.strip():
            raise DomainError('room is required')
        if total_seats <= 0:
            raise DomainError('total_seats must be positive')
        if start_time.tzinfo is None:
            raise DomainError('start_time must be timezone-aware')

        try:
            normalized_price = Decimal(str(price)).quantize(Decimal('0.01'))
        except InvalidOperation:
            raise DomainError(f'Invalid price: {price}')
        if normalized_price < 0:
            raise DomainError('price must not be negative')

        return cls(
            film_title=film_title.strip(),
            room=room.strip(),
            start_time=start_time,
            price=normalized_price,
            total_seats=total_seats,
            film_id=film_id,
            is_active=is_active,
            created_at=now,
        )

    def price_for(self, seat_count: int) -> Decimal:
        return (self.price * seat_count).quantize(Decimal('0.01'))
