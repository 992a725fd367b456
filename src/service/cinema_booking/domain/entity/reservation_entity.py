from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.domain.enum.reservation_status import (
    PENDING_RESERVATION_STATUSES,
    ReservationStatus,
)
from src.service.cinema_booking.domain.reservation_state_machine import is_transition_allowed
from src.service.cinema_booking.domain.value_object.holder import Holder


@attrs.define
class Reservation:
    id: UUID
    screening_id: int
    seat_ids: List[int]
    holder: Holder
    expires_at: datetime
    status: ReservationStatus = ReservationStatus.HOLDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    total_price: Optional[Decimal] = None
    confirmation_code: Optional[str] = None
    payment_reference: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        screening_id: int,
        seat_ids: List[int],
        holder: Holder,
        now: datetime,
        hold_window: timedelta,
        max_seats: int,
    ) -> 'Reservation':
        if not seat_ids:
            raise DomainError('At least one seat must be selected')
        if len(set(seat_ids)) != len(seat_ids):
            raise DomainError('Each seat can only be selected once')
        if len(seat_ids) > max_seats:
            raise DomainError(f'Maximum {max_seats} seats per reservation')
        if hold_window <= timedelta(0):
            raise DomainError('Hold window must be positive')

        return cls(
            id=uuid7(),
            screening_id=screening_id,
            seat_ids=list(seat_ids),
            holder=holder,
            status=ReservationStatus.HOLDING,
            created_at=now,
            updated_at=now,
            expires_at=now + hold_window,
        )

    @property
    def seat_count(self) -> int:
        return len(self.seat_ids)

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_RESERVATION_STATUSES

    def is_overdue(self, now: datetime) -> bool:
        """Hold window elapsed while the reservation still waits for payment."""
        return self.is_pending and self.expires_at <= now

    def can_transition_to(self, to_status: ReservationStatus) -> bool:
        return is_transition_allowed(self.status, to_status)

    def transition_to(
        self, to_status: ReservationStatus, *, now: datetime, **changes: Any
    ) -> 'Reservation':
        if not self.can_transition_to(to_status):
            raise DomainError(
                f'Reservation {self.id} cannot move from {self.status} to {to_status}', 409
            )
        if to_status == ReservationStatus.CONFIRMED:
            if not changes.get('confirmation_code') or changes.get('total_price') is None:
                raise DomainError('Confirmation requires a confirmation code and total price')
            changes.setdefault('confirmed_at', now)
        return attrs.evolve(self, status=to_status, updated_at=now, **changes)
