"""
Typed rejections returned by the seat inventory and reservation ledger.

These are values, not exceptions: a conflicting compare-and-swap is an
expected outcome that callers branch on.
"""

from typing import List, Optional
from uuid import UUID

import attrs

from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus


@attrs.frozen
class SeatsUnavailable:
    seat_ids: List[int]


@attrs.frozen
class InvalidTransition:
    reservation_id: UUID
    from_status: ReservationStatus
    to_status: ReservationStatus
    current_status: ReservationStatus


@attrs.frozen
class NotFound:
    entity: str
    key: str


@attrs.frozen
class HasActiveHolds:
    screening_id: int
    seat_ids: List[int]


@attrs.frozen
class SeatStatusChange:
    """Result of a seat compare-and-swap; `conflicting_seat_ids` is empty when applied."""

    applied: bool
    conflicting_seat_ids: List[int] = attrs.field(factory=list)
    error: Optional[str] = None
