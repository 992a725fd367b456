"""Cinema Booking Domain Enums"""

from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus
from src.service.cinema_booking.domain.enum.reservation_status import (
    ACTIVE_RESERVATION_STATUSES,
    PENDING_RESERVATION_STATUSES,
    TERMINAL_RESERVATION_STATUSES,
    ReservationStatus,
)
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus

__all__ = [
    'ACTIVE_RESERVATION_STATUSES',
    'PENDING_RESERVATION_STATUSES',
    'TERMINAL_RESERVATION_STATUSES',
    'PaymentMethod',
    'PaymentStatus',
    'ReservationStatus',
    'SeatStatus',
]
