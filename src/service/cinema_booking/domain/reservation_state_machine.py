"""
Reservation lifecycle

    holding          -> awaiting_payment   payment submitted
    holding          -> expired            hold timer fired
    holding          -> cancelled          customer/admin abort
    awaiting_payment -> confirmed          payment completed
    awaiting_payment -> expired            hold timer fired before payment resolved
    awaiting_payment -> cancelled          payment failed / declined

confirmed, expired and cancelled are terminal. Any edge not listed is rejected.
"""

from types import MappingProxyType

from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus


ALLOWED_TRANSITIONS = MappingProxyType(
    {
        ReservationStatus.HOLDING: frozenset(
            {
                ReservationStatus.AWAITING_PAYMENT,
                ReservationStatus.EXPIRED,
                ReservationStatus.CANCELLED,
            }
        ),
        ReservationStatus.AWAITING_PAYMENT: frozenset(
            {
                ReservationStatus.CONFIRMED,
                ReservationStatus.EXPIRED,
                ReservationStatus.CANCELLED,
            }
        ),
        ReservationStatus.CONFIRMED: frozenset(),
        ReservationStatus.EXPIRED: frozenset(),
        ReservationStatus.CANCELLED: frozenset(),
    }
)


def is_transition_allowed(from_status: ReservationStatus, to_status: ReservationStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]
