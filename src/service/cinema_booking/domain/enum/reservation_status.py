from enum import StrEnum


class ReservationStatus(StrEnum):
    HOLDING = 'holding'
    AWAITING_PAYMENT = 'awaiting_payment'
    CONFIRMED = 'confirmed'
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'

    @property
    def is_active(self) -> bool:
        """Active reservations own their seats (held or sold)."""
        return self in ACTIVE_RESERVATION_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_RESERVATION_STATUSES


# Reservations whose hold timer is still running
PENDING_RESERVATION_STATUSES = frozenset(
    {ReservationStatus.HOLDING, ReservationStatus.AWAITING_PAYMENT}
)
ACTIVE_RESERVATION_STATUSES = PENDING_RESERVATION_STATUSES | {ReservationStatus.CONFIRMED}
TERMINAL_RESERVATION_STATUSES = frozenset(
    {ReservationStatus.CONFIRMED, ReservationStatus.EXPIRED, ReservationStatus.CANCELLED}
)
