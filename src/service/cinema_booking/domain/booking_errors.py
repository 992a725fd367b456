from typing import Any, Sequence
from uuid import UUID

from src.platform.exception.exceptions import CustomBaseError


class SeatsUnavailableError(CustomBaseError):
    """Requested seats are taken; the client re-renders availability."""

    log_level = 'INFO'

    def __init__(self, seat_ids: Sequence[int]) -> None:
        self.seat_ids = sorted(seat_ids)
        labels = ', '.join(str(seat_id) for seat_id in self.seat_ids)
        super().__init__(f'Seats are no longer available: {labels}', 409)

    @property
    def extra(self) -> dict[str, Any]:
        return {'unavailable_seat_ids': self.seat_ids}


class InvalidTransitionError(CustomBaseError):
    def __init__(
        self,
        *,
        reservation_id: UUID,
        current_status: str,
        to_status: str,
        message: str = 'The reservation changed in the meantime, please retry later',
    ) -> None:
        self.reservation_id = reservation_id
        self.current_status = current_status
        self.to_status = to_status
        super().__init__(message, 409)


class HoldExpiredError(InvalidTransitionError):
    log_level = 'INFO'

    def __init__(self, *, reservation_id: UUID, to_status: str) -> None:
        super().__init__(
            reservation_id=reservation_id,
            current_status='expired',
            to_status=to_status,
            message='Your hold expired, please select seats again',
        )


class PaymentInProgressError(InvalidTransitionError):
    log_level = 'INFO'

    def __init__(self, *, reservation_id: UUID) -> None:
        super().__init__(
            reservation_id=reservation_id,
            current_status='awaiting_payment',
            to_status='awaiting_payment',
            message='A payment for this reservation is already in progress',
        )


class HasActiveHoldsError(CustomBaseError):
    log_level = 'WARNING'

    def __init__(self, *, screening_id: int, seat_ids: Sequence[int]) -> None:
        self.screening_id = screening_id
        self.seat_ids = sorted(seat_ids)
        super().__init__(
            f'Screening {screening_id} has {len(self.seat_ids)} held or sold seats', 409
        )

    @property
    def extra(self) -> dict[str, Any]:
        return {'active_seat_ids': self.seat_ids}
