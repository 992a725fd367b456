from src.service.cinema_booking.app.dto.availability_dto import ScreeningAvailability, SeatMap
from src.service.cinema_booking.app.dto.payment_dto import ChargeResult, PaymentReceipt
from src.service.cinema_booking.app.dto.rejection import (
    HasActiveHolds,
    InvalidTransition,
    NotFound,
    SeatStatusChange,
    SeatsUnavailable,
)
from src.service.cinema_booking.app.dto.sweep_dto import ExpiryOutcome, SweepResult
from src.service.cinema_booking.app.dto.ticket_dto import TicketConfirmation

__all__ = [
    'ChargeResult',
    'ExpiryOutcome',
    'HasActiveHolds',
    'InvalidTransition',
    'NotFound',
    'PaymentReceipt',
    'ScreeningAvailability',
    'SeatMap',
    'SeatStatusChange',
    'SeatsUnavailable',
    'SweepResult',
    'TicketConfirmation',
]
