"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.cinema_booking.driven_adapter.model.payment_model import PaymentModel
from src.service.cinema_booking.driven_adapter.model.reservation_model import ReservationModel
from src.service.cinema_booking.driven_adapter.model.screening_model import ScreeningModel
from src.service.cinema_booking.driven_adapter.model.seat_model import SeatModel

__all__ = [
    'PaymentModel',
    'ReservationModel',
    'ScreeningModel',
    'SeatModel',
]
