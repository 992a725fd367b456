"""Cinema Booking Entities"""

from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat

__all__ = ['Payment', 'Reservation', 'Screening', 'Seat']
