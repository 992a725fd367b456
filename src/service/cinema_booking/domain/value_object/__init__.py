"""Cinema Booking Value Objects"""

from src.service.cinema_booking.domain.value_object.holder import Holder
from src.service.cinema_booking.domain.value_object.seat_position import SeatPosition

__all__ = ['Holder', 'SeatPosition']
