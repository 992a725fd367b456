from abc import ABC, abstractmethod

from src.service.cinema_booking.app.dto.ticket_dto import TicketConfirmation
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat


class ITicketNotifier(ABC):
    @abstractmethod
    async def send_confirmation(
        self, *, reservation: Reservation, screening: Screening, seats: list[Seat]
    ) -> TicketConfirmation:
        pass
