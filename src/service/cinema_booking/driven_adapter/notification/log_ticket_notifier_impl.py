from typing import List

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.ticket_dto import TicketConfirmation
from src.service.cinema_booking.app.interface.i_ticket_notifier import ITicketNotifier
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat


class LogTicketNotifierImpl(ITicketNotifier):
    """Builds the confirmation artifact and writes it to the log instead of mailing it."""

    @Logger.io
    async def send_confirmation(
        self, *, reservation: Reservation, screening: Screening, seats: List[Seat]
    ) -> TicketConfirmation:
        if not reservation.confirmation_code or reservation.total_price is None:
            raise ValueError(f'Reservation {reservation.id} is not confirmed')

        labels_by_id = {seat.id: seat.label for seat in seats}
        confirmation = TicketConfirmation(
            confirmation_code=reservation.confirmation_code,
            recipient_email=reservation.holder.guest_email,
            recipient_name=reservation.holder.display_name,
            film_title=screening.film_title,
            room=screening.room,
            start_time=screening.start_time,
            seat_labels=[
                labels_by_id.get(seat_id, f'#{seat_id}') for seat_id in reservation.seat_ids
            ],
            total_price=reservation.total_price,
        )

        Logger.base.info(
            f'📧 [TICKET] {confirmation.confirmation_code} for {confirmation.recipient_name} '
            f'<{confirmation.recipient_email or "-"}>: {confirmation.film_title}, '
            f'{confirmation.room}, {confirmation.start_time.isoformat()}, '
            f'seats {confirmation.seats_list}, total {confirmation.total_price}'
        )
        return confirmation
