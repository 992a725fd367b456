from src.service.cinema_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema_booking.app.interface.i_payment_repo import IPaymentRepo
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.app.interface.i_ticket_notifier import ITicketNotifier

__all__ = [
    'IPaymentGateway',
    'IPaymentRepo',
    'IReservationLedger',
    'IScreeningCatalog',
    'ISeatInventory',
    'ITicketNotifier',
]
