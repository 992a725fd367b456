"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.cinema_booking.app.command import (
    create_screening_use_case,
    pay_reservation_use_case,
    record_payment_result_use_case,
)
from src.service.cinema_booking.app.query import (
    get_reservation_use_case,
    get_seat_map_use_case,
    list_screenings_use_case,
)
from src.service.cinema_booking.driving_adapter.http_controller import (
    reservation_controller,
    screening_controller,
)


WIRE_MODULES: list[ModuleType] = [
    create_screening_use_case,
    pay_reservation_use_case,
    record_payment_result_use_case,
    get_reservation_use_case,
    get_seat_map_use_case,
    list_screenings_use_case,
    reservation_controller,
    screening_controller,
]
