from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Self, Tuple

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.service.booking_coordinator import BookingCoordinator
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat


class CreateScreeningUseCase:
    """
    Register a screening in the catalog and lay out its seats.

    The screening is stored first so the catalog assigns its id; the seats are
    created through the booking coordinator, all available.
    """

    def __init__(
        self,
        *,
        screening_catalog: IScreeningCatalog,
        booking_coordinator: BookingCoordinator,
    ) -> None:
        self.screening_catalog = screening_catalog
        self.booking_coordinator = booking_coordinator

    @classmethod
    @inject
    def depends(
        cls,
        screening_catalog: IScreeningCatalog = Depends(Provide[Container.screening_catalog]),
        booking_coordinator: BookingCoordinator = Depends(
            Provide[Container.booking_coordinator]
        ),
    ) -> Self:
        return cls(screening_catalog=screening_catalog, booking_coordinator=booking_coordinator)

    @Logger.io
    async def execute(
        self,
        *,
        film_title: str,
        room: str,
        start_time: datetime,
        price: Decimal,
        total_seats: int,
        film_id: Optional[int] = None,
        is_active: bool = True,
    ) -> Tuple[Screening, List[Seat]]:
        screening = Screening.create(
            film_title=film_title,
            room=room,
            start_time=start_time,
            price=price,
            total_seats=total_seats,
            film_id=film_id,
            is_active=is_active,
            now=datetime.now(timezone.utc),
        )
        screening = await self.screening_catalog.add(screening=screening)
        seats = await self.booking_coordinator.initialize_seats(screening=screening)

        Logger.base.info(
            f'🎬 [SCREENING] Created screening {screening.id} '
            f'({screening.film_title} @ {screening.room}) with {len(seats)} seats'
        )
        return screening, seats
