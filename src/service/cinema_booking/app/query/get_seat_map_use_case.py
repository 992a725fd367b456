from collections import defaultdict
from typing import Dict, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.availability_dto import ScreeningAvailability, SeatMap
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.entity.seat_entity import Seat


class GetSeatMapUseCase:
    """Read-only seat map; never takes the screening lock."""

    def __init__(
        self, *, screening_catalog: IScreeningCatalog, seat_inventory: ISeatInventory
    ) -> None:
        self.screening_catalog = screening_catalog
        self.seat_inventory = seat_inventory

    @classmethod
    @inject
    def depends(
        cls,
        screening_catalog: IScreeningCatalog = Depends(Provide[Container.screening_catalog]),
        seat_inventory: ISeatInventory = Depends(Provide[Container.seat_inventory]),
    ) -> Self:
        return cls(screening_catalog=screening_catalog, seat_inventory=seat_inventory)

    @Logger.io
    async def execute(self, *, screening_id: int) -> SeatMap:
        screening = await self.screening_catalog.get(screening_id=screening_id)
        if screening is None:
            raise NotFoundError(f'Screening {screening_id} not found')

        seats = await self.seat_inventory.seats_for(screening_id=screening_id)

        rows: Dict[str, List[Seat]] = defaultdict(list)
        for seat in seats:
            rows[seat.row].append(seat)

        timestamps = [seat.updated_at for seat in seats if seat.updated_at is not None]
        return SeatMap(
            availability=ScreeningAvailability.from_seats(screening=screening, seats=seats),
            rows=dict(rows),
            updated_at=max(timestamps) if timestamps else screening.created_at,
        )
