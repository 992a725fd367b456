from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.availability_dto import ScreeningAvailability
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory


class ListScreeningsUseCase:
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
    async def list_all(self, *, active_only: bool = False) -> List[ScreeningAvailability]:
        screenings = await self.screening_catalog.list_all(active_only=active_only)
        result = []
        for screening in screenings:
            seats = await self.seat_inventory.seats_for(screening_id=screening.id or 0)
            result.append(ScreeningAvailability.from_seats(screening=screening, seats=seats))

        Logger.base.info(f'📋 [SCREENING] Listed {len(result)} screenings')
        return result

    @Logger.io
    async def get(self, *, screening_id: int) -> ScreeningAvailability:
        screening = await self.screening_catalog.get(screening_id=screening_id)
        if screening is None:
            raise NotFoundError(f'Screening {screening_id} not found')
        seats = await self.seat_inventory.seats_for(screening_id=screening_id)
        return ScreeningAvailability.from_seats(screening=screening, seats=seats)
