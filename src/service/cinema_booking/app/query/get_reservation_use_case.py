from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation


class GetReservationUseCase:
    def __init__(
        self, *, reservation_ledger: IReservationLedger, screening_catalog: IScreeningCatalog
    ) -> None:
        self.reservation_ledger = reservation_ledger
        self.screening_catalog = screening_catalog

    @classmethod
    @inject
    def depends(
        cls,
        reservation_ledger: IReservationLedger = Depends(Provide[Container.reservation_ledger]),
        screening_catalog: IScreeningCatalog = Depends(Provide[Container.screening_catalog]),
    ) -> Self:
        return cls(reservation_ledger=reservation_ledger, screening_catalog=screening_catalog)

    @Logger.io
    async def get_by_id(self, *, reservation_id: UUID) -> Reservation:
        reservation = await self.reservation_ledger.get(reservation_id=reservation_id)
        if reservation is None:
            raise NotFoundError('Reservation not found')
        return reservation

    @Logger.io
    async def get_by_confirmation_code(self, *, code: str) -> Reservation:
        """Customer "find my reservation"; codes are matched case-insensitively."""
        reservation = await self.reservation_ledger.find_by_confirmation_code(
            code=code.strip().upper()
        )
        if reservation is None:
            raise NotFoundError('Reservation not found')
        return reservation

    @Logger.io
    async def list_by_screening(self, *, screening_id: int) -> List[Reservation]:
        if await self.screening_catalog.get(screening_id=screening_id) is None:
            raise NotFoundError(f'Screening {screening_id} not found')
        return await self.reservation_ledger.list_by_screening(screening_id=screening_id)
