from typing import AsyncContextManager, Callable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.driven_adapter.model.screening_model import ScreeningModel


class ScreeningCatalogSqlalchemyImpl(IScreeningCatalog):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def add(self, *, screening: Screening) -> Screening:
        async with self.session_factory() as session:
            model = ScreeningModel(
                film_id=screening.film_id,
                film_title=screening.film_title,
                room=screening.room,
                start_time=screening.start_time,
                price=screening.price,
                total_seats=screening.total_seats,
                is_active=screening.is_active,
            )
            if screening.created_at is not None:
                model.created_at = screening.created_at

            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    async def get(self, *, screening_id: int) -> Screening | None:
        async with self.session_factory() as session:
            model = await session.get(ScreeningModel, screening_id)
            return self._model_to_entity(model) if model else None

    async def list_all(self, *, active_only: bool = False) -> List[Screening]:
        stmt = select(ScreeningModel).order_by(ScreeningModel.start_time)
        if active_only:
            stmt = stmt.where(ScreeningModel.is_active.is_(True))

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._model_to_entity(model) for model in result.scalars()]

    @staticmethod
    def _model_to_entity(model: ScreeningModel) -> Screening:
        return Screening(
            id=model.id,
            film_id=model.film_id,
            film_title=model.film_title,
            room=model.room,
            start_time=model.start_time,
            price=model.price,
            total_seats=model.total_seats,
            is_active=model.is_active,
            created_at=model.created_at,
        )
