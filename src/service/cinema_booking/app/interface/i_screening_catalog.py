from abc import ABC, abstractmethod
from typing import List

from src.service.cinema_booking.domain.entity.screening_entity import Screening


class IScreeningCatalog(ABC):
    """Screenings are read-only once created; only the catalog assigns their ids."""

    @abstractmethod
    async def add(self, *, screening: Screening) -> Screening:
        pass

    @abstractmethod
    async def get(self, *, screening_id: int) -> Screening | None:
        pass

    @abstractmethod
    async def list_all(self, *, active_only: bool = False) -> List[Screening]:
        pass
