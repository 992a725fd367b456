import itertools
import threading
from typing import Dict, List

import attrs

from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.domain.entity.screening_entity import Screening


class ScreeningCatalogMemoryImpl(IScreeningCatalog):
    def __init__(self) -> None:
        self._screenings: Dict[int, Screening] = {}
        self._ids = itertools.count(1)
        self._mutex = threading.Lock()

    async def add(self, *, screening: Screening) -> Screening:
        with self._mutex:
            stored = attrs.evolve(screening, id=next(self._ids))
            self._screenings[stored.id] = stored
            return stored

    async def get(self, *, screening_id: int) -> Screening | None:
        with self._mutex:
            return self._screenings.get(screening_id)

    async def list_all(self, *, active_only: bool = False) -> List[Screening]:
        with self._mutex:
            screenings = list(self._screenings.values())
        if active_only:
            screenings = [screening for screening in screenings if screening.is_active]
        return sorted(screenings, key=lambda screening: screening.start_time)
