"""
Test Configuration and Fixtures

- Environment variables are set before any application module is imported,
  since settings and logging read them at import time
- `booking_env` wires the in-memory adapters to a BookingCoordinator driven
  by a controllable clock
- API tests get a TestClient on the real application with fresh singletons
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['STORAGE_BACKEND'] = 'memory'
    os.environ['SWEEPER_ENABLED'] = 'false'
    os.environ['HOLD_WINDOW_MINUTES'] = '30'
    os.environ['MAX_SEATS_PER_RESERVATION'] = '10'
    os.environ['REPAIR_PURGES_RESERVATION_HISTORY'] = 'false'


_early_setup_test_environment()

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import List  # noqa: E402

import attrs  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from src.platform.state.screening_lock import ScreeningLockRegistry  # noqa: E402
from src.service.cinema_booking.app.command.sweep_expired_holds_use_case import (  # noqa: E402
    SweepExpiredHoldsUseCase,
)
from src.service.cinema_booking.app.service.booking_coordinator import (  # noqa: E402
    BookingCoordinator,
)
from src.service.cinema_booking.domain.entity.screening_entity import Screening  # noqa: E402
from src.service.cinema_booking.domain.entity.seat_entity import Seat  # noqa: E402
from src.service.cinema_booking.domain.value_object.holder import Holder  # noqa: E402
from src.service.cinema_booking.driven_adapter.memory.payment_repo_memory_impl import (  # noqa: E402
    PaymentRepoMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.reservation_ledger_memory_impl import (  # noqa: E402
    ReservationLedgerMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.screening_catalog_memory_impl import (  # noqa: E402
    ScreeningCatalogMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.seat_inventory_memory_impl import (  # noqa: E402
    SeatInventoryMemoryImpl,
)


START = datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock; tests move time forward explicitly."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@attrs.define
class BookingEnv:
    clock: FakeClock
    catalog: ScreeningCatalogMemoryImpl
    inventory: SeatInventoryMemoryImpl
    ledger: ReservationLedgerMemoryImpl
    payment_repo: PaymentRepoMemoryImpl
    coordinator: BookingCoordinator
    sweeper: SweepExpiredHoldsUseCase

    async def create_screening(
        self, *, total_seats: int = 10, price: str = '12.50', is_active: bool = True
    ) -> tuple[Screening, List[Seat]]:
        screening = await self.catalog.add(
            screening=Screening.create(
                film_title='Spirited Away',
                room='Hall 1',
                start_time=START + timedelta(days=1),
                price=Decimal(price),
                total_seats=total_seats,
                is_active=is_active,
                now=self.clock(),
            )
        )
        seats = await self.coordinator.initialize_seats(screening=screening)
        return screening, seats

    async def seat_statuses(self, screening_id: int) -> dict[str, str]:
        seats = await self.inventory.seats_for(screening_id=screening_id)
        return {seat.label: seat.status.value for seat in seats}


def make_booking_env(**coordinator_options) -> BookingEnv:
    clock = FakeClock()
    catalog = ScreeningCatalogMemoryImpl()
    inventory = SeatInventoryMemoryImpl()
    ledger = ReservationLedgerMemoryImpl()
    payment_repo = PaymentRepoMemoryImpl()
    coordinator = BookingCoordinator(
        seat_inventory=inventory,
        reservation_ledger=ledger,
        payment_repo=payment_repo,
        screening_catalog=catalog,
        lock_registry=ScreeningLockRegistry(),
        hold_window_minutes=30,
        max_seats_per_reservation=10,
        seat_row_labels=['A', 'B'],
        now_provider=clock,
        **coordinator_options,
    )
    return BookingEnv(
        clock=clock,
        catalog=catalog,
        inventory=inventory,
        ledger=ledger,
        payment_repo=payment_repo,
        coordinator=coordinator,
        sweeper=SweepExpiredHoldsUseCase(
            reservation_ledger=ledger, booking_coordinator=coordinator, now_provider=clock
        ),
    )


@pytest.fixture
def booking_env() -> BookingEnv:
    return make_booking_env()


@pytest.fixture
def booking_env_factory() -> Callable[..., BookingEnv]:
    return make_booking_env


@pytest.fixture
def guest() -> Holder:
    return Holder.create(guest_name='Lin Mei', guest_email='lin.mei@example.com')


@pytest.fixture
def another_guest() -> Holder:
    return Holder.create(guest_name='Chen Wei', guest_email='chen.wei@example.com')


@pytest_asyncio.fixture
async def screening_with_seats(booking_env: BookingEnv) -> AsyncIterator[tuple[Screening, List[Seat]]]:
    yield await booking_env.create_screening()


@pytest.fixture
def client() -> Iterator[TestClient]:
    from src.main import app
    from src.platform.config.di import cleanup

    cleanup()
    with TestClient(app) as test_client:
        yield test_client
    cleanup()
