"""
Unit tests for SweepExpiredHoldsUseCase and HoldExpirySweeper

Test Coverage:
1. Overdue holds of every screening are expired
2. A reservation that moved on is skipped
3. A failing record does not stop the sweep
4. The background sweeper survives a failing run
"""

from unittest.mock import AsyncMock

import pytest

from src.service.cinema_booking.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.cinema_booking.app.dto.sweep_dto import ExpiryOutcome
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.driving_adapter.background.hold_expiry_sweeper import (
    HoldExpirySweeper,
)


pytestmark = pytest.mark.unit


class TestSweepExpiredHolds:
    @pytest.mark.asyncio
    async def test_expires_overdue_holds_across_screenings(
        self, booking_env, guest, another_guest
    ):
        # Given: one holding and one awaiting payment, on two screenings
        screening_1, seats_1 = await booking_env.create_screening()
        screening_2, seats_2 = await booking_env.create_screening()
        r1 = await booking_env.coordinator.hold_seats(
            screening_id=screening_1.id, seat_ids=[seats_1[0].id], holder=guest
        )
        r2 = await booking_env.coordinator.hold_seats(
            screening_id=screening_2.id, seat_ids=[seats_2[0].id], holder=another_guest
        )
        await booking_env.coordinator.begin_payment(
            reservation_id=r2.id, method=PaymentMethod.CREDIT_CARD
        )

        # When
        booking_env.clock.advance(minutes=31)
        result = await booking_env.sweeper.execute()

        # Then
        assert set(result.expired) == {r1.id, r2.id}
        assert result.failed == []
        assert await booking_env.seat_statuses(screening_1.id) == {
            seat.label: SeatStatus.AVAILABLE.value for seat in seats_1
        }
        assert (await booking_env.ledger.get(reservation_id=r2.id)).status == (
            ReservationStatus.EXPIRED
        )

    @pytest.mark.asyncio
    async def test_scoped_to_one_screening(self, booking_env, guest):
        screening_1, seats_1 = await booking_env.create_screening()
        screening_2, seats_2 = await booking_env.create_screening()
        await booking_env.coordinator.hold_seats(
            screening_id=screening_1.id, seat_ids=[seats_1[0].id], holder=guest
        )
        r2 = await booking_env.coordinator.hold_seats(
            screening_id=screening_2.id, seat_ids=[seats_2[0].id], holder=guest
        )
        booking_env.clock.advance(minutes=31)

        result = await booking_env.sweeper.execute(screening_id=screening_2.id)

        assert result.expired == [r2.id]
        assert await booking_env.inventory.seat_status(seat_id=seats_1[0].id) == SeatStatus.HELD

    @pytest.mark.asyncio
    async def test_failing_record_does_not_stop_sweep(self, booking_env, guest):
        # Given: two overdue holds, the coordinator breaks on the first one
        screening, seats = await booking_env.create_screening()
        r1 = await booking_env.coordinator.hold_seats(
            screening_id=screening.id, seat_ids=[seats[0].id], holder=guest
        )
        r2 = await booking_env.coordinator.hold_seats(
            screening_id=screening.id, seat_ids=[seats[1].id], holder=guest
        )
        booking_env.clock.advance(minutes=31)

        coordinator = AsyncMock()
        coordinator.expire.side_effect = [RuntimeError('db gone'), ExpiryOutcome.SKIPPED]
        use_case = SweepExpiredHoldsUseCase(
            reservation_ledger=booking_env.ledger,
            booking_coordinator=coordinator,
            now_provider=booking_env.clock,
        )

        # When
        result = await use_case.execute()

        # Then: both visited, first failed, second skipped
        assert coordinator.expire.await_count == 2
        assert result.failed == [r1.id]
        assert result.skipped == [r2.id]
        assert result.scanned == 2

    @pytest.mark.asyncio
    async def test_nothing_due(self, booking_env, guest):
        screening, seats = await booking_env.create_screening()
        await booking_env.coordinator.hold_seats(
            screening_id=screening.id, seat_ids=[seats[0].id], holder=guest
        )
        booking_env.clock.advance(minutes=29)

        result = await booking_env.sweeper.execute()

        assert result.scanned == 0
        assert await booking_env.inventory.seat_status(seat_id=seats[0].id) == SeatStatus.HELD


class TestHoldExpirySweeper:
    @pytest.mark.asyncio
    async def test_run_once_survives_failure(self):
        use_case = AsyncMock()
        use_case.execute.side_effect = [RuntimeError('boom'), None]
        sweeper = HoldExpirySweeper(sweep_use_case=use_case, interval_seconds=0.01)

        await sweeper.run_once()
        await sweeper.run_once()

        assert sweeper.runs == 2
        assert use_case.execute.await_count == 2
