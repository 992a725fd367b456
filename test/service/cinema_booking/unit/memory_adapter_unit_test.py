"""
Unit tests for the in-memory seat inventory, reservation ledger and payment repo

Test Coverage:
1. Seat compare-and-swap is all-or-nothing, seats listed by row then number
2. Regeneration refused while seats are held or sold
3. Ledger refuses seats referenced by an active reservation
4. Ledger transition is a compare-and-swap on the current status
5. Lookups by seat, confirmation code and expiry
6. Only one caller can claim the charge of a pending payment
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import ConflictError
from src.service.cinema_booking.app.dto.rejection import (
    HasActiveHolds,
    InvalidTransition,
    NotFound,
    SeatsUnavailable,
)
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.domain.seat_layout import build_seat_layout
from src.service.cinema_booking.domain.value_object.holder import Holder
from src.service.cinema_booking.driven_adapter.memory.payment_repo_memory_impl import (
    PaymentRepoMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.reservation_ledger_memory_impl import (
    ReservationLedgerMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.seat_inventory_memory_impl import (
    SeatInventoryMemoryImpl,
)


pytestmark = pytest.mark.unit


class TestSeatInventoryMemory:
    def setup_method(self):
        self.inventory = SeatInventoryMemoryImpl()
        self.positions = build_seat_layout(total_seats=6, row_labels=['A', 'B'])

    @pytest.mark.asyncio
    async def test_initialize_creates_available_seats_once(self):
        seats = await self.inventory.initialize_seats(screening_id=1, positions=self.positions)

        assert [seat.label for seat in seats] == ['A1', 'A2', 'A3', 'B1', 'B2', 'B3']
        assert all(seat.status == SeatStatus.AVAILABLE for seat in seats)

        with pytest.raises(ConflictError):
            await self.inventory.initialize_seats(screening_id=1, positions=self.positions)

    @pytest.mark.asyncio
    async def test_set_status_is_all_or_nothing(self):
        # Given: seat 2 already held
        seats = await self.inventory.initialize_seats(screening_id=1, positions=self.positions)
        ids = [seat.id for seat in seats]
        await self.inventory.set_status(
            seat_ids=[ids[1]], from_status=SeatStatus.AVAILABLE, to_status=SeatStatus.HELD
        )

        # When: holding seats 1-3
        change = await self.inventory.set_status(
            seat_ids=ids[:3], from_status=SeatStatus.AVAILABLE, to_status=SeatStatus.HELD
        )

        # Then: nothing moved, seat 2 reported
        assert not change.applied
        assert change.conflicting_seat_ids == [ids[1]]
        assert await self.inventory.seat_status(seat_id=ids[0]) == SeatStatus.AVAILABLE
        assert await self.inventory.seat_status(seat_id=ids[2]) == SeatStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_unknown_seat_conflicts(self):
        change = await self.inventory.set_status(
            seat_ids=[404], from_status=SeatStatus.AVAILABLE, to_status=SeatStatus.HELD
        )

        assert change.conflicting_seat_ids == [404]
        assert await self.inventory.seat_status(seat_id=404) is None

    @pytest.mark.asyncio
    async def test_returned_seats_are_copies(self):
        seats = await self.inventory.initialize_seats(screening_id=1, positions=self.positions)
        seats[0].status = SeatStatus.SOLD

        assert await self.inventory.seat_status(seat_id=seats[0].id) == SeatStatus.AVAILABLE

    @pytest.mark.asyncio
    async def test_regenerate_refuses_active_seats(self):
        seats = await self.inventory.initialize_seats(screening_id=1, positions=self.positions)
        await self.inventory.set_status(
            seat_ids=[seats[4].id], from_status=SeatStatus.AVAILABLE, to_status=SeatStatus.HELD
        )

        result = await self.inventory.regenerate(screening_id=1, positions=self.positions)

        assert result == HasActiveHolds(screening_id=1, seat_ids=[seats[4].id])
        assert len(await self.inventory.seats_for(screening_id=1)) == 6

    @pytest.mark.asyncio
    async def test_seats_are_listed_by_row_then_number(self):
        await self.inventory.initialize_seats(
            screening_id=1, positions=list(reversed(self.positions))
        )

        seats = await self.inventory.seats_for(screening_id=1)

        assert [seat.label for seat in seats] == ['A1', 'A2', 'A3', 'B1', 'B2', 'B3']

    @pytest.mark.asyncio
    async def test_regenerate_replaces_layout(self):
        await self.inventory.initialize_seats(screening_id=1, positions=self.positions)
        smaller = build_seat_layout(total_seats=2, row_labels=['A', 'B'])

        result = await self.inventory.regenerate(screening_id=1, positions=smaller)

        assert [seat.label for seat in result] == ['A1', 'B1']
        assert await self.inventory.seats_for(screening_id=1) == result


class TestReservationLedgerMemory:
    def setup_method(self):
        self.now = datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc)
        self.ledger = ReservationLedgerMemoryImpl()
        self.holder = Holder.create(guest_name='Lin Mei', guest_email='lin.mei@example.com')

    def new_reservation(self, seat_ids, screening_id=1) -> Reservation:
        return Reservation.create(
            screening_id=screening_id,
            seat_ids=seat_ids,
            holder=self.holder,
            now=self.now,
            hold_window=timedelta(minutes=30),
            max_seats=10,
        )

    @pytest.mark.asyncio
    async def test_create_refuses_seat_of_active_reservation(self):
        first = await self.ledger.create(reservation=self.new_reservation([1, 2]))

        result = await self.ledger.create(reservation=self.new_reservation([2, 3]))

        assert result == SeatsUnavailable(seat_ids=[2])
        assert (await self.ledger.find_by_seat(seat_id=2)).id == first.id
        assert await self.ledger.find_by_seat(seat_id=3) is None

    @pytest.mark.asyncio
    async def test_terminal_transition_frees_seats(self):
        first = await self.ledger.create(reservation=self.new_reservation([1]))

        await self.ledger.transition(
            reservation_id=first.id,
            from_status=ReservationStatus.HOLDING,
            to_status=ReservationStatus.EXPIRED,
            now=self.now,
        )

        assert await self.ledger.find_by_seat(seat_id=1) is None
        again = await self.ledger.create(reservation=self.new_reservation([1]))
        assert isinstance(again, Reservation)

    @pytest.mark.asyncio
    async def test_transition_checks_current_status(self):
        reservation = await self.ledger.create(reservation=self.new_reservation([1]))
        await self.ledger.transition(
            reservation_id=reservation.id,
            from_status=ReservationStatus.HOLDING,
            to_status=ReservationStatus.AWAITING_PAYMENT,
            now=self.now,
        )

        # A sweeper that still believes the reservation is holding loses
        stale = await self.ledger.transition(
            reservation_id=reservation.id,
            from_status=ReservationStatus.HOLDING,
            to_status=ReservationStatus.EXPIRED,
            now=self.now,
        )

        assert isinstance(stale, InvalidTransition)
        assert stale.current_status == ReservationStatus.AWAITING_PAYMENT
        current = await self.ledger.get(reservation_id=reservation.id)
        assert current.status == ReservationStatus.AWAITING_PAYMENT

    @pytest.mark.asyncio
    async def test_transition_unknown_reservation(self):
        result = await self.ledger.transition(
            reservation_id=uuid7(),
            from_status=ReservationStatus.HOLDING,
            to_status=ReservationStatus.CANCELLED,
            now=self.now,
        )
        assert isinstance(result, NotFound)

    @pytest.mark.asyncio
    async def test_confirmation_code_lookup(self):
        reservation = await self.ledger.create(reservation=self.new_reservation([1]))
        await self.ledger.transition(
            reservation_id=reservation.id,
            from_status=ReservationStatus.HOLDING,
            to_status=ReservationStatus.AWAITING_PAYMENT,
            now=self.now,
        )
        await self.ledger.transition(
            reservation_id=reservation.id,
            from_status=ReservationStatus.AWAITING_PAYMENT,
            to_status=ReservationStatus.CONFIRMED,
            now=self.now,
            confirmation_code='CONF-TEST0001',
            total_price=Decimal('12.50'),
            payment_reference='p1',
        )

        found = await self.ledger.find_by_confirmation_code(code='CONF-TEST0001')
        assert found.id == reservation.id
        assert found.status == ReservationStatus.CONFIRMED
        assert (await self.ledger.find_by_seat(seat_id=1)).id == reservation.id

    @pytest.mark.asyncio
    async def test_list_expired_and_purge(self):
        overdue = await self.ledger.create(reservation=self.new_reservation([1]))
        other_screening = await self.ledger.create(
            reservation=self.new_reservation([9], screening_id=2)
        )
        later = self.now + timedelta(minutes=31)

        assert [r.id for r in await self.ledger.list_expired(now=later, screening_id=1)] == [
            overdue.id
        ]
        assert {r.id for r in await self.ledger.list_expired(now=later)} == {
            overdue.id,
            other_screening.id,
        }
        assert await self.ledger.list_expired(now=self.now) == []

        await self.ledger.transition(
            reservation_id=overdue.id,
            from_status=ReservationStatus.HOLDING,
            to_status=ReservationStatus.EXPIRED,
            now=later,
        )
        assert await self.ledger.purge_inactive(screening_id=1) == 1
        assert await self.ledger.list_by_screening(screening_id=1) == []
        assert len(await self.ledger.list_by_screening(screening_id=2)) == 1


class TestPaymentRepoMemory:
    def setup_method(self):
        self.repo = PaymentRepoMemoryImpl()
        self.now = datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc)
        self.reservation_id = uuid7()

    async def save_pending(self) -> Payment:
        return await self.repo.save(
            payment=Payment.pending(
                reservation_id=self.reservation_id,
                amount=Decimal('12.50'),
                method=PaymentMethod.CREDIT_CARD,
                now=self.now,
            )
        )

    @pytest.mark.asyncio
    async def test_claim_charge_is_exclusive(self):
        await self.save_pending()

        assert await self.repo.claim_charge(reservation_id=self.reservation_id, now=self.now)
        assert not await self.repo.claim_charge(reservation_id=self.reservation_id, now=self.now)

        stored = await self.repo.get_by_reservation(reservation_id=self.reservation_id)
        assert stored.is_charging
        assert stored.charge_started_at == self.now

    @pytest.mark.asyncio
    async def test_released_charge_can_be_claimed_again(self):
        await self.save_pending()
        await self.repo.claim_charge(reservation_id=self.reservation_id, now=self.now)

        await self.repo.release_charge(reservation_id=self.reservation_id)

        assert await self.repo.claim_charge(reservation_id=self.reservation_id, now=self.now)

    @pytest.mark.asyncio
    async def test_claim_needs_a_pending_payment(self):
        assert not await self.repo.claim_charge(reservation_id=self.reservation_id, now=self.now)

        payment = await self.save_pending()
        await self.repo.save(
            payment=payment.mark_as_failed(reason='Card declined', reference=None, now=self.now)
        )
        assert not await self.repo.claim_charge(reservation_id=self.reservation_id, now=self.now)
