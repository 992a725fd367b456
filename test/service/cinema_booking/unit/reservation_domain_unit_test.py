"""
Unit tests for the reservation domain

Test Coverage:
1. Lifecycle edges accepted / rejected by the state machine
2. Reservation.create validation and hold window
3. Holder rules for registered users and guests
4. Seat layout over row labels
5. Screening pricing
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.cinema_booking.domain.confirmation_code import generate_confirmation_code
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.reservation_state_machine import (
    ALLOWED_TRANSITIONS,
    is_transition_allowed,
)
from src.service.cinema_booking.domain.seat_layout import build_seat_layout
from src.service.cinema_booking.domain.value_object.holder import Holder


pytestmark = pytest.mark.unit

NOW = datetime(2026, 11, 1, 18, 0, tzinfo=timezone.utc)


def make_reservation(**overrides) -> Reservation:
    options = {
        'screening_id': 1,
        'seat_ids': [1, 2],
        'holder': Holder.create(guest_name='Lin Mei', guest_email='lin.mei@example.com'),
        'now': NOW,
        'hold_window': timedelta(minutes=30),
        'max_seats': 10,
    }
    options.update(overrides)
    return Reservation.create(**options)


class TestReservationStateMachine:
    @pytest.mark.parametrize(
        'from_status, to_status',
        [
            (ReservationStatus.HOLDING, ReservationStatus.AWAITING_PAYMENT),
            (ReservationStatus.HOLDING, ReservationStatus.EXPIRED),
            (ReservationStatus.HOLDING, ReservationStatus.CANCELLED),
            (ReservationStatus.AWAITING_PAYMENT, ReservationStatus.CONFIRMED),
            (ReservationStatus.AWAITING_PAYMENT, ReservationStatus.EXPIRED),
            (ReservationStatus.AWAITING_PAYMENT, ReservationStatus.CANCELLED),
        ],
    )
    def test_allowed_edges(self, from_status, to_status):
        assert is_transition_allowed(from_status, to_status)

    @pytest.mark.parametrize(
        'from_status, to_status',
        [
            (ReservationStatus.HOLDING, ReservationStatus.CONFIRMED),
            (ReservationStatus.AWAITING_PAYMENT, ReservationStatus.HOLDING),
            (ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED),
            (ReservationStatus.EXPIRED, ReservationStatus.HOLDING),
            (ReservationStatus.CANCELLED, ReservationStatus.AWAITING_PAYMENT),
        ],
    )
    def test_rejected_edges(self, from_status, to_status):
        assert not is_transition_allowed(from_status, to_status)

    def test_terminal_states_have_no_exit(self):
        for status in ReservationStatus:
            assert (not ALLOWED_TRANSITIONS[status]) == status.is_terminal


class TestReservationEntity:
    def test_create_starts_holding_with_hold_window(self):
        reservation = make_reservation()

        assert reservation.status == ReservationStatus.HOLDING
        assert reservation.expires_at == NOW + timedelta(minutes=30)
        assert reservation.seat_count == 2
        assert reservation.confirmation_code is None
        assert reservation.total_price is None

    @pytest.mark.parametrize(
        'overrides, message',
        [
            ({'seat_ids': []}, 'At least one seat'),
            ({'seat_ids': [3, 3]}, 'only be selected once'),
            ({'seat_ids': [1, 2, 3], 'max_seats': 2}, 'Maximum 2 seats'),
            ({'hold_window': timedelta(0)}, 'Hold window must be positive'),
        ],
    )
    def test_create_validation(self, overrides, message):
        with pytest.raises(DomainError, match=message):
            make_reservation(**overrides)

    def test_overdue_only_while_pending(self):
        reservation = make_reservation()

        assert not reservation.is_overdue(NOW + timedelta(minutes=29))
        assert reservation.is_overdue(NOW + timedelta(minutes=30))

        cancelled = reservation.transition_to(ReservationStatus.CANCELLED, now=NOW)
        assert not cancelled.is_overdue(NOW + timedelta(hours=1))

    def test_confirm_requires_code_and_price(self):
        awaiting = make_reservation().transition_to(ReservationStatus.AWAITING_PAYMENT, now=NOW)

        with pytest.raises(DomainError, match='confirmation code'):
            awaiting.transition_to(ReservationStatus.CONFIRMED, now=NOW)

        confirmed = awaiting.transition_to(
            ReservationStatus.CONFIRMED,
            now=NOW,
            confirmation_code='CONF-ABCD1234',
            total_price=Decimal('25.00'),
        )
        assert confirmed.confirmed_at == NOW
        assert confirmed.total_price == Decimal('25.00')

    def test_illegal_transition_raises_conflict(self):
        with pytest.raises(DomainError) as exc_info:
            make_reservation().transition_to(ReservationStatus.CONFIRMED, now=NOW)
        assert exc_info.value.status_code == 409


class TestHolder:
    def test_guest_needs_name_and_email(self):
        with pytest.raises(DomainError, match='guest_name'):
            Holder.create(guest_email='someone@example.com')
        with pytest.raises(DomainError, match='guest_email is required'):
            Holder.create(guest_name='Someone')

    def test_registered_user_needs_no_guest_details(self):
        holder = Holder.create(user_id=7)

        assert not holder.is_guest
        assert holder.display_name == 'user#7'

    def test_guest_fields_are_trimmed(self):
        holder = Holder.create(guest_name='  Lin Mei ', guest_email=' lin.mei@example.com ')

        assert holder.is_guest
        assert holder.guest_name == 'Lin Mei'
        assert holder.guest_email == 'lin.mei@example.com'

    def test_invalid_email(self):
        with pytest.raises(DomainError, match='not a valid email'):
            Holder.create(guest_name='Lin Mei', guest_email='lin.mei')


class TestSeatLayout:
    def test_fills_rows_in_order(self):
        labels = [p.label for p in build_seat_layout(total_seats=10, row_labels='ABCDEFGHIJ')]
        assert labels == ['A1', 'B1', 'C1', 'D1', 'E1', 'F1', 'G1', 'H1', 'I1', 'J1']

    def test_last_row_takes_remainder(self):
        labels = [p.label for p in build_seat_layout(total_seats=7, row_labels=['A', 'B', 'C'])]
        assert labels == ['A1', 'A2', 'A3', 'B1', 'B2', 'B3', 'C1']

    def test_trailing_rows_may_stay_empty(self):
        positions = build_seat_layout(total_seats=4, row_labels=['A', 'B', 'C'])

        assert len(positions) == 4
        assert {p.row for p in positions} == {'A', 'B'}

    def test_labels_are_unique(self):
        positions = build_seat_layout(total_seats=95, row_labels='ABCDEFGHIJ')
        assert len({p.label for p in positions}) == 95

    @pytest.mark.parametrize(
        'total_seats, row_labels', [(0, ['A']), (5, []), (5, ['A', 'A'])]
    )
    def test_invalid_layout(self, total_seats, row_labels):
        with pytest.raises(DomainError):
            build_seat_layout(total_seats=total_seats, row_labels=row_labels)


class TestScreening:
    def test_price_is_normalized_and_multiplied(self):
        screening = Screening.create(
            film_title=' Spirited Away ',
            room='Hall 1',
            start_time=NOW,
            price='9.5',
            total_seats=40,
            now=NOW,
        )

        assert screening.film_title == 'Spirited Away'
        assert screening.price == Decimal('9.50')
        assert screening.price_for(3) == Decimal('28.50')

    def test_naive_start_time_is_rejected(self):
        with pytest.raises(DomainError, match='timezone-aware'):
            Screening.create(
                film_title='Spirited Away',
                room='Hall 1',
                start_time=datetime(2026, 11, 1, 18, 0),
                price='9.50',
                total_seats=40,
                now=NOW,
            )


def test_confirmation_code_format():
    code = generate_confirmation_code(prefix='CONF-', length=8)

    assert code.startswith('CONF-')
    assert len(code) == 13
    assert code[5:].isalnum() and code[5:].upper() == code[5:]
