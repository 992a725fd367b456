"""
Booking Coordinator - the only component that mutates seat inventory and the
reservation ledger

Every mutation runs under the lock of the screening it touches, so the
read-check-flip of one screening never interleaves while other screenings
proceed independently.

Write order inside a critical section:
- hold:        seats Available -> Held (CAS), then ledger create
               (seats are flipped back if the ledger refuses)
- transitions: ledger CAS first, then the seat cache follows
               (the ledger transition decides who won a race)
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
import time
from typing import Any, List, Optional, Sequence
from uuid import UUID

import attrs
from opentelemetry import trace

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    DomainError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.state.screening_lock import ScreeningLockRegistry
from src.service.cinema_booking.app.dto.payment_dto import PaymentReceipt
from src.service.cinema_booking.app.dto.rejection import (
    HasActiveHolds,
    InvalidTransition,
    NotFound,
    SeatsUnavailable,
)
from src.service.cinema_booking.app.dto.sweep_dto import ExpiryOutcome
from src.service.cinema_booking.app.interface.i_payment_repo import IPaymentRepo
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.booking_errors import (
    HasActiveHoldsError,
    HoldExpiredError,
    InvalidTransitionError,
    PaymentInProgressError,
    SeatsUnavailableError,
)
from src.service.cinema_booking.domain.confirmation_code import generate_confirmation_code
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.domain.seat_layout import build_seat_layout
from src.service.cinema_booking.domain.value_object.holder import Holder


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingCoordinator:
    CONFIRMATION_CODE_ATTEMPTS = 5

    def __init__(
        self,
        *,
        seat_inventory: ISeatInventory,
        reservation_ledger: IReservationLedger,
        payment_repo: IPaymentRepo,
        screening_catalog: IScreeningCatalog,
        lock_registry: ScreeningLockRegistry,
        hold_window_minutes: int = 30,
        max_seats_per_reservation: int = 10,
        seat_row_labels: Sequence[str] = tuple('ABCDEFGHIJ'),
        confirmation_code_prefix: str = 'CONF-',
        confirmation_code_length: int = 8,
        repair_purges_reservation_history: bool = False,
        now_provider: Callable[[], datetime] = utc_now,
    ) -> None:
        self.seat_inventory = seat_inventory
        self.reservation_ledger = reservation_ledger
        self.payment_repo = payment_repo
        self.screening_catalog = screening_catalog
        self.lock_registry = lock_registry
        self.hold_window = timedelta(minutes=hold_window_minutes)
        self.max_seats_per_reservation = max_seats_per_reservation
        self.seat_row_labels = list(seat_row_labels)
        self.confirmation_code_prefix = confirmation_code_prefix
        self.confirmation_code_length = confirmation_code_length
        self.repair_purges_reservation_history = repair_purges_reservation_history
        self.now_provider = now_provider
        self.tracer = trace.get_tracer(__name__)

    # ========== Screening setup / repair ==========

    @Logger.io
    async def initialize_seats(self, *, screening: Screening) -> List[Seat]:
        """Instantiate the seat layout of a freshly created screening."""
        if screening.id is None:
            raise DomainError('Screening must be stored before its seats are created')

        positions = build_seat_layout(
            total_seats=screening.total_seats, row_labels=self.seat_row_labels
        )
        async with self.lock_registry.hold(screening.id):
            return await self.seat_inventory.initialize_seats(
                screening_id=screening.id, positions=positions
            )

    @Logger.io
    async def repair_seats(self, *, screening_id: int) -> List[Seat]:
        """
        Regenerate the seat set of a screening.

        Expired holds are swept first; the repair is refused while any seat is
        still held or sold.

        Raises:
            NotFoundError: Unknown screening
            HasActiveHoldsError: At least one seat is held or sold
        """
        with self.tracer.start_as_current_span(
            'coordinator.repair_seats', attributes={'screening.id': screening_id}
        ):
            screening = await self._require_screening(screening_id)
            positions = build_seat_layout(
                total_seats=screening.total_seats, row_labels=self.seat_row_labels
            )

            async with self.lock_registry.hold(screening_id):
                await self._sweep_screening(screening_id=screening_id, now=self.now_provider())

                result = await self.seat_inventory.regenerate(
                    screening_id=screening_id, positions=positions
                )
                if isinstance(result, HasActiveHolds):
                    raise HasActiveHoldsError(
                        screening_id=result.screening_id, seat_ids=result.seat_ids
                    )

                if self.repair_purges_reservation_history:
                    purged = await self.reservation_ledger.purge_inactive(
                        screening_id=screening_id
                    )
                    Logger.base.info(
                        f'🧹 [REPAIR] Purged {purged} inactive reservations of screening {screening_id}'
                    )

            Logger.base.info(
                f'🛠️ [REPAIR] Screening {screening_id} regenerated with {len(result)} seats'
            )
            return result

    # ========== Hold ==========

    @Logger.io
    async def hold_seats(
        self, *, screening_id: int, seat_ids: Sequence[int], holder: Holder
    ) -> Reservation:
        """
        Hold seats for a holder and open a reservation in `holding`.

        Raises:
            NotFoundError: Unknown screening
            DomainError: Invalid seat selection or screening closed for booking
            SeatsUnavailableError: Some seats are held or sold by someone else
        """
        started = time.perf_counter()
        seat_ids = list(seat_ids)

        with self.tracer.start_as_current_span(
            'coordinator.hold_seats',
            attributes={'screening.id': screening_id, 'seat.count': len(seat_ids)},
        ) as span:
            try:
                reservation = await self._hold_seats(
                    screening_id=screening_id, seat_ids=seat_ids, holder=holder
                )
            except SeatsUnavailableError as e:
                span.set_attribute('hold.result', 'unavailable')
                metrics.record_hold(
                    screening_id=screening_id,
                    result='unavailable',
                    duration=time.perf_counter() - started,
                )
                Logger.base.info(
                    f'🪑 [HOLD] Screening {screening_id}: seats {e.seat_ids} unavailable'
                )
                raise
            except CustomBaseError:
                span.set_attribute('hold.result', 'rejected')
                metrics.record_hold(
                    screening_id=screening_id,
                    result='rejected',
                    duration=time.perf_counter() - started,
                )
                raise

            span.set_attribute('reservation.id', str(reservation.id))
            span.set_attribute('hold.result', 'held')
            metrics.record_hold(
                screening_id=screening_id, result='held', duration=time.perf_counter() - started
            )
            metrics.record_transition(to_status=ReservationStatus.HOLDING)
            Logger.base.info(
                f'✅ [HOLD] Reservation {reservation.id} holds seats {seat_ids} '
                f'until {reservation.expires_at.isoformat()}'
            )
            return reservation

    async def _hold_seats(
        self, *, screening_id: int, seat_ids: List[int], holder: Holder
    ) -> Reservation:
        screening = await self._require_screening(screening_id)
        if not screening.is_active:
            raise DomainError(f'Screening {screening_id} is not open for booking')

        async with self.lock_registry.hold(screening_id):
            now = self.now_provider()
            await self._sweep_screening(screening_id=screening_id, now=now)

            # Validates emptiness, duplicates and the per-reservation limit
            reservation = Reservation.create(
                screening_id=screening_id,
                seat_ids=seat_ids,
                holder=holder,
                now=now,
                hold_window=self.hold_window,
                max_seats=self.max_seats_per_reservation,
            )

            seats = await self.seat_inventory.get_seats(seat_ids=seat_ids)
            owned = {seat.id for seat in seats if seat.screening_id == screening_id}
            foreign = [seat_id for seat_id in seat_ids if seat_id not in owned]
            if foreign:
                raise DomainError(
                    f'Seats {foreign} do not belong to screening {screening_id}'
                )

            change = await self.seat_inventory.set_status(
                seat_ids=seat_ids,
                from_status=SeatStatus.AVAILABLE,
                to_status=SeatStatus.HELD,
            )
            if not change.applied:
                raise SeatsUnavailableError(change.conflicting_seat_ids)

            created = await self.reservation_ledger.create(reservation=reservation)
            if isinstance(created, SeatsUnavailable):
                await self._sync_seats(
                    seat_ids=seat_ids, from_status=SeatStatus.HELD, to_status=SeatStatus.AVAILABLE
                )
                raise SeatsUnavailableError(created.seat_ids)

            return created

    # ========== Payment ==========

    @Logger.io
    async def begin_payment(
        self, *, reservation_id: UUID, method: PaymentMethod
    ) -> Reservation:
        """
        Move a holding reservation to `awaiting_payment` and open a pending payment.

        Calling it again while the payment is in flight returns the reservation
        unchanged.

        Raises:
            NotFoundError: Unknown reservation
            HoldExpiredError: The hold window has passed
            InvalidTransitionError: Reservation is confirmed or cancelled
        """
        with self.tracer.start_as_current_span(
            'coordinator.begin_payment',
            attributes={'reservation.id': str(reservation_id), 'payment.method': method},
        ):
            async with self._reservation_scope(reservation_id) as reservation:
                return await self._open_payment(
                    reservation, method=method, now=self.now_provider()
                )

    @Logger.io
    async def start_charge(
        self, *, reservation_id: UUID, method: PaymentMethod
    ) -> Reservation:
        """
        Open the payment like `begin_payment` and claim the right to charge it.

        Only one caller holds the claim until the payment completes, fails or
        the claim is released, so a reservation is never charged twice.

        Raises:
            NotFoundError: Unknown reservation
            HoldExpiredError: The hold window has passed
            PaymentInProgressError: Another checkout is charging this reservation
            InvalidTransitionError: Reservation is confirmed or cancelled
        """
        with self.tracer.start_as_current_span(
            'coordinator.start_charge',
            attributes={'reservation.id': str(reservation_id), 'payment.method': method},
        ):
            async with self._reservation_scope(reservation_id) as reservation:
                now = self.now_provider()
                awaiting = await self._open_payment(reservation, method=method, now=now)
                if not await self.payment_repo.claim_charge(
                    reservation_id=awaiting.id, now=now
                ):
                    Logger.base.info(
                        f'⏳ [PAY] Reservation {awaiting.id} is already being charged'
                    )
                    raise PaymentInProgressError(reservation_id=awaiting.id)
                return awaiting

    async def release_charge(self, *, reservation_id: UUID) -> None:
        """Give the charge claim back when the gateway was never reached."""
        async with self._reservation_scope(reservation_id):
            await self.payment_repo.release_charge(reservation_id=reservation_id)

    @Logger.io
    async def record_unapplied_charge(
        self, *, reservation_id: UUID, receipt: PaymentReceipt, error: InvalidTransitionError
    ) -> None:
        """
        Keep the trace of money taken for a reservation that could not be confirmed.

        The payment is stored as failed with the gateway reference so it can be
        refunded. A payment already completed by another reference is left alone.
        """
        async with self._reservation_scope(reservation_id) as reservation:
            now = self.now_provider()
            if isinstance(error, HoldExpiredError):
                reason = 'Hold expired after charge, refund required'
            else:
                reason = 'Reservation changed during charge, refund required'
            Logger.base.error(
                f'💸 [PAY] Reservation {reservation.id} ({reservation.status}) was charged '
                f'{receipt.amount} as {receipt.reference} but not confirmed: {reason}'
            )

            payment = await self.payment_repo.get_by_reservation(reservation_id=reservation.id)
            if payment is not None and payment.status == PaymentStatus.COMPLETED:
                return
            if payment is None:
                payment = Payment.pending(
                    reservation_id=reservation.id,
                    amount=receipt.amount,
                    method=receipt.method,
                    now=now,
                )
            await self.payment_repo.save(
                payment=attrs.evolve(
                    payment.mark_as_failed(reason=reason, reference=receipt.reference, now=now),
                    amount=receipt.amount,
                )
            )

    @Logger.io
    async def confirm_payment(
        self, *, reservation_id: UUID, receipt: PaymentReceipt
    ) -> Reservation:
        """
        Confirm a reservation after its payment completed.

        Fixes the total price, generates the confirmation code and sells the
        seats. Repeating the call with the same payment reference returns the
        confirmed reservation unchanged.

        Raises:
            NotFoundError: Unknown reservation
            HoldExpiredError: The hold window passed before the payment resolved
            InvalidTransitionError: Not awaiting payment, or confirmed by another payment
        """
        with self.tracer.start_as_current_span(
            'coordinator.confirm_payment',
            attributes={
                'reservation.id': str(reservation_id),
                'payment.reference': receipt.reference,
            },
        ):
            async with self._reservation_scope(reservation_id) as reservation:
                now = self.now_provider()
                to_status = ReservationStatus.CONFIRMED

                if reservation.status == ReservationStatus.CONFIRMED:
                    if reservation.payment_reference == receipt.reference:
                        Logger.base.info(
                            f'🔁 [CONFIRM] Reservation {reservation.id} already confirmed by {receipt.reference}'
                        )
                        return reservation
                    raise InvalidTransitionError(
                        reservation_id=reservation.id,
                        current_status=reservation.status,
                        to_status=to_status,
                        message='Reservation was already paid by another payment',
                    )

                await self._reject_if_expired(reservation, to_status=to_status, now=now)
                if reservation.status != ReservationStatus.AWAITING_PAYMENT:
                    raise InvalidTransitionError(
                        reservation_id=reservation.id,
                        current_status=reservation.status,
                        to_status=to_status,
                    )

                screening = await self._require_screening(reservation.screening_id)
                total_price = screening.price_for(reservation.seat_count)
                if receipt.amount != total_price:
                    Logger.base.warning(
                        f'⚠️ [CONFIRM] Reservation {reservation.id} paid {receipt.amount}, '
                        f'expected {total_price}'
                    )

                payment = await self.payment_repo.get_by_reservation(
                    reservation_id=reservation.id
                )
                if payment is None or payment.status == PaymentStatus.FAILED:
                    payment = Payment.pending(
                        reservation_id=reservation.id,
                        amount=total_price,
                        method=receipt.method,
                        now=now,
                    )
                completed = payment.mark_as_completed(
                    reference=receipt.reference, amount=receipt.amount, now=now
                )

                confirmed = self._accepted(
                    await self.reservation_ledger.transition(
                        reservation_id=reservation.id,
                        from_status=ReservationStatus.AWAITING_PAYMENT,
                        to_status=to_status,
                        now=now,
                        confirmation_code=await self._new_confirmation_code(),
                        total_price=total_price,
                        payment_reference=receipt.reference,
                    ),
                    to_status=to_status,
                )
                await self._sync_seats(
                    seat_ids=confirmed.seat_ids,
                    from_status=SeatStatus.HELD,
                    to_status=SeatStatus.SOLD,
                )
                await self.payment_repo.save(payment=completed)

                metrics.record_transition(to_status=to_status)
                Logger.base.info(
                    f'🎟️ [CONFIRM] Reservation {confirmed.id} confirmed as {confirmed.confirmation_code}'
                )
                return confirmed

    @Logger.io
    async def fail_payment(
        self, *, reservation_id: UUID, reason: str, reference: Optional[str] = None
    ) -> Reservation:
        """
        Cancel a reservation whose payment failed and release its seats.

        A reservation that is already cancelled or expired is returned as is;
        its payment is still closed if it was left pending.
        """
        with self.tracer.start_as_current_span(
            'coordinator.fail_payment', attributes={'reservation.id': str(reservation_id)}
        ):
            async with self._reservation_scope(reservation_id) as reservation:
                now = self.now_provider()

                if reservation.status in (ReservationStatus.CANCELLED, ReservationStatus.EXPIRED):
                    payment = await self.payment_repo.get_by_reservation(
                        reservation_id=reservation.id
                    )
                    if payment is not None and not payment.is_terminal:
                        await self.payment_repo.save(
                            payment=payment.mark_as_failed(
                                reason=reason, reference=reference, now=now
                            )
                        )
                    return reservation
                if reservation.status == ReservationStatus.CONFIRMED:
                    raise InvalidTransitionError(
                        reservation_id=reservation.id,
                        current_status=reservation.status,
                        to_status=ReservationStatus.CANCELLED,
                        message='Reservation is already confirmed',
                    )

                cancelled = await self._release(
                    reservation,
                    now=now,
                    release_reason='payment_failed',
                    cancellation_reason=reason,
                )

                payment = await self.payment_repo.get_by_reservation(
                    reservation_id=reservation.id
                )
                if payment is None:
                    screening = await self._require_screening(reservation.screening_id)
                    payment = Payment.pending(
                        reservation_id=reservation.id,
                        amount=screening.price_for(reservation.seat_count),
                        method=PaymentMethod.CREDIT_CARD,
                        now=now,
                    )
                await self.payment_repo.save(
                    payment=payment.mark_as_failed(reason=reason, reference=reference, now=now)
                )
                return cancelled

    # ========== Cancel / expire ==========

    @Logger.io
    async def cancel(self, *, reservation_id: UUID, actor: str) -> Reservation:
        """
        Customer or admin abort of a holding reservation.

        Raises:
            InvalidTransitionError: Reservation is not holding any more
        """
        with self.tracer.start_as_current_span(
            'coordinator.cancel', attributes={'reservation.id': str(reservation_id)}
        ):
            async with self._reservation_scope(reservation_id) as reservation:
                if reservation.status == ReservationStatus.CANCELLED:
                    return reservation
                if reservation.status != ReservationStatus.HOLDING:
                    raise InvalidTransitionError(
                        reservation_id=reservation.id,
                        current_status=reservation.status,
                        to_status=ReservationStatus.CANCELLED,
                        message=f'Only holding reservations can be cancelled (current: {reservation.status})',
                    )
                return await self._release(
                    reservation,
                    now=self.now_provider(),
                    release_reason='cancelled',
                    cancellation_reason=f'Cancelled by {actor}',
                    cancelled_by=actor,
                )

    async def expire(
        self, *, reservation_id: UUID, now: Optional[datetime] = None
    ) -> ExpiryOutcome:
        """Expire one overdue reservation; used by the sweep."""
        reservation = await self.reservation_ledger.get(reservation_id=reservation_id)
        if reservation is None:
            return ExpiryOutcome.SKIPPED

        async with self.lock_registry.hold(reservation.screening_id):
            current = await self.reservation_ledger.get(reservation_id=reservation_id)
            if current is None or not current.is_pending:
                return ExpiryOutcome.SKIPPED
            return await self._expire_locked(current, now=now or self.now_provider())

    # ========== Internals (callers hold the screening lock) ==========

    @asynccontextmanager
    async def _reservation_scope(self, reservation_id: UUID) -> AsyncIterator[Reservation]:
        # The screening id never changes, so an unlocked read is enough to find the lock
        reservation = await self._require_reservation(reservation_id)
        async with self.lock_registry.hold(reservation.screening_id):
            yield await self._require_reservation(reservation_id)

    async def _require_reservation(self, reservation_id: UUID) -> Reservation:
        reservation = await self.reservation_ledger.get(reservation_id=reservation_id)
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')
        return reservation

    async def _require_screening(self, screening_id: int) -> Screening:
        screening = await self.screening_catalog.get(screening_id=screening_id)
        if screening is None:
            raise NotFoundError(f'Screening {screening_id} not found')
        return screening

    async def _reject_if_expired(
        self, reservation: Reservation, *, to_status: ReservationStatus, now: datetime
    ) -> None:
        if reservation.status == ReservationStatus.EXPIRED:
            raise HoldExpiredError(reservation_id=reservation.id, to_status=to_status)
        if reservation.is_overdue(now):
            await self._expire_locked(reservation, now=now)
            raise HoldExpiredError(reservation_id=reservation.id, to_status=to_status)

    async def _open_payment(
        self, reservation: Reservation, *, method: PaymentMethod, now: datetime
    ) -> Reservation:
        to_status = ReservationStatus.AWAITING_PAYMENT
        await self._reject_if_expired(reservation, to_status=to_status, now=now)

        if reservation.status == ReservationStatus.AWAITING_PAYMENT:
            return reservation
        if reservation.status != ReservationStatus.HOLDING:
            raise InvalidTransitionError(
                reservation_id=reservation.id,
                current_status=reservation.status,
                to_status=to_status,
            )

        screening = await self._require_screening(reservation.screening_id)
        updated = self._accepted(
            await self.reservation_ledger.transition(
                reservation_id=reservation.id,
                from_status=ReservationStatus.HOLDING,
                to_status=to_status,
                now=now,
            ),
            to_status=to_status,
        )
        await self.payment_repo.save(
            payment=Payment.pending(
                reservation_id=updated.id,
                amount=screening.price_for(updated.seat_count),
                method=method,
                now=now,
            )
        )
        metrics.record_transition(to_status=to_status)
        return updated

    async def _sweep_screening(self, *, screening_id: int, now: datetime) -> int:
        overdue = await self.reservation_ledger.list_expired(now=now, screening_id=screening_id)
        expired = 0
        for reservation in overdue:
            if await self._expire_locked(reservation, now=now) == ExpiryOutcome.EXPIRED:
                expired += 1
        if expired:
            Logger.base.info(
                f'⌛ [SWEEP] Released {expired} expired holds of screening {screening_id}'
            )
        return expired

    async def _expire_locked(self, reservation: Reservation, *, now: datetime) -> ExpiryOutcome:
        if not reservation.is_overdue(now):
            return ExpiryOutcome.NOT_DUE

        result = await self.reservation_ledger.transition(
            reservation_id=reservation.id,
            from_status=reservation.status,
            to_status=ReservationStatus.EXPIRED,
            now=now,
        )
        if isinstance(result, (InvalidTransition, NotFound)):
            # Lost the race against payment / cancel
            return ExpiryOutcome.SKIPPED

        await self._sync_seats(
            seat_ids=result.seat_ids, from_status=SeatStatus.HELD, to_status=SeatStatus.AVAILABLE
        )
        metrics.record_transition(to_status=ReservationStatus.EXPIRED)
        metrics.record_seats_released(reason='expired', count=result.seat_count)
        Logger.base.info(f'⌛ [EXPIRE] Reservation {result.id} expired, seats {result.seat_ids} released')
        return ExpiryOutcome.EXPIRED

    async def _release(
        self, reservation: Reservation, *, now: datetime, release_reason: str, **changes: Any
    ) -> Reservation:
        to_status = ReservationStatus.CANCELLED
        cancelled = self._accepted(
            await self.reservation_ledger.transition(
                reservation_id=reservation.id,
                from_status=reservation.status,
                to_status=to_status,
                now=now,
                **changes,
            ),
            to_status=to_status,
        )
        await self._sync_seats(
            seat_ids=cancelled.seat_ids,
            from_status=SeatStatus.HELD,
            to_status=SeatStatus.AVAILABLE,
        )
        metrics.record_transition(to_status=to_status)
        metrics.record_seats_released(reason=release_reason, count=cancelled.seat_count)
        return cancelled

    async def _sync_seats(
        self, *, seat_ids: Sequence[int], from_status: SeatStatus, to_status: SeatStatus
    ) -> None:
        """Bring the seat cache in line with a ledger decision already taken."""
        change = await self.seat_inventory.set_status(
            seat_ids=seat_ids, from_status=from_status, to_status=to_status
        )
        if not change.applied:
            Logger.base.error(
                f'❌ [SEATS] Could not move seats {change.conflicting_seat_ids} '
                f'from {from_status} to {to_status}: {change.error or "status mismatch"}'
            )

    async def _new_confirmation_code(self) -> str:
        for _ in range(self.CONFIRMATION_CODE_ATTEMPTS):
            code = generate_confirmation_code(
                prefix=self.confirmation_code_prefix, length=self.confirmation_code_length
            )
            if await self.reservation_ledger.find_by_confirmation_code(code=code) is None:
                return code
        raise ConflictError('Could not generate a unique confirmation code, please retry')

    @staticmethod
    def _accepted(
        result: Reservation | InvalidTransition | NotFound, *, to_status: ReservationStatus
    ) -> Reservation:
        if isinstance(result, NotFound):
            raise NotFoundError(f'{result.entity} {result.key} not found')
        if isinstance(result, InvalidTransition):
            raise InvalidTransitionError(
                reservation_id=result.reservation_id,
                current_status=result.current_status,
                to_status=to_status,
            )
        return result
