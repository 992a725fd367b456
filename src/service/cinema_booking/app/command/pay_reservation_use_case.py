from decimal import Decimal
from typing import Any, Mapping, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.payment_dto import ChargeResult, PaymentReceipt
from src.service.cinema_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.app.interface.i_ticket_notifier import ITicketNotifier
from src.service.cinema_booking.app.service.booking_coordinator import BookingCoordinator
from src.service.cinema_booking.domain.booking_errors import InvalidTransitionError
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.entity.screening_entity import Screening
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus


class PayReservationUseCase:
    """
    Checkout of a held reservation

    Flow:
    1. start_charge (holding -> awaiting_payment, pending payment record claimed
       by this checkout; a concurrent checkout is refused)
    2. Charge through the payment gateway, outside any screening lock
    3. confirm_payment or fail_payment depending on the charge outcome; a
       charge that cannot be confirmed any more is recorded for refund
    4. Send the ticket confirmation (a notifier failure keeps the booking)
    """

    def __init__(
        self,
        *,
        booking_coordinator: BookingCoordinator,
        reservation_ledger: IReservationLedger,
        screening_catalog: IScreeningCatalog,
        seat_inventory: ISeatInventory,
        payment_gateway: IPaymentGateway,
        ticket_notifier: ITicketNotifier,
    ) -> None:
        self.booking_coordinator = booking_coordinator
        self.reservation_ledger = reservation_ledger
        self.screening_catalog = screening_catalog
        self.seat_inventory = seat_inventory
        self.payment_gateway = payment_gateway
        self.ticket_notifier = ticket_notifier
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_coordinator: BookingCoordinator = Depends(
            Provide[Container.booking_coordinator]
        ),
        reservation_ledger: IReservationLedger = Depends(Provide[Container.reservation_ledger]),
        screening_catalog: IScreeningCatalog = Depends(Provide[Container.screening_catalog]),
        seat_inventory: ISeatInventory = Depends(Provide[Container.seat_inventory]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        ticket_notifier: ITicketNotifier = Depends(Provide[Container.ticket_notifier]),
    ) -> Self:
        return cls(
            booking_coordinator=booking_coordinator,
            reservation_ledger=reservation_ledger,
            screening_catalog=screening_catalog,
            seat_inventory=seat_inventory,
            payment_gateway=payment_gateway,
            ticket_notifier=ticket_notifier,
        )

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        method: PaymentMethod,
        payment_details: Mapping[str, Any],
    ) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.pay_reservation',
            attributes={'reservation.id': str(reservation_id), 'payment.method': method},
        ) as span:
            reservation = await self.reservation_ledger.get(reservation_id=reservation_id)
            if reservation is None:
                raise NotFoundError(f'Reservation {reservation_id} not found')
            if reservation.status == ReservationStatus.CONFIRMED:
                Logger.base.info(
                    f'🔁 [PAY] Reservation {reservation_id} is already confirmed, not charging again'
                )
                return reservation

            awaiting = await self.booking_coordinator.start_charge(
                reservation_id=reservation_id, method=method
            )
            try:
                screening = await self.screening_catalog.get(screening_id=awaiting.screening_id)
                if screening is None:
                    raise NotFoundError(f'Screening {awaiting.screening_id} not found')
                amount = screening.price_for(awaiting.seat_count)

                charge = await self._charge(
                    amount=amount, method=method, payment_details=payment_details
                )
            except CustomBaseError:
                # Nothing was charged, the checkout may be retried
                await self.booking_coordinator.release_charge(reservation_id=reservation_id)
                raise
            span.set_attribute('payment.status', charge.status)

            if not charge.succeeded:
                Logger.base.info(
                    f'💳 [PAY] Reservation {reservation_id} payment failed: {charge.failure_reason}'
                )
                return await self.booking_coordinator.fail_payment(
                    reservation_id=reservation_id,
                    reason=charge.failure_reason or 'Payment declined',
                    reference=charge.reference or None,
                )

            receipt = PaymentReceipt(reference=charge.reference, amount=amount, method=method)
            try:
                confirmed = await self.booking_coordinator.confirm_payment(
                    reservation_id=reservation_id, receipt=receipt
                )
            except InvalidTransitionError as e:
                await self.booking_coordinator.record_unapplied_charge(
                    reservation_id=reservation_id,
                    receipt=receipt,
                    error=e,
                )
                raise
            await self._notify(reservation=confirmed, screening=screening)
            return confirmed

    async def _charge(
        self, *, amount: Decimal, method: PaymentMethod, payment_details: Mapping[str, Any]
    ) -> ChargeResult:
        with self.tracer.start_as_current_span(
            'use_case.pay_reservation.charge', attributes={'payment.amount': str(amount)}
        ):
            try:
                return await self.payment_gateway.charge(
                    amount=amount, method=method, payment_details=payment_details
                )
            except CustomBaseError:
                raise
            except Exception as e:
                Logger.base.error(f'❌ [PAY] Payment gateway error: {e}')
                return ChargeResult(
                    status=PaymentStatus.FAILED,
                    reference='',
                    failure_reason='Payment gateway unavailable',
                )

    async def _notify(self, *, reservation: Reservation, screening: Screening) -> None:
        seats = await self.seat_inventory.get_seats(seat_ids=reservation.seat_ids)
        try:
            await self.ticket_notifier.send_confirmation(
                reservation=reservation, screening=screening, seats=seats
            )
        except Exception as e:
            Logger.base.error(
                f'❌ [PAY] Ticket notification failed for {reservation.confirmation_code}: {e}'
            )
