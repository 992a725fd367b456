from decimal import Decimal
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.payment_dto import PaymentReceipt
from src.service.cinema_booking.app.interface.i_payment_repo import IPaymentRepo
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.app.interface.i_screening_catalog import IScreeningCatalog
from src.service.cinema_booking.app.service.booking_coordinator import BookingCoordinator
from src.service.cinema_booking.domain.booking_errors import InvalidTransitionError
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus
from src.service.cinema_booking.domain.enum.reservation_status import ReservationStatus


class RecordPaymentResultUseCase:
    """
    Payment provider notification (webhook).

    Providers redeliver notifications, so every branch is idempotent: a second
    `completed` with the same transaction id returns the confirmed reservation,
    a second `failed` returns the cancelled one.
    """

    def __init__(
        self,
        *,
        booking_coordinator: BookingCoordinator,
        reservation_ledger: IReservationLedger,
        screening_catalog: IScreeningCatalog,
        payment_repo: IPaymentRepo,
    ) -> None:
        self.booking_coordinator = booking_coordinator
        self.reservation_ledger = reservation_ledger
        self.screening_catalog = screening_catalog
        self.payment_repo = payment_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_coordinator: BookingCoordinator = Depends(
            Provide[Container.booking_coordinator]
        ),
        reservation_ledger: IReservationLedger = Depends(Provide[Container.reservation_ledger]),
        screening_catalog: IScreeningCatalog = Depends(Provide[Container.screening_catalog]),
        payment_repo: IPaymentRepo = Depends(Provide[Container.payment_repo]),
    ) -> Self:
        return cls(
            booking_coordinator=booking_coordinator,
            reservation_ledger=reservation_ledger,
            screening_catalog=screening_catalog,
            payment_repo=payment_repo,
        )

    @Logger.io
    async def execute(
        self,
        *,
        reservation_id: UUID,
        status: PaymentStatus,
        transaction_id: str,
        amount: Optional[Decimal] = None,
        method: Optional[PaymentMethod] = None,
        failure_reason: Optional[str] = None,
    ) -> Reservation:
        reservation = await self.reservation_ledger.get(reservation_id=reservation_id)
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')

        Logger.base.info(
            f'📨 [WEBHOOK] Reservation {reservation_id}: payment {status} ({transaction_id})'
        )

        if status == PaymentStatus.FAILED:
            return await self.booking_coordinator.fail_payment(
                reservation_id=reservation_id,
                reason=failure_reason or 'Payment failed',
                reference=transaction_id,
            )
        if status != PaymentStatus.COMPLETED:
            raise DomainError(f'Unsupported payment status: {status}')

        payment = await self.payment_repo.get_by_reservation(reservation_id=reservation_id)
        method = method or (payment.method if payment else PaymentMethod.CREDIT_CARD)

        if amount is None:
            screening = await self.screening_catalog.get(screening_id=reservation.screening_id)
            if screening is None:
                raise NotFoundError(f'Screening {reservation.screening_id} not found')
            amount = screening.price_for(reservation.seat_count)

        receipt = PaymentReceipt(reference=transaction_id, amount=amount, method=method)
        try:
            if reservation.status == ReservationStatus.HOLDING:
                # Provider completed before the client reported the checkout
                await self.booking_coordinator.begin_payment(
                    reservation_id=reservation_id, method=method
                )
            return await self.booking_coordinator.confirm_payment(
                reservation_id=reservation_id, receipt=receipt
            )
        except InvalidTransitionError as e:
            # The provider already took the money
            await self.booking_coordinator.record_unapplied_charge(
                reservation_id=reservation_id,
                receipt=receipt,
                error=e,
            )
            raise
