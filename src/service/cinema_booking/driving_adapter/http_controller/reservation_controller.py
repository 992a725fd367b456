from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.command.pay_reservation_use_case import PayReservationUseCase
from src.service.cinema_booking.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.cinema_booking.app.service.booking_coordinator import BookingCoordinator
from src.service.cinema_booking.domain.value_object.holder import Holder
from src.service.cinema_booking.driving_adapter.http_controller.schema.reservation_schema import (
    BeginPaymentRequest,
    CancelReservationRequest,
    PaymentRequest,
    ReservationCreateRequest,
    ReservationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
@inject
async def hold_seats(
    request: ReservationCreateRequest,
    booking_coordinator: BookingCoordinator = Depends(Provide[Container.booking_coordinator]),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.hold_seats') as span:
        span.set_attribute('screening_id', request.screening_id)
        span.set_attribute('seat_count', len(request.seat_ids))

        holder = Holder.create(
            user_id=request.user_id,
            guest_name=request.guest_name,
            guest_email=request.guest_email,
            guest_phone=request.guest_phone,
        )
        reservation = await booking_coordinator.hold_seats(
            screening_id=request.screening_id, seat_ids=request.seat_ids, holder=holder
        )

        span.set_attribute('reservation.id', str(reservation.id))
        return ReservationResponse.from_entity(reservation)


@router.get('/code/{confirmation_code}')
@Logger.io
async def get_reservation_by_code(
    confirmation_code: str,
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.get_by_confirmation_code(code=confirmation_code)
    return ReservationResponse.from_entity(reservation)


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: UUID,
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.get_by_id(reservation_id=reservation_id)
    return ReservationResponse.from_entity(reservation)


@router.post('/{reservation_id}/begin_payment')
@Logger.io
@inject
async def begin_payment(
    reservation_id: UUID,
    request: BeginPaymentRequest,
    booking_coordinator: BookingCoordinator = Depends(Provide[Container.booking_coordinator]),
) -> ReservationResponse:
    reservation = await booking_coordinator.begin_payment(
        reservation_id=reservation_id, method=request.payment_method
    )
    return ReservationResponse.from_entity(reservation)


@router.post('/{reservation_id}/pay')
@Logger.io
async def pay_reservation(
    reservation_id: UUID,
    request: PaymentRequest,
    use_case: PayReservationUseCase = Depends(PayReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.execute(
        reservation_id=reservation_id,
        method=request.payment_method,
        payment_details=request.model_dump(exclude={'payment_method'}, exclude_none=True),
    )
    return ReservationResponse.from_entity(reservation)


@router.patch('/{reservation_id}/cancel')
@Logger.io
@inject
async def cancel_reservation(
    reservation_id: UUID,
    request: CancelReservationRequest,
    booking_coordinator: BookingCoordinator = Depends(Provide[Container.booking_coordinator]),
) -> ReservationResponse:
    reservation = await booking_coordinator.cancel(
        reservation_id=reservation_id, actor=request.actor
    )
    return ReservationResponse.from_entity(reservation)
