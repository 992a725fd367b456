from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.command.record_payment_result_use_case import (
    RecordPaymentResultUseCase,
)
from src.service.cinema_booking.domain.enum.payment_status import PaymentStatus
from src.service.cinema_booking.driving_adapter.http_controller.schema.reservation_schema import (
    PaymentWebhookRequest,
    ReservationResponse,
)


router = APIRouter()


@router.post('/webhook')
@Logger.io
async def payment_webhook(
    request: PaymentWebhookRequest,
    use_case: RecordPaymentResultUseCase = Depends(RecordPaymentResultUseCase.depends),
) -> ReservationResponse:
    """Payment provider notification; redelivery of the same notification is harmless."""
    reservation = await use_case.execute(
        reservation_id=request.reservation_id,
        status=PaymentStatus(request.status),
        transaction_id=request.transaction_id,
        amount=request.amount,
        method=request.payment_method,
        failure_reason=request.failure_reason,
    )
    return ReservationResponse.from_entity(reservation)
