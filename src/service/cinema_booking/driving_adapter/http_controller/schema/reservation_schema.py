from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod


class ReservationCreateRequest(BaseModel):
    screening_id: int
    seat_ids: List[int] = Field(min_length=1)
    user_id: Optional[int] = None
    guest_name: Optional[str] = Field(default=None, max_length=255)
    guest_email: Optional[str] = Field(default=None, max_length=255)
    guest_phone: Optional[str] = Field(default=None, max_length=20)

    class Config:
        json_schema_extra = {
            'example': {
                'screening_id': 1,
                'seat_ids': [1, 2],
                'guest_name': 'Lin Mei',
                'guest_email': 'lin.mei@example.com',
                'guest_phone': '0912345678',
            }
        }


class BeginPaymentRequest(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD


class PaymentRequest(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    card_number: Optional[str] = Field(default=None, min_length=12, max_length=19)
    paypal_email: Optional[str] = None

    class Config:
        json_schema_extra = {
            'example': {'payment_method': 'credit_card', 'card_number': '4111111111111111'}
        }


class CancelReservationRequest(BaseModel):
    actor: str = Field(default='customer', min_length=1, max_length=100)


class PaymentWebhookRequest(BaseModel):
    reservation_id: UUID
    status: Literal['completed', 'failed']
    transaction_id: str = Field(min_length=1, max_length=100)
    amount: Optional[Decimal] = None
    payment_method: Optional[PaymentMethod] = None
    failure_reason: Optional[str] = None


class ReservationResponse(BaseModel):
    id: UUID
    screening_id: int
    seat_ids: List[int]
    status: str
    user_id: Optional[int]
    guest_name: Optional[str]
    guest_email: Optional[str]
    expires_at: datetime
    created_at: Optional[datetime]
    total_price: Optional[Decimal]
    confirmation_code: Optional[str]
    payment_reference: Optional[str]
    confirmed_at: Optional[datetime]
    cancellation_reason: Optional[str]

    @classmethod
    def from_entity(cls, reservation: Reservation) -> 'ReservationResponse':
        return cls(
            id=reservation.id,
            screening_id=reservation.screening_id,
            seat_ids=list(reservation.seat_ids),
            status=reservation.status.value,
            user_id=reservation.holder.user_id,
            guest_name=reservation.holder.guest_name,
            guest_email=reservation.holder.guest_email,
            expires_at=reservation.expires_at,
            created_at=reservation.created_at,
            total_price=reservation.total_price,
            confirmation_code=reservation.confirmation_code,
            payment_reference=reservation.payment_reference,
            confirmed_at=reservation.confirmed_at,
            cancellation_reason=reservation.cancellation_reason,
        )
