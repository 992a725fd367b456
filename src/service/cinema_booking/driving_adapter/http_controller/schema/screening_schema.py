from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from src.service.cinema_booking.app.dto.availability_dto import ScreeningAvailability, SeatMap
from src.service.cinema_booking.domain.entity.seat_entity import Seat


class ScreeningCreateRequest(BaseModel):
    film_title: str = Field(min_length=1, max_length=255)
    room: str = Field(min_length=1, max_length=50)
    start_time: datetime
    price: Decimal = Field(ge=0, decimal_places=2)
    total_seats: int = Field(gt=0, le=1000)
    film_id: Optional[int] = None
    is_active: bool = True

    class Config:
        json_schema_extra = {
            'example': {
                'film_title': 'Spirited Away',
                'room': 'Hall 1',
                'start_time': '2026-11-01T19:30:00+08:00',
                'price': '12.50',
                'total_seats': 100,
                'film_id': 7,
                'is_active': True,
            }
        }


class ScreeningResponse(BaseModel):
    id: int
    film_id: Optional[int]
    film_title: str
    room: str
    start_time: datetime
    price: Decimal
    total_seats: int
    is_active: bool
    available_seats: int
    held_seats: int
    sold_seats: int
    is_fully_booked: bool

    @classmethod
    def from_availability(cls, availability: ScreeningAvailability) -> 'ScreeningResponse':
        screening = availability.screening
        return cls(
            id=screening.id or 0,
            film_id=screening.film_id,
            film_title=screening.film_title,
            room=screening.room,
            start_time=screening.start_time,
            price=screening.price,
            total_seats=screening.total_seats,
            is_active=screening.is_active,
            available_seats=availability.available_seats,
            held_seats=availability.held_seats,
            sold_seats=availability.sold_seats,
            is_fully_booked=availability.is_fully_booked,
        )


class SeatResponse(BaseModel):
    id: int
    row: str
    number: int
    label: str
    status: str

    @classmethod
    def from_entity(cls, seat: Seat) -> 'SeatResponse':
        return cls(
            id=seat.id or 0,
            row=seat.row,
            number=seat.number,
            label=seat.label,
            status=seat.status.value,
        )


class ScreeningCreatedResponse(ScreeningResponse):
    seats: List[SeatResponse]


class SeatMapResponse(BaseModel):
    screening: ScreeningResponse
    rows: Dict[str, List[SeatResponse]]
    updated_at: Optional[datetime]

    @classmethod
    def from_seat_map(cls, seat_map: SeatMap) -> 'SeatMapResponse':
        return cls(
            screening=ScreeningResponse.from_availability(seat_map.availability),
            rows={
                row: [SeatResponse.from_entity(seat) for seat in seats]
                for row, seats in seat_map.rows.items()
            },
            updated_at=seat_map.updated_at,
        )


class RepairSeatsResponse(BaseModel):
    screening_id: int
    seat_count: int
    seats: List[SeatResponse]


class SweepResponse(BaseModel):
    scanned: int
    expired: List[str]
    skipped: List[str]
    failed: List[str]
