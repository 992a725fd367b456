from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.command.create_screening_use_case import (
    CreateScreeningUseCase,
)
from src.service.cinema_booking.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.cinema_booking.app.dto.availability_dto import ScreeningAvailability
from src.service.cinema_booking.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.cinema_booking.app.query.get_seat_map_use_case import GetSeatMapUseCase
from src.service.cinema_booking.app.query.list_screenings_use_case import ListScreeningsUseCase
from src.service.cinema_booking.app.service.booking_coordinator import BookingCoordinator
from src.service.cinema_booking.driving_adapter.http_controller.schema.reservation_schema import (
    ReservationResponse,
)
from src.service.cinema_booking.driving_adapter.http_controller.schema.screening_schema import (
    RepairSeatsResponse,
    ScreeningCreateRequest,
    ScreeningCreatedResponse,
    ScreeningResponse,
    SeatMapResponse,
    SeatResponse,
    SweepResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_screening(
    request: ScreeningCreateRequest,
    use_case: CreateScreeningUseCase = Depends(CreateScreeningUseCase.depends),
) -> ScreeningCreatedResponse:
    screening, seats = await use_case.execute(
        film_title=request.film_title,
        room=request.room,
        start_time=request.start_time,
        price=request.price,
        total_seats=request.total_seats,
        film_id=request.film_id,
        is_active=request.is_active,
    )
    availability = ScreeningAvailability.from_seats(screening=screening, seats=seats)
    return ScreeningCreatedResponse(
        **ScreeningResponse.from_availability(availability).model_dump(),
        seats=[SeatResponse.from_entity(seat) for seat in seats],
    )


@router.get('')
@Logger.io
async def list_screenings(
    active_only: bool = False,
    use_case: ListScreeningsUseCase = Depends(ListScreeningsUseCase.depends),
) -> List[ScreeningResponse]:
    screenings = await use_case.list_all(active_only=active_only)
    return [ScreeningResponse.from_availability(availability) for availability in screenings]


@router.post('/sweep_expired')
@Logger.io
@inject
async def sweep_expired_holds(
    use_case: SweepExpiredHoldsUseCase = Depends(
        Provide[Container.sweep_expired_holds_use_case]
    ),
) -> SweepResponse:
    result = await use_case.execute()
    return SweepResponse(
        scanned=result.scanned,
        expired=[str(reservation_id) for reservation_id in result.expired],
        skipped=[str(reservation_id) for reservation_id in result.skipped],
        failed=[str(reservation_id) for reservation_id in result.failed],
    )


@router.get('/{screening_id}')
@Logger.io
async def get_screening(
    screening_id: int,
    use_case: ListScreeningsUseCase = Depends(ListScreeningsUseCase.depends),
) -> ScreeningResponse:
    return ScreeningResponse.from_availability(await use_case.get(screening_id=screening_id))


@router.get('/{screening_id}/seats')
@Logger.io
async def get_seat_map(
    screening_id: int,
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> SeatMapResponse:
    return SeatMapResponse.from_seat_map(await use_case.execute(screening_id=screening_id))


@router.post('/{screening_id}/repair_seats')
@Logger.io
@inject
async def repair_seats(
    screening_id: int,
    booking_coordinator: BookingCoordinator = Depends(Provide[Container.booking_coordinator]),
) -> RepairSeatsResponse:
    seats = await booking_coordinator.repair_seats(screening_id=screening_id)
    return RepairSeatsResponse(
        screening_id=screening_id,
        seat_count=len(seats),
        seats=[SeatResponse.from_entity(seat) for seat in seats],
    )


@router.get('/{screening_id}/reservations')
@Logger.io
async def list_screening_reservations(
    screening_id: int,
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> List[ReservationResponse]:
    reservations = await use_case.list_by_screening(screening_id=screening_id)
    return [ReservationResponse.from_entity(reservation) for reservation in reservations]
