"""
Sweep Expired Holds Use Case

Releases holds whose window has passed. Safe to run concurrently from several
workers: each reservation is expired through the coordinator, and a
reservation that already moved on is simply skipped.
"""

from collections.abc import Callable
from datetime import datetime
import time
from typing import Optional

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.cinema_booking.app.dto.sweep_dto import ExpiryOutcome, SweepResult
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.app.service.booking_coordinator import (
    BookingCoordinator,
    utc_now,
)


class SweepExpiredHoldsUseCase:
    def __init__(
        self,
        *,
        reservation_ledger: IReservationLedger,
        booking_coordinator: BookingCoordinator,
        now_provider: Callable[[], datetime] = utc_now,
    ) -> None:
        self.reservation_ledger = reservation_ledger
        self.booking_coordinator = booking_coordinator
        self.now_provider = now_provider
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, screening_id: Optional[int] = None) -> SweepResult:
        started = time.perf_counter()
        result = SweepResult()

        with self.tracer.start_as_current_span('use_case.sweep_expired_holds') as span:
            now = self.now_provider()
            try:
                overdue = await self.reservation_ledger.list_expired(
                    now=now, screening_id=screening_id
                )
            except Exception:
                metrics.record_sweep(result='error', duration=time.perf_counter() - started)
                raise

            for reservation in overdue:
                try:
                    outcome = await self.booking_coordinator.expire(
                        reservation_id=reservation.id, now=now
                    )
                except Exception as e:
                    # One broken record must not stop the sweep
                    Logger.base.error(f'❌ [SWEEP] Failed to expire {reservation.id}: {e}')
                    result.failed.append(reservation.id)
                    continue

                if outcome == ExpiryOutcome.EXPIRED:
                    result.expired.append(reservation.id)
                else:
                    result.skipped.append(reservation.id)

            span.set_attribute('sweep.expired', len(result.expired))
            span.set_attribute('sweep.skipped', len(result.skipped))
            span.set_attribute('sweep.failed', len(result.failed))

        metrics.record_sweep(
            result='error' if result.failed else 'ok', duration=time.perf_counter() - started
        )
        if result.scanned:
            Logger.base.info(
                f'⌛ [SWEEP] expired={len(result.expired)} skipped={len(result.skipped)} '
                f'failed={len(result.failed)}'
            )
        return result
