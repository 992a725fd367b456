import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)


class HoldExpirySweeper:
    """Run the expiry sweep on a fixed interval inside the application task group"""

    def __init__(
        self,
        *,
        sweep_use_case: SweepExpiredHoldsUseCase,
        interval_seconds: float = 30.0,
    ) -> None:
        self.sweep_use_case = sweep_use_case
        self.interval_seconds = interval_seconds
        self.runs = 0

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)  # pyrefly: ignore[bad-argument-type]
        Logger.base.info(f'⏰ [Sweeper] Started, interval {self.interval_seconds}s')

    async def run_once(self) -> None:
        try:
            await self.sweep_use_case.execute()
        except Exception as e:
            # Keep the loop alive; the next tick retries
            Logger.base.error(f'❌ [Sweeper] Sweep failed: {e}')
        finally:
            self.runs += 1

    async def _sweep_loop(self) -> None:
        while True:
            await self.run_once()
            await anyio.sleep(self.interval_seconds)
