"""
Production FastAPI Application

Seat booking API plus the background hold-expiry sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.cinema_booking.driving_adapter.background.hold_expiry_sweeper import (
    HoldExpirySweeper,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Cinema Booking] Starting up...')

    tracing = TracingConfig(service_name='cinema-booking')
    tracing.setup()
    Logger.base.info('📊 [Cinema Booking] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Cinema Booking] Dependency injection wired')

    if settings.STORAGE_BACKEND == 'postgres':
        tracing.instrument_sqlalchemy(engine=get_engine())
        await create_db_and_tables()
        Logger.base.info('🗄️  [Cinema Booking] PostgreSQL storage ready + instrumented')
    else:
        Logger.base.info('🧠 [Cinema Booking] Using in-memory storage')

    async with anyio.create_task_group() as tg:
        if settings.SWEEPER_ENABLED:
            sweeper = HoldExpirySweeper(
                sweep_use_case=container.sweep_expired_holds_use_case(),
                interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
            )
            await sweeper.start(task_group=tg)

        Logger.base.info('✅ [Cinema Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Cinema Booking] Shutting down...')
        tg.cancel_scope.cancel()

    if settings.STORAGE_BACKEND == 'postgres':
        await dispose_engine()
        Logger.base.info('🗄️  [Cinema Booking] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Cinema Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
