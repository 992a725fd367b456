"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.state.screening_lock import ScreeningLockRegistry
from src.service.cinema_booking.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.cinema_booking.app.service.booking_coordinator import BookingCoordinator
from src.service.cinema_booking.driven_adapter.gateway.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.cinema_booking.driven_adapter.memory.payment_repo_memory_impl import (
    PaymentRepoMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.reservation_ledger_memory_impl import (
    ReservationLedgerMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.screening_catalog_memory_impl import (
    ScreeningCatalogMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.memory.seat_inventory_memory_impl import (
    SeatInventoryMemoryImpl,
)
from src.service.cinema_booking.driven_adapter.notification.log_ticket_notifier_impl import (
    LogTicketNotifierImpl,
)
from src.service.cinema_booking.driven_adapter.repo.payment_repo_sqlalchemy_impl import (
    PaymentRepoSqlalchemyImpl,
)
from src.service.cinema_booking.driven_adapter.repo.reservation_ledger_sqlalchemy_impl import (
    ReservationLedgerSqlalchemyImpl,
)
from src.service.cinema_booking.driven_adapter.repo.screening_catalog_sqlalchemy_impl import (
    ScreeningCatalogSqlalchemyImpl,
)
from src.service.cinema_booking.driven_adapter.repo.seat_inventory_sqlalchemy_impl import (
    SeatInventorySqlalchemyImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (only touched when STORAGE_BACKEND=postgres)
    database = providers.Singleton(Database)

    # Storage adapters, chosen by STORAGE_BACKEND
    screening_catalog = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(ScreeningCatalogMemoryImpl),
        postgres=providers.Singleton(
            ScreeningCatalogSqlalchemyImpl, session_factory=database.provided.session
        ),
    )
    seat_inventory = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(SeatInventoryMemoryImpl),
        postgres=providers.Singleton(
            SeatInventorySqlalchemyImpl, session_factory=database.provided.session
        ),
    )
    reservation_ledger = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(ReservationLedgerMemoryImpl),
        postgres=providers.Singleton(
            ReservationLedgerSqlalchemyImpl, session_factory=database.provided.session
        ),
    )
    payment_repo = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        memory=providers.Singleton(PaymentRepoMemoryImpl),
        postgres=providers.Singleton(
            PaymentRepoSqlalchemyImpl, session_factory=database.provided.session
        ),
    )

    # External collaborators
    payment_gateway = providers.Singleton(
        MockPaymentGatewayImpl,
        declined_card_suffix=config_service.provided.MOCK_DECLINED_CARD_SUFFIX,
    )
    ticket_notifier = providers.Singleton(LogTicketNotifierImpl)

    # Per-screening locks shared by every coordinator call in this process
    screening_lock_registry = providers.Singleton(ScreeningLockRegistry)

    booking_coordinator = providers.Singleton(
        BookingCoordinator,
        seat_inventory=seat_inventory,
        reservation_ledger=reservation_ledger,
        payment_repo=payment_repo,
        screening_catalog=screening_catalog,
        lock_registry=screening_lock_registry,
        hold_window_minutes=config_service.provided.HOLD_WINDOW_MINUTES,
        max_seats_per_reservation=config_service.provided.MAX_SEATS_PER_RESERVATION,
        seat_row_labels=config_service.provided.SEAT_ROW_LABELS,
        confirmation_code_prefix=config_service.provided.CONFIRMATION_CODE_PREFIX,
        confirmation_code_length=config_service.provided.CONFIRMATION_CODE_LENGTH,
        repair_purges_reservation_history=config_service.provided.REPAIR_PURGES_RESERVATION_HISTORY,
    )

    sweep_expired_holds_use_case = providers.Singleton(
        SweepExpiredHoldsUseCase,
        reservation_ledger=reservation_ledger,
        booking_coordinator=booking_coordinator,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
