from dependency_injector import containers, providers

from ledgerapi.config import settings
from ledgerapi.core.security import IdentityResolver
from ledgerapi.services.account_service import AccountService
from ledgerapi.services.attendance_service import AttendanceService
from ledgerapi.services.discussion_service import DiscussionService
from ledgerapi.services.favorites_service import FavoritesService
from ledgerapi.services.ledger_service import LedgerService
from ledgerapi.services.recovery_service import RecoveryService
from ledgerapi.services.registration_service import RegistrationService
from ledgerapi.utils.timezone_utils import get_kst_now


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration (read once at process start)."""

    config = providers.Object(settings)


class CoreModule(containers.DeclarativeContainer):
    """Process-wide collaborators shared by every request."""

    config = providers.DependenciesContainer()

    identity = providers.Singleton(
        IdentityResolver.from_settings, settings=config.config
    )
    clock = providers.Object(get_kst_now)


class ServiceModule(containers.DeclarativeContainer):
    """
    Service layer dependencies.

    The request-scoped DB session is supplied by the caller:
    ``container.services.ledger_service(db=db)``.
    """

    config = providers.DependenciesContainer()
    core = providers.DependenciesContainer()

    registration_service = providers.Factory(
        RegistrationService,
        settings=config.config,
        identity=core.identity,
        clock=core.clock,
    )
    account_service = providers.Factory(
        AccountService,
        settings=config.config,
        identity=core.identity,
        clock=core.clock,
    )
    ledger_service = providers.Factory(
        LedgerService, settings=config.config, clock=core.clock
    )
    attendance_service = providers.Factory(
        AttendanceService, settings=config.config, clock=core.clock
    )
    recovery_service = providers.Factory(
        RecoveryService,
        settings=config.config,
        identity=core.identity,
        clock=core.clock,
    )
    favorites_service = providers.Factory(FavoritesService, settings=config.config)
    discussion_service = providers.Factory(
        DiscussionService, settings=config.config, clock=core.clock
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(modules=["ledgerapi.deps"])

    config = providers.Container(ConfigModule)
    core = providers.Container(CoreModule, config=config)
    services = providers.Container(ServiceModule, config=config, core=core)
