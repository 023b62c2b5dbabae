from typing import Callable

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.orm import Session

from ledgerapi.containers import Container
from ledgerapi.database.session import get_db

# Services
from ledgerapi.services.account_service import AccountService
from ledgerapi.services.attendance_service import AttendanceService
from ledgerapi.services.discussion_service import DiscussionService
from ledgerapi.services.favorites_service import FavoritesService
from ledgerapi.services.ledger_service import LedgerService
from ledgerapi.services.recovery_service import RecoveryService
from ledgerapi.services.registration_service import RegistrationService


@inject
def get_registration_service(
    db: Session = Depends(get_db),
    factory: Callable[..., RegistrationService] = Depends(
        Provide[Container.services.registration_service.provider]
    ),
) -> RegistrationService:
    return factory(db=db)


@inject
def get_account_service(
    db: Session = Depends(get_db),
    factory: Callable[..., AccountService] = Depends(
        Provide[Container.services.account_service.provider]
    ),
) -> AccountService:
    return factory(db=db)


@inject
def get_ledger_service(
    db: Session = Depends(get_db),
    factory: Callable[..., LedgerService] = Depends(
        Provide[Container.services.ledger_service.provider]
    ),
) -> LedgerService:
    return factory(db=db)


@inject
def get_attendance_service(
    db: Session = Depends(get_db),
    factory: Callable[..., AttendanceService] = Depends(
        Provide[Container.services.attendance_service.provider]
    ),
) -> AttendanceService:
    return factory(db=db)


@inject
def get_recovery_service(
    db: Session = Depends(get_db),
    factory: Callable[..., RecoveryService] = Depends(
        Provide[Container.services.recovery_service.provider]
    ),
) -> RecoveryService:
    return factory(db=db)


@inject
def get_favorites_service(
    db: Session = Depends(get_db),
    factory: Callable[..., FavoritesService] = Depends(
        Provide[Container.services.favorites_service.provider]
    ),
) -> FavoritesService:
    return factory(db=db)


@inject
def get_discussion_service(
    db: Session = Depends(get_db),
    factory: Callable[..., DiscussionService] = Depends(
        Provide[Container.services.discussion_service.provider]
    ),
) -> DiscussionService:
    return factory(db=db)
