# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .account_repository import AccountRepository
from .ledger_repository import LedgerRepository
from .attendance_repository import AttendanceRepository
from .device_creation_repository import DeviceCreationRepository
from .favorites_repository import FavoritesRepository
from .discussion_repository import DiscussionRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "LedgerRepository",
    "AttendanceRepository",
    "DeviceCreationRepository",
    "FavoritesRepository",
    "DiscussionRepository",
]
