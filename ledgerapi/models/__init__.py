# 테이블 메타데이터 등록을 위해 모든 모델을 임포트
from .base import Base
from .account import Account, AccountStatus
from .ledger import LedgerEntry, LedgerKind
from .attendance import DailyAttendance, AttendanceSummary
from .device_creation import DeviceCreationEvent
from .favorite import Favorite
from .discussion import Comment, Discussion, ParticipatedDiscussion, PopularDiscussionCache

__all__ = [
    "Base",
    "Account",
    "AccountStatus",
    "LedgerEntry",
    "LedgerKind",
    "DailyAttendance",
    "AttendanceSummary",
    "DeviceCreationEvent",
    "Favorite",
    "Comment",
    "Discussion",
    "ParticipatedDiscussion",
    "PopularDiscussionCache",
]
