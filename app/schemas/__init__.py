"""Schema package exports."""
from .activity_log import ActivityAnalytics, ActivityLogPage, ActivityLogPurgeResult, ActivityLogRead
from .backup import (
    BackupHistoryPage,
    BackupRequest,
    BackupResponse,
    BackupSnapshot,
    BackupSummary,
    RestoreRequest,
    RestoreResponse,
    ScheduleCreate,
    ScheduleList,
    ScheduleRead,
    ScheduleResponse,
    ScheduleUpdate,
)
from .base import CamelModel, MessageResponse, PageParams, Pagination
from .blacklist import BlacklistCreate, BlacklistPage, BlacklistRead, BlacklistUpdate, PaymentUpdate
from .discipline import DisciplineCreate, DisciplinePage, DisciplineRead, DisciplineUpdate
from .inventory import (
    InventoryCreate,
    InventoryPage,
    InventoryRead,
    InventoryUpdate,
    WithdrawCreate,
    WithdrawPage,
    WithdrawRead,
    WithdrawResponse,
    WithdrawUpdate,
)
from .leave import LeaveCreate, LeavePage, LeaveRead, LeaveReview
from .notification import MarkAllReadResult, NotificationCreate, NotificationPage, NotificationRead
from .user import UserCreate, UserPage, UserRead, UserUpdate

__all__ = [
    "ActivityAnalytics",
    "ActivityLogPage",
    "ActivityLogPurgeResult",
    "ActivityLogRead",
    "BackupHistoryPage",
    "BackupRequest",
    "BackupResponse",
    "BackupSnapshot",
    "BackupSummary",
    "BlacklistCreate",
    "BlacklistPage",
    "BlacklistRead",
    "BlacklistUpdate",
    "CamelModel",
    "DisciplineCreate",
    "DisciplinePage",
    "DisciplineRead",
    "DisciplineUpdate",
    "InventoryCreate",
    "InventoryPage",
    "InventoryRead",
    "InventoryUpdate",
    "LeaveCreate",
    "LeavePage",
    "LeaveRead",
    "LeaveReview",
    "MarkAllReadResult",
    "MessageResponse",
    "NotificationCreate",
    "NotificationPage",
    "NotificationRead",
    "PageParams",
    "Pagination",
    "PaymentUpdate",
    "RestoreRequest",
    "RestoreResponse",
    "ScheduleCreate",
    "ScheduleList",
    "ScheduleRead",
    "ScheduleResponse",
    "ScheduleUpdate",
    "UserCreate",
    "UserPage",
    "UserRead",
    "UserUpdate",
    "WithdrawCreate",
    "WithdrawPage",
    "WithdrawRead",
    "WithdrawResponse",
    "WithdrawUpdate",
]
