"""ORM models package."""
from .activity_log import ActivityAction, ActivityLog
from .api_key import ApiKey
from .backup import SNAPSHOT_VERSION, Backup, BackupFrequency, BackupSchedule, BackupStatus
from .base import Base
from .blacklist import BlacklistCategory, BlacklistEntry, BlacklistSeverity, PaymentStatus
from .discipline import DisciplineRecord, DisciplineStatus, PenaltyType
from .inventory import InventoryItem, WithdrawItem
from .leave import Leave, LeaveStatus, LeaveType
from .notification import Notification, NotificationPriority, NotificationType
from .user import User, UserRole

__all__ = [
    "ActivityAction",
    "ActivityLog",
    "ApiKey",
    "Backup",
    "BackupFrequency",
    "BackupSchedule",
    "BackupStatus",
    "Base",
    "BlacklistCategory",
    "BlacklistEntry",
    "BlacklistSeverity",
    "DisciplineRecord",
    "DisciplineStatus",
    "InventoryItem",
    "Leave",
    "LeaveStatus",
    "LeaveType",
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "PaymentStatus",
    "PenaltyType",
    "SNAPSHOT_VERSION",
    "User",
    "UserRole",
    "WithdrawItem",
]
