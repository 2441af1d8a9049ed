from .activity import Activity, ActivityStatus, Currency, Region
from .activity_comment import ActivityComment
from .activity_history import ActivityHistory, HistoryAction
from .calendar import Calendar
from .calendar_permission import AccessType, CalendarPermission
from .campaign import Campaign
from .campaign_permission import CampaignPermission
from .catalog import ActivityType, Vendor
from .notification import Notification, NotificationType, RelatedType
from .swimlane import Swimlane
from .user import User, UserRole

__all__ = [
    "AccessType",
    "Activity",
    "ActivityComment",
    "ActivityHistory",
    "ActivityStatus",
    "ActivityType",
    "Calendar",
    "CalendarPermission",
    "Campaign",
    "CampaignPermission",
    "Currency",
    "HistoryAction",
    "Notification",
    "NotificationType",
    "Region",
    "RelatedType",
    "Swimlane",
    "User",
    "UserRole",
    "Vendor",
]
