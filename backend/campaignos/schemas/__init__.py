from .activity import (
    ActivityCreate,
    ActivityRead,
    ActivitySnapshot,
    ActivityUpdate,
    Attachment,
    BulkActivityOperation,
    BulkActivityResult,
)
from .calendar import (
    CalendarCreate,
    CalendarDetail,
    CalendarRead,
    CalendarReadWithAccess,
    CalendarUpdate,
)
from .campaign import CampaignCreate, CampaignRead, CampaignUpdate
from .catalog import CatalogEntryCreate, CatalogEntryRead, CatalogEntryUpdate
from .comment import CommentCreate, CommentRead, CommentUpdate
from .history import HistoryEntryRead, UndoRequest, UndoResult
from .notification import NotificationRead, NotificationUpdate
from .permission import (
    CalendarPermissionCreate,
    CalendarPermissionRead,
    CampaignPermissionCreate,
    CampaignPermissionRead,
    PermissionUpdate,
)
from .swimlane import SwimlaneCreate, SwimlaneRead, SwimlaneUpdate
from .user import (
    ProfileUpdate,
    RefreshTokenRequest,
    TokenPair,
    UserAdminUpdate,
    UserCreate,
    UserLogin,
    UserRead,
    UserSummary,
)

__all__ = [
    "ActivityCreate",
    "ActivityRead",
    "ActivitySnapshot",
    "ActivityUpdate",
    "Attachment",
    "BulkActivityOperation",
    "BulkActivityResult",
    "CalendarCreate",
    "CalendarDetail",
    "CalendarPermissionCreate",
    "CalendarPermissionRead",
    "CalendarRead",
    "CalendarReadWithAccess",
    "CalendarUpdate",
    "CampaignCreate",
    "CampaignPermissionCreate",
    "CampaignPermissionRead",
    "CampaignRead",
    "CampaignUpdate",
    "CatalogEntryCreate",
    "CatalogEntryRead",
    "CatalogEntryUpdate",
    "CommentCreate",
    "CommentRead",
    "CommentUpdate",
    "HistoryEntryRead",
    "NotificationRead",
    "NotificationUpdate",
    "PermissionUpdate",
    "ProfileUpdate",
    "RefreshTokenRequest",
    "SwimlaneCreate",
    "SwimlaneRead",
    "SwimlaneUpdate",
    "TokenPair",
    "UndoRequest",
    "UndoResult",
    "UserAdminUpdate",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "UserSummary",
]
