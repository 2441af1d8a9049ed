from fastapi import APIRouter

from campaignos.api.v1 import (
    activities,
    activity_comments,
    activity_history,
    auth,
    calendar_permissions,
    calendars,
    campaign_permissions,
    campaigns,
    health,
    notifications,
    swimlanes,
    users,
)
from campaignos.api.v1.catalog import activity_types_router, vendors_router

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(calendars.router, prefix="/calendars", tags=["calendars"])
api_router.include_router(
    calendar_permissions.router, prefix="/calendar-permissions", tags=["calendar-permissions"]
)
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
api_router.include_router(
    campaign_permissions.router, prefix="/campaign-permissions", tags=["campaign-permissions"]
)
api_router.include_router(swimlanes.router, prefix="/swimlanes", tags=["swimlanes"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(
    activity_history.router, prefix="/activity-history", tags=["activity-history"]
)
api_router.include_router(
    activity_comments.router, prefix="/activity-comments", tags=["activity-comments"]
)
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(activity_types_router, prefix="/activity-types", tags=["catalog"])
api_router.include_router(vendors_router, prefix="/vendors", tags=["catalog"])
