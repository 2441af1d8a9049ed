"""Typed error outcomes raised by the authorization and history core.

Every error maps to an HTTP status; ``campaignos.main`` renders them as
``{"detail": message}`` so callers never see unclassified storage errors.
"""

from __future__ import annotations

from fastapi import status


class CampaignOSError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotAuthenticated(CampaignOSError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class AccessDenied(CampaignOSError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class ResourceNotFound(CampaignOSError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class PermissionConflict(CampaignOSError):
    """A grant for the same user and resource already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "User already has access to this resource"


class ForeignKeyViolation(CampaignOSError):
    """A restored row points at a parent that no longer exists."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Referenced parent record no longer exists"


class InvalidUndo(CampaignOSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Nothing to undo"


class ValidationFailed(CampaignOSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"
