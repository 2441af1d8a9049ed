from .config import settings
from .security import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_subject,
    get_password_hash,
    issue_token_pair,
    verify_password,
)

__all__ = [
    "settings",
    "TokenType",
    "create_access_token",
    "create_refresh_token",
    "decode_subject",
    "get_password_hash",
    "issue_token_pair",
    "verify_password",
]
