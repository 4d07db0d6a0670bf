"""FastAPI dependencies for QuickCook API.

Provides:
- Database session dependency (from the datastore on app.state)
- Settings lookup
- Current identity resolution from the Authorization bearer token
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .db import get_db
from .errors import Unauthenticated
from .security import Identity, verify_token
from .settings import Settings

auth_scheme = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_settings", "get_current_identity"]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_identity(
    cred: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Resolve the caller from ``Authorization: Bearer <token>``.

    A missing header, a non-bearer scheme and a bad token all raise the same
    Unauthenticated error.
    """
    if cred is None or cred.scheme.lower() != "bearer" or not cred.credentials:
        raise Unauthenticated()
    return verify_token(cred.credentials, settings)
