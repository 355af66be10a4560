"""
Caller resolution from Firebase ID tokens and session cookies
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import exceptions as firebase_exceptions

from app.core.config import settings
from app.schemas.auth import Caller
from app.services import firebase_client

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Malformed tokens raise ValueError, every verification failure is a FirebaseError
REJECTED_CREDENTIALS = (ValueError, firebase_exceptions.FirebaseError)


def _caller_from_claims(claims: Dict[str, Any]) -> Caller:
    return Caller(uid=claims["uid"], email=claims.get("email"))


def caller_from_id_token(id_token: str) -> Optional[Caller]:
    """Verify a Firebase ID token; None when it is not acceptable"""
    try:
        return _caller_from_claims(firebase_client.verify_id_token(id_token))
    except firebase_client.FirebaseNotConfigured as e:
        logger.error(f"Cannot verify ID token: {e}")
        return None
    except REJECTED_CREDENTIALS as e:
        logger.warning(f"Rejected ID token: {e}")
        return None


def caller_from_session_cookie(session_cookie: str) -> Optional[Caller]:
    try:
        return _caller_from_claims(firebase_client.verify_session_cookie(session_cookie))
    except firebase_client.FirebaseNotConfigured as e:
        logger.error(f"Cannot verify session cookie: {e}")
        return None
    except REJECTED_CREDENTIALS as e:
        logger.warning(f"Rejected session cookie: {e}")
        return None


def get_current_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Caller]:
    """Resolve the caller from a bearer token, then the session cookie. None means no caller."""
    if credentials and credentials.credentials:
        return caller_from_id_token(credentials.credentials)

    session_cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if session_cookie:
        return caller_from_session_cookie(session_cookie)

    return None


def require_caller(caller: Optional[Caller] = Depends(get_current_caller)) -> Caller:
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return caller
