"""
Auth API routes.

Sign-up, password and Google sign-in run client-side with the Firebase SDK;
the server only turns a verified ID token into a session cookie and back.
"""

import logging
from datetime import timedelta
from fastapi import APIRouter, Depends
from firebase_admin import exceptions as firebase_exceptions

from app.core.config import settings
from app.schemas.auth import Caller, SessionRequest
from app.schemas.common import ActionResult
from app.services import firebase_client
from app.utils.security import caller_from_id_token, get_current_caller, require_caller
from app.utils.responses import result_response, error_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/session")
async def create_session(body: SessionRequest):
    """Exchange a Firebase ID token for an HTTP-only session cookie"""
    caller = caller_from_id_token(body.id_token)
    if caller is None:
        return error_response("Invalid ID token", status_code=401)

    expires_in = timedelta(days=settings.SESSION_COOKIE_MAX_AGE_DAYS)
    try:
        session_cookie = firebase_client.create_session_cookie(body.id_token, expires_in)
    except firebase_exceptions.FirebaseError as e:
        logger.warning(f"Failed to create session cookie: {e}")
        return error_response("Failed to create session", status_code=401)

    response = result_response(ActionResult.ok({
        "message": "Successfully signed in",
        "uid": caller.uid,
        "email": caller.email
    }))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_cookie,
        max_age=int(expires_in.total_seconds()),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax"
    )
    return response

@router.post("/logout")
async def logout(caller: Caller | None = Depends(get_current_caller)):
    """Clear the session cookie and revoke the caller's refresh tokens"""
    if caller is not None:
        try:
            firebase_client.revoke_refresh_tokens(caller.uid)
        except firebase_exceptions.FirebaseError as e:
            logger.warning(f"Failed to revoke refresh tokens for {caller.uid}: {e}")

    response = result_response(ActionResult.ok({"message": "Signed out"}))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response

@router.get("/me")
async def me(caller: Caller = Depends(require_caller)):
    """Return the resolved caller"""
    return result_response(ActionResult.ok(caller))
