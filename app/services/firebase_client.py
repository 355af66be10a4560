"""
Firebase initialization and auth helpers
"""

from __future__ import annotations

import json
from datetime import timedelta
from functools import lru_cache
from typing import Any
import base64
import os

import firebase_admin
from firebase_admin import auth, credentials

from app.core.config import settings


class FirebaseNotConfigured(RuntimeError):
    """Neither credentials nor a project id are available"""


@lru_cache(maxsize=1)
def get_firebase_app() -> firebase_admin.App:
    """Initialize and return the cached Firebase app.

    Credentials come from one of: FIREBASE_CREDENTIALS_JSON, FIREBASE_CREDENTIALS_B64, FIREBASE_CREDENTIALS_FILE.
    Without credentials only FIREBASE_PROJECT_ID is used, which is enough to verify ID tokens.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    info: dict[str, Any] | None = None
    if settings.FIREBASE_CREDENTIALS_JSON:
        info = json.loads(settings.FIREBASE_CREDENTIALS_JSON)
    elif settings.FIREBASE_CREDENTIALS_B64:
        decoded = base64.b64decode(settings.FIREBASE_CREDENTIALS_B64).decode("utf-8")
        info = json.loads(decoded)
    elif settings.FIREBASE_CREDENTIALS_FILE and os.path.exists(settings.FIREBASE_CREDENTIALS_FILE):
        with open(settings.FIREBASE_CREDENTIALS_FILE, "r", encoding="utf-8") as f:
            info = json.load(f)

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None

    if info:
        return firebase_admin.initialize_app(credentials.Certificate(info), options)

    if not options:
        raise FirebaseNotConfigured("Firebase is not configured. Set FIREBASE_PROJECT_ID or one of FIREBASE_CREDENTIALS_FILE, FIREBASE_CREDENTIALS_JSON, FIREBASE_CREDENTIALS_B64")

    return firebase_admin.initialize_app(options=options)


def verify_id_token(id_token: str) -> dict[str, Any]:
    return auth.verify_id_token(id_token, app=get_firebase_app())


def create_session_cookie(id_token: str, expires_in: timedelta) -> str:
    cookie = auth.create_session_cookie(id_token, expires_in=expires_in, app=get_firebase_app())
    return cookie.decode("utf-8") if isinstance(cookie, bytes) else cookie


def verify_session_cookie(session_cookie: str) -> dict[str, Any]:
    return auth.verify_session_cookie(session_cookie, check_revoked=True, app=get_firebase_app())


def revoke_refresh_tokens(uid: str) -> None:
    auth.revoke_refresh_tokens(uid, app=get_firebase_app())
