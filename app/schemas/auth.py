"""
Auth-related Pydantic schemas
"""

from typing import Optional
from pydantic import BaseModel

class Caller(BaseModel):
    """The authenticated user an operation runs on behalf of"""
    uid: str
    email: Optional[str] = None

class SessionRequest(BaseModel):
    """Exchange a Firebase ID token for a session cookie"""
    id_token: str
