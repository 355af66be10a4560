"""
Common Pydantic schemas
"""

from typing import Any, Optional
from pydantic import BaseModel, Field

class ActionResult(BaseModel):
    """Uniform outcome of every operation: a payload on success, one message on failure"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    status_code: int = Field(200, exclude=True)

    @classmethod
    def ok(cls, data: Any = None, status_code: int = 200) -> "ActionResult":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(cls, error: str, status_code: int = 400) -> "ActionResult":
        return cls(success=False, error=error, status_code=status_code)
