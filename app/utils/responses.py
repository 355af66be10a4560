"""
Standardized response utilities
"""

from typing import Optional
from fastapi.responses import JSONResponse

from app.schemas.common import ActionResult

def result_response(result: ActionResult, status_code: Optional[int] = None) -> JSONResponse:
    """Render an ActionResult; the status follows the outcome unless given"""
    return JSONResponse(
        content=result.model_dump(mode="json", by_alias=True),
        status_code=status_code or result.status_code
    )

def error_response(message: str, status_code: int = 400) -> JSONResponse:
    """Render a failure outside of an operation"""
    return result_response(ActionResult.fail(message, status_code))
