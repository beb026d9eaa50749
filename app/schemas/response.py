"""
app/schemas/response.py

Purpose: Envelopes shared by every router
"""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """
    Body of every non-2xx response.
    """
    error: str
    code: str
    details: Optional[Any] = None


class SuccessResponse(BaseModel):
    """Plain acknowledgement for mutations that return no resource."""
    success: bool = True
    message: Optional[str] = None
