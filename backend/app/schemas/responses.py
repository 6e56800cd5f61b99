"""
Response envelopes shared by every API route.

Routes answer ``{"success": true, "data": ...}``; failures rendered by
the application's exception handlers answer ``{"success": false, "error": ...}``.
"""
from typing import Generic, TypeVar, Optional
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope around a route's payload."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        return cls(success=True, data=data)


class ErrorResponse(BaseModel):
    """Body returned by the store error handler."""
    success: bool = False
    error: str
