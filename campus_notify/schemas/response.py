from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Generic API response model for consistent output."""
    success: bool = Field(True, description="Whether the request succeeded.")
    message: Optional[str] = Field(None, description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The actual data returned by the API, if any.")

class CountResult(BaseModel):
    count: int

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    success: bool = Field(False, description="Always false for errors")
    code: str = Field(..., description="Error code for client handling")
    message: str = Field(..., description="Human-readable error message")
    errors: Optional[Any] = Field(None, description="Field-level validation errors")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    timestamp: str = Field(..., description="ISO 8601 timestamp of error")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Unique request identifier for debugging")
