"""
Pydantic response schemas shared by the routers.

Document the external contract in the OpenAPI schema.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Application health status."""

    status: str = Field(..., examples=["ok"])
    version: str


class FieldErrorSchema(BaseModel):
    """One failed validation rule."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    status: str = Field("error", examples=["error"])
    message: Union[str, list[FieldErrorSchema]]
    stack: Optional[str] = None


ERROR_RESPONSES: dict[Union[int, str], dict] = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Server error"},
}
