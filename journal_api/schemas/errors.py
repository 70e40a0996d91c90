"""
Journal API: Error and Health Schemas
=====================================

What:  Documented response shapes shared across routes.

Every error, whatever raised it, is rendered as ErrorResponse:
    {"code": 404, "msg": "Entry does not exist", "details": null}
Validation failures fill `details` with one ErrorDetail per failed rule.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    location: str = Field(description="Request part: body, query, path or header")
    msg: str = Field(description="What is wrong with the field")
    param: str = Field(description="Dotted path of the offending field")


class ErrorResponse(BaseModel):
    code: int = Field(description="HTTP status code", examples=[400])
    msg: str = Field(description="Static summary of the error", examples=["Malformed request"])
    details: Optional[List[ErrorDetail]] = Field(
        default=None,
        description="Per-field failures; null unless the request was malformed",
    )


class HealthResponse(BaseModel):
    """GET /health: process and database status."""

    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the module was loaded")
