"""
Watchdeck API response models.

Request bodies for stash and event operations are forwarded to the backends
as-is, so only the shapes Watchdeck itself produces are modelled here.
"""

from typing import Dict

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every route."""

    error: str = Field(..., description="Human readable error message")
    status: int = Field(..., description="HTTP status code")


class BackendHealth(BaseModel):
    """Health of one monitoring backend."""

    output: str = Field(..., description="'ok' or the error seen when probing")


class HealthReport(BaseModel):
    """Health of the dashboard and every configured backend."""

    dashboard: str = Field("ok", description="Dashboard process status")
    backends: Dict[str, BackendHealth] = Field(default_factory=dict)
