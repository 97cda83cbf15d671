"""
API Module - Black Box Interface

Purpose: Shapes of the data the HTTP surface returns
Interface: Pydantic response models
Hidden: Nothing; routes live in watchdeck.main

The API layer only orchestrates - it contains no business logic.
"""

from .models import BackendHealth, ErrorResponse, HealthReport

__all__ = ["BackendHealth", "ErrorResponse", "HealthReport"]
