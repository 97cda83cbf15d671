"""
Backend Module - Black Box Interface

Purpose: Talk to the monitoring backends on behalf of the dashboard
Interface: BackendClient protocol, HttpBackendClient implementation
Hidden: Per-backend HTTP clients, upstream URL layout, fan-out

Can be replaced with any object implementing BackendClient.
"""

from .client import BackendClient, HttpBackendClient

__all__ = ["BackendClient", "HttpBackendClient"]
