"""
Watchdeck - Monitoring Dashboard Server

A small dashboard that fronts one or more Sensu-style monitoring APIs.

Architecture:
- Each module is self-contained with clear interfaces
- Configuration is normalized once at startup and never mutated afterwards
- Authentication is a strategy chosen once and wrapped around every route
- All communication through defined interfaces

Modules:
- auth: Credential files, password verification, Basic auth strategies
- config: Normalization, validation and the redacted public view
- backend: Client for the monitoring backends
- api: Response models for the HTTP surface
"""

__version__ = "1.0.0"
