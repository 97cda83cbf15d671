#!/usr/bin/env python3
"""
Watchdeck - Main Entry Point

This is the thin orchestration layer that:
1. Loads and normalizes configuration
2. Builds the authentication strategy and backend client
3. Runs the dashboard server

All business logic is in the modules, following black box principles.
"""

import argparse
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from watchdeck.config.provider import Configuration, EnvConfigProvider, FileConfigProvider
from watchdeck.errors import BackendError, ConfigError
from watchdeck.logging_config import configure_logging, get_logging_config
from watchdeck.modules.api import BackendHealth, ErrorResponse, HealthReport
from watchdeck.modules.auth import AuthStrategy
from watchdeck.modules.auth.factory import AuthFactory
from watchdeck.modules.auth.strategies import format_error
from watchdeck.modules.backend import BackendClient, HttpBackendClient
from watchdeck.modules.config import build_public_config, normalize_config, to_public_dict

logger = logging.getLogger(__name__)


def load_configuration(path: str) -> Configuration:
    """
    Read and normalize the configuration file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    logger.info(f"Loading configuration file {path}")
    raw = FileConfigProvider(path).load()
    return normalize_config(raw)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=format_error(status_code, message))


def _backend(request: Request) -> BackendClient:
    return request.app.state.backend


def _client_params(request: Request):
    client_id = request.query_params.get("id")
    dc = request.query_params.get("dc")
    if not client_id or not dc:
        return None
    return client_id, dc


async def _json_body(request: Request):
    try:
        return await request.json()
    except ValueError:
        return None


# Route handlers (protected)


async def get_client(request: Request):
    """Fetch one client from the backend it lives on."""
    params = _client_params(request)
    if params is None:
        return _error(400, "Parameters 'id' and 'dc' are required")
    client_id, dc = params
    return await _backend(request).get_client(client_id, dc)


async def delete_client(request: Request):
    """Remove a client from its backend."""
    params = _client_params(request)
    if params is None:
        return _error(400, "Parameters 'id' and 'dc' are required")
    client_id, dc = params
    await _backend(request).delete_client(client_id, dc)
    return Response(status_code=200)


async def post_event(request: Request):
    """Resolve an event."""
    data = await _json_body(request)
    if data is None:
        return _error(400, "Could not decode body")
    await _backend(request).resolve_event(data)
    return Response(status_code=200)


async def post_stash(request: Request):
    """Create a stash."""
    data = await _json_body(request)
    if data is None:
        return _error(400, "Could not decode body")
    await _backend(request).create_stash(data)
    return Response(status_code=200)


async def delete_stash(request: Request):
    """Delete a stash."""
    data = await _json_body(request)
    if data is None:
        return _error(400, "Could not decode body")
    await _backend(request).delete_stash(data)
    return Response(status_code=200)


async def get_config(request: Request):
    """Serve the redacted configuration."""
    return request.app.state.public_config_document


async def get_sensu(request: Request):
    """Serve clients and events gathered from every backend."""
    return await _backend(request).snapshot()


async def static_assets(request: Request):
    """Serve the dashboard's static files."""
    path = request.path_params.get("path", "")
    path = os.path.normpath(os.path.join(*path.split("/")))
    return await request.app.state.static_files.get_response(path, request.scope)


# Health handlers (never authenticated)


async def _health_report(request: Request) -> HealthReport:
    backends = await _backend(request).health()
    return HealthReport(
        dashboard="ok",
        backends={name: BackendHealth(**status) for name, status in backends.items()},
    )


async def health(request: Request):
    """Health of the dashboard and every backend."""
    return await _health_report(request)


async def health_component(request: Request):
    """Health of one part: ``dashboard`` or ``backends``."""
    component = request.path_params["component"]
    report = await _health_report(request)
    if component == "dashboard":
        return report.dashboard
    if component == "backends":
        return {name: status.model_dump() for name, status in report.backends.items()}
    return _error(404, f"Unknown health component {component!r}")


PROTECTED_ROUTES = (
    ("/get_client", get_client, ["GET"]),
    ("/delete_client", delete_client, ["GET", "DELETE"]),
    ("/post_event", post_event, ["POST"]),
    ("/post_stash", post_stash, ["POST"]),
    ("/delete_stash", delete_stash, ["POST", "DELETE"]),
    ("/get_config", get_config, ["GET"]),
    ("/get_sensu", get_sensu, ["GET"]),
)

# Documented on every protected route
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing parameters or undecodable body"},
    401: {"model": ErrorResponse, "description": "Missing or rejected Basic credentials"},
    500: {"model": ErrorResponse, "description": "A monitoring backend failed"},
}


async def backend_error_handler(request: Request, exc: BackendError):
    """Handle failures reported by a monitoring backend."""
    logger.error(f"Backend error on {request.url.path}: {exc}")
    return _error(500, str(exc))


def create_app(
    config: Configuration,
    backend: BackendClient,
    public_path: str = "./public",
    strategy: Optional[AuthStrategy] = None,
) -> FastAPI:
    """
    Compose the dashboard application.

    Configuration, the public projection and the auth strategy are built here
    once and only read afterwards.

    Args:
        config: Normalized configuration
        backend: Client for the monitoring backends
        public_path: Directory with the dashboard's static files
        strategy: Authentication strategy; built from config if omitted

    Returns:
        FastAPI application
    """
    if strategy is None:
        strategy = AuthFactory.build(config.dashboard)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Watchdeck is now listening on {config.dashboard.host}:{config.dashboard.port}"
        )
        yield
        logger.info("Shutting down Watchdeck...")
        await backend.close()

    app = FastAPI(
        title="Watchdeck",
        description="Dashboard for Sensu-style monitoring backends",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.public_config_document = to_public_dict(build_public_config(config))
    app.state.backend = backend
    app.state.auth_strategy = strategy
    app.state.static_files = StaticFiles(directory=public_path, html=True, check_dir=False)

    app.add_exception_handler(BackendError, backend_error_handler)

    app.add_api_route("/health", health, methods=["GET"], response_model=HealthReport)
    app.add_api_route(
        "/health/{component}",
        health_component,
        methods=["GET"],
        responses={404: {"model": ErrorResponse, "description": "Unknown component"}},
    )

    for path, handler, methods in PROTECTED_ROUTES:
        app.add_api_route(
            path, strategy.decorate(handler), methods=methods, responses=ERROR_RESPONSES
        )

    # Registered last so it only catches what the routes above do not
    app.add_api_route(
        "/{path:path}",
        strategy.decorate(static_assets),
        methods=["GET", "HEAD"],
        responses={401: ERROR_RESPONSES[401]},
    )

    return app


def main(argv=None) -> int:
    """Command-line entry point."""
    env = EnvConfigProvider().get_env_settings()

    parser = argparse.ArgumentParser(description="Watchdeck monitoring dashboard")
    parser.add_argument("-c", "--config", default=env.config_path, help="Path to the configuration file")
    parser.add_argument("-p", "--public", default=env.public_path, help="Path to the static files")
    parser.add_argument("--log-level", default=env.log_level, help="Logging level")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        config = load_configuration(args.config)
    except ConfigError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1

    app = create_app(config, HttpBackendClient(config), public_path=args.public)

    uvicorn.run(
        app,
        host=config.dashboard.host,
        port=config.dashboard.port,
        log_level=args.log_level.lower(),
        log_config=get_logging_config(args.log_level),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
