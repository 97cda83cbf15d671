"""
HTTP client for the monitoring backends.

One httpx.AsyncClient is kept per configured backend. Operations that target
a single backend select it by its name, passed as ``dc`` (datacenter).
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol
from urllib.parse import quote

import httpx

from ...config.provider import BackendEndpoint, Configuration
from ...errors import BackendError

logger = logging.getLogger(__name__)


class BackendClient(Protocol):
    """Protocol for the operations the dashboard routes forward to."""

    async def get_client(self, client_id: str, dc: str) -> Any:
        ...

    async def delete_client(self, client_id: str, dc: str) -> None:
        ...

    async def create_stash(self, data: Any) -> None:
        ...

    async def delete_stash(self, data: Any) -> None:
        ...

    async def resolve_event(self, data: Any) -> None:
        ...

    async def snapshot(self) -> Dict[str, Any]:
        ...

    async def health(self) -> Dict[str, Dict[str, str]]:
        ...

    async def close(self) -> None:
        ...


def _datacenter(data: Any) -> str:
    if not isinstance(data, dict) or not data.get("dc"):
        raise BackendError("Payload must be an object with a 'dc' property")
    return str(data["dc"])


def _without_dc(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k != "dc"}


class HttpBackendClient:
    """BackendClient talking to Sensu-style REST APIs over httpx."""

    def __init__(self, config: Configuration, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            config: Normalized configuration listing the backends
            transport: Optional httpx transport, used by tests
        """
        self._clients: Dict[str, httpx.AsyncClient] = {
            b.name: self._build_client(b, transport) for b in config.backends
        }

    @staticmethod
    def _build_client(
        endpoint: BackendEndpoint,
        transport: Optional[httpx.AsyncBaseTransport]
    ) -> httpx.AsyncClient:
        auth = None
        if endpoint.user and endpoint.password:
            auth = httpx.BasicAuth(endpoint.user, endpoint.password)
        return httpx.AsyncClient(
            base_url=endpoint.url,
            auth=auth,
            timeout=float(endpoint.timeout),
            verify=not endpoint.insecure,
            transport=transport,
        )

    def _client_for(self, dc: str) -> httpx.AsyncClient:
        client = self._clients.get(dc)
        if client is None:
            raise BackendError(f"Unknown datacenter {dc!r}")
        return client

    async def _request(self, dc: str, method: str, path: str, **kwargs) -> httpx.Response:
        client = self._client_for(dc)
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"{dc}: {method} {path} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"{dc}: {method} {path} failed: {e}") from e
        return response

    async def get_client(self, client_id: str, dc: str) -> Any:
        """Fetch a single client, with its history, from one backend."""
        path = f"/clients/{quote(client_id, safe='')}"
        client = (await self._request(dc, "GET", path)).json()
        history = (await self._request(dc, "GET", f"{path}/history")).json()
        if isinstance(client, dict):
            client["history"] = history
            client["dc"] = dc
        return client

    async def delete_client(self, client_id: str, dc: str) -> None:
        """Remove a client from one backend."""
        await self._request(dc, "DELETE", f"/clients/{quote(client_id, safe='')}")

    async def create_stash(self, data: Any) -> None:
        """Create a stash (silence) on the backend named by ``data['dc']``."""
        dc = _datacenter(data)
        await self._request(dc, "POST", "/stashes", json=_without_dc(data))

    async def delete_stash(self, data: Any) -> None:
        """Delete the stash at ``data['path']`` on the backend named by ``data['dc']``."""
        dc = _datacenter(data)
        path = data.get("path")
        if not path:
            raise BackendError("Payload must have a 'path' property")
        await self._request(dc, "DELETE", f"/stashes/{quote(str(path).lstrip('/'), safe='/')}")

    async def resolve_event(self, data: Any) -> None:
        """Resolve an event on the backend named by ``data['dc']``."""
        dc = _datacenter(data)
        await self._request(dc, "POST", "/resolve", json=_without_dc(data))

    async def _collect(self, dc: str) -> Dict[str, Any]:
        clients, events = await asyncio.gather(
            self._request(dc, "GET", "/clients"),
            self._request(dc, "GET", "/events"),
        )
        return {"clients": clients.json(), "events": events.json()}

    async def snapshot(self) -> Dict[str, Any]:
        """
        Gather clients and events from every backend.

        Backends that fail are listed with their error instead of data.
        """
        names = list(self._clients)
        results = await asyncio.gather(
            *(self._collect(name) for name in names), return_exceptions=True
        )

        snapshot: Dict[str, Any] = {"dc": [], "clients": [], "events": []}
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(f"Could not collect data from backend {name}: {result}")
                snapshot["dc"].append({"name": name, "status": "error", "error": str(result)})
                continue
            snapshot["dc"].append({"name": name, "status": "ok"})
            for key in ("clients", "events"):
                for item in result[key] or []:
                    if isinstance(item, dict):
                        item["dc"] = name
                    snapshot[key].append(item)
        return snapshot

    async def _probe(self, dc: str) -> Dict[str, str]:
        try:
            await self._request(dc, "GET", "/info")
        except BackendError as e:
            return {"output": str(e)}
        return {"output": "ok"}

    async def health(self) -> Dict[str, Dict[str, str]]:
        """Probe every backend's /info endpoint."""
        names = list(self._clients)
        results = await asyncio.gather(*(self._probe(name) for name in names))
        return dict(zip(names, results))

    async def close(self) -> None:
        """Close all underlying HTTP connections."""
        for client in self._clients.values():
            await client.aclose()
