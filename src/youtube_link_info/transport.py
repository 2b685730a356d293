"""Async HTTP transport for ``MetadataRequest`` objects.

Subscribed to the ``http.request`` bus event, each request is fetched in
its own task on the running event loop and settled exactly once: the
response text resolves it whatever the status code (the Data API puts
its error details in the body), any ``httpx.HTTPError`` rejects it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .errors import TransportError
from .models import MetadataRequest
from .plugin import REQUEST_EVENT

logger = logging.getLogger(__name__)


class HttpTransport:
    """Dispatches metadata requests through a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._tasks: set[asyncio.Task[None]] = set()

    def register(self, bus: Any) -> None:
        """Handle ``http.request`` events from *bus*."""
        bus.on(REQUEST_EVENT, self.dispatch)

    def dispatch(self, request: MetadataRequest) -> asyncio.Task[None]:
        """Start fetching *request* in the background and return immediately.

        Must be called from a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self._run(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def fetch(self, url: str) -> str:
        """GET *url* and return the response text.

        Raises:
            TransportError: If the request could not be completed.
        """
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        if response.status_code >= 400:
            logger.debug("HTTP %d from %s", response.status_code, response.request.url.host)
        return response.text

    async def _run(self, request: MetadataRequest) -> None:
        try:
            body = await self.fetch(request.url)
        except TransportError as exc:
            request.reject(str(exc))
        else:
            request.resolve(body)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every dispatched request has settled."""
        while self._tasks:
            results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Request task failed: %r", result)

    async def aclose(self) -> None:
        """Wait for outstanding requests, then close the client if we created it."""
        await self.drain()
        if self._owns_client:
            await self._client.aclose()
