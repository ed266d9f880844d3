"""
HTTP transport for the Marvel API (httpx).

MarvelService maps each endpoint to a Call. A Call is executed once, either
awaited directly or enqueued on the running event loop with a RemoteCallback.
Network code stays here, authentication and routing live in the dispatcher.
"""

import asyncio
import time
from typing import Any, Callable, Dict, Optional, Set

import httpx
import structlog

from .callback import RemoteCallback
from .errors import CallCancelledError, DecodeError, HttpStatusError, MarvelApiError, NetworkError
from .models import character_list_decoder, comic_list_decoder

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://gateway.marvel.com/v1/public/"


class Call:
    """One prepared GET request. Not reusable."""

    def __init__(self, client: httpx.AsyncClient, path: str, params: Dict[str, Any],
                 decoder: Callable[[Any], Any], pending: Set[asyncio.Task] = None):
        self.path = path
        # Unset query parameters are left off the URL, not sent empty
        self.params = {k: v for k, v in params.items() if v is not None}
        self._client = client
        self._decoder = decoder
        self._pending = pending if pending is not None else set()
        self._task: Optional[asyncio.Task] = None
        self.executed = False

    @property
    def url(self) -> str:
        return str(self._client.build_request("GET", self.path, params=self.params).url)

    def _mark_executed(self):
        if self.executed:
            raise RuntimeError(f"Call to {self.path} already executed")
        self.executed = True

    async def execute(self) -> Any:
        """Send the request and return the decoded payload, or raise a MarvelApiError."""
        self._mark_executed()
        return await self._perform()

    def enqueue(self, callback: RemoteCallback) -> asyncio.Task:
        """Run the call on the current event loop and report the outcome to callback."""
        loop = asyncio.get_running_loop()
        self._mark_executed()
        self._task = loop.create_task(self._perform())
        self._pending.add(self._task)
        self._task.add_done_callback(self._pending.discard)
        self._task.add_done_callback(lambda task: self._deliver(task, callback))
        return self._task

    def cancel(self) -> bool:
        if self._task is None:
            return False
        return self._task.cancel()

    @property
    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    def _deliver(self, task: asyncio.Task, callback: RemoteCallback):
        if task.cancelled():
            outcome, value = callback.on_failed, CallCancelledError(f"Call to {self.path} cancelled")
        elif task.exception() is not None:
            error = task.exception()
            if not isinstance(error, MarvelApiError):
                logger.error("unexpected_call_error", path=self.path, error=repr(error))
                wrapped = MarvelApiError(f"Unexpected error: {error}")
                wrapped.__cause__ = error
                error = wrapped
            outcome, value = callback.on_failed, error
        else:
            outcome, value = callback.on_success, task.result()

        try:
            outcome(value)
        except Exception as e:
            logger.error("callback_error", path=self.path, callback=type(callback).__name__,
                         error=str(e), exc_info=True)

    async def _perform(self) -> Any:
        start_time = time.time()

        try:
            response = await self._client.get(self.path, params=self.params)
        except httpx.TimeoutException as e:
            logger.warning("request_timeout", path=self.path, error=str(e))
            raise NetworkError(f"Timeout: {e}", url=self.path) from e
        except httpx.TransportError as e:
            logger.warning("connection_error", path=self.path, error=str(e))
            raise NetworkError(f"Connection error: {e}", url=self.path) from e

        fetch_time = time.time() - start_time

        if not response.is_success:
            error = self._status_error(response)
            logger.info("request_rejected",
                        path=self.path,
                        status_code=error.status_code,
                        code=error.code,
                        message=error.message)
            raise error

        try:
            payload = self._decoder(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("response_decode_failed", path=self.path, error=repr(e))
            raise DecodeError(f"Unexpected response body for {self.path}: {e!r}") from e

        logger.debug("request_completed", path=self.path, status_code=response.status_code,
                     fetch_time=round(fetch_time, 3))
        return payload

    def _status_error(self, response: httpx.Response) -> HttpStatusError:
        """Error bodies are {"code": ..., "message"|"status": ...}; fall back to the reason phrase."""
        code = None
        message = response.reason_phrase
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = body.get('code')
            message = body.get('message') or body.get('status') or message
        return HttpStatusError(
            status_code=response.status_code,
            message=message,
            code=str(code) if code is not None else None,
            url=self.path,
        )


class MarvelService:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        user_agent: str = 'marvel-data/1.0',
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
        transport: httpx.AsyncBaseTransport = None,
    ):
        """Initialize the service with one pooled async client."""
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.timeout = timeout
        self.user_agent = user_agent
        self._pending: Set[asyncio.Task] = set()

        headers = {
            'User-Agent': self.user_agent,
            'Accept': 'application/json',
            'Accept-Encoding': 'gzip, deflate',
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers=headers,
            limits=httpx.Limits(max_connections=max_connections,
                                max_keepalive_connections=max_keepalive_connections),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config, transport: httpx.AsyncBaseTransport = None) -> 'MarvelService':
        fetcher = config.fetcher
        return cls(
            base_url=config.marvel.get('base_url') or DEFAULT_BASE_URL,
            timeout=float(fetcher.get('timeout', 30.0)),
            user_agent=fetcher.get('user_agent', 'marvel-data/1.0'),
            max_connections=fetcher.get('max_connections', 20),
            max_keepalive_connections=fetcher.get('max_keepalive_connections', 10),
            transport=transport,
        )

    def get(self, path: str, params: Dict[str, Any], decoder: Callable[[Any], Any]) -> Call:
        return Call(self._client, path, params, decoder, self._pending)

    def get_characters(self, apikey: str, auth_hash: str, ts: int,
                       offset: Optional[int], limit: Optional[int], name_starts_with: Optional[str]) -> Call:
        return self.get("characters", {
            'offset': offset,
            'limit': limit,
            'nameStartsWith': name_starts_with,
            'apikey': apikey,
            'hash': auth_hash,
            'ts': ts,
        }, character_list_decoder)

    def get_character(self, character_id: int, apikey: str, auth_hash: str, ts: int) -> Call:
        return self.get(f"characters/{character_id}", {
            'apikey': apikey,
            'hash': auth_hash,
            'ts': ts,
        }, character_list_decoder)

    def get_character_comics(self, character_id: int, comic_type: str,
                             offset: Optional[int], limit: Optional[int],
                             apikey: str, auth_hash: str, ts: int) -> Call:
        return self.get(f"characters/{character_id}/{comic_type}", {
            'offset': offset,
            'limit': limit,
            'apikey': apikey,
            'hash': auth_hash,
            'ts': ts,
        }, comic_list_decoder)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def aclose(self):
        """Cancel calls still in flight and close the connection pool."""
        in_flight = list(self._pending)
        for task in in_flight:
            task.cancel()
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        await self._client.aclose()
