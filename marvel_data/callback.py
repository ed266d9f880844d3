"""
Completion sinks for an enqueued Call. Exactly one of on_success / on_failed
is invoked per call.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from .errors import MarvelApiError

T = TypeVar("T")


class RemoteCallback(ABC, Generic[T]):

    @abstractmethod
    def on_success(self, response: T) -> None:
        """Called with the decoded payload of a 2xx response."""

    @abstractmethod
    def on_failed(self, error: MarvelApiError) -> None:
        """Called with the network, HTTP status, decode or cancellation failure."""


class FutureCallback(RemoteCallback[T]):
    """Resolves an asyncio.Future, so a call can be awaited instead of observed.

    Usage:
        callback = FutureCallback()
        manager.list_characters(0, 20, "spider", callback)
        wrapper = await callback
    """

    def __init__(self, loop: asyncio.AbstractEventLoop = None):
        loop = loop or asyncio.get_running_loop()
        self.future: "asyncio.Future[T]" = loop.create_future()

    def on_success(self, response: T) -> None:
        if not self.future.done():
            self.future.set_result(response)

    def on_failed(self, error: MarvelApiError) -> None:
        if not self.future.done():
            self.future.set_exception(error)

    def __await__(self) -> Any:
        return self.future.__await__()
