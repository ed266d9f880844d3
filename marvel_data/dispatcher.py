"""
Api abstraction: one entry point per fetchable resource.

Each request is stamped with a fresh timestamp and the hash derived from it,
then enqueued on the transport with the caller's callback as completion sink.
Results pass straight through to the callback.
"""

import threading
from enum import Enum
from typing import Optional, Union

import httpx
import structlog

from .auth import AuthTokenBuilder
from .callback import RemoteCallback
from .config import Config, get_config
from .service import Call, MarvelService

logger = structlog.get_logger(__name__)


class ComicType(str, Enum):
    """Comic-family sub-resources of a character."""
    COMICS = "comics"
    SERIES = "series"
    STORIES = "stories"
    EVENTS = "events"


class DataManager:
    _instance: Optional['DataManager'] = None
    _instance_lock = threading.Lock()

    def __init__(self, service: MarvelService, token_builder: AuthTokenBuilder):
        self._service = service
        self._token_builder = token_builder

    @classmethod
    def from_config(cls, config: Config, transport: httpx.AsyncBaseTransport = None) -> 'DataManager':
        return cls(
            service=MarvelService.from_config(config, transport=transport),
            token_builder=AuthTokenBuilder(config.credentials),
        )

    @classmethod
    def get_instance(cls) -> 'DataManager':
        """Shared instance built from the global config on first access."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls.from_config(get_config())
                    logger.info("data_manager_created", base_url=cls._instance._service.base_url)
        return cls._instance

    @property
    def public_key(self) -> str:
        return self._token_builder.public_key

    def list_characters(self, offset: Optional[int], limit: Optional[int], search_query: Optional[str],
                        callback: RemoteCallback) -> Call:
        """List characters, optionally filtered to names starting with search_query."""
        token = self._token_builder.issue()
        call = self._service.get_characters(self.public_key, token.hash, token.timestamp,
                                            offset, limit, search_query)
        call.enqueue(callback)
        return call

    def get_character(self, character_id: int, callback: RemoteCallback) -> Call:
        """The API answers with a one-element list wrapper."""
        token = self._token_builder.issue()
        call = self._service.get_character(character_id, self.public_key, token.hash, token.timestamp)
        call.enqueue(callback)
        return call

    def list_comics(self, character_id: int, offset: Optional[int], limit: Optional[int],
                    callback: RemoteCallback) -> Call:
        return self._enqueue(self._get_comic_list_by_type(character_id, ComicType.COMICS, offset, limit), callback)

    def list_series(self, character_id: int, offset: Optional[int], limit: Optional[int],
                    callback: RemoteCallback) -> Call:
        return self._enqueue(self._get_comic_list_by_type(character_id, ComicType.SERIES, offset, limit), callback)

    def list_stories(self, character_id: int, offset: Optional[int], limit: Optional[int],
                     callback: RemoteCallback) -> Call:
        return self._enqueue(self._get_comic_list_by_type(character_id, ComicType.STORIES, offset, limit), callback)

    def list_events(self, character_id: int, offset: Optional[int], limit: Optional[int],
                    callback: RemoteCallback) -> Call:
        return self._enqueue(self._get_comic_list_by_type(character_id, ComicType.EVENTS, offset, limit), callback)

    def _get_comic_list_by_type(self, character_id: int, comic_type: Union[ComicType, str],
                                offset: Optional[int], limit: Optional[int]) -> Call:
        """Shared request for the comic-family lists of one character.

        Raises ValueError for an unknown resource kind.
        """
        comic_type = ComicType(comic_type)
        token = self._token_builder.issue()
        return self._service.get_character_comics(character_id, comic_type.value, offset, limit,
                                                  self.public_key, token.hash, token.timestamp)

    @staticmethod
    def _enqueue(call: Call, callback: RemoteCallback) -> Call:
        call.enqueue(callback)
        return call

    async def aclose(self):
        """Close the transport. A closed shared instance is dropped so the next get_instance() rebuilds it."""
        await self._service.aclose()
        cls = type(self)
        with cls._instance_lock:
            if cls._instance is self:
                cls._instance = None
