"""
Shared pytest fixtures for marvel_data tests.

- FakeMarvelApi: httpx.MockTransport handler recording every request
- RecordingCallback: RemoteCallback that counts deliveries
- service / manager wired to the fake API with fixed credentials
"""

import asyncio
import itertools
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from marvel_data.auth import AuthCredentials, AuthTokenBuilder
from marvel_data.callback import RemoteCallback
from marvel_data.dispatcher import DataManager
from marvel_data.service import MarvelService

PUBLIC_KEY = "1234"
PRIVATE_KEY = "abcd"
BASE_URL = "https://gateway.marvel.com/v1/public/"

SPIDER_MAN = {
    "id": 1009610,
    "name": "Spider-Man",
    "description": "Bitten by a radioactive spider, high school student Peter Parker gained the speed, strength and powers of a spider.",
    "modified": "2020-07-21T10:30:10-0400",
    "resourceURI": "http://gateway.marvel.com/v1/public/characters/1009610",
    "thumbnail": {"path": "http://i.annihil.us/u/prod/marvel/i/mg/3/50/526548a343e4b", "extension": "jpg"},
    "urls": [{"type": "detail", "url": "http://marvel.com/characters/54/spider-man"}],
    "comics": {
        "available": 4100,
        "returned": 1,
        "collectionURI": "http://gateway.marvel.com/v1/public/characters/1009610/comics",
        "items": [{"resourceURI": "http://gateway.marvel.com/v1/public/comics/6482", "name": "Amazing Fantasy (1962) #15"}],
    },
    "series": {"available": 0, "returned": 0, "items": []},
    "stories": {"available": 0, "returned": 0, "items": []},
    "events": {"available": 0, "returned": 0, "items": []},
}

AMAZING_FANTASY = {
    "id": 6482,
    "title": "Amazing Fantasy (1962) #15",
    "description": None,
    "resourceURI": "http://gateway.marvel.com/v1/public/comics/6482",
    "thumbnail": {"path": "http://i.annihil.us/u/prod/marvel/i/mg/4/a0/5d7a5f5b2a1b0", "extension": "jpg"},
}


def wrap(results: List[Dict[str, Any]], offset: int = 0, limit: int = 20, total: int = None) -> Dict[str, Any]:
    """Build the API's DataWrapper envelope around results."""
    return {
        "code": 200,
        "status": "Ok",
        "copyright": "© 2024 MARVEL",
        "attributionText": "Data provided by Marvel. © 2024 MARVEL",
        "etag": "f0fbae65eb2f8f28bdeea0a29be8749a4e67acb3",
        "data": {
            "offset": offset,
            "limit": limit,
            "total": len(results) if total is None else total,
            "count": len(results),
            "results": results,
        },
    }


class FakeMarvelApi:
    """Records requests and answers them with a configurable responder."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responder: Callable[[httpx.Request], Any] = lambda request: httpx.Response(200, json=wrap([]))

    def respond_with(self, status_code: int = 200, json: Any = None, **kwargs):
        self._responder = lambda request: httpx.Response(status_code, json=json, **kwargs)

    def respond(self, responder: Callable[[httpx.Request], Any]):
        self._responder = responder

    def handler(self, request: httpx.Request):
        self.requests.append(request)
        return self._responder(request)

    @property
    def last_request(self) -> Optional[httpx.Request]:
        return self.requests[-1] if self.requests else None


class RecordingCallback(RemoteCallback):
    def __init__(self):
        self.successes = []
        self.failures = []
        self.done = asyncio.Event()

    def on_success(self, response):
        self.successes.append(response)
        self.done.set()

    def on_failed(self, error):
        self.failures.append(error)
        self.done.set()

    @property
    def deliveries(self) -> int:
        return len(self.successes) + len(self.failures)

    async def wait(self, timeout: float = 2.0):
        await asyncio.wait_for(self.done.wait(), timeout)
        # let any stray second delivery surface before asserting
        await asyncio.sleep(0)


@pytest.fixture
def credentials():
    return AuthCredentials(public_key=PUBLIC_KEY, private_key=PRIVATE_KEY)


@pytest.fixture
def clock():
    """Strictly increasing millisecond clock."""
    counter = itertools.count(1700000000000)
    return lambda: next(counter)


@pytest.fixture
def api():
    return FakeMarvelApi()


@pytest_asyncio.fixture
async def service(api):
    service = MarvelService(base_url=BASE_URL, transport=httpx.MockTransport(api.handler))
    yield service
    await service.aclose()


@pytest_asyncio.fixture
async def manager(service, credentials, clock):
    return DataManager(service=service, token_builder=AuthTokenBuilder(credentials, clock=clock))
