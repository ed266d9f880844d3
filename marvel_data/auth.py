"""
Builds the "hash" parameter the API requires on every request:
md5(ts + privateKey + publicKey), lowercase hex.
"""

import hashlib
import time
from dataclasses import dataclass
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)

MD5_HEX_LENGTH = 32


@dataclass(frozen=True)
class AuthCredentials:
    public_key: str
    private_key: str

    def __repr__(self) -> str:
        return f"AuthCredentials(public_key={self.public_key!r}, private_key='***')"


@dataclass(frozen=True)
class AuthToken:
    """Timestamp and the hash derived from it. Never reuse one across requests."""
    timestamp: int
    hash: str

    def as_params(self, public_key: str) -> dict:
        return {"apikey": public_key, "ts": str(self.timestamp), "hash": self.hash}


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def build_md5_auth_parameter(timestamp: int, private_key: str, public_key: str) -> str:
    """
    Build the required API hash parameter (timestamp + privateKey + publicKey).

    Returns an empty string if MD5 is not available in this runtime, the
    request then fails upstream with the normal authentication error.
    """
    try:
        digest = hashlib.md5(f"{timestamp}{private_key}{public_key}".encode("utf-8")).digest()
    except ValueError as e:
        logger.error("md5_auth_hash_failed", timestamp=timestamp, error=str(e))
        return ""

    md5 = format(int.from_bytes(digest, "big"), "x")
    return md5.rjust(MD5_HEX_LENGTH, "0")


class AuthTokenBuilder:
    """Issues a fresh AuthToken per request from fixed credentials."""

    def __init__(self, credentials: AuthCredentials, clock: Callable[[], int] = current_timestamp_ms):
        self.credentials = credentials
        self._clock = clock

    @property
    def public_key(self) -> str:
        return self.credentials.public_key

    def build_hash(self, timestamp: int) -> str:
        return build_md5_auth_parameter(timestamp, self.credentials.private_key, self.credentials.public_key)

    def issue(self) -> AuthToken:
        timestamp = self._clock()
        return AuthToken(timestamp=timestamp, hash=self.build_hash(timestamp))
