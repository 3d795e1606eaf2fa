"""JSON-over-HTTPS for the GitHub releases endpoint.

Stages depend on the ``HttpClient`` protocol; the CLI passes ``RealHttpClient``
(urllib, system trust store) and tests pass ``MockHttpClient``. Failures come
back as ``HttpError`` values; nothing here raises on a bad status.
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Protocol, cast, runtime_checkable

from release_script.core.result import Err, Ok, Result
from release_script.core.structured import as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]

type JsonObject = dict[str, Any]


@dataclass(frozen=True, slots=True)
class HttpError:
    """A failed request. ``status`` is 0 when no HTTP response arrived."""

    url: str
    status: int
    message: str

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401

    def __str__(self) -> str:
        prefix = f"HTTP {self.status}: " if self.status else ""
        return f"{prefix}{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def post_json(
        self,
        url: str,
        payload: JsonObject,
        headers: dict[str, str] | None = None,
    ) -> Result[JsonObject, HttpError]:
        """Send ``payload`` as a JSON body; an empty reply decodes to ``{}``."""
        ...


def _decode(url: str, raw: bytes) -> Result[JsonObject, HttpError]:
    if not raw.strip():
        return Ok({})
    try:
        parsed: object = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(HttpError(url, 0, f"invalid JSON in response: {e}"))
    obj = as_str_dict(parsed)
    if obj is None:
        return Err(HttpError(url, 0, "response is not a JSON object"))
    return Ok(cast(JsonObject, obj))


class RealHttpClient:
    def __init__(self, timeout: float = 30.0, user_agent: str = "release-script") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._tls = ssl.create_default_context()

    def _request(self, url: str, payload: JsonObject, headers: dict[str, str]) -> urllib.request.Request:
        merged = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        merged.update(headers)
        return urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers=merged,
            method="POST",
        )

    def post_json(
        self,
        url: str,
        payload: JsonObject,
        headers: dict[str, str] | None = None,
    ) -> Result[JsonObject, HttpError]:
        try:
            request = self._request(url, payload, headers or {})
            with urllib.request.urlopen(request, timeout=self.timeout, context=self._tls) as reply:
                raw: bytes = reply.read()
        except urllib.error.HTTPError as e:
            # Subclass of URLError, so it must be handled first.
            return Err(HttpError(url, e.code, str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url, 0, str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url, 0, f"no response within {self.timeout}s"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url, 0, str(e)))
        return _decode(url, raw)


@dataclass(frozen=True, slots=True)
class RecordedPost:
    url: str
    payload: JsonObject
    headers: dict[str, str]


@dataclass
class MockHttpClient:
    """Answers from ``responses`` by URL; unknown URLs get a 404.

    Every call is appended to ``posts``, whatever the answer.
    """

    responses: dict[str, JsonObject | HttpError] = field(default_factory=dict)
    posts: list[RecordedPost] = field(default_factory=list)

    def set_response(self, url: str, response: JsonObject | HttpError) -> None:
        self.responses[url] = response

    def post_json(
        self,
        url: str,
        payload: JsonObject,
        headers: dict[str, str] | None = None,
    ) -> Result[JsonObject, HttpError]:
        self.posts.append(RecordedPost(url, payload, dict(headers or {})))
        match self.responses.get(url):
            case None:
                return Err(HttpError(url, 404, "no canned response"))
            case HttpError() as error:
                return Err(error)
            case body:
                return Ok(body)
