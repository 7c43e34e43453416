from __future__ import annotations

from typing import Dict, Mapping, Optional, Protocol, Union, runtime_checkable

import httpx

from kraken_client.constants import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT
from kraken_client.errors import NetworkError

QueryOrBody = Union[Mapping[str, str], str, None]


@runtime_checkable
class Transport(Protocol):
    """Protocol for the component that puts bytes on the wire."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body_or_query: QueryOrBody,
    ) -> bytes:
        """
        Send one request and return the raw response body.

        GET: `body_or_query` is the query mapping. POST: it is the encoded
        form body. Raises NetworkError on any transport failure.
        """
        ...


class HttpxTransport:
    """
    httpx-backed transport. Owns timeout and TLS; never retries.
    """

    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S, user_agent: str = DEFAULT_USER_AGENT):
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body_or_query: QueryOrBody,
    ) -> bytes:
        all_headers: Dict[str, str] = {"User-Agent": self.user_agent}
        all_headers.update(headers)
        method = method.upper()

        try:
            with httpx.Client(timeout=self.timeout_s, headers=all_headers) as c:
                if method == "GET":
                    r = c.get(url, params=dict(body_or_query or {}))
                elif method == "POST":
                    r = c.post(url, content=_as_body(body_or_query))
                else:
                    raise ValueError(f"Unsupported HTTP method: {method}")
                r.raise_for_status()
                return r.content
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"{method} {url} timed out after {self.timeout_s}s",
                details={"url": url, "cause": type(e).__name__},
            ) from e
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"{method} {url} returned HTTP {e.response.status_code}",
                details={"url": url, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"{method} {url} failed: {e}",
                details={"url": url, "cause": type(e).__name__},
            ) from e


def _as_body(body_or_query: QueryOrBody) -> Optional[bytes]:
    if body_or_query is None:
        return None
    if isinstance(body_or_query, str):
        return body_or_query.encode("utf-8")
    raise TypeError("POST body must be the already-encoded form string that was signed")
