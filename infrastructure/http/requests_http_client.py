# infrastructure/http/requests_http_client.py
from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Optional

import requests

from application.ports.http_client import HttpClientPort, HttpResponse
from domain.exceptions import TransportError


class RequestsHttpClient(HttpClientPort):
    """
    HttpClientPort on a shared requests.Session. The blocking call runs in a
    worker thread so concurrent steps and load-test workers do not stall the
    event loop.
    """

    def __init__(self, base_headers: Optional[Dict[str, str]] = None, timeout_ms: int = 30000):
        self._session = requests.Session()
        self._base_headers = base_headers or {}
        self._timeout_ms = timeout_ms

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> HttpResponse:
        return await asyncio.to_thread(self._send_sync, method, url, headers, body, params, timeout_ms)

    def _send_sync(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]],
        body: Any,
        params: Optional[Dict[str, Any]],
        timeout_ms: Optional[int],
    ) -> HttpResponse:
        merged = dict(self._base_headers)
        if headers:
            merged.update(headers)

        kwargs: Dict[str, Any] = {}
        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif body is not None:
            kwargs["data"] = body if isinstance(body, (str, bytes)) else str(body)

        timeout = (timeout_ms or self._timeout_ms) / 1000
        started = time.monotonic()
        try:
            resp = self._session.request(
                method=method.upper(),
                url=url,
                headers=merged,
                params=params,
                timeout=timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method.upper()} {url} failed: {exc}") from exc
        duration_ms = (time.monotonic() - started) * 1000

        return HttpResponse(
            status=resp.status_code,
            headers=dict(resp.headers),
            body=_decode_body(resp),
            duration_ms=duration_ms,
            url=str(resp.url),
        )

    def close(self) -> None:
        self._session.close()


def _decode_body(resp: requests.Response) -> Any:
    """JSON when the payload parses as JSON, otherwise the text (None when empty)."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text
