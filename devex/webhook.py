"""Outbound delivery of survey messages to Slack.

Requests are JSON POSTs. A non-2xx answer raises ``DeliveryError`` inside the
transport; it is caught at the delivery boundary, logged, and handed back as
a failed ``DeliveryResult`` so callers never see transport failures as
exceptions.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol
from urllib.parse import urlsplit

import aiohttp

from devex.error_utils import log_exception_categorized
from devex.errors import DeliveryError
from devex.logging_utils import get_logger


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one delivery attempt."""

    ok: bool
    status: Optional[int] = None
    body: Optional[str] = None
    error: Optional[BaseException] = None


class Transport(Protocol):
    async def post(self, url: str, data: Dict[str, Any], auth_token: Optional[str] = None) -> DeliveryResult:
        ...


def build_headers(auth_token: Optional[str] = None) -> Dict[str, str]:
    """Return request headers; the bearer header is only set with a token."""
    headers = {"Content-type": "application/json"}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    return headers


class SlackTransport:
    """Asynchronous JSON poster for Slack's Web API and response URLs."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or getattr(self.session, "closed", False):
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self) -> None:
        if self.session and not getattr(self.session, "closed", False):
            await self.session.close()

    async def _request(self, url: str, data: Dict[str, Any], auth_token: Optional[str]) -> DeliveryResult:
        session = await self._get_session()
        async with session.post(url, json=data, headers=build_headers(auth_token)) as resp:
            body = await resp.text()
            if 200 <= resp.status < 300:
                return DeliveryResult(ok=True, status=resp.status, body=body)
            raise DeliveryError(status=resp.status, status_text=resp.reason or "")

    async def post(self, url: str, data: Dict[str, Any], auth_token: Optional[str] = None) -> DeliveryResult:
        """POST ``data`` as JSON to ``url``. Never raises for delivery failures."""
        if not data:
            return DeliveryResult(ok=False)

        host = urlsplit(url).netloc
        log = get_logger("slack.delivery", host=host)
        log.debug("posting", extra={"authorized": bool(auth_token)})
        try:
            result = await self._request(url, data, auth_token)
        except DeliveryError as e:
            log_exception_categorized(e, host=host, status=e.status)
            return DeliveryResult(ok=False, status=e.status, error=e)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log_exception_categorized(e, host=host)
            return DeliveryResult(ok=False, error=e)
        log.info("delivered", extra={"status": result.status})
        return result
