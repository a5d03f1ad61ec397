"""Secure HTTP client: the single exit point for external API calls.

Responsibilities:
  1. scrub API keys from exceptions before they surface
  2. uniform timeout / retry policy
  3. keep the httpx dependency behind one seam
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from app.security.key_manager import get_key_manager
from app.shared.exceptions import ToolError


class SecureHttpClient:
    """Thin httpx wrapper that never leaks credentials in error text."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_retries: int = 0,
        tool_name: str = "http",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._timeout = timeout
        self._max_retries = max_retries
        self._tool_name = tool_name
        self._transport = transport
        self._km = get_key_manager()

    def post_json(
        self,
        url: str,
        *,
        json_body: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """POST a JSON body and return the decoded JSON response.

        4xx responses are not retried: they carry the status code on the
        raised ToolError so callers can tell auth and rate-limit failures apart.
        """
        last_error: Optional[ToolError] = None

        for attempt in range(1, self._max_retries + 2):
            try:
                with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                    resp = client.post(url, json=json_body, headers=headers)
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"HTTP {status}: {safe_msg}", status_code=status)
                if status < 500:
                    raise last_error from None
            except httpx.TimeoutException:
                last_error = ToolError(
                    self._tool_name, f"request timed out after {self._timeout}s (attempt {attempt})"
                )
            except httpx.HTTPError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"network error: {safe_msg}")
            except ValueError as e:
                safe_msg = self._km.scrub_text(str(e))
                last_error = ToolError(self._tool_name, f"malformed JSON response: {safe_msg}")

            if attempt <= self._max_retries:
                time.sleep(0.5 * attempt)

        raise last_error  # type: ignore[misc]
