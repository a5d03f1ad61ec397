"""OpenRouteService key holder.

The routing key is the only credential the engine handles. It is read from
the environment once, and every log line or error string passes through
``scrub_text`` before it leaves the process.
"""

from __future__ import annotations

import os
import threading
from typing import Optional

from app.security.redact import redact_sensitive

ROUTING_KEY_NAME = "OPENROUTESERVICE_API_KEY"


class KeyManager:
    """Process-wide holder for the routing key."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._routing_key: Optional[str] = None

    @property
    def routing_key(self) -> str:
        """Empty string means Haversine-only mode."""
        with self._lock:
            if self._routing_key is None:
                self._routing_key = os.getenv(ROUTING_KEY_NAME, "").strip()
            return self._routing_key

    @property
    def routing_mode(self) -> str:
        return "openrouteservice" if self.routing_key else "haversine"

    def masked_routing_key(self) -> str:
        """Routing key with only its first and last four characters visible."""
        value = self.routing_key
        if len(value) <= 8:
            return "****"
        return value[:4] + "****" + value[-4:]

    def scrub_text(self, text: str) -> str:
        result = str(text) if text is not None else ""
        key = self.routing_key
        if key and key in result:
            result = result.replace(key, f"[{ROUTING_KEY_NAME}:***REDACTED***]")
        return redact_sensitive(result)

    def reload(self) -> None:
        """Re-read the routing key after a rotation."""
        with self._lock:
            self._routing_key = None


_manager: Optional[KeyManager] = None


def get_key_manager() -> KeyManager:
    global _manager
    if _manager is None:
        _manager = KeyManager()
    return _manager
