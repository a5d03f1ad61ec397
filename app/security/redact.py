"""Redaction of OpenRouteService credentials in log lines and error strings.

ORS accepts the key either as a bare ``Authorization`` header value or as an
``api_key`` query parameter, and issues keys in two shapes: the legacy hex
form prefixed with the ORS organisation id and the newer base64 token that
starts with the same organisation id encoded as JSON.
"""

from __future__ import annotations

import re

_REDACTED = "***REDACTED***"

# Values that are already a redaction marker or a placeholder are left alone.
_VALUE = r"(?P<value>(?!\*)[^&\s\"',;}\]]+)"

_AUTH_HEADER_RE = re.compile(r"(?i)(?P<prefix>\bauthorization[\"']?\s*[:=]\s*[\"']?(?:bearer\s+|basic\s+)?)(?!(?:bearer|basic)\s)" + _VALUE)
_BEARER_RE = re.compile(r"(?i)(?P<prefix>\bbearer\s+)" + _VALUE)
_QUERY_VALUE_RE = re.compile(r"(?i)(?P<prefix>\b(?:api[_-]?key|key|token)\s*=\s*)" + _VALUE)
_JSON_KV_RE = re.compile(r"(?i)(?P<prefix>[\"']?(?:api[_-]?key|token|secret|password)[\"']?\s*:\s*[\"']?)" + _VALUE)

_ORS_HEX_KEY_RE = re.compile(r"\b5b3ce3597851110001cf6248[0-9a-f]{8,}\b")
_ORS_TOKEN_KEY_RE = re.compile(r"\beyJvcmciOi[A-Za-z0-9+/_=-]{16,}")


def _replace_value(pattern: re.Pattern[str], text: str) -> str:
    def repl(match: re.Match[str]) -> str:
        return f"{match.group('prefix')}{_REDACTED}"

    return pattern.sub(repl, text)


def redact_sensitive(text: str) -> str:
    """Redact routing credentials while preserving surrounding context."""
    if not text:
        return text

    redacted = str(text)
    for pattern in (_AUTH_HEADER_RE, _BEARER_RE, _QUERY_VALUE_RE, _JSON_KV_RE):
        redacted = _replace_value(pattern, redacted)
    for pattern in (_ORS_HEX_KEY_RE, _ORS_TOKEN_KEY_RE):
        redacted = pattern.sub(_REDACTED, redacted)
    return redacted


__all__ = ["redact_sensitive"]
