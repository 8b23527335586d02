"""Logging of outgoing upstream requests when LRA_LOG_REQUESTS is enabled."""

import logging
import os
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

# Query parameters that carry credentials
SENSITIVE_PARAMS = frozenset({"key", "api_key", "apikey", "token"})


def should_log_requests() -> bool:
    """Check if request logging is enabled via the LRA_LOG_REQUESTS environment variable."""
    return os.getenv("LRA_LOG_REQUESTS", "").lower() == "true"


def redact_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Replace credential values so they never reach the logs."""
    if not params:
        return {}
    return {k: "***REDACTED***" if k.lower() in SENSITIVE_PARAMS else v for k, v in params.items()}


def build_url_with_params(url: str, params: Mapping[str, Any] | None) -> str:
    """Build full URL with (already redacted) query parameters."""
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}?{param_str}" if "?" not in url else f"{url}&{param_str}"


def log_api_request(
    method: str,
    url: str,
    params: Mapping[str, Any] | None = None,
    attempt: int = 0,
) -> None:
    """Log an outgoing request if LRA_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters; credentials are redacted.
        attempt: Zero-based retry attempt.
    """
    if not should_log_requests():
        return

    full_url = build_url_with_params(url, redact_params(params))
    suffix = f" (retry {attempt})" if attempt else ""
    logger.info(f"API Request: {method} {full_url}{suffix}")
