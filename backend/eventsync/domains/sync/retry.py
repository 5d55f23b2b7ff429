"""Retry helpers for the sync driver.

The page fetcher never raises on HTTP 429; it returns a ``RateLimited``
outcome. These helpers plug that outcome into tenacity: retry on the
result, and wait as long as the server asked.
"""

from typing import Any, Mapping, Optional

from tenacity import RetryCallState, retry_if_result

from eventsync.domains.sync.types import RateLimited

DEFAULT_RETRY_AFTER_SECONDS = 5


def parse_retry_after(
    value: Optional[str],
    *,
    default: int = DEFAULT_RETRY_AFTER_SECONDS,
    maximum: Optional[int] = None,
) -> int:
    """Parse a ``Retry-After`` header value into whole seconds.

    Accepts integer seconds; a decimal value is truncated ("2.9" -> 2).
    Missing, empty, or non-numeric values (including HTTP-dates) fall back to
    ``default``. Negative values clamp to 0 and ``maximum`` caps the result.

    Args:
        value: Raw header value, or None if the header is absent
        default: Seconds to use when the value is unusable
        maximum: Optional upper bound

    Returns:
        Number of seconds to wait before retrying
    """
    seconds = default
    if value is not None:
        text = str(value).strip()
        try:
            seconds = int(text)
        except ValueError:
            try:
                seconds = int(float(text))
            except (ValueError, OverflowError):
                seconds = default
    seconds = max(seconds, 0)
    if maximum is not None:
        seconds = min(seconds, maximum)
    return seconds


def retry_after_from_headers(
    headers: Mapping[str, Any],
    *,
    default: int = DEFAULT_RETRY_AFTER_SECONDS,
    maximum: Optional[int] = None,
) -> int:
    """Read the retry hint from response headers (case-insensitive lookup)."""
    value = headers.get("retry-after")
    if value is None:
        value = headers.get("Retry-After")
    return parse_retry_after(value, default=default, maximum=maximum)


def is_rate_limited(outcome: Any) -> bool:
    """Check if a fetch outcome asks for a retry."""
    return isinstance(outcome, RateLimited)


def wait_retry_after(retry_state: RetryCallState) -> float:
    """Wait strategy that uses the ``RateLimited`` outcome's server hint.

    Args:
        retry_state: tenacity retry state

    Returns:
        Number of seconds to wait before retry
    """
    outcome = retry_state.outcome.result() if retry_state.outcome else None
    if isinstance(outcome, RateLimited):
        return float(outcome.retry_after_seconds)
    return 0.0


retry_if_rate_limited = retry_if_result(is_rate_limited)
