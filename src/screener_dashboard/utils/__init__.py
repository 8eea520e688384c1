"""Shared utilities."""

from screener_dashboard.utils.retry import RETRYABLE_ERRORS, transport_retrying

__all__ = ["RETRYABLE_ERRORS", "transport_retrying"]
