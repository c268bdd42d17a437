"""
Helper functions for common infrastructure operations.

This module provides domain-agnostic utility functions for:
- UUID validation
- Bounded retries of transient failures

These utilities are pure infrastructure - they have no knowledge
of domain concepts like chats, members, or messages.

Usage:
    from core.helpers import run_with_retry, validate_uuid

    if validate_uuid(chat_id):
        ...

    message = run_with_retry(
        lambda: append_once(chat_id, text),
        attempts=3,
        retry_on=(OperationalError,),
    )
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

logger = logging.getLogger(__name__)


def validate_uuid(value: str) -> bool:
    """
    Check if string is a valid UUID.

    Args:
        value: String to validate

    Returns:
        True if valid UUID format

    Example:
        is_valid = validate_uuid("550e8400-e29b-41d4-a716-446655440000")  # True
    """
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, TypeError, AttributeError):
        return False


def run_with_retry(
    operation: Callable[[], T],
    attempts: int = 3,
    delay: float = 0.05,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """
    Call operation, retrying on the given exception types.

    The delay doubles after each failed attempt. The last exception is
    re-raised once attempts are exhausted; exceptions outside retry_on
    propagate immediately.

    Args:
        operation: Zero-argument callable to run
        attempts: Total number of attempts (at least 1)
        delay: Initial sleep between attempts in seconds
        retry_on: Exception types considered transient

    Returns:
        Whatever operation returns

    Example:
        rows = run_with_retry(lambda: list(qs), attempts=3, retry_on=(OperationalError,))
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except retry_on as exc:
            if attempt == attempts:
                raise
            logger.warning(f"Transient failure (attempt {attempt}/{attempts}): {exc}")
            if delay > 0:
                time.sleep(delay * (2 ** (attempt - 1)))
    raise AssertionError("unreachable")
