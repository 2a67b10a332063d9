"""
Read Failure Policies

Decide what a read path does when the document store fails:

    - FailOpenPolicy: availability first. Log a warning and serve the
      matching slice of the demo dataset; the emptiness check answers
      "empty".
    - FailClosedPolicy: consistency first. Raise StoreUnavailableError.

Write paths never consult a policy; they always raise StoreWriteError.
"""

import logging
from abc import ABC, abstractmethod
from typing import TypeVar

from qrmenu.core.config import FallbackMode
from qrmenu.core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseFallbackPolicy(ABC):
    """Strategy applied to store failures on read paths."""

    @property
    @abstractmethod
    def mode(self) -> FallbackMode:
        pass

    @abstractmethod
    def on_emptiness_error(self, error: Exception) -> bool:
        """
        Handle a failed emptiness check.

        Returns:
            bool: The emptiness verdict to use instead
        """
        pass

    @abstractmethod
    def on_read_error(self, error: Exception, fallback: T, operation: str) -> T:
        """
        Handle a failed read.

        Args:
            error: The store failure
            fallback: Static value to serve instead
            operation: Name of the failing read, for logging
        """
        pass


class FailOpenPolicy(BaseFallbackPolicy):
    """Serve demo content on any read failure."""

    @property
    def mode(self) -> FallbackMode:
        return FallbackMode.FAIL_OPEN

    def on_emptiness_error(self, error: Exception) -> bool:
        logger.warning(f"Emptiness check failed, using static data: {error}")
        return True

    def on_read_error(self, error: Exception, fallback: T, operation: str) -> T:
        logger.warning(f"{operation} failed, using static data: {error}")
        return fallback


class FailClosedPolicy(BaseFallbackPolicy):
    """Surface read failures to the caller."""

    @property
    def mode(self) -> FallbackMode:
        return FallbackMode.FAIL_CLOSED

    def on_emptiness_error(self, error: Exception) -> bool:
        logger.error(f"Emptiness check failed: {error}")
        raise StoreUnavailableError(f"Emptiness check failed: {error}") from error

    def on_read_error(self, error: Exception, fallback: T, operation: str) -> T:
        logger.error(f"{operation} failed: {error}")
        if isinstance(error, StoreUnavailableError):
            raise error
        raise StoreUnavailableError(f"{operation} failed: {error}") from error


def get_fallback_policy(mode: FallbackMode) -> BaseFallbackPolicy:
    """Build the policy for a configured FallbackMode."""
    if mode == FallbackMode.FAIL_CLOSED:
        return FailClosedPolicy()
    return FailOpenPolicy()
