"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod


class RetryStrategy(ABC):
    """Abstract retry strategy for chunk transfers."""
    
    def __init__(self, max_attempts: int):
        """
        Args:
            max_attempts: Total attempts allowed per chunk (initial one included)
        """
        self.max_attempts = max_attempts
    
    def should_retry(self, attempt: int) -> bool:
        """Determines if a chunk that failed on ``attempt`` (1-based) is tried again."""
        return attempt < self.max_attempts
    
    @abstractmethod
    async def wait_async(self, attempt: int):
        """Waits before retry (async)."""
        pass


class ImmediateRetryStrategy(RetryStrategy):
    """Retries right away, without any backoff delay."""
    
    async def wait_async(self, attempt: int):
        """Yields to the event loop once, no delay."""
        await asyncio.sleep(0)
