"""Upload strategies module."""
from .chunking import BaseChunkingStrategy, FixedSizeChunkingStrategy
from .retry import RetryStrategy, ImmediateRetryStrategy

__all__ = [
    'BaseChunkingStrategy',
    'FixedSizeChunkingStrategy',
    'RetryStrategy',
    'ImmediateRetryStrategy',
]
