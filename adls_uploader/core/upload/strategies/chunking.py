"""
Chunking strategies for file uploads.

Implements Strategy Pattern for chunk boundary calculation.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..models import ChunkInfo, DEFAULT_CHUNK_SIZE


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""
    
    @abstractmethod
    def next_chunk(self, offset: int, file_size: int, index: int = 0) -> Optional[ChunkInfo]:
        """Calculate the chunk starting at offset."""
        pass


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Simple fixed-size chunking strategy.
    
    Every chunk is ``chunk_size`` bytes except the last one, which ends at EOF.
    """
    
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.
        
        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size
    
    def next_chunk(self, offset: int, file_size: int, index: int = 0) -> Optional[ChunkInfo]:
        """
        Calculate the chunk [offset, min(offset + chunk_size, file_size)).
        
        Args:
            offset: First byte of the chunk
            file_size: Total file size in bytes
            index: Index assigned to the chunk
            
        Returns:
            The chunk, or None once offset reached the end of the file
        """
        if offset >= file_size:
            return None
        return ChunkInfo(index=index, start=offset, end=min(offset + self.chunk_size, file_size))
