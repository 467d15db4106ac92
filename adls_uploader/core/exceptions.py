"""
Custom exceptions for chunked uploads.

This module defines exception classes raised by the upload engine
and its default transfer client.
"""
from typing import Optional


class UploaderException(Exception):
    """Base exception for all uploader errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class TransferError(UploaderException):
    """Exception raised when a create/transfer/finalize call fails."""
    
    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        error_code: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            status: HTTP status returned by the remote store (if any)
            error_code: Numeric error code (if available)
        """
        self.status = status
        super().__init__(message, error_code)


class TransferAbortedError(TransferError):
    """Exception raised when an in-flight call is preempted by cancellation."""
    
    def __init__(self, message: str = "Transfer aborted") -> None:
        super().__init__(message)


class UploadInProgressError(UploaderException):
    """Exception raised when upload() is called while a run is active."""
    pass


class InvalidFileError(UploaderException):
    """Exception raised when a local file cannot be queued."""
    pass
