"""Utilities package for sheet interchange.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from sheet_interchange.utils.exceptions import (
    AccessError,
    CellNotFoundError,
    CodecBusyError,
    ColumnNotFoundError,
    DocumentFormatError,
    EncodingError,
    ErrorCode,
    FileError,
    FileExtensionMismatchError,
    FileReadError,
    FiletypeNotSupportedError,
    FileTooLargeError,
    FileWriteError,
    InvalidDocumentFormatError,
    InvalidDocumentNamespaceError,
    MalformedJsonError,
    RowNotFoundError,
    SheetError,
    SheetFileNotFoundError,
    SheetNotFoundError,
    UnknownError,
    UnterminatedQuoteError,
)
from sheet_interchange.utils.logging import (
    LogContext,
    StructuredLogger,
    configure_logging,
    get_logger,
    timed_operation,
)

__all__ = [
    # Exceptions
    "AccessError",
    "CellNotFoundError",
    "CodecBusyError",
    "ColumnNotFoundError",
    "DocumentFormatError",
    "EncodingError",
    "ErrorCode",
    "FileError",
    "FileExtensionMismatchError",
    "FileReadError",
    "FiletypeNotSupportedError",
    "FileTooLargeError",
    "FileWriteError",
    "InvalidDocumentFormatError",
    "InvalidDocumentNamespaceError",
    "MalformedJsonError",
    "RowNotFoundError",
    "SheetError",
    "SheetFileNotFoundError",
    "SheetNotFoundError",
    "UnknownError",
    "UnterminatedQuoteError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "timed_operation",
]
