"""Centralized exception classes for sheet interchange.

This module provides a hierarchy of custom exceptions with error codes and
structured error details for consistent error handling across the codecs,
the data model and the byte source/sink boundary.

Exception Hierarchy:
    SheetError (base)
    ├── FileError
    │   ├── SheetFileNotFoundError
    │   ├── FileReadError
    │   ├── FileWriteError
    │   ├── FileTooLargeError
    │   ├── FileExtensionMismatchError
    │   ├── FiletypeNotSupportedError
    │   └── EncodingError
    ├── DocumentFormatError
    │   ├── InvalidDocumentFormatError
    │   │   └── UnterminatedQuoteError
    │   ├── InvalidDocumentNamespaceError
    │   └── MalformedJsonError
    ├── AccessError
    │   ├── CellNotFoundError
    │   ├── RowNotFoundError
    │   ├── ColumnNotFoundError
    │   └── SheetNotFoundError
    ├── CodecBusyError
    └── UnknownError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the library.

    Error codes are grouped by category:
    - E1xxx: File and byte source/sink errors
    - E2xxx: Document format errors
    - E3xxx: Accessor (addressing) errors
    - E4xxx: Codec state errors
    - E9xxx: Internal/unexpected errors
    """

    # File errors (E1xxx)
    FILE_NOT_FOUND = "E1001"
    FILE_TOO_LARGE = "E1002"
    FILETYPE_NOT_SUPPORTED = "E1003"
    FILE_READ_ERROR = "E1004"
    FILE_WRITE_ERROR = "E1005"
    ENCODING_ERROR = "E1006"
    FILE_EXTENSION_MISMATCH = "E1007"

    # Document format errors (E2xxx)
    INVALID_DOCUMENT_FORMAT = "E2001"
    INVALID_DOCUMENT_NAMESPACE = "E2002"
    UNTERMINATED_QUOTE = "E2003"
    MALFORMED_JSON = "E2004"

    # Accessor errors (E3xxx)
    CELL_NOT_FOUND = "E3001"
    ROW_NOT_FOUND = "E3002"
    COLUMN_NOT_FOUND = "E3003"
    SHEET_NOT_FOUND = "E3004"

    # Codec state errors (E4xxx)
    CODEC_BUSY = "E4001"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    UNKNOWN_ERROR = "E9999"


class SheetError(Exception):
    """Base exception for all sheet interchange errors.

    All custom exceptions in the library inherit from this class.
    It provides:
    - Unique error codes for programmatic handling
    - Structured error details for logging and debugging

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(SheetError):
    """Base class for byte source and sink errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path or name of the problematic file.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class SheetFileNotFoundError(FileError):
    """Raised when a byte source points at a file that does not exist.

    Note: Named SheetFileNotFoundError to avoid shadowing built-in FileNotFoundError.
    """

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f"File not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class FileReadError(FileError):
    """Raised when a byte source fails while reading."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_READ_ERROR,
            file_path=file_path,
            details=details,
        )


class FileWriteError(FileError):
    """Raised when a sink fails to save the serialized output."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_WRITE_ERROR,
            file_path=file_path,
            details=details,
        )


class FileTooLargeError(FileError):
    """Raised when an input exceeds the maximum allowed size."""

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual input size in bytes.
            max_size: Maximum allowed size in bytes.
            file_path: Optional file path.
            details: Additional details.
        """
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class FileExtensionMismatchError(FileError):
    """Raised when a file's extension names a different format than the codec's."""

    def __init__(
        self,
        expected: str,
        actual: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["expected_format"] = expected
        details["actual_extension"] = actual
        super().__init__(
            message=f"File extension '{actual}' does not match format '{expected}'",
            error_code=ErrorCode.FILE_EXTENSION_MISMATCH,
            file_path=file_path,
            details=details,
        )
        self.expected = expected
        self.actual = actual


class FiletypeNotSupportedError(FileError):
    """Raised when a format tag has no registered parser or writer."""

    def __init__(
        self,
        message: str,
        format_tag: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with format information.

        Args:
            message: Error message.
            format_tag: The format tag that was requested.
            file_path: Optional file path.
            details: Additional details.
        """
        details = details or {}
        if format_tag:
            details["format_tag"] = format_tag
        super().__init__(
            message=message,
            error_code=ErrorCode.FILETYPE_NOT_SUPPORTED,
            file_path=file_path,
            details=details,
        )
        self.format_tag = format_tag


class EncodingError(FileError):
    """Raised when raw bytes cannot be decoded to text."""

    def __init__(
        self,
        message: str,
        encoding: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if encoding:
            details["encoding"] = encoding
        super().__init__(
            message=message,
            error_code=ErrorCode.ENCODING_ERROR,
            file_path=file_path,
            details=details,
        )
        self.encoding = encoding


# =============================================================================
# Document Format Errors (E2xxx)
# =============================================================================


class DocumentFormatError(SheetError):
    """Base class for input that does not match the expected document shape."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_DOCUMENT_FORMAT,
        format_tag: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if format_tag:
            details["format_tag"] = format_tag
        super().__init__(message, error_code, details)
        self.format_tag = format_tag


class InvalidDocumentFormatError(DocumentFormatError):
    """Raised when markup or delimited text cannot be parsed."""

    def __init__(
        self,
        message: str,
        format_tag: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.INVALID_DOCUMENT_FORMAT,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            format_tag=format_tag,
            details=details,
        )


class UnterminatedQuoteError(InvalidDocumentFormatError):
    """Raised when a quoted field is never closed."""

    def __init__(
        self,
        line_number: int,
        format_tag: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the line where the quoted field opened.

        Args:
            line_number: 1-based line number where the open quote appeared.
            format_tag: Format being parsed.
            details: Additional details.
        """
        details = details or {}
        details["line_number"] = line_number
        super().__init__(
            message=f"Unterminated quoted field starting on line {line_number}",
            format_tag=format_tag,
            details=details,
            error_code=ErrorCode.UNTERMINATED_QUOTE,
        )
        self.line_number = line_number


class InvalidDocumentNamespaceError(DocumentFormatError):
    """Raised when an XML document's root does not declare the expected namespace."""

    def __init__(
        self,
        expected: str,
        actual: str | None,
        format_tag: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["expected_namespace"] = expected
        details["actual_namespace"] = actual
        super().__init__(
            message=(
                f"Invalid document namespace: expected '{expected}', "
                f"got '{actual or ''}'"
            ),
            error_code=ErrorCode.INVALID_DOCUMENT_NAMESPACE,
            format_tag=format_tag,
            details=details,
        )
        self.expected = expected
        self.actual = actual


class MalformedJsonError(DocumentFormatError):
    """Reserved for a JSON codec."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.MALFORMED_JSON,
            format_tag="json",
            details=details,
        )


# =============================================================================
# Accessor Errors (E3xxx)
# =============================================================================


class AccessError(SheetError):
    """Base class for 1-based addressing outside the current extent."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class CellNotFoundError(AccessError):
    """Raised when a (column, row) address falls outside the sheet."""

    def __init__(self, column: int, row: int) -> None:
        super().__init__(
            message=f"Cell not found at column {column}, row {row}",
            error_code=ErrorCode.CELL_NOT_FOUND,
            details={"column": column, "row": row},
        )
        self.column = column
        self.row = row


class RowNotFoundError(AccessError):
    """Raised when a row number falls outside the sheet."""

    def __init__(self, row: int, row_count: int | None = None) -> None:
        details: dict[str, Any] = {"row": row}
        if row_count is not None:
            details["row_count"] = row_count
        super().__init__(
            message=f"Row not found: {row}",
            error_code=ErrorCode.ROW_NOT_FOUND,
            details=details,
        )
        self.row = row


class ColumnNotFoundError(AccessError):
    """Raised when no row of the sheet reaches a column number."""

    def __init__(self, column: int, column_count: int | None = None) -> None:
        details: dict[str, Any] = {"column": column}
        if column_count is not None:
            details["column_count"] = column_count
        super().__init__(
            message=f"Column not found: {column}",
            error_code=ErrorCode.COLUMN_NOT_FOUND,
            details=details,
        )
        self.column = column


class SheetNotFoundError(AccessError):
    """Raised when a sheet number falls outside the document."""

    def __init__(self, sheet_number: int, sheet_count: int | None = None) -> None:
        details: dict[str, Any] = {"sheet_number": sheet_number}
        if sheet_count is not None:
            details["sheet_count"] = sheet_count
        super().__init__(
            message=f"Sheet not found: {sheet_number}",
            error_code=ErrorCode.SHEET_NOT_FOUND,
            details=details,
        )
        self.sheet_number = sheet_number


# =============================================================================
# Codec State Errors (E4xxx)
# =============================================================================


class CodecBusyError(SheetError):
    """Raised when a codec instance is asked to load while a load is outstanding."""

    def __init__(
        self,
        format_tag: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if format_tag:
            details["format_tag"] = format_tag
        super().__init__(
            message="Codec is busy with an outstanding load",
            error_code=ErrorCode.CODEC_BUSY,
            details=details,
        )


# =============================================================================
# Catch-all
# =============================================================================


class UnknownError(SheetError):
    """Raised for failures that fit no other category."""

    def __init__(
        self,
        message: str = "Unknown error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.UNKNOWN_ERROR,
            details=details,
        )
