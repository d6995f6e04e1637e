"""Sheet Interchange - CSV, TSV, HTML table and XML spreadsheet conversion."""

from sheet_interchange.models import Format
from sheet_interchange.services.registry import (
    SheetParser,
    SheetWriter,
    detect_format,
    get_mime_type,
    parser_for,
    writer_for,
)
from sheet_interchange.spreadsheet import Cell, DataType, Document, Records, Sheet

__all__ = [
    "Cell",
    "DataType",
    "Document",
    "Format",
    "Records",
    "Sheet",
    "SheetParser",
    "SheetWriter",
    "detect_format",
    "get_mime_type",
    "parser_for",
    "writer_for",
]
__version__ = "0.1.0"
