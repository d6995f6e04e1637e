"""Codecs, markup adapter, registry and byte-source helpers."""

from sheet_interchange.services.delimited import DelimitedCodec
from sheet_interchange.services.markup import MarkupTableAdapter
from sheet_interchange.services.registry import (
    SheetParser,
    SheetWriter,
    detect_format,
    get_mime_type,
    parser_for,
    writer_for,
)

__all__ = [
    "DelimitedCodec",
    "MarkupTableAdapter",
    "SheetParser",
    "SheetWriter",
    "detect_format",
    "get_mime_type",
    "parser_for",
    "writer_for",
]
