"""Format registry and the parser/writer objects it hands out.

Every format is described by data in ``FORMAT_SPECS``; there is one parser
class and one writer class, configured per format from that data. Each call
to :func:`parser_for` or :func:`writer_for` returns a fresh instance that owns
its own :class:`~sheet_interchange.spreadsheet.Document`. Delimited parsers
and writers may override the format's delimiter, e.g. ``;`` for CSV written
by locales that use a decimal comma.
"""

from __future__ import annotations

import asyncio
import copy
import dataclasses
from collections.abc import Callable, Iterable
from pathlib import PurePath
from typing import Any, Protocol, runtime_checkable

from sheet_interchange.config import Settings
from sheet_interchange.config import settings as default_settings
from sheet_interchange.models import (
    EXTENSION_TO_FORMAT,
    FORMAT_SPECS,
    Format,
    FormatSpec,
)
from sheet_interchange.services.delimited import DelimitedCodec
from sheet_interchange.services.markup import MarkupTableAdapter
from sheet_interchange.services.sources import ByteSource, Sink, decode_text
from sheet_interchange.spreadsheet import Document, Sheet
from sheet_interchange.utils.exceptions import (
    CodecBusyError,
    EncodingError,
    FileExtensionMismatchError,
    FileReadError,
    FiletypeNotSupportedError,
    FileTooLargeError,
    FileWriteError,
    SheetError,
    UnknownError,
)
from sheet_interchange.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

__all__ = [
    "Parser",
    "SheetParser",
    "SheetWriter",
    "Writer",
    "detect_format",
    "get_format_spec",
    "get_mime_type",
    "parser_for",
    "resolve_format",
    "writer_for",
]

Decoder = Callable[[str], list[Sheet]]


@runtime_checkable
class Parser(Protocol):
    """Read capability: text or a byte source in, sheets out."""

    format_spec: FormatSpec
    document: Document

    @property
    def format(self) -> Format: ...

    @property
    def busy(self) -> bool: ...

    @property
    def delimiter(self) -> str | None: ...

    def set_delimiter(self, delimiter: str) -> Parser: ...

    def load_string(self, text: str, sheet_number: int = 1) -> Document: ...

    async def load_file(self, source: ByteSource, sheet_number: int = 1) -> Document: ...

    def get_sheet(self, number: int = 1) -> Sheet: ...


@runtime_checkable
class Writer(Protocol):
    """Write capability: sheets in, delimited text out."""

    format_spec: FormatSpec
    document: Document

    @property
    def format(self) -> Format: ...

    @property
    def mime_type(self) -> str: ...

    @property
    def delimiter(self) -> str: ...

    def set_delimiter(self, delimiter: str) -> Writer: ...

    def get_sheet(self, number: int = 1) -> Sheet: ...

    def insert_sheet(self, data: Sheet | Iterable[Iterable[Any]]) -> Writer: ...

    def remove_sheet(self, number: int) -> Writer: ...

    def to_string(self, sheet_number: int = 1) -> str: ...

    def to_bytes(self, sheet_number: int = 1) -> bytes: ...

    async def save(
        self, sink: Sink, filename: str | None = None, sheet_number: int = 1
    ) -> None: ...


# --------------------------------------------------------------------------- #
# Lookup
# --------------------------------------------------------------------------- #


def resolve_format(tag: Format | str) -> Format:
    """Turn a format tag such as ``"CSV"`` or ``".tsv"`` into a Format.

    Raises:
        FiletypeNotSupportedError: If the tag names no known format.
    """
    if isinstance(tag, Format):
        return tag
    normalized = str(tag).strip().lower().lstrip(".")
    try:
        return Format(normalized)
    except ValueError as e:
        raise FiletypeNotSupportedError(
            f"Unsupported format: {tag}", format_tag=str(tag)
        ) from e


def get_format_spec(tag: Format | str) -> FormatSpec:
    return FORMAT_SPECS[resolve_format(tag)]


def get_mime_type(tag: Format | str) -> str:
    return get_format_spec(tag).mime_type


def detect_format(filename: str) -> Format:
    """Pick a format from a file name's extension.

    Raises:
        FiletypeNotSupportedError: If the extension is not recognized.
    """
    extension = PurePath(filename).suffix.lower()
    if extension not in EXTENSION_TO_FORMAT:
        raise FiletypeNotSupportedError(
            f"Unsupported file extension: {extension or '(none)'}",
            format_tag=extension or None,
            file_path=filename,
        )
    return EXTENSION_TO_FORMAT[extension]


def _delimited_codec(
    spec: FormatSpec, settings: Settings, delimiter: str | None = None
) -> DelimitedCodec:
    """Build the codec for a delimited format.

    Raises:
        FiletypeNotSupportedError: If the format is not delimited.
        ValueError: If ``delimiter`` is not usable.
    """
    if spec.delimiter is None:
        raise FiletypeNotSupportedError(
            f"Format {spec.format.value} has no delimiter", format_tag=spec.format.value
        )
    return DelimitedCodec(
        spec.delimiter if delimiter is None else delimiter,
        allow_multiline=settings.allow_multiline_fields,
        quote_on_write=settings.quote_on_write,
        line_terminator=settings.line_terminator,
        format_tag=spec.format.value,
    )


def _markup_adapter(spec: FormatSpec, settings: Settings) -> MarkupTableAdapter:
    if spec.markup is None:
        raise FiletypeNotSupportedError(
            f"Format {spec.format.value} is not markup", format_tag=spec.format.value
        )
    markup = spec.markup
    if markup.namespace is not None:
        markup = dataclasses.replace(markup, namespace=settings.spreadsheet_namespace)
    return MarkupTableAdapter(markup)


def parser_for(
    tag: Format | str,
    settings: Settings | None = None,
    *,
    delimiter: str | None = None,
) -> Parser:
    """Create a new parser for a format tag.

    Args:
        tag: Format tag or Format.
        settings: Settings to use instead of the module-level ones.
        delimiter: Delimiter overriding the format's own. Delimited formats only.

    Raises:
        FiletypeNotSupportedError: If the tag is unknown, or a delimiter is
            given for a markup format.
    """
    settings = settings or default_settings
    spec = get_format_spec(tag)
    if not spec.readable:
        raise FiletypeNotSupportedError(
            f"No parser for format: {spec.format.value}", format_tag=spec.format.value
        )
    parser = SheetParser(spec, settings)
    if delimiter is not None:
        parser.set_delimiter(delimiter)
    return parser


def writer_for(
    tag: Format | str,
    settings: Settings | None = None,
    *,
    delimiter: str | None = None,
) -> Writer:
    """Create a new writer for a format tag.

    Raises:
        FiletypeNotSupportedError: If the tag is unknown or not writable.
    """
    settings = settings or default_settings
    spec = get_format_spec(tag)
    if not spec.writable:
        raise FiletypeNotSupportedError(
            f"No writer for format: {spec.format.value}", format_tag=spec.format.value
        )
    return SheetWriter(spec, settings, delimiter=delimiter)


# --------------------------------------------------------------------------- #
# Parser / writer
# --------------------------------------------------------------------------- #


class SheetParser:
    """Parser bound to one format. Owns the document it populates."""

    def __init__(self, spec: FormatSpec, settings: Settings) -> None:
        self.format_spec = spec
        self.document = Document()
        self._settings = settings
        self._codec: DelimitedCodec | None = None
        self._decode: Decoder
        if spec.delimiter is not None:
            self._use_codec(_delimited_codec(spec, settings))
        else:
            self._decode = _markup_adapter(spec, settings).parse
        self._loading = False

    @property
    def format(self) -> Format:
        return self.format_spec.format

    @property
    def busy(self) -> bool:
        return self._loading

    @property
    def delimiter(self) -> str | None:
        """Current field delimiter, or None for markup formats."""
        return self._codec.delimiter if self._codec is not None else None

    def set_delimiter(self, delimiter: str) -> SheetParser:
        """Split fields on ``delimiter`` from now on.

        Raises:
            FiletypeNotSupportedError: If the format is markup.
            CodecBusyError: If a load is outstanding.
            ValueError: If ``delimiter`` is not a single usable character.
        """
        if self._codec is None:
            raise FiletypeNotSupportedError(
                f"Format {self.format.value} has no delimiter",
                format_tag=self.format.value,
            )
        if self._loading:
            raise CodecBusyError(format_tag=self.format.value)
        self._use_codec(_delimited_codec(self.format_spec, self._settings, delimiter))
        return self

    def _use_codec(self, codec: DelimitedCodec) -> None:
        self._codec = codec
        self._decode = lambda text: [codec.parse(text)]

    def get_sheet(self, number: int = 1) -> Sheet:
        return self.document.get_sheet(number)

    def load_string(self, text: str, sheet_number: int = 1) -> Document:
        """Parse ``text`` and place the result starting at ``sheet_number``.

        A delimited format yields one sheet; a markup format yields one sheet
        per table. Nothing is placed into the document unless the whole
        input parses.
        """
        sheets = self._decode(text)
        self.document.put_sheets(sheet_number, sheets)
        logger.info(
            "Loaded document",
            format=self.format.value,
            sheets=len(sheets),
            rows=sum(sheet.row_count for sheet in sheets),
        )
        return self.document

    async def load_file(self, source: ByteSource, sheet_number: int = 1) -> Document:
        """Read a byte source, decode it and parse it into the document.

        Raises:
            CodecBusyError: If another load on this parser is outstanding.
            FileExtensionMismatchError: If the source is named for another format.
            FileTooLargeError: If the source exceeds the configured size.
            FileReadError: If the source fails with an OS error.
            UnknownError: If the source fails in any other way.
        """
        if self._loading:
            raise CodecBusyError(format_tag=self.format.value)
        self._loading = True
        try:
            with LogContext(source=source.name or "<memory>", format=self.format.value):
                self._check_extension(source.name)
                content = await self._read(source)
                max_size = self._settings.max_input_size_bytes
                if len(content) > max_size:
                    raise FileTooLargeError(len(content), max_size, file_path=source.name)
                text = await asyncio.to_thread(
                    decode_text,
                    content,
                    fallback_encoding=self._settings.default_encoding,
                    min_confidence=self._settings.min_encoding_confidence,
                    source=source.name,
                )
                return self.load_string(text, sheet_number)
        finally:
            self._loading = False

    @staticmethod
    async def _read(source: ByteSource) -> bytes:
        try:
            return await source.read_bytes()
        except SheetError:
            raise
        except OSError as e:
            raise FileReadError(f"Error reading file: {e}", file_path=source.name) from e
        except Exception as e:
            raise UnknownError(
                f"Byte source failed: {e}", details={"source": source.name}
            ) from e

    def _check_extension(self, name: str | None) -> None:
        if not name or not self._settings.enforce_extension_match:
            return
        extension = PurePath(name).suffix.lower()
        named_format = EXTENSION_TO_FORMAT.get(extension)
        if named_format is not None and named_format is not self.format:
            raise FileExtensionMismatchError(
                expected=self.format.value, actual=extension, file_path=name
            )


class SheetWriter:
    """Delimited-text writer bound to one format. Owns its document."""

    def __init__(
        self, spec: FormatSpec, settings: Settings, delimiter: str | None = None
    ) -> None:
        self.format_spec = spec
        self.document = Document()
        self._settings = settings
        self._codec = _delimited_codec(spec, settings, delimiter)

    @property
    def format(self) -> Format:
        return self.format_spec.format

    @property
    def mime_type(self) -> str:
        return self.format_spec.mime_type

    @property
    def delimiter(self) -> str:
        return self._codec.delimiter

    def set_delimiter(self, delimiter: str) -> SheetWriter:
        """Join fields with ``delimiter`` from now on.

        Raises:
            ValueError: If ``delimiter`` is not a single usable character.
        """
        self._codec = _delimited_codec(self.format_spec, self._settings, delimiter)
        return self

    def get_sheet(self, number: int = 1) -> Sheet:
        return self.document.get_sheet(number)

    def insert_sheet(self, data: Sheet | Iterable[Iterable[Any]]) -> SheetWriter:
        """Append a sheet, or a bare sequence of rows wrapped in a new sheet.

        A sheet is copied so that the writer's document never shares
        records with another document.
        """
        if isinstance(data, Sheet):
            sheet = copy.deepcopy(data)
        else:
            sheet = Sheet().set_records(data)
        self.document.append_sheet(sheet)
        return self

    def remove_sheet(self, number: int) -> SheetWriter:
        self.document.remove_sheet(number)
        return self

    def to_string(self, sheet_number: int = 1) -> str:
        return self._codec.serialize(self.document.get_sheet(sheet_number))

    def to_bytes(self, sheet_number: int = 1) -> bytes:
        encoding = self._settings.default_encoding
        try:
            return self.to_string(sheet_number).encode(encoding)
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Could not encode output as {encoding}: {e}", encoding=encoding
            ) from e

    async def save(
        self, sink: Sink, filename: str | None = None, sheet_number: int = 1
    ) -> None:
        """Serialize one sheet and hand the bytes to ``sink``.

        Raises:
            FileWriteError: If the sink fails with an OS error.
            UnknownError: If the sink fails in any other way.
        """
        content = self.to_bytes(sheet_number)
        if filename is not None and not PurePath(filename).suffix:
            filename = f"{filename}{self.format_spec.extension}"
        try:
            await sink.save(content, self.mime_type, filename)
        except SheetError:
            raise
        except OSError as e:
            raise FileWriteError(f"Error writing file: {e}", file_path=filename) from e
        except Exception as e:
            raise UnknownError(
                f"Sink failed: {e}", details={"filename": filename}
            ) from e
