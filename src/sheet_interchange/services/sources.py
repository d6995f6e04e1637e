"""Byte sources, sinks and text decoding at the edge of the codecs.

Parsers only ever see text; this module turns a byte source into text and
hands serialized output to a sink. File access runs in a worker thread so
awaiting a load never blocks the event loop.
"""

from __future__ import annotations

import asyncio
import codecs
from pathlib import Path
from typing import Protocol, runtime_checkable

import chardet

from sheet_interchange.utils.exceptions import (
    EncodingError,
    FileReadError,
    FileTooLargeError,
    FileWriteError,
    SheetFileNotFoundError,
)
from sheet_interchange.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "ByteSource",
    "FileByteSource",
    "FileSink",
    "MemoryByteSource",
    "MemorySink",
    "Sink",
    "decode_text",
]

# Tried in order when chardet is unsure
FALLBACK_ENCODINGS = ["utf-8", "cp1252", "latin-1"]

_BOMS: list[tuple[bytes, str]] = [
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
]


@runtime_checkable
class ByteSource(Protocol):
    """Anything that can asynchronously produce the raw bytes of a document."""

    @property
    def name(self) -> str | None: ...

    async def read_bytes(self) -> bytes: ...


@runtime_checkable
class Sink(Protocol):
    """Anything that can accept serialized bytes, e.g. save them to disk."""

    async def save(
        self, content: bytes, mime_type: str, filename: str | None = None
    ) -> None: ...


class MemoryByteSource:
    """Byte source over bytes already in memory."""

    def __init__(self, content: bytes | str, name: str | None = None) -> None:
        self._content = content.encode("utf-8") if isinstance(content, str) else content
        self._name = name

    @property
    def name(self) -> str | None:
        return self._name

    async def read_bytes(self) -> bytes:
        return self._content


class FileByteSource:
    """Byte source reading a file from the local filesystem."""

    def __init__(self, path: str | Path, max_size_bytes: int | None = None) -> None:
        self.path = Path(path)
        self.max_size_bytes = max_size_bytes

    @property
    def name(self) -> str | None:
        return self.path.name

    async def read_bytes(self) -> bytes:
        """Read the whole file.

        Raises:
            SheetFileNotFoundError: If the path does not exist.
            FileTooLargeError: If the file exceeds ``max_size_bytes``.
            FileReadError: If the file cannot be read.
        """
        return await asyncio.to_thread(self._read)

    def _read(self) -> bytes:
        try:
            if self.max_size_bytes is not None:
                size = self.path.stat().st_size
                if size > self.max_size_bytes:
                    raise FileTooLargeError(
                        size, self.max_size_bytes, file_path=str(self.path)
                    )
            return self.path.read_bytes()
        except FileNotFoundError as e:
            raise SheetFileNotFoundError(str(self.path)) from e
        except OSError as e:
            raise FileReadError(
                f"Error reading file: {e}", file_path=str(self.path)
            ) from e


class FileSink:
    """Sink writing output files into a directory."""

    def __init__(self, directory: str | Path, default_stem: str = "sheet") -> None:
        self.directory = Path(directory)
        self.default_stem = default_stem

    async def save(
        self, content: bytes, mime_type: str, filename: str | None = None
    ) -> None:
        target = self.directory / (filename or self.default_stem)
        await asyncio.to_thread(self._write, target, content)
        logger.info(
            "Saved output", path=str(target), mime_type=mime_type, size=len(content)
        )

    @staticmethod
    def _write(target: Path, content: bytes) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise FileWriteError(
                f"Error writing file: {e}", file_path=str(target)
            ) from e


class MemorySink:
    """Sink that keeps every saved payload in memory."""

    def __init__(self) -> None:
        self.saved: list[tuple[str | None, str, bytes]] = []

    async def save(
        self, content: bytes, mime_type: str, filename: str | None = None
    ) -> None:
        self.saved.append((filename, mime_type, content))


def _bom_encoding(content: bytes) -> str | None:
    for bom, encoding in _BOMS:
        if content.startswith(bom):
            return encoding
    return None


def detect_encoding(content: bytes, min_confidence: float = 0.5) -> str | None:
    """Guess the encoding of ``content``.

    A byte-order mark wins outright; otherwise chardet's guess is used when
    its confidence reaches ``min_confidence``.
    """
    bom_encoding = _bom_encoding(content)
    if bom_encoding:
        return bom_encoding

    result = chardet.detect(content)
    encoding = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    if encoding and confidence >= min_confidence:
        logger.debug(f"Detected encoding: {encoding} (confidence: {confidence:.2f})")
        return encoding
    return None


def decode_text(
    content: bytes,
    fallback_encoding: str = "utf-8",
    min_confidence: float = 0.5,
    source: str | None = None,
) -> str:
    """Decode raw bytes into text.

    A byte-order mark decides outright. Otherwise strict UTF-8 is tried
    first, since it rarely decodes non-UTF-8 input by accident; chardet only
    runs when that fails. Then the detected encoding, then the fallbacks.

    Raises:
        EncodingError: If no candidate encoding decodes the content.
    """
    if not content:
        return ""

    tried: list[str] = []
    text = _try_decode(content, [_bom_encoding(content) or "utf-8"], tried)
    if text is not None:
        return text

    candidates: list[str] = []
    detected = detect_encoding(content, min_confidence)
    if detected:
        candidates.append(detected)
    candidates.append(fallback_encoding)
    candidates.extend(FALLBACK_ENCODINGS)
    text = _try_decode(content, candidates, tried)
    if text is not None:
        return text

    raise EncodingError(
        f"Could not decode content with any of: {', '.join(tried)}",
        file_path=source,
    )


def _try_decode(content: bytes, encodings: list[str], tried: list[str]) -> str | None:
    """Return ``content`` decoded with the first encoding that works.

    Encodings already in ``tried`` are skipped; each attempt is recorded there.
    """
    for encoding in encodings:
        if encoding in tried:
            continue
        tried.append(encoding)
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    return None
