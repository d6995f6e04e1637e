"""Quote-aware codec for delimiter-separated text.

CSV and TSV share this one grammar and differ only by delimiter:

- Line terminators (CRLF, CR, LF) are normalized to LF before splitting.
- A field is split off at a delimiter only when the delimiter is outside
  quotes. A field that starts with a quote runs to its closing quote; a
  doubled quote inside it is one literal quote.
- In an unquoted field a doubled quote also collapses to one quote and a
  single quote is kept as-is.
- A quoted field left open at the end of a line continues on the next line
  when multiline fields are allowed; a quote still open at the end of the
  input is an error.

Every field becomes a TEXT cell; no type inference is attempted.
"""

from __future__ import annotations

import re

from sheet_interchange.spreadsheet import Cell, DataType, Records, Row, Sheet
from sheet_interchange.utils.exceptions import UnterminatedQuoteError
from sheet_interchange.utils.logging import get_logger, timed_operation

logger = get_logger(__name__)

__all__ = ["DelimitedCodec", "normalize_line_breaks"]

_LINE_BREAK = re.compile(r"\r\n?|\n")


def normalize_line_breaks(text: str) -> str:
    """Replace every CRLF, CR and LF with a single LF."""
    return _LINE_BREAK.sub("\n", text)


class DelimitedCodec:
    """Parse and serialize delimited text for one delimiter."""

    def __init__(
        self,
        delimiter: str = ",",
        *,
        quote_char: str = '"',
        allow_multiline: bool = True,
        quote_on_write: bool = True,
        line_terminator: str = "\r\n",
        format_tag: str | None = None,
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
        if len(quote_char) != 1:
            raise ValueError(f"Quote must be a single character, got {quote_char!r}")
        if delimiter == quote_char or delimiter in "\r\n":
            raise ValueError(f"Delimiter {delimiter!r} conflicts with the grammar")

        self.delimiter = delimiter
        self.quote_char = quote_char
        self.allow_multiline = allow_multiline
        self.quote_on_write = quote_on_write
        self.line_terminator = line_terminator
        self.format_tag = format_tag

    # ------------------------------------------------------------------ #
    # Parsing
    # ------------------------------------------------------------------ #

    def parse(self, text: str) -> Sheet:
        """Parse delimited text into a new sheet.

        Args:
            text: Decoded input text.

        Returns:
            A sheet with one row per record, in input order.

        Raises:
            UnterminatedQuoteError: If a quoted field never closes.
        """
        with timed_operation(logger, f"{self.format_tag or 'delimited'}_parse") as metrics:
            lines = self._split_lines(text)
            records = Records()
            index = 0
            while index < len(lines):
                row, index = self._read_record(lines, index, self.allow_multiline)
                records.append(row)

            metrics.bytes_processed = len(text)
            metrics.rows_processed = len(records)
            metrics.sheets_processed = 1

        logger.debug(
            "Parsed delimited text",
            delimiter=repr(self.delimiter),
            rows=len(records),
            columns=records.column_count,
        )
        return Sheet(records=records)

    def split_line(self, line: str) -> list[str]:
        """Split a single physical line into field values."""
        row, _ = self._read_record([line], 0, allow_multiline=False)
        return [cell.value for cell in row]

    @staticmethod
    def _split_lines(text: str) -> list[str]:
        if not text:
            return []
        lines = normalize_line_breaks(text).split("\n")
        # A final terminator does not open another record.
        if lines[-1] == "":
            lines.pop()
        return lines

    def _read_record(
        self, lines: list[str], index: int, allow_multiline: bool
    ) -> tuple[Row, int]:
        """Read one record starting at ``lines[index]``.

        Returns:
            The row and the index of the first line after the record.
        """
        delimiter = self.delimiter
        quote = self.quote_char

        line = lines[index]
        if line == "":
            return [], index + 1

        row: Row = []
        chars: list[str] = []
        quoted = False
        field_start = True
        quote_line = index + 1
        pos = 0

        while True:
            if pos >= len(line):
                if not quoted:
                    row.append(Cell("".join(chars), DataType.TEXT))
                    return row, index + 1
                if not allow_multiline or index + 1 >= len(lines):
                    raise UnterminatedQuoteError(quote_line, format_tag=self.format_tag)
                index += 1
                line = lines[index]
                pos = 0
                chars.append("\n")
                continue

            char = line[pos]

            if quoted:
                if char == quote:
                    if line.startswith(quote, pos + 1):
                        chars.append(quote)
                        pos += 2
                    else:
                        quoted = False
                        pos += 1
                    continue
                chars.append(char)
                pos += 1
                continue

            if char == delimiter:
                row.append(Cell("".join(chars), DataType.TEXT))
                chars = []
                field_start = True
                pos += 1
                continue

            if char == quote:
                if field_start:
                    quoted = True
                    quote_line = index + 1
                    field_start = False
                    pos += 1
                    continue
                if line.startswith(quote, pos + 1):
                    chars.append(quote)
                    pos += 2
                    continue

            chars.append(char)
            field_start = False
            pos += 1

    # ------------------------------------------------------------------ #
    # Serializing
    # ------------------------------------------------------------------ #

    def serialize(self, sheet: Sheet) -> str:
        """Write every row of ``sheet`` followed by the line terminator."""
        with timed_operation(
            logger, f"{self.format_tag or 'delimited'}_serialize"
        ) as metrics:
            parts: list[str] = []
            for row in sheet.records:
                parts.append(self.format_row(row))
                parts.append(self.line_terminator)
            output = "".join(parts)

            metrics.rows_processed = sheet.row_count
            metrics.bytes_processed = len(output)
            metrics.sheets_processed = 1
        return output

    def format_row(self, row: Row) -> str:
        """Join one row's values with the delimiter, quoting where needed."""
        if self.quote_on_write and len(row) == 1 and row[0].value == "":
            # Keeps a single empty cell distinct from an empty row.
            return self.quote_char * 2
        return self.delimiter.join(self.format_field(cell.value) for cell in row)

    def format_field(self, value: str) -> str:
        if not self.quote_on_write or not self._needs_quoting(value):
            return value
        quote = self.quote_char
        return f"{quote}{value.replace(quote, quote * 2)}{quote}"

    def _needs_quoting(self, value: str) -> bool:
        return (
            self.delimiter in value
            or self.quote_char in value
            or "\r" in value
            or "\n" in value
        )
