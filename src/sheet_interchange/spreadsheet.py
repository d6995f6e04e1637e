"""Dataclasses representing a parsed spreadsheet document.

All public addressing is 1-based: sheet 1 is the first sheet, row 1 the
first row and column 1 the first cell of a row.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias

from sheet_interchange.utils.exceptions import (
    CellNotFoundError,
    ColumnNotFoundError,
    RowNotFoundError,
    SheetNotFoundError,
)


class DataType(str, Enum):
    """Semantic type tag carried by every cell."""

    CURRENCY = "CURRENCY"
    DATETIME = "DATETIME"
    FORMULA = "FORMULA"
    LOGICAL = "LOGICAL"
    NUMBER = "NUMBER"
    TEXT = "TEXT"


@dataclass
class Cell:
    """A single value plus its data type tag."""

    value: str = ""
    data_type: DataType = DataType.TEXT

    def __post_init__(self) -> None:
        self.value = "" if self.value is None else str(self.value)
        if not isinstance(self.data_type, DataType):
            self.data_type = DataType(str(self.data_type).upper())

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Cell:
        """Build a cell from a mapping, taking only the recognized fields.

        ``value`` and ``dataType`` (or ``data_type``) are read; any other key
        is ignored and any missing key keeps its default.
        """
        kwargs: dict[str, Any] = {}
        if "value" in config:
            kwargs["value"] = config["value"]
        for key in ("dataType", "data_type"):
            if key in config:
                kwargs["data_type"] = config[key]
                break
        return cls(**kwargs)

    def __str__(self) -> str:
        return self.value


Row: TypeAlias = list[Cell]


def to_row(values: Iterable[Any]) -> Row:
    """Convert an iterable of cells or plain values into a row of cells."""
    row: Row = []
    for value in values:
        if isinstance(value, Cell):
            row.append(value)
        elif isinstance(value, Mapping):
            row.append(Cell.from_config(value))
        else:
            row.append(Cell(value))
    return row


class Records(list[Row]):
    """Ordered rows of a sheet with 1-based accessors.

    Rows may have different lengths; rectangularity is not enforced.
    """

    def get_cell(self, column: int, row: int) -> Cell:
        if row < 1 or row > len(self) or column < 1:
            raise CellNotFoundError(column, row)
        cells = self[row - 1]
        if column > len(cells):
            raise CellNotFoundError(column, row)
        return cells[column - 1]

    def get_row(self, row: int) -> Row:
        if row < 1 or row > len(self):
            raise RowNotFoundError(row, row_count=len(self))
        return self[row - 1]

    def get_column(self, column: int) -> list[Cell]:
        """Return the cells at ``column`` from every row long enough to hold one."""
        if column < 1:
            raise ColumnNotFoundError(column, column_count=self.column_count)
        cells = [cells[column - 1] for cells in self if len(cells) >= column]
        if not cells:
            raise ColumnNotFoundError(column, column_count=self.column_count)
        return cells

    @property
    def column_count(self) -> int:
        return max((len(cells) for cells in self), default=0)


@dataclass
class Sheet:
    """One table of a document. Owns its records exclusively."""

    records: Records = field(default_factory=Records)
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.records, Records):
            self.records = Records(to_row(row) for row in self.records)

    # Accessors

    def get_cell(self, column: int, row: int) -> Cell:
        return self.records.get_cell(column, row)

    def get_row(self, row: int) -> Row:
        return self.records.get_row(row)

    def get_column(self, column: int) -> list[Cell]:
        return self.records.get_column(column)

    @property
    def row_count(self) -> int:
        return len(self.records)

    @property
    def column_count(self) -> int:
        """Width of the widest row."""
        return self.records.column_count

    # Mutators

    def insert_record(self, row: Iterable[Any], at: int | None = None) -> Sheet:
        """Append a row, or insert it before the 1-based position ``at``."""
        cells = to_row(row)
        if at is None:
            self.records.append(cells)
            return self
        if at < 1 or at > len(self.records) + 1:
            raise RowNotFoundError(at, row_count=len(self.records))
        self.records.insert(at - 1, cells)
        return self

    def remove_record(self, row: int) -> Sheet:
        self.records.get_row(row)
        del self.records[row - 1]
        return self

    def replace_record(self, row: int, values: Iterable[Any]) -> Sheet:
        self.records.get_row(row)
        self.records[row - 1] = to_row(values)
        return self

    def set_records(self, records: Iterable[Iterable[Any]]) -> Sheet:
        """Replace all rows with a fresh copy of ``records``."""
        self.records = Records(to_row(row) for row in records)
        return self

    def values(self) -> list[list[str]]:
        """Plain string values of every row."""
        return [[cell.value for cell in row] for row in self.records]


@dataclass
class Document:
    """Ordered sheets produced by one parse or consumed by one serialize."""

    sheets: list[Sheet] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.sheets)

    def __iter__(self) -> Iterator[Sheet]:
        return iter(self.sheets)

    def get_sheet(self, number: int = 1) -> Sheet:
        if number < 1 or number > len(self.sheets):
            raise SheetNotFoundError(number, sheet_count=len(self.sheets))
        return self.sheets[number - 1]

    def put_sheet(self, number: int, sheet: Sheet) -> Document:
        """Replace sheet ``number``, or append when it is one past the end."""
        if number == len(self.sheets) + 1:
            self.sheets.append(sheet)
        else:
            self.get_sheet(number)
            self.sheets[number - 1] = sheet
        return self

    def put_sheets(self, start: int, sheets: list[Sheet]) -> Document:
        """Place ``sheets`` at consecutive positions beginning at ``start``."""
        if start < 1 or start > len(self.sheets) + 1:
            raise SheetNotFoundError(start, sheet_count=len(self.sheets))
        end = start - 1 + len(sheets)
        self.sheets[start - 1 : min(end, len(self.sheets))] = sheets
        return self

    def append_sheet(self, sheet: Sheet) -> Document:
        self.sheets.append(sheet)
        return self

    def remove_sheet(self, number: int) -> Document:
        self.get_sheet(number)
        del self.sheets[number - 1]
        return self
