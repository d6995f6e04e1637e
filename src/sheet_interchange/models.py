"""Format tags and per-format configuration."""

from dataclasses import dataclass
from enum import Enum

from sheet_interchange.config import SPREADSHEET_2003_NAMESPACE


class Format(str, Enum):
    """Supported format tags."""

    CSV = "csv"
    TSV = "tsv"
    HTML = "html"
    XML = "xml"


class ContentType(str, Enum):
    """Content kinds understood by the markup-tree builder."""

    HTML = "text/html"
    XML = "text/xml"


@dataclass(frozen=True)
class MarkupSpec:
    """Tag names that identify tables, rows and cells in a markup tree."""

    content_type: ContentType
    table_tag: str
    row_tag: str
    cell_tags: tuple[str, ...]
    namespace: str | None = None
    name_attribute: str | None = None


HTML_TABLE = MarkupSpec(
    content_type=ContentType.HTML,
    table_tag="table",
    row_tag="tr",
    cell_tags=("td",),
)

XML_SPREADSHEET = MarkupSpec(
    content_type=ContentType.XML,
    table_tag="Worksheet",
    row_tag="Row",
    cell_tags=("Data",),
    namespace=SPREADSHEET_2003_NAMESPACE,
    name_attribute="Name",
)


@dataclass(frozen=True)
class FormatSpec:
    """Everything that distinguishes one format from another.

    Delimited formats carry a ``delimiter``; markup formats carry a
    ``markup`` spec. Only delimited formats are writable.
    """

    format: Format
    extension: str
    mime_type: str
    delimiter: str | None = None
    markup: MarkupSpec | None = None

    @property
    def readable(self) -> bool:
        return self.delimiter is not None or self.markup is not None

    @property
    def writable(self) -> bool:
        return self.delimiter is not None


FORMAT_SPECS: dict[Format, FormatSpec] = {
    Format.CSV: FormatSpec(
        format=Format.CSV,
        extension=".csv",
        mime_type="text/csv",
        delimiter=",",
    ),
    Format.TSV: FormatSpec(
        format=Format.TSV,
        extension=".tsv",
        mime_type="text/tab-separated-values",
        delimiter="\t",
    ),
    Format.HTML: FormatSpec(
        format=Format.HTML,
        extension=".html",
        mime_type="text/html",
        markup=HTML_TABLE,
    ),
    Format.XML: FormatSpec(
        format=Format.XML,
        extension=".xml",
        mime_type="text/xml",
        markup=XML_SPREADSHEET,
    ),
}

EXTENSION_TO_FORMAT: dict[str, Format] = {
    ".csv": Format.CSV,
    ".tsv": Format.TSV,
    ".tab": Format.TSV,
    ".html": Format.HTML,
    ".htm": Format.HTML,
    ".xml": Format.XML,
}
