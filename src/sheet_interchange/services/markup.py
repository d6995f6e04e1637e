"""Convert HTML tables and XML Spreadsheet 2003 worksheets into sheets.

The markup tree is built with lxml. HTML goes through the forgiving
``lxml.html`` parser; XML goes through a hardened ``etree.XMLParser`` that
neither resolves entities nor touches the network. Table, row and cell
elements are matched on their exact local name, so ``Worksheet`` in the
spreadsheet namespace matches while ``worksheet`` does not.
"""

from __future__ import annotations

from collections.abc import Iterator

import lxml.html
from lxml import etree

from sheet_interchange.models import ContentType, MarkupSpec
from sheet_interchange.spreadsheet import Cell, DataType, Records, Sheet
from sheet_interchange.utils.exceptions import (
    InvalidDocumentFormatError,
    InvalidDocumentNamespaceError,
)
from sheet_interchange.utils.logging import get_logger, timed_operation

logger = get_logger(__name__)

__all__ = ["MarkupTableAdapter", "build_tree"]


def build_tree(text: str, content_type: ContentType) -> etree._Element:
    """Parse markup text into an element tree and return its root.

    Raises:
        InvalidDocumentFormatError: If the markup cannot be parsed.
    """
    data = text.encode("utf-8")
    try:
        if content_type is ContentType.HTML:
            parser = lxml.html.HTMLParser(encoding="utf-8")
            return lxml.html.document_fromstring(data, parser=parser)
        parser = etree.XMLParser(
            encoding="utf-8",
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
        )
        return etree.fromstring(data, parser=parser)
    except (etree.XMLSyntaxError, etree.ParserError) as e:
        raise InvalidDocumentFormatError(
            f"Could not parse {content_type.value} document: {e}",
            format_tag=content_type.value,
        ) from e


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _descendants(element: etree._Element, tag: str) -> Iterator[etree._Element]:
    """Yield elements below ``element`` whose local name is exactly ``tag``."""
    for child in element.iterdescendants(etree.Element):
        if _local_name(child) == tag:
            yield child


class MarkupTableAdapter:
    """Turn every table element of a markup document into a sheet."""

    def __init__(self, spec: MarkupSpec) -> None:
        self.spec = spec

    def parse(self, text: str) -> list[Sheet]:
        """Parse markup text and convert each table element into a sheet.

        Args:
            text: Decoded HTML or XML text.

        Returns:
            One sheet per table element, in document order. Empty when the
            document holds no tables.

        Raises:
            InvalidDocumentFormatError: If the markup cannot be parsed.
            InvalidDocumentNamespaceError: If an XML root lacks the expected
                namespace.
        """
        if self.spec.content_type is ContentType.HTML:
            return self._parse_html(text)
        root = build_tree(text, self.spec.content_type)
        return self.convert(root)

    def _parse_html(self, text: str) -> list[Sheet]:
        if not text.strip():
            return []
        try:
            root = build_tree(text, ContentType.HTML)
        except InvalidDocumentFormatError:
            # lxml.html only fails on documents with no elements, e.g. comments only
            logger.debug("HTML document has no elements")
            return []
        return self.convert(root)

    def convert(self, root: etree._Element) -> list[Sheet]:
        """Convert an already built markup tree into sheets."""
        self._check_namespace(root)

        with timed_operation(logger, f"{self.spec.table_tag}_convert") as metrics:
            sheets = [self._build_sheet(table) for table in self._tables(root)]
            metrics.sheets_processed = len(sheets)
            metrics.rows_processed = sum(sheet.row_count for sheet in sheets)

        logger.debug(
            "Converted markup tables",
            content_type=self.spec.content_type.value,
            sheets=len(sheets),
        )
        return sheets

    def _check_namespace(self, root: etree._Element) -> None:
        expected = self.spec.namespace
        if expected is None:
            return
        declared = set(root.nsmap.values())
        actual = etree.QName(root).namespace
        if expected not in declared and actual != expected:
            raise InvalidDocumentNamespaceError(
                expected=expected,
                actual=actual,
                format_tag=self.spec.content_type.value,
            )

    def _tables(self, root: etree._Element) -> Iterator[etree._Element]:
        if _local_name(root) == self.spec.table_tag:
            yield root
        yield from _descendants(root, self.spec.table_tag)

    def _build_sheet(self, table: etree._Element) -> Sheet:
        records = Records()
        for row_element in _descendants(table, self.spec.row_tag):
            records.append(
                [
                    Cell(self._text_content(cell), DataType.TEXT)
                    for cell in row_element.iterdescendants(etree.Element)
                    if _local_name(cell) in self.spec.cell_tags
                ]
            )
        return Sheet(records=records, name=self._sheet_name(table))

    def _sheet_name(self, table: etree._Element) -> str | None:
        if self.spec.name_attribute is None:
            return None
        for key, value in table.attrib.items():
            if etree.QName(key).localname == self.spec.name_attribute:
                return str(value)
        return None

    @staticmethod
    def _text_content(element: etree._Element) -> str:
        return "".join(element.itertext())
