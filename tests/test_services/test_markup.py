"""Tests for the markup table adapter."""

import dataclasses

import pytest

from sheet_interchange.models import HTML_TABLE, XML_SPREADSHEET, ContentType
from sheet_interchange.services.markup import MarkupTableAdapter, build_tree
from sheet_interchange.spreadsheet import DataType
from sheet_interchange.utils.exceptions import (
    ErrorCode,
    InvalidDocumentFormatError,
    InvalidDocumentNamespaceError,
)


@pytest.fixture
def html_adapter() -> MarkupTableAdapter:
    return MarkupTableAdapter(HTML_TABLE)


@pytest.fixture
def xml_adapter() -> MarkupTableAdapter:
    return MarkupTableAdapter(XML_SPREADSHEET)


class TestHtmlTables:
    """Tests for HTML table conversion."""

    def test_two_tables_become_two_sheets(
        self, html_adapter: MarkupTableAdapter, two_table_html: str
    ) -> None:
        sheets = html_adapter.parse(two_table_html)

        assert len(sheets) == 2
        for sheet in sheets:
            assert sheet.row_count == 2
            assert [len(row) for row in sheet.records] == [3, 3]
        assert sheets[0].get_cell(1, 1).value == "a1"
        assert sheets[1].get_cell(3, 2).value == "z2"

    def test_cells_are_text(
        self, html_adapter: MarkupTableAdapter, two_table_html: str
    ) -> None:
        sheet = html_adapter.parse(two_table_html)[0]
        assert all(cell.data_type == DataType.TEXT for row in sheet.records for cell in row)

    def test_cell_text_includes_nested_markup(
        self, html_adapter: MarkupTableAdapter
    ) -> None:
        html = "<table><tr><td><b>bold</b> and <i>italic</i></td></tr></table>"
        sheet = html_adapter.parse(html)[0]
        assert sheet.get_cell(1, 1).value == "bold and italic"

    def test_header_cells_are_not_data(self, html_adapter: MarkupTableAdapter) -> None:
        html = "<table><tr><th>H</th></tr><tr><td>v</td></tr></table>"
        sheet = html_adapter.parse(html)[0]
        assert sheet.get_row(1) == []
        assert sheet.get_cell(1, 2).value == "v"

    def test_no_tables_yields_no_sheets(self, html_adapter: MarkupTableAdapter) -> None:
        assert html_adapter.parse("<html><body><p>nothing</p></body></html>") == []

    def test_empty_document_yields_no_sheets(
        self, html_adapter: MarkupTableAdapter
    ) -> None:
        assert html_adapter.parse("   ") == []

    @pytest.mark.parametrize("html", ["<!-- nothing -->", "just words", "<p>no tables</p>"])
    def test_documents_without_tables_yield_no_sheets(
        self, html_adapter: MarkupTableAdapter, html: str
    ) -> None:
        assert html_adapter.parse(html) == []

    def test_fragment_without_html_wrapper(self, html_adapter: MarkupTableAdapter) -> None:
        sheets = html_adapter.parse("<table><tr><td>1</td><td>2</td></tr></table>")
        assert sheets[0].values() == [["1", "2"]]


class TestXmlSpreadsheet:
    """Tests for XML Spreadsheet 2003 conversion."""

    def test_worksheets_become_sheets(
        self, xml_adapter: MarkupTableAdapter, spreadsheet_xml: str
    ) -> None:
        sheets = xml_adapter.parse(spreadsheet_xml)

        assert len(sheets) == 2
        assert sheets[0].values() == [["item", "count"], ["bolt", "42"]]
        assert sheets[1].row_count == 0

    def test_worksheet_name_is_kept(
        self, xml_adapter: MarkupTableAdapter, spreadsheet_xml: str
    ) -> None:
        sheets = xml_adapter.parse(spreadsheet_xml)
        assert [sheet.name for sheet in sheets] == ["Inventory", "Empty"]

    def test_typed_data_stays_text(
        self, xml_adapter: MarkupTableAdapter, spreadsheet_xml: str
    ) -> None:
        cell = xml_adapter.parse(spreadsheet_xml)[0].get_cell(2, 2)
        assert cell.value == "42"
        assert cell.data_type == DataType.TEXT

    def test_missing_namespace_rejected(self, xml_adapter: MarkupTableAdapter) -> None:
        xml = "<Workbook><Worksheet><Table><Row><Cell><Data>x</Data></Cell></Row></Table></Worksheet></Workbook>"
        with pytest.raises(InvalidDocumentNamespaceError) as exc_info:
            xml_adapter.parse(xml)
        assert exc_info.value.error_code == ErrorCode.INVALID_DOCUMENT_NAMESPACE
        assert exc_info.value.actual is None

    def test_wrong_namespace_rejected(self, xml_adapter: MarkupTableAdapter) -> None:
        xml = '<Workbook xmlns="urn:example:other"><Worksheet/></Workbook>'
        with pytest.raises(InvalidDocumentNamespaceError) as exc_info:
            xml_adapter.parse(xml)
        assert exc_info.value.actual == "urn:example:other"

    def test_tag_match_is_case_exact(self, xml_adapter: MarkupTableAdapter) -> None:
        xml = (
            '<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet">'
            "<worksheet><Row><Data>x</Data></Row></worksheet></Workbook>"
        )
        assert xml_adapter.parse(xml) == []

    def test_malformed_xml(self, xml_adapter: MarkupTableAdapter) -> None:
        with pytest.raises(InvalidDocumentFormatError) as exc_info:
            xml_adapter.parse("<Workbook><Worksheet>")
        assert exc_info.value.error_code == ErrorCode.INVALID_DOCUMENT_FORMAT

    def test_empty_xml(self, xml_adapter: MarkupTableAdapter) -> None:
        with pytest.raises(InvalidDocumentFormatError):
            xml_adapter.parse("")

    def test_entities_are_not_expanded(self, xml_adapter: MarkupTableAdapter) -> None:
        xml = (
            '<?xml version="1.0"?>'
            '<!DOCTYPE Workbook [<!ENTITY big "expanded">]>'
            '<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet">'
            "<Worksheet><Table><Row><Cell><Data>&big;</Data></Cell></Row></Table>"
            "</Worksheet></Workbook>"
        )
        sheets = xml_adapter.parse(xml)
        assert sheets[0].get_cell(1, 1).value != "expanded"

    def test_custom_namespace(self) -> None:
        markup = dataclasses.replace(XML_SPREADSHEET, namespace="urn:example:sheets")
        xml = (
            '<Workbook xmlns="urn:example:sheets">'
            "<Worksheet><Row><Data>ok</Data></Row></Worksheet></Workbook>"
        )
        assert MarkupTableAdapter(markup).parse(xml)[0].values() == [["ok"]]


class TestBuildTree:
    """Tests for the markup-tree builder."""

    def test_html_tree_is_queryable(self) -> None:
        root = build_tree("<table><tr><td>a</td></tr></table>", ContentType.HTML)
        assert len(list(root.iter("td"))) == 1

    def test_xml_with_encoding_declaration(self) -> None:
        root = build_tree(
            '<?xml version="1.0" encoding="ISO-8859-1"?><a>é</a>', ContentType.XML
        )
        assert root.text == "é"
