from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from sheet_interchange.config import Settings
from sheet_interchange.spreadsheet import Sheet


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only, ignoring the environment and any .env."""
    with patch.dict(os.environ, {}, clear=True):
        return Settings(_env_file=None)


@pytest.fixture
def simple_sheet() -> Sheet:
    return Sheet().set_records(
        [
            ["name", "qty", "city"],
            ["apple", "3", "Paris"],
            ["pear", "10", "Rome"],
        ]
    )


@pytest.fixture
def two_table_html() -> str:
    return """\
<html><body>
<table>
  <tr><td>a1</td><td>b1</td><td>c1</td></tr>
  <tr><td>a2</td><td>b2</td><td>c2</td></tr>
</table>
<p>between</p>
<table>
  <tr><td>x1</td><td>y1</td><td>z1</td></tr>
  <tr><td>x2</td><td>y2</td><td>z2</td></tr>
</table>
</body></html>
"""


@pytest.fixture
def spreadsheet_xml() -> str:
    return """\
<?xml version="1.0"?>
<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet"
 xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet">
 <Worksheet ss:Name="Inventory">
  <Table>
   <Row>
    <Cell><Data ss:Type="String">item</Data></Cell>
    <Cell><Data ss:Type="String">count</Data></Cell>
   </Row>
   <Row>
    <Cell><Data ss:Type="String">bolt</Data></Cell>
    <Cell><Data ss:Type="Number">42</Data></Cell>
   </Row>
  </Table>
 </Worksheet>
 <Worksheet ss:Name="Empty">
  <Table/>
 </Worksheet>
</Workbook>
"""
