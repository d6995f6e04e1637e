"""Bridge between sheets and pandas DataFrames."""

from __future__ import annotations

import pandas as pd

from sheet_interchange.spreadsheet import Cell, DataType, Sheet


def sheet_to_dataframe(sheet: Sheet, header: bool = True) -> pd.DataFrame:
    """Build a DataFrame of string values from a sheet.

    Ragged rows are padded with empty strings to the widest row. With
    ``header`` the first row supplies the column names.
    """
    width = sheet.column_count
    rows = [values + [""] * (width - len(values)) for values in sheet.values()]
    if header and rows:
        return pd.DataFrame(rows[1:], columns=rows[0], dtype=object)
    return pd.DataFrame(rows, dtype=object)


def sheet_from_dataframe(frame: pd.DataFrame, include_header: bool = True) -> Sheet:
    """Build a TEXT sheet from a DataFrame; missing values become empty strings."""
    sheet = Sheet()
    if include_header:
        sheet.insert_record([Cell(str(column), DataType.TEXT) for column in frame.columns])
    for values in frame.itertuples(index=False, name=None):
        sheet.insert_record(
            [Cell("" if pd.isna(value) else str(value), DataType.TEXT) for value in values]
        )
    return sheet
