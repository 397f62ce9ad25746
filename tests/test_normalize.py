import datetime as dt
import math

import numpy as np
import pandas as pd
import pytest

from findash.data.normalize import (
    CsvRecordNormalizer, SpreadsheetRecordNormalizer, parse_amount, parse_date,
)
from findash.errors import RecordRejected


@pytest.mark.parametrize("raw, expected", [
    ("-1.234,56", -1234.56),
    ("-15,90", -15.90),
    ("1.800,00", 1800.0),
    ("2.345.678,9", 2345678.9),
    ("  42  ", 42.0),
    (12.5, 12.5),
    (-3, -3.0),
    (np.float64(-7.25), -7.25),
])
def test_parse_amount_accepts_locale_strings_and_numbers(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12,34,56", float("nan"), True])
def test_parse_amount_rejects_bad_values(raw):
    with pytest.raises(RecordRejected):
        parse_amount(raw)


@pytest.mark.parametrize("raw, expected", [
    ("31/12/25", dt.date(2025, 12, 31)),
    ("02/05/2022", dt.date(2022, 5, 2)),
    ("1/2/23", dt.date(2023, 2, 1)),
    (dt.datetime(2017, 3, 2, 15, 30), dt.date(2017, 3, 2)),
    (pd.Timestamp("2019-07-08 10:00"), dt.date(2019, 7, 8)),
    (dt.date(2020, 2, 29), dt.date(2020, 2, 29)),
])
def test_parse_date_formats_and_native_values(raw, expected):
    assert parse_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "2022-05-01", "31/02/2022", "05/2022", "01/13/22", "01/01/123", pd.NaT])
def test_parse_date_rejects_bad_values(raw):
    with pytest.raises(RecordRejected):
        parse_date(raw)


def test_csv_normalizer_trims_text_and_derives_year_month():
    record = {
        "Fecha valor": "03/05/22",
        "Importe": "-1.234,56",
        "Tipo de movimiento": "  Gastos ",
        "Categoría": " Supermercado",
        "Concepto": "MERCADONA  ",
        "Entidad": " Banco A ",
        "Nota": " compra semanal ",
    }
    tx = CsvRecordNormalizer(source="current").normalize(record)

    assert tx.operation_type == "Gastos"
    assert tx.category == "Supermercado"
    assert tx.concept == "MERCADONA"
    assert tx.entity == " Banco A "
    assert tx.note == "compra semanal"
    assert tx.amount == pytest.approx(-1234.56)
    assert tx.date == dt.date(2022, 5, 3)
    assert (tx.year, tx.month) == (2022, 4)
    assert tx.source == "current"


def test_missing_text_fields_become_empty_strings():
    tx = CsvRecordNormalizer().normalize({"Fecha valor": "01/01/24", "Importe": "1,00"})
    assert (tx.operation_type, tx.category, tx.concept, tx.entity, tx.note) == ("", "", "", "", "")


def test_either_bad_date_or_bad_amount_rejects_the_record():
    normalizer = CsvRecordNormalizer()
    with pytest.raises(RecordRejected):
        normalizer.normalize({"Fecha valor": "bad", "Importe": "1,00"})
    with pytest.raises(RecordRejected):
        normalizer.normalize({"Fecha valor": "01/01/24", "Importe": ""})


def test_non_mapping_record_is_a_shape_error():
    with pytest.raises(TypeError):
        CsvRecordNormalizer().normalize(["01/01/24", "1,00"])


def test_normalize_all_drops_rejected_records():
    records = [
        {"Fecha valor": "01/01/24", "Importe": "-10,00", "Concepto": "ok"},
        {"Fecha valor": "", "Importe": "-10,00", "Concepto": "no date"},
        {"Fecha valor": "02/01/24", "Importe": "n/a", "Concepto": "no amount"},
        {"Fecha valor": "03/01/24", "Importe": "5", "Concepto": "ok too"},
    ]
    out = CsvRecordNormalizer().normalize_all(records)

    assert [t.concept for t in out] == ["ok", "ok too"]
    for t in out:
        assert not math.isnan(t.amount)
        assert (t.year, t.month) == (t.date.year, t.date.month - 1)


def test_spreadsheet_normalizer_uses_native_cells_and_date_fallback():
    normalizer = SpreadsheetRecordNormalizer(source="2017")
    tx = normalizer.normalize({
        "Fecha valor": "",
        "Fecha de operación": pd.Timestamp("2017-04-02"),
        "Importe": -7.25,
        "Concepto": " FARMACIA ",
    })
    assert tx.date == dt.date(2017, 4, 2)
    assert tx.amount == pytest.approx(-7.25)
    assert tx.concept == "FARMACIA"

    string_date = normalizer.normalize({"Fecha valor": "15/06/17", "Importe": "-1.000,00"})
    assert string_date.date == dt.date(2017, 6, 15)
    assert string_date.amount == pytest.approx(-1000.0)


def test_spreadsheet_normalizer_rejects_empty_amount_cells():
    normalizer = SpreadsheetRecordNormalizer()
    assert normalizer.normalize_all([
        {"Fecha valor": dt.datetime(2017, 1, 1), "Importe": float("nan")},
        {"Fecha valor": dt.datetime(2017, 1, 1), "Importe": ""},
    ]) == []
