"""Shared fixtures: transaction factory, sample data set, and source files on disk."""
from __future__ import annotations

import datetime as dt
from pathlib import Path

import pandas as pd
import pytest

from findash.data.schemas import Transaction, transactions_to_frame

CSV_HEADER = "Fecha de operación,Fecha valor,Concepto,Importe,Tipo de movimiento,Categoría,Entidad,Nota"


def _tx(
    date: str,
    amount: float,
    operation_type: str = "Gastos",
    category: str = "",
    concept: str = "",
    entity: str = "",
    note: str = "",
    source: str = "current",
) -> Transaction:
    return Transaction(
        operation_type=operation_type,
        category=category,
        concept=concept,
        entity=entity,
        note=note,
        amount=amount,
        date=dt.date.fromisoformat(date),
        source=source,
    )


@pytest.fixture
def make_tx():
    return _tx


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    return [
        _tx("2024-03-02", -45.10, "Gastos", "Supermercado", "MERCADONA VALENCIA"),
        _tx("2024-02-28", 1800.00, "Ingresos", "Nómina", "NOMINA ACME SL"),
        _tx("2024-02-10", -30.00, "Gastos", "Restaurantes", "BAR MANOLO"),
        _tx("2024-01-05", -62.35, "Gastos", "Supermercado", "Mercadona Ruzafa"),
        _tx("2023-12-20", -200.00, "Transferencias", "Ahorro", "TRASPASO AHORRO"),
        _tx("2023-12-01", 1750.00, "Ingresos", "Nómina", "NOMINA ACME SL"),
        _tx("2023-06-15", -80.00, "Gastos", "Restaurantes", "RESTAURANTE EL PUERTO"),
        _tx("2023-01-15", -50.00, "Gastos", "Supermercado", "MERCADONA VALENCIA"),
        _tx("2022-11-11", -25.00, "Gastos", "", "COMPRA SIN CATEGORIA"),
    ]


@pytest.fixture
def sample_df(sample_transactions) -> pd.DataFrame:
    return transactions_to_frame(sample_transactions)


def write_csv(path: Path, rows: list[str]) -> Path:
    path.write_text("\n".join([CSV_HEADER, *rows]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def source_folder(tmp_path: Path) -> Path:
    """Current CSV, historical CSV, and a 2017 spreadsheet overlapping around the cutoff."""
    write_csv(tmp_path / "movimientos.csv", [
        '03/05/22,03/05/22,MERCADONA,"-1.234,56",Gastos,Supermercado, Banco A ,',
        '02/05/22,02/05/22,NOMINA,"1.800,00",Ingresos,Nómina,Banco A,',
        '30/04/22,30/04/22,SOLAPADO ACTUAL,"-10,00",Gastos,Supermercado,Banco A,',
        'xx/05/22,xx/05/22,FECHA MALA,"-5,00",Gastos,Supermercado,Banco A,',
        '04/05/22,04/05/22,IMPORTE MALO,abc,Gastos,Supermercado,Banco A,',
    ])
    write_csv(tmp_path / "movimientos - hasta 1 mayo 2022.csv", [
        '02/05/2022,02/05/2022,SOLAPADO HISTORICO,"-99,00",Gastos,Supermercado,Banco B,',
        '01/05/2022,01/05/2022,  BAR PEPE  ,"-12,50", Gastos ,Restaurantes,Banco B, cena ',
        '15/01/2021,15/01/2021,NOMINA,"1.500,00",Ingresos,Nómina,Banco B,',
    ])
    pd.DataFrame({
        "Fecha de operación": [dt.datetime(2017, 3, 1), dt.datetime(2017, 4, 2)],
        "Fecha valor": [dt.datetime(2017, 3, 2), None],
        "Concepto": ["LIBRERIA", "FARMACIA"],
        "Importe": [-20.5, -7.25],
        "Tipo de movimiento": ["Gastos", "Gastos"],
        "Categoría": ["Ocio", "Salud"],
        "Entidad": ["Banco C", "Banco C"],
        "Nota": ["", ""],
    }).to_excel(tmp_path / "Movimientos 2017.xlsx", index=False)
    return tmp_path
