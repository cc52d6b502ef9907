"""Unit tests for the menu hand-off between tools."""

from __future__ import annotations

from datetime import datetime
import io
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from openpyxl import load_workbook
import pytest

import io_sheets
import timesheet


def _at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2024, 3, day, hour, minute)


def _answers(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _text="": next(replies))


def _fake_files(monkeypatch, tables):
    monkeypatch.setattr(io_sheets, "read_table_file", lambda path: tables[path])


def _capture_saves(monkeypatch):
    saved = []
    monkeypatch.setattr(timesheet, "_save", saved.append)
    return saved


def _prefix(export) -> str:
    return export.filename.rsplit("_", 1)[0]


@pytest.mark.parametrize(
    ("answers", "prefixes"),
    [
        (("0",), ["Unificado"]),
        (("1", ""), ["Unificado", "Tratada"]),
        (("2",), ["Unificado", "Analise_Diaristas"]),
    ],
)
def test_merged_rows_are_sent_to_the_chosen_tool(monkeypatch, answers, prefixes):
    _fake_files(
        monkeypatch,
        {"a.xlsx": [{"Nome": "Ana", "Entrada": _at(8, 0)}], "b.xlsx": [{"Nome": "Ana", "Entrada": _at(17, 0)}]},
    )
    saved = _capture_saves(monkeypatch)
    _answers(monkeypatch, "a.xlsx, b.xlsx", *answers)

    timesheet._handle_merge()

    assert [_prefix(export) for export in saved] == prefixes


def test_daily_worker_analysis_of_preloaded_rows_skips_the_file_prompt(monkeypatch):
    saved = _capture_saves(monkeypatch)
    _answers(monkeypatch)
    rows = [{"Nome": "Ana", "Entrada": _at(8, 0)}, {"Nome": "Ana", "Entrada": _at(17, 0)}]

    timesheet._handle_daily_workers(rows)

    sheet = load_workbook(io.BytesIO(saved[0].content))["Analise Diaristas"]
    assert sheet["A2"].value == "Ana"
    assert sheet["F2"].value == "09:00:00"


def test_filtered_rows_become_base_of_a_new_cross_check(monkeypatch):
    _fake_files(
        monkeypatch,
        {
            "base.csv": [{"Nome": "Ana"}, {"Nome": "Bia"}, {"Nome": "Caio"}],
            "nomes.csv": [{"Colaborador": "ana"}, {"Colaborador": "bia"}],
            "outros.csv": [{"Funcionario": "BIA"}],
        },
    )
    saved = _capture_saves(monkeypatch)
    _answers(monkeypatch, "base.csv", "nomes.csv", "3", "outros.csv", "0")

    timesheet._handle_cross_check()

    assert [_prefix(export) for export in saved] == ["Cruzamento_Informacoes"] * 2
    first, second = (load_workbook(io.BytesIO(export.content))["Filtrado"] for export in saved)
    assert [cell.value for cell in first["A"]] == ["Nome", "Ana", "Bia"]
    assert [cell.value for cell in second["A"]] == ["Nome", "Bia"]
