"""Spreadsheet decoding and encoding for the timesheet engine."""

from __future__ import annotations

import io
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from timesheet import (
    DailyWorkerRecord,
    Shift,
    ShiftPeriod,
    TimesheetIOError,
    daily_workers_to_frame,
    period_shifts_to_frame,
    shifts_to_frame,
    short_shifts_last,
    table_rows,
)

logger = logging.getLogger(__name__)

# Spreadsheet suffix -> pandas read_excel engine.
EXCEL_ENGINES = {".xlsx": "openpyxl", ".xlsm": "openpyxl", ".xls": "xlrd", ".ods": "odf"}
TEXT_SUFFIXES = {".csv", ".tsv", ".txt"}
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MAX_SHEET_TITLE = 31
DEFAULT_COLUMN_WIDTH = 20
COLUMN_WIDTHS = {
    "Pessoa": 30,
    "Data": 12,
    "Horas Trabalhadas": 15,
    "Horas": 15,
    "NOME": 35,
    "CPF": 15,
    "DATA": 12,
    "DATA/HORA CHEGADA": 22,
    "DATA/HORA SAÍDA": 22,
    "HORA TOTAL": 15,
    "CATEGORIA": 15,
    "Info": 45,
}


@dataclass(frozen=True)
class ExportFile:
    """An encoded workbook kept in memory with its suggested filename."""

    filename: str
    content: bytes
    media_type: str = XLSX_MEDIA_TYPE


def _read_excel(data: bytes, filename: str, engine: str) -> pd.DataFrame:
    try:
        return pd.read_excel(io.BytesIO(data), sheet_name=0, engine=engine, dtype=object)
    except Exception as exc:  # noqa: BLE001 - any reader failure means unreadable
        raise TimesheetIOError(f"Falha ao ler planilha / Failed to read workbook '{filename}': {exc}") from exc


def _read_delimited(data: bytes, filename: str) -> pd.DataFrame:
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        encodings: Sequence[str] = ("utf-16",)
    else:
        encodings = ("utf-8-sig", "latin-1")

    last_error: Exception | None = None
    for encoding in encodings:
        try:
            return pd.read_csv(io.BytesIO(data), dtype=str, encoding=encoding, engine="python", sep=None)
        except (UnicodeError, ValueError, pd.errors.ParserError) as exc:
            last_error = exc
    raise TimesheetIOError(
        f"Falha ao ler arquivo de texto / Failed to read delimited file '{filename}': {last_error}"
    ) from last_error


def read_table(data: bytes, filename: str) -> list[dict[str, object]]:
    """Decode the first sheet of a spreadsheet or delimited file into rows.

    Each row maps header to cell value; blank cells are left out.  Date cells
    of workbooks arrive as ``datetime`` values, delimited files keep text.
    """

    suffix = Path(filename).suffix.lower()
    if suffix in EXCEL_ENGINES:
        frame = _read_excel(data, filename, EXCEL_ENGINES[suffix])
    elif suffix in TEXT_SUFFIXES:
        frame = _read_delimited(data, filename)
    else:
        raise TimesheetIOError(f"Formato não suportado / Unsupported file format: '{filename}'")

    rows = [dict(row) for row in table_rows(frame)]
    logger.info("Decoded %d rows from %s", len(rows), filename)
    return rows


def read_table_file(path: str | Path) -> list[dict[str, object]]:
    file_path = Path(path)
    if not file_path.exists():
        raise TimesheetIOError(f"Arquivo não encontrado / File not found: {file_path}")
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise TimesheetIOError(f"Falha ao ler / Failed to read {file_path}: {exc}") from exc
    return read_table(data, file_path.name)


def merge_tables(tables: Iterable[Sequence[Mapping[str, object]]]) -> list[Mapping[str, object]]:
    """Concatenate decoded tables, keeping every row object as it is."""

    rows: list[Mapping[str, object]] = []
    for table in tables:
        rows.extend(table)
    if not rows:
        raise TimesheetIOError("Nenhum dado encontrado para mesclar / No data found to merge")
    logger.info("Merged %d rows", len(rows))
    return rows


def suggest_filename(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}.xlsx"


def _excel_value(value: object) -> object:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, float) and pd.isna(value):
        return None
    return value


def write_workbook(sheets: Mapping[str, pd.DataFrame], prefix: str) -> ExportFile:
    """Encode one worksheet per frame, in order, into an xlsx workbook."""

    if not sheets:
        raise TimesheetIOError("Nenhuma planilha para exportar / Nothing to export")

    workbook = Workbook()
    # remove default sheet created by openpyxl
    workbook.remove(workbook.active)

    for name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=name[:MAX_SHEET_TITLE])
        columns = [str(column) for column in frame.columns]
        worksheet.append(columns)
        for values in frame.itertuples(index=False, name=None):
            worksheet.append([_excel_value(value) for value in values])
        for index, column in enumerate(columns, start=1):
            width = COLUMN_WIDTHS.get(column, DEFAULT_COLUMN_WIDTH)
            worksheet.column_dimensions[get_column_letter(index)].width = width

    buffer = io.BytesIO()
    try:
        workbook.save(buffer)
    except Exception as exc:  # noqa: BLE001
        raise TimesheetIOError(f"Falha ao gerar planilha / Failed to write workbook: {exc}") from exc
    return ExportFile(filename=suggest_filename(prefix), content=buffer.getvalue())


def export_shifts(shifts: Sequence[Shift]) -> ExportFile:
    return write_workbook({"Ponto Tratado": shifts_to_frame(shifts)}, "Tratada")


def export_shifts_by_period(by_period: Mapping[ShiftPeriod, Sequence[Shift]]) -> ExportFile:
    """Write morning, afternoon and night shifts to one sheet each."""

    sheets = {
        period.value: period_shifts_to_frame(list(by_period.get(period, [])))
        for period in ShiftPeriod
    }
    return write_workbook(sheets, "Turnos_Separados")


def export_period_sheet(period: ShiftPeriod, shifts: Sequence[Shift]) -> ExportFile:
    frame = period_shifts_to_frame(short_shifts_last(shifts))
    return write_workbook({period.value: frame}, f"Turno_{period.value}")


def export_daily_workers(records: Sequence[DailyWorkerRecord]) -> ExportFile:
    return write_workbook({"Analise Diaristas": daily_workers_to_frame(records)}, "Analise_Diaristas")


def export_rows(
    rows: Iterable[Mapping[str, object]], sheet_name: str = "Dados", prefix: str = "Dados"
) -> ExportFile:
    """Write arbitrary rows (merged or filtered tables) to a single sheet."""

    frame = pd.DataFrame([dict(row) for row in rows])
    return write_workbook({sheet_name: frame}, prefix)


def save_export(export: ExportFile, directory: str | Path) -> Path:
    target = Path(directory) / export.filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(export.content)
    except OSError as exc:
        raise TimesheetIOError(f"Falha ao salvar / Failed to save {target}: {exc}") from exc
    return target
