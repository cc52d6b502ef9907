"""Timesheet reconstruction engine and bilingual command-line menu.

Raw time-clock exports arrive as loosely structured tables: one row per
punch, one row per day with entry, lunch and exit side by side, or anything
in between.  This module sniffs the useful columns, linearizes every row into
a sorted punch stream, splits each person's stream into shifts, infers the
meal break of each shift and computes the net worked time.  All of that is
pure and synchronous; reading and writing spreadsheets lives in
``io_sheets`` and is only reached from the (Portuguese/English) menu at the
bottom of this file.
"""

from __future__ import annotations

import logging
import os
import random
import warnings
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
OUTPUT_DIR = Path(os.getenv("PONTO_OUTPUT_DIR", "."))
LOG_LEVEL = os.getenv("PONTO_LOG_LEVEL", "WARNING")

DEFAULT_GROUP = "Default"
MIN_PUNCH_YEAR = 2020
MIN_DATE_STRING_LENGTH = 8

FULL_MODE_HARD_CAP_HOURS = 18
DAILY_WORKER_THRESHOLD_HOURS = 12
DAILY_WORKER_HARD_CAP_HOURS = 16
SHORT_SHIFT = timedelta(hours=1)
SYNTHESIS_MARGIN = timedelta(minutes=15)
SYNTHESIS_JITTER_MINUTES = 5

SHORT_SHIFT_WARNING = "Turno com registro único ou muito curto / Single punch or very short shift"
NO_RECORDS_INFO = "Nenhum registro encontrado para este turno"

PERSON_KEYWORDS = ("pessoa", "nome", "funcionario", "empregado")
GROUP_KEYWORDS = ("grupo", "depto")
SUMMARY_KEYWORDS = ("total", "saldo", "banco", "horas", "hrs", "trab", "obs")
DOCUMENT_KEYWORDS = ("cpf", "documento")
CATEGORY_KEYWORDS = ("categoria", "função", "funcao", "cargo")
DEPARTMENT_KEYWORDS = ("grupo", "depto", "departamento", "setor")

# Evaluated in order against lower-cased headers; first matching header wins.
COLUMN_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("person", PERSON_KEYWORDS),
    ("group", GROUP_KEYWORDS),
)

SHIFT_COLUMNS = [
    "Pessoa",
    "Data",
    "Primeira Hora",
    "Início Almoço/Janta",
    "Fim Almoço/Janta",
    "Saída",
    "Horas Trabalhadas",
]
PERIOD_COLUMNS = [
    "Pessoa",
    "Data",
    "Início",
    "Início Almoço/Janta",
    "Fim Almoço/Janta",
    "Fim",
    "Horas",
]
DAILY_WORKER_COLUMNS = [
    "NOME",
    "CPF",
    "DATA",
    "DATA/HORA CHEGADA",
    "DATA/HORA SAÍDA",
    "HORA TOTAL",
    "CATEGORIA",
    "GRUPO DE PESSOAS",
]


class TimesheetError(Exception):
    """Base class for timesheet processing errors."""


class TimesheetValidationError(TimesheetError):
    """Raised when configuration or shift data breaks an invariant."""


class TimesheetIOError(TimesheetError):
    """Raised when a table cannot be decoded, encoded or saved."""


@dataclass(frozen=True)
class ProcessingConfig:
    """Thresholds that drive segmentation and break detection.

    ``shift_threshold_hours`` is the widest gap between two consecutive
    punches that still belong to the same shift.  The lunch bounds are
    inclusive, in minutes.  ``default_lunch_duration`` only seeds the length
    of synthetic breaks.
    """

    shift_threshold_hours: float = 8
    lunch_min_duration: int = 45
    lunch_max_duration: int = 75
    default_lunch_duration: int = 60

    def __post_init__(self) -> None:
        if self.shift_threshold_hours <= 0:
            raise TimesheetValidationError("Shift threshold must be positive")
        if self.lunch_min_duration <= 0 or self.lunch_max_duration < self.lunch_min_duration:
            raise TimesheetValidationError("Lunch bounds must satisfy 0 < min <= max")
        if self.default_lunch_duration <= 0:
            raise TimesheetValidationError("Default lunch duration must be positive")


DEFAULT_CONFIG = ProcessingConfig()
# Folds long overnight spans (e.g. 22:00 - 06:00 on call) into one shift.
SHIFT_ID_CONFIG = replace(DEFAULT_CONFIG, shift_threshold_hours=12)


class LunchKind(str, Enum):
    NONE = "NONE"
    NORMAL = "NORMAL"
    ARTIFICIAL = "ARTIFICIAL"


class ShiftPeriod(Enum):
    """Shift category by start hour; values double as export sheet names."""

    MORNING = "Manhã"
    AFTERNOON = "Tarde"
    NIGHT = "Noite"


MEAL_WINDOWS = {
    ShiftPeriod.MORNING: (time(10, 30), time(14, 30)),
    ShiftPeriod.AFTERNOON: (time(17, 30), time(20, 0)),
    ShiftPeriod.NIGHT: (time(0, 30), time(3, 0)),
}


@dataclass(frozen=True)
class Punch:
    """One clock event for one person."""

    person: str
    timestamp: datetime
    group: str = DEFAULT_GROUP
    source_row: Mapping[str, object] | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class MealWindow:
    """Expected meal break range for a shift."""

    start: datetime
    end: datetime
    period: ShiftPeriod

    @property
    def midpoint(self) -> datetime:
        return self.start + (self.end - self.start) / 2

    def contains(self, start: datetime, end: datetime) -> bool:
        return self.start <= start and end <= self.end


@dataclass(frozen=True)
class Shift:
    """A segmented run of punches with its resolved break and worked time."""

    person: str
    punches: tuple[Punch, ...]
    lunch_start: datetime | None = None
    lunch_end: datetime | None = None
    lunch_kind: LunchKind = LunchKind.NONE
    worked: timedelta = timedelta(0)
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.punches:
            raise TimesheetValidationError("A shift needs at least one punch")
        if self.end < self.start:
            raise TimesheetValidationError("Shift end must be on or after start")
        if self.lunch_kind is not LunchKind.NONE:
            if self.lunch_start is None or self.lunch_end is None:
                raise TimesheetValidationError("A resolved lunch needs both bounds")
            if not self.start <= self.lunch_start < self.lunch_end <= self.end:
                raise TimesheetValidationError("Lunch interval must lie inside the shift")

    @property
    def start(self) -> datetime:
        return self.punches[0].timestamp

    @property
    def end(self) -> datetime:
        return self.punches[-1].timestamp

    @property
    def date(self) -> date:
        return self.start.date()

    @property
    def period(self) -> ShiftPeriod:
        return classify_period(self.start)

    @property
    def break_duration(self) -> timedelta:
        if self.lunch_start is None or self.lunch_end is None:
            return timedelta(0)
        return self.lunch_end - self.lunch_start

    @property
    def worked_hours(self) -> float:
        return round(self.worked.total_seconds() / 3600, 2)

    @property
    def worked_str(self) -> str:
        return format_duration(self.worked)

    @property
    def id(self) -> str:
        return f"{self.person}-{int(self.start.timestamp() * 1000)}"


@dataclass(frozen=True)
class DailyWorkerRecord:
    """First/last punch summary of one shift, as used for day labourers."""

    name: str
    document: str
    date: date
    arrival: datetime
    departure: datetime
    net: timedelta
    category: str
    group: str

    @property
    def net_str(self) -> str:
        return format_duration(self.net)

    @property
    def id(self) -> str:
        return f"{self.name}-{int(self.arrival.timestamp() * 1000)}"


@dataclass(frozen=True)
class ShiftSummary:
    total_records: int
    artificial_lunches: int
    total_hours: float


def format_datetime(value: datetime | None) -> str:
    return value.strftime(DATETIME_FORMAT) if value else ""


def format_date(value: date | None) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def format_duration(value: timedelta) -> str:
    """Return ``HH:MM:SS``; negative durations are shown as zero."""

    total_seconds = max(int(value.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: object) -> str:
    """Return a trimmed display string for a spreadsheet cell."""

    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def header_matches(header: object, keywords: Sequence[str]) -> bool:
    lowered = str(header).lower()
    return any(keyword in lowered for keyword in keywords)


def find_header(headers: Iterable[object], keywords: Sequence[str]) -> object | None:
    """Return the first header containing any of ``keywords``."""

    for header in headers:
        if header_matches(header, keywords):
            return header
    return None


def sniff_columns(headers: Iterable[object]) -> dict[str, object]:
    """Map semantic fields (person, group) to the headers that carry them."""

    headers = list(headers)
    found: dict[str, object] = {}
    for field_name, keywords in COLUMN_RULES:
        header = find_header(headers, keywords)
        if header is not None:
            found[field_name] = header
    return found


def find_value(row: Mapping[str, object], keywords: Sequence[str]) -> str:
    header = find_header(row.keys(), keywords)
    if header is None:
        return ""
    return cell_text(row[header])


def table_rows(table: pd.DataFrame | Iterable[Mapping[str, object]]) -> list[Mapping[str, object]]:
    """Return ``table`` as a list of row mappings.

    DataFrame rows are rebuilt as dictionaries without their blank cells, so
    each row only carries the cells it actually has.  Other iterables are
    returned as a list of the very same row objects.
    """

    if isinstance(table, pd.DataFrame):
        rows: list[Mapping[str, object]] = []
        for _, row in table.iterrows():
            rows.append({str(column): value for column, value in row.items() if not _is_blank(value)})
        return rows
    return list(table)


def coerce_timestamp(value: object) -> datetime | None:
    """Return ``value`` as a naive datetime rounded to the second, if date-like.

    Date values are taken as they are; strings longer than eight characters
    are parsed leniently unless they are all digits.  Anything else, or a
    failed parse, yields None.
    """

    if isinstance(value, datetime):
        if _is_blank(value):
            return None
        try:
            parsed = pd.Timestamp(value)
        except (ValueError, OverflowError):
            return None
    elif isinstance(value, str) and len(value) > MIN_DATE_STRING_LENGTH:
        # Registration numbers and document codes, not dates.
        if value.strip().isdigit():
            return None
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            try:
                parsed = pd.to_datetime(value.strip(), errors="coerce")
            except (ValueError, TypeError, OverflowError):
                return None
        if _is_blank(parsed):
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed.round("s").to_pydatetime()


def is_plausible_punch(timestamp: datetime) -> bool:
    """Reject bare reference dates (midnight) and misparsed duration cells."""

    return timestamp.time() != time(0, 0) and timestamp.year >= MIN_PUNCH_YEAR


def sort_punches(punches: Iterable[Punch]) -> list[Punch]:
    return sorted(punches, key=lambda punch: (punch.person, punch.timestamp))


def normalize_punches(table: pd.DataFrame | Iterable[Mapping[str, object]]) -> list[Punch]:
    """Linearize a loosely structured table into a sorted punch stream.

    Parameters
    ----------
    table:
        A DataFrame or a sequence of header -> cell mappings.  A row may hold
        several time columns (entry, lunch out, lunch in, exit side by side);
        each accepted cell becomes its own ``Punch``.  Rows without a person
        column and cells that are not plausible punches are skipped silently.
    """

    punches: list[Punch] = []
    skipped_rows = 0

    for row in table_rows(table):
        columns = sniff_columns(row.keys())
        person_key = columns.get("person")
        person = cell_text(row[person_key]) if person_key is not None else ""
        if not person:
            skipped_rows += 1
            continue

        group_key = columns.get("group")
        group = (cell_text(row[group_key]) if group_key is not None else "") or DEFAULT_GROUP

        for header, value in row.items():
            if header == person_key or header == group_key:
                continue
            if header_matches(header, SUMMARY_KEYWORDS):
                continue
            timestamp = coerce_timestamp(value)
            if timestamp is None or not is_plausible_punch(timestamp):
                continue
            punches.append(Punch(person=person, timestamp=timestamp, group=group, source_row=row))

    if skipped_rows:
        logger.debug("Skipped %d rows without a person column", skipped_rows)
    logger.info("Normalized %d punches", len(punches))
    return sort_punches(punches)


def classify_period(start: datetime) -> ShiftPeriod:
    if 5 <= start.hour < 13:
        return ShiftPeriod.MORNING
    if 13 <= start.hour < 18:
        return ShiftPeriod.AFTERNOON
    return ShiftPeriod.NIGHT


def resolve_meal_window(start: datetime) -> MealWindow:
    """Return the canonical meal window for a shift starting at ``start``.

    Night shifts that start in the evening eat after midnight, so their
    window rolls over to the next calendar day.
    """

    period = classify_period(start)
    day = start.date()
    if period is ShiftPeriod.NIGHT and start.hour >= 18:
        day += timedelta(days=1)
    window_start, window_end = MEAL_WINDOWS[period]
    return MealWindow(
        start=datetime.combine(day, window_start),
        end=datetime.combine(day, window_end),
        period=period,
    )


def group_by_person(punches: Iterable[Punch]) -> dict[str, list[Punch]]:
    grouped: dict[str, list[Punch]] = {}
    for punch in punches:
        grouped.setdefault(punch.person, []).append(punch)
    return grouped


def segment_punches(
    punches: Sequence[Punch], threshold_hours: float, hard_cap_hours: float
) -> list[list[Punch]]:
    """Greedily split one person's time-sorted punches into shifts.

    A punch joins the current shift when the gap to the previous punch is at
    most ``threshold_hours`` and the span from the first punch is at most
    ``hard_cap_hours``.
    """

    threshold = timedelta(hours=threshold_hours)
    hard_cap = timedelta(hours=hard_cap_hours)
    segments: list[list[Punch]] = []
    current: list[Punch] = []

    for punch in punches:
        if current:
            gap = punch.timestamp - current[-1].timestamp
            span = punch.timestamp - current[0].timestamp
            if gap <= threshold and span <= hard_cap:
                current.append(punch)
                continue
            segments.append(current)
        current = [punch]

    if current:
        segments.append(current)
    return segments


def find_break(
    timestamps: Sequence[datetime], config: ProcessingConfig = DEFAULT_CONFIG
) -> tuple[datetime, datetime] | None:
    """Return the punch gap that best explains the meal break, if any.

    Only gaps within the configured lunch bounds qualify.  With several
    candidates the first one fully inside the meal window wins, otherwise
    the one whose midpoint is closest to the window midpoint.
    """

    if len(timestamps) < 2 or timestamps[-1] - timestamps[0] < SHORT_SHIFT:
        return None

    low = timedelta(minutes=config.lunch_min_duration)
    high = timedelta(minutes=config.lunch_max_duration)
    candidates = [
        (gap_start, gap_end)
        for gap_start, gap_end in zip(timestamps, timestamps[1:])
        if low <= gap_end - gap_start <= high
    ]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    window = resolve_meal_window(timestamps[0])
    for gap_start, gap_end in candidates:
        if window.contains(gap_start, gap_end):
            return gap_start, gap_end

    midpoint = window.midpoint
    return min(candidates, key=lambda gap: abs(gap[0] + (gap[1] - gap[0]) / 2 - midpoint))


def synthesize_break(
    start: datetime,
    end: datetime,
    config: ProcessingConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> tuple[datetime, datetime] | None:
    """Place a plausible break inside the meal window, or return None.

    The break lasts ``default_lunch_duration`` plus up to five minutes and
    keeps fifteen minutes clear of both shift ends.
    """

    if rng is None:
        rng = random.Random()
    length = timedelta(minutes=config.default_lunch_duration + rng.randint(0, SYNTHESIS_JITTER_MINUTES))
    window = resolve_meal_window(start)
    usable_start = max(start + SYNTHESIS_MARGIN, window.start)
    usable_end = min(end - SYNTHESIS_MARGIN, window.end)

    slack = usable_end - usable_start - length
    if slack < timedelta(0):
        return None
    offset = timedelta(seconds=rng.randint(0, int(slack.total_seconds())))
    lunch_start = usable_start + offset
    return lunch_start, lunch_start + length


def build_shift(
    person: str,
    punches: Sequence[Punch],
    config: ProcessingConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
    synthesize: bool = True,
) -> Shift:
    """Resolve the break of one segmented shift and compute worked time."""

    punches = tuple(punches)
    start, end = punches[0].timestamp, punches[-1].timestamp
    span = end - start

    if len(punches) < 2 or span < SHORT_SHIFT:
        return Shift(person=person, punches=punches, worked=span, warnings=(SHORT_SHIFT_WARNING,))

    lunch = find_break([punch.timestamp for punch in punches], config)
    kind = LunchKind.NORMAL
    if lunch is None and synthesize:
        lunch = synthesize_break(start, end, config, rng)
        kind = LunchKind.ARTIFICIAL
    if lunch is None:
        return Shift(person=person, punches=punches, worked=span)

    lunch_start, lunch_end = lunch
    worked = max((lunch_start - start) + (end - lunch_end), timedelta(0))
    return Shift(
        person=person,
        punches=punches,
        lunch_start=lunch_start,
        lunch_end=lunch_end,
        lunch_kind=kind,
        worked=worked,
    )


def process_records(
    table: pd.DataFrame | Iterable[Mapping[str, object]],
    config: ProcessingConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> list[Shift]:
    """Return one detailed ``Shift`` per segmented shift, by person and start."""

    if rng is None:
        rng = random.Random()
    punches = normalize_punches(table)

    shifts: list[Shift] = []
    for person, person_punches in group_by_person(punches).items():
        for segment in segment_punches(person_punches, config.shift_threshold_hours, FULL_MODE_HARD_CAP_HOURS):
            shifts.append(build_shift(person, segment, config, rng))

    if not shifts:
        logger.warning("No shifts reconstructed; no usable person/date columns found")
    shifts.sort(key=lambda shift: (shift.person, shift.start))
    return shifts


def short_shifts_last(shifts: Iterable[Shift]) -> list[Shift]:
    """Move shifts of one worked hour or less to the bottom, keeping order."""

    return sorted(shifts, key=lambda shift: shift.worked_hours <= 1)


def identify_shifts(
    table: pd.DataFrame | Iterable[Mapping[str, object]],
    config: ProcessingConfig = SHIFT_ID_CONFIG,
    rng: random.Random | None = None,
) -> dict[ShiftPeriod, list[Shift]]:
    """Reconstruct shifts and separate them into morning/afternoon/night."""

    by_period: dict[ShiftPeriod, list[Shift]] = {period: [] for period in ShiftPeriod}
    for shift in process_records(table, config, rng):
        by_period[shift.period].append(shift)
    return {period: short_shifts_last(shifts) for period, shifts in by_period.items()}


def _daily_worker_record(person: str, punches: Sequence[Punch], config: ProcessingConfig) -> DailyWorkerRecord:
    first = punches[0]
    arrival, departure = first.timestamp, punches[-1].timestamp
    net = departure - arrival
    lunch = find_break([punch.timestamp for punch in punches], config)
    if lunch is not None:
        net -= lunch[1] - lunch[0]

    row = first.source_row or {}
    if first.group and first.group != DEFAULT_GROUP:
        group = first.group
    else:
        group = find_value(row, DEPARTMENT_KEYWORDS)

    return DailyWorkerRecord(
        name=person,
        document=find_value(row, DOCUMENT_KEYWORDS),
        date=arrival.date(),
        arrival=arrival,
        departure=departure,
        net=max(net, timedelta(0)),
        category=find_value(row, CATEGORY_KEYWORDS),
        group=group,
    )


def calculate_daily_workers(
    table: pd.DataFrame | Iterable[Mapping[str, object]],
    config: ProcessingConfig = DEFAULT_CONFIG,
) -> list[DailyWorkerRecord]:
    """Return one first/last punch record per shift.

    Shifts are segmented with a fixed 12 hour gap and a 16 hour cap.  A real
    break found in the punches is netted out; none is ever synthesized.  Only
    the lunch bounds of ``config`` are used.
    """

    punches = normalize_punches(table)
    records: list[DailyWorkerRecord] = []
    for person, person_punches in group_by_person(punches).items():
        for segment in segment_punches(
            person_punches, DAILY_WORKER_THRESHOLD_HOURS, DAILY_WORKER_HARD_CAP_HOURS
        ):
            records.append(_daily_worker_record(person, segment, config))

    records.sort(key=lambda record: (record.name, record.arrival))
    return records


def summarize_shifts(shifts: Sequence[Shift]) -> ShiftSummary:
    return ShiftSummary(
        total_records=len(shifts),
        artificial_lunches=sum(1 for shift in shifts if shift.lunch_kind is LunchKind.ARTIFICIAL),
        total_hours=round(sum(shift.worked_hours for shift in shifts), 2),
    )


def shifts_to_frame(shifts: Iterable[Shift]) -> pd.DataFrame:
    """Return the full-detail export rows."""

    rows = [
        {
            "Pessoa": shift.person,
            "Data": format_date(shift.date),
            "Primeira Hora": format_datetime(shift.start),
            "Início Almoço/Janta": format_datetime(shift.lunch_start),
            "Fim Almoço/Janta": format_datetime(shift.lunch_end),
            "Saída": format_datetime(shift.end),
            "Horas Trabalhadas": shift.worked_str,
        }
        for shift in shifts
    ]
    return pd.DataFrame(rows, columns=SHIFT_COLUMNS)


def period_shifts_to_frame(shifts: Sequence[Shift]) -> pd.DataFrame:
    if not shifts:
        return pd.DataFrame([{"Info": NO_RECORDS_INFO}], columns=["Info"])
    rows = [
        {
            "Pessoa": shift.person,
            "Data": format_date(shift.date),
            "Início": format_datetime(shift.start),
            "Início Almoço/Janta": format_datetime(shift.lunch_start),
            "Fim Almoço/Janta": format_datetime(shift.lunch_end),
            "Fim": format_datetime(shift.end),
            "Horas": shift.worked_str,
        }
        for shift in shifts
    ]
    return pd.DataFrame(rows, columns=PERIOD_COLUMNS)


def daily_workers_to_frame(records: Iterable[DailyWorkerRecord]) -> pd.DataFrame:
    rows = [
        {
            "NOME": record.name,
            "CPF": record.document,
            "DATA": format_date(record.date),
            "DATA/HORA CHEGADA": format_datetime(record.arrival),
            "DATA/HORA SAÍDA": format_datetime(record.departure),
            "HORA TOTAL": record.net_str,
            "CATEGORIA": record.category,
            "GRUPO DE PESSOAS": record.group,
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=DAILY_WORKER_COLUMNS)


def _prompt(text: str) -> str:
    return input(text).strip()


def _prompt_paths(text: str) -> list[str]:
    raw = _prompt(text)
    return [part.strip() for part in raw.split(",") if part.strip()]


def _hand_off(rows: list[Mapping[str, object]]) -> None:
    """Send merged or filtered rows straight to another tool."""

    choice = _prompt(
        "Enviar dados para / Send data to: 1) Tratamento de ponto / Process timesheet  "
        "2) Análise de diaristas / Daily workers  3) Novo cruzamento / New cross-check  "
        "0) Nenhum / None: "
    )
    if choice == "1":
        _handle_process(rows)
    elif choice == "2":
        _handle_daily_workers(rows)
    elif choice == "3":
        _handle_cross_check(rows)


def _input_config() -> ProcessingConfig:
    raw = _prompt(
        f"Intervalo máximo entre batidas em horas (Enter = {DEFAULT_CONFIG.shift_threshold_hours:g}) "
        "/ Max gap between punches in hours: "
    )
    if not raw:
        return DEFAULT_CONFIG
    try:
        return replace(DEFAULT_CONFIG, shift_threshold_hours=float(raw.replace(",", ".")))
    except (ValueError, TimesheetValidationError) as exc:
        print(f"⚠️ Valor inválido / Invalid value: {exc}")
        return _input_config()


def _save(export) -> None:
    from io_sheets import save_export

    try:
        path = save_export(export, OUTPUT_DIR)
    except TimesheetIOError as exc:
        print(f"❌ Não foi possível salvar / Could not save: {exc}")
        return
    print(f"✅ Arquivo gerado / File written -> {path.resolve()}\n")


def _handle_process(rows: list[Mapping[str, object]] | None = None) -> None:
    from io_sheets import export_shifts, read_table_file

    if rows is None:
        path = _prompt("Arquivo de ponto / Timesheet file: ")
        try:
            rows = read_table_file(path)
        except TimesheetIOError as exc:
            print(f"❌ Arquivo ilegível / File unreadable: {exc}")
            return

    shifts = process_records(rows, _input_config())
    if not shifts:
        print("⚠️ Nenhuma coluna de pessoa/data utilizável encontrada / No usable person/date columns found.\n")
        return

    summary = summarize_shifts(shifts)
    print(
        f"Turnos / Shifts: {summary.total_records}  "
        f"Almoços artificiais / Artificial lunches: {summary.artificial_lunches}  "
        f"Horas totais / Total hours: {summary.total_hours:.2f}"
    )
    for shift in shifts:
        if shift.warnings:
            print(f"⚠️ {shift.person} {format_datetime(shift.start)}: {'; '.join(shift.warnings)}")
    _save(export_shifts(shifts))


def _handle_merge() -> None:
    from io_sheets import export_rows, merge_tables, read_table_file

    paths = _prompt_paths("Arquivos separados por vírgula / Files separated by comma: ")
    try:
        merged = merge_tables(read_table_file(path) for path in paths)
    except TimesheetIOError as exc:
        print(f"❌ Falha ao mesclar / Merge failed: {exc}")
        return

    print(f"✅ {len(merged)} linhas unificadas / rows merged.")
    _save(export_rows(merged, sheet_name="Unificado", prefix="Unificado"))
    _hand_off(merged)


def _handle_daily_workers(rows: list[Mapping[str, object]] | None = None) -> None:
    from io_sheets import export_daily_workers, read_table_file

    if rows is None:
        path = _prompt("Arquivo de ponto / Timesheet file: ")
        try:
            rows = read_table_file(path)
        except TimesheetIOError as exc:
            print(f"❌ Arquivo ilegível / File unreadable: {exc}")
            return

    records = calculate_daily_workers(rows)
    if not records:
        print("⚠️ Nenhuma coluna de pessoa/data utilizável encontrada / No usable person/date columns found.\n")
        return
    print(f"✅ {len(records)} registros de diaristas / daily worker records.")
    _save(export_daily_workers(records))


def _handle_identify_shifts() -> None:
    from io_sheets import export_period_sheet, export_shifts_by_period, read_table_file

    path = _prompt("Arquivo de ponto / Timesheet file: ")
    try:
        rows = read_table_file(path)
    except TimesheetIOError as exc:
        print(f"❌ Arquivo ilegível / File unreadable: {exc}")
        return

    by_period = identify_shifts(rows)
    if not any(by_period.values()):
        print("⚠️ Nenhuma coluna de pessoa/data utilizável encontrada / No usable person/date columns found.\n")
        return
    for period, shifts in by_period.items():
        print(f"{period.value}: {len(shifts)}")

    choice = _prompt("1) Todas as abas / All sheets  2) Manhã  3) Tarde  4) Noite: ")
    periods = {"2": ShiftPeriod.MORNING, "3": ShiftPeriod.AFTERNOON, "4": ShiftPeriod.NIGHT}
    if choice in periods:
        period = periods[choice]
        _save(export_period_sheet(period, by_period[period]))
    else:
        _save(export_shifts_by_period(by_period))


def _handle_cross_check(base: list[Mapping[str, object]] | None = None) -> None:
    from intersection import filter_by_names
    from io_sheets import export_rows, read_table_file

    first = None if base is not None else _prompt("Arquivo base / Base file: ")
    second = _prompt("Arquivo com os nomes / File with the names: ")
    try:
        rows_a = base if base is not None else read_table_file(first)
        rows_b = read_table_file(second)
    except TimesheetIOError as exc:
        print(f"❌ Arquivo ilegível / File unreadable: {exc}")
        return
    if not rows_a or not rows_b:
        print("❌ Uma das planilhas está vazia / One of the sheets is empty.\n")
        return

    result = filter_by_names(rows_a, rows_b)
    print(f"✅ {result.final_count} de / of {result.initial_count} linhas mantidas / rows kept.")
    if not result.rows:
        return
    _save(export_rows(result.rows, sheet_name="Filtrado", prefix="Cruzamento_Informacoes"))
    _hand_off(list(result.rows))


def resolve_log_level(name: str) -> int:
    """Return the numeric level for ``name``, WARNING when it is unknown."""

    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def main() -> None:
    logging.basicConfig(level=resolve_log_level(LOG_LEVEL), format="%(levelname)s %(name)s: %(message)s")
    menu = (
        "\nPonto Inteligente (Timesheet Processor)\n"
        "1) Tratamento de ponto / Process timesheet\n"
        "2) Unificar planilhas / Merge spreadsheets\n"
        "3) Análise de diaristas / Daily worker analysis\n"
        "4) Identificação de turno / Shift identification\n"
        "5) Cruzamento de nomes / Name cross-check\n"
        "0) Sair / Exit\n"
    )

    while True:
        print(menu)
        choice = _prompt("Escolha uma opção (Enter choice): ")
        if choice == "1":
            _handle_process()
        elif choice == "2":
            _handle_merge()
        elif choice == "3":
            _handle_daily_workers()
        elif choice == "4":
            _handle_identify_shifts()
        elif choice == "5":
            _handle_cross_check()
        elif choice == "0":
            print("Até logo / Goodbye!")
            break
        else:
            print("⚠️ Escolha uma opção válida (Please choose a valid option).\n")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
