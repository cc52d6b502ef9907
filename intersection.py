"""Cross-check two tables by person name.

Keeps the rows of a base table whose person also appears in a second table.
Names are compared trimmed and case-insensitively.  Rows without a
recognizable name column are ignored on both sides; the shift engine is not
involved at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

import pandas as pd

from timesheet import cell_text, find_header, table_rows

logger = logging.getLogger(__name__)

NAME_KEYWORDS = ("nome", "pessoa", "funcionario", "empregado", "colaborador")


@dataclass(frozen=True)
class IntersectionResult:
    rows: list[Mapping[str, object]]
    initial_count: int
    final_count: int


def extract_name(row: Mapping[str, object]) -> str | None:
    """Return the normalized person name of ``row``, or None."""

    header = find_header(row.keys(), NAME_KEYWORDS)
    if header is None:
        return None
    name = cell_text(row[header]).lower()
    return name or None


def collect_names(rows: Iterable[Mapping[str, object]]) -> set[str]:
    names = set()
    for row in rows:
        name = extract_name(row)
        if name:
            names.add(name)
    return names


def filter_by_names(
    base: pd.DataFrame | Iterable[Mapping[str, object]],
    reference: pd.DataFrame | Iterable[Mapping[str, object]],
) -> IntersectionResult:
    """Keep the rows of ``base`` whose name appears in ``reference``.

    Retained rows are the original row objects, in their original order.
    """

    base_rows = table_rows(base)
    whitelist = collect_names(table_rows(reference))

    kept = []
    for row in base_rows:
        name = extract_name(row)
        if name and name in whitelist:
            kept.append(row)

    logger.info("Kept %d of %d rows (%d reference names)", len(kept), len(base_rows), len(whitelist))
    return IntersectionResult(rows=kept, initial_count=len(base_rows), final_count=len(kept))
