"""Helpers to load the predictions roster and emit canonical entries."""

from __future__ import annotations

import csv
import logging
import re
from io import StringIO
from pathlib import Path
from typing import List, Mapping, Optional

from hitboard.errors import RosterFormatError
from hitboard.models import RosterEntry


logger = logging.getLogger(__name__)

DEFAULT_ROSTER_MAPPING = {
    "student": "student",
    "player": "baseball_player",
    "predicted_hits": "predicted_hits",
}

_LEADING_INT = re.compile(r"^[+-]?\d+")


def _parse_predicted_hits(raw: str) -> Optional[int]:
    """Parse a hit guess the lenient way a spreadsheet export needs.

    Leading digits win (``"150 hits"`` -> 150). Anything without leading
    digits, or a negative guess, yields ``None``.
    """

    text = raw.strip().replace("_", "")
    match = _LEADING_INT.match(text)
    if not match:
        return None
    value = int(match.group(0))
    if value < 0:
        return None
    return value


def _resolve_columns(fieldnames: List[str], mapping: Mapping[str, str]) -> dict[str, str]:
    lookup = {name.strip().lower(): name for name in fieldnames}
    resolved: dict[str, str] = {}
    missing: list[str] = []
    for key in ("student", "player", "predicted_hits"):
        column = mapping.get(key, DEFAULT_ROSTER_MAPPING[key])
        actual = lookup.get(column.strip().lower())
        if actual is None:
            missing.append(column)
        else:
            resolved[key] = actual
    if missing:
        raise RosterFormatError(
            "Roster header is missing required column(s): " + ", ".join(missing)
        )
    return resolved


def parse_roster(raw_text: str, *, mapping: Mapping[str, str] | None = None) -> List[RosterEntry]:
    """Parse ``student,baseball_player,predicted_hits`` rows in file order.

    Columns are matched by header name (case-insensitive), so extra or
    reordered columns are fine. Blank lines are skipped; sequence numbers are
    assigned 1-based over the rows kept.
    """

    mapping = mapping or DEFAULT_ROSTER_MAPPING
    text = raw_text.lstrip("\ufeff")
    reader = csv.DictReader(StringIO(text))
    if not reader.fieldnames:
        raise RosterFormatError("Roster is empty")
    columns = _resolve_columns(list(reader.fieldnames), mapping)

    entries: list[RosterEntry] = []
    for row in reader:
        values = [value for value in row.values() if isinstance(value, str)]
        if not any(value.strip() for value in values):
            continue
        raw_hits = (row.get(columns["predicted_hits"]) or "").strip()
        predicted = _parse_predicted_hits(raw_hits)
        student = (row.get(columns["student"]) or "").strip()
        player = (row.get(columns["player"]) or "").strip()
        if predicted is None:
            logger.warning(
                "Unparseable predicted hits %r for %s (%s); treating as 0",
                raw_hits,
                student,
                player,
            )
        entries.append(
            RosterEntry(
                seq=len(entries) + 1,
                student=student,
                player=player,
                predicted_hits=predicted,
                raw_predicted_hits=raw_hits,
            )
        )
    return entries


def load_roster(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[RosterEntry]:
    try:
        raw_text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise RosterFormatError(f"Failed to read roster {path}: {exc}") from exc
    entries = parse_roster(raw_text, mapping=mapping)
    logger.info("Loaded %d roster entries from %s", len(entries), path)
    return entries
