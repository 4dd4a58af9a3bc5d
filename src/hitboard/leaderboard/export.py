"""Text, HTML and CSV renderings of the leaderboard."""

from __future__ import annotations

import csv
from datetime import date
from html import escape
from io import StringIO
from typing import Dict, Iterable, List, Optional, Sequence

from hitboard.models import FiniteDeviation, Hitter, PredictionRecord

from .ranking import rank


TOP_GUESSES_FOOTNOTE = (
    "Predicted hits (to date) are calculated based on the proportion of MLB games "
    "completed so far in the season."
)

_COLUMNS = (
    "Rank",
    "Student",
    "Player",
    "Predicted Hits",
    "Predicted (To Date)",
    "Actual Hits",
    "Delta",
)


def format_delta(record: PredictionRecord) -> str:
    if record.is_unbounded:
        return "∞"
    if isinstance(record.deviation, FiniteDeviation):
        return f"{record.deviation.percent:.2f}%"
    return "-"


def _row(position: int, record: PredictionRecord) -> List[str]:
    return [
        str(position),
        record.student,
        record.player,
        str(record.predicted_hits),
        f"{record.predicted_hits_to_date:.1f}",
        str(record.actual_hits),
        format_delta(record),
    ]


def records_to_csv(records: Iterable[PredictionRecord]) -> str:
    """Ranked leaderboard as CSV; unbounded deltas are written as ``inf``."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(
        [
            "rank",
            "student",
            "player",
            "predicted_hits",
            "predicted_hits_to_date",
            "actual_hits",
            "percentage_off",
            "status",
        ]
    )
    for position, record in enumerate(rank(records), start=1):
        if record.is_unbounded:
            delta = "inf"
        elif isinstance(record.deviation, FiniteDeviation):
            delta = f"{record.deviation.percent:.2f}"
        else:
            delta = ""
        writer.writerow(
            [
                position,
                record.student,
                record.player,
                record.predicted_hits,
                f"{record.predicted_hits_to_date:.1f}",
                record.actual_hits,
                delta,
                record.status,
            ]
        )
    return buffer.getvalue()


def top_guesses_text(records: Iterable[PredictionRecord], n: int = 5) -> str:
    """Tab-separated table of the ``n`` most accurate guesses."""

    lines = ["\t".join(_COLUMNS), "\t".join("-" * len(column) for column in _COLUMNS)]
    for position, record in enumerate(rank(records)[: max(0, n)], start=1):
        lines.append("\t".join(_row(position, record)))
    return "\n".join(lines) + "\n\n" + TOP_GUESSES_FOOTNOTE


def top_guesses_html(records: Iterable[PredictionRecord], n: int = 5) -> str:
    header = "".join(f"<th>{escape(column)}</th>" for column in _COLUMNS)
    body_rows = []
    for position, record in enumerate(rank(records)[: max(0, n)], start=1):
        cells = "".join(f"<td>{escape(value)}</td>" for value in _row(position, record))
        body_rows.append(f"<tr>{cells}</tr>")
    return (
        '<table border="1" cellpadding="5" cellspacing="0" style="border-collapse: collapse;">'
        f"<thead><tr>{header}</tr></thead>"
        f"<tbody>{''.join(body_rows)}</tbody>"
        "</table>"
        f'<p style="font-style: italic;">{escape(TOP_GUESSES_FOOTNOTE)}</p>'
    )


def _last_name(name: str) -> str:
    parts = name.split()
    return parts[-1] if parts else name


def _series_keys(hitters: Sequence[Hitter]) -> List[str]:
    """Last names, widened to the full name (then the id) where they collide."""

    last = [_last_name(hitter.name) for hitter in hitters]
    keys = [
        hitter.name if last.count(short) > 1 else short
        for hitter, short in zip(hitters, last)
    ]
    return [
        f"{key} ({hitter.player_id})" if keys.count(key) > 1 else key
        for hitter, key in zip(hitters, keys)
    ]


def cumulative_hits(
    hitters: Sequence[Hitter],
    *,
    since: Optional[date] = None,
) -> List[Dict[str, object]]:
    """Running hit totals per hitter, one point per game date.

    Totals accumulate over every logged game, but only dates on or after
    ``since`` are emitted. Series are keyed by last name, or by full name
    when two hitters share one.
    """

    all_dates = sorted({game.date for hitter in hitters for game in hitter.hits_by_date})
    by_hitter = []
    for hitter, key in zip(hitters, _series_keys(hitters)):
        per_date: Dict[date, int] = {}
        for game in hitter.hits_by_date:
            per_date[game.date] = per_date.get(game.date, 0) + game.hits
        by_hitter.append((key, per_date))

    totals = {key: 0 for key, _ in by_hitter}
    points: List[Dict[str, object]] = []
    for game_date in all_dates:
        for key, per_date in by_hitter:
            totals[key] += per_date.get(game_date, 0)
        if since is not None and game_date < since:
            continue
        point: Dict[str, object] = {"date": game_date.isoformat()}
        point.update(totals)
        points.append(point)
    return points
