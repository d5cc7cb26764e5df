# src/dispatch_terminal/services/reports.py
"""Aggregations behind the dashboards and exports.

Everything here is a pure function over already-loaded rows so the same
numbers back the JSON endpoints and the exported files.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Any

from dispatch_terminal.core.settings import settings
from dispatch_terminal.db.time import format_date_br, format_time_hm, today
from dispatch_terminal.models import ExitLog, Period, QueueEntry

STATUS_QUEUED = "FILA"
STATUS_EXITED = "SAIDA"

HISTORY_COLUMNS = ["Data", "Hora", "Nome", "Frota", "Matrícula", "Zona", "DT", "Volume"]

PRODUCTIVITY_COLUMNS = [
    "Data",
    "Hora",
    "Nome",
    "Frota",
    "Matrícula",
    "Zona",
    "Frequência na Zona",
    "Volume",
]


def default_range(days: int, end: date | None = None) -> tuple[str, str]:
    """Return ``(start, end)`` ISO dates covering the last ``days`` days."""
    last = end or today()
    return (last - timedelta(days=days)).isoformat(), last.isoformat()


def resolve_range(start: str | None, end: str | None, default_days: int) -> tuple[str, str]:
    """Fill in a missing bound of a date filter.

    Raises:
        ValueError: If the bounds are not ISO dates or ``start`` is after ``end``.
    """
    default_start, default_end = default_range(default_days)
    first = date.fromisoformat(start) if start else date.fromisoformat(default_start)
    last = date.fromisoformat(end) if end else date.fromisoformat(default_end)
    if first > last:
        raise ValueError("Start date must not be after end date")
    return first.isoformat(), last.isoformat()


def productivity_stats(logs: Sequence[ExitLog]) -> dict[str, Any]:
    """Exit count, total orders and orders per exit rounded to one decimal."""
    volume = sum(log.orders_count for log in logs)
    exits = len(logs)
    return {"exits": exits, "volume": volume, "avg": round(volume / (exits or 1), 1)}


def zone_frequencies(logs: Iterable[ExitLog]) -> dict[str, int]:
    """How many times each zone appears, most frequent first."""
    counts = Counter(log.zone or "N/A" for log in logs)
    return dict(counts.most_common())


def daily_volume(logs: Iterable[ExitLog]) -> list[dict[str, Any]]:
    """Orders carried per calendar day, in date order."""
    totals: dict[str, int] = defaultdict(int)
    for log in logs:
        totals[log.date] += log.orders_count
    return [
        {"date": day, "label": format_date_br(day), "volume": totals[day]}
        for day in sorted(totals)
    ]


def daily_summary(day: str, logs: Sequence[ExitLog]) -> dict[str, Any]:
    by_period = {period.value: 0 for period in Period}
    for log in logs:
        by_period[log.period.value] += 1
    return {
        "date": day,
        "exits": len(logs),
        "volume": sum(log.orders_count for log in logs),
        "by_period": by_period,
        "logs": list(logs),
    }


def queue_frequency(
    queues: dict[Period, Sequence[QueueEntry]],
    todays_logs: Iterable[ExitLog],
    companies: Sequence[str] | None = None,
) -> dict[str, dict[str, list[dict[str, Any]]]]:
    """Where drivers of the tracked companies stand today, per period.

    A driver who already left is reported as ``SAIDA`` even if they queued
    again; entries are sorted by their queue or exit time.
    """
    tracked = [company.upper() for company in (companies or settings.frequency_companies)]
    result: dict[str, dict[str, list[dict[str, Any]]]] = {}
    logs = list(todays_logs)

    for period in Period:
        seen: dict[tuple[str, str], dict[str, Any]] = {}
        for log in logs:
            company = (log.company or "").strip().upper()
            if log.period is not period or company not in tracked:
                continue
            key = (company, log.driver_id)
            previous = seen.get(key)
            if previous is None or previous["time"] > log.exit_time:
                seen[key] = {"name": log.name, "status": STATUS_EXITED, "time": log.exit_time}
        for entry in queues.get(period, ()):
            driver = entry.driver
            if driver is None:
                continue
            company = (driver.company or "").strip().upper()
            key = (company, driver.id)
            if company in tracked and key not in seen:
                seen[key] = {"name": driver.name, "status": STATUS_QUEUED, "time": entry.arrival_time}

        grouped: dict[str, list[dict[str, Any]]] = {company: [] for company in tracked}
        for (company, _driver_id), row in seen.items():
            grouped[company].append(row)
        for rows in grouped.values():
            rows.sort(key=lambda row: row["time"])
        result[period.value] = grouped
    return result


def history_rows(logs: Iterable[ExitLog]) -> list[dict[str, Any]]:
    """Flatten exit logs into export rows keyed by ``HISTORY_COLUMNS``."""
    return [
        {
            "Data": format_date_br(log.date),
            "Hora": format_time_hm(log.exit_time),
            "Nome": log.name,
            "Frota": log.fleet_number,
            "Matrícula": log.registration,
            "Zona": log.zone,
            "DT": log.dt_number,
            "Volume": log.orders_count,
        }
        for log in logs
    ]


def productivity_rows(logs: Sequence[ExitLog]) -> list[dict[str, Any]]:
    """Export rows for one driver; each row carries its zone's frequency."""
    frequencies = zone_frequencies(logs)
    return [
        {
            "Data": format_date_br(log.date),
            "Hora": format_time_hm(log.exit_time),
            "Nome": log.name,
            "Frota": log.fleet_number,
            "Matrícula": log.registration,
            "Zona": log.zone,
            "Frequência na Zona": frequencies.get(log.zone or "N/A", 0),
            "Volume": log.orders_count,
        }
        for log in logs
    ]
