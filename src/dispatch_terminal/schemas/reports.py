# src/dispatch_terminal/schemas/reports.py
"""Reporting Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel

from .driver import DriverResponse
from .exit_log import ExitLogResponse


class ProductivityStats(BaseModel):
    """Totals over a driver's exits in a date range."""

    exits: int
    volume: int
    avg: float


class DailyVolume(BaseModel):
    """Orders carried on one calendar day."""

    date: str
    label: str
    volume: int


class ProductivityReport(BaseModel):
    """One driver's productivity over an inclusive date range."""

    driver: DriverResponse
    start: str
    end: str
    stats: ProductivityStats
    zone_frequencies: dict[str, int]
    daily_volume: list[DailyVolume]
    logs: list[ExitLogResponse]


class DailySummary(BaseModel):
    """Exit totals for a single day."""

    date: str
    exits: int
    volume: int
    by_period: dict[str, int]
    logs: list[ExitLogResponse]


class FrequencyEntry(BaseModel):
    """A tracked-company driver seen in a period today."""

    name: str
    status: Literal["FILA", "SAIDA"]
    time: int


class QueueFrequencyReport(BaseModel):
    """Tracked-company presence per period, keyed by period then company."""

    date: str
    periods: dict[str, dict[str, list[FrequencyEntry]]]
