"""Stage records passed between loader, resolver, ranker and renderer."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

# Monday-first, independent of host locale
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
HOURS = tuple(f"{h:02d}" for h in range(24))

WEEKDAY_DTYPE = pd.CategoricalDtype(WEEKDAYS, ordered=True)
HOUR_DTYPE = pd.CategoricalDtype(HOURS, ordered=True)


@dataclass(frozen=True)
class Event:
    timestamp: str
    source_country: str
    tz: str


@dataclass(frozen=True)
class ResolvedEvent:
    source_country: str
    weekday: str  # one of WEEKDAYS
    hour: str     # "00".."23"


@dataclass(frozen=True)
class CountryRank:
    code: str
    display_name: str
    event_count: int
    percent: float  # 0..100
    rank: int

    @property
    def percent_label(self) -> str:
        return format_percent(self.percent)


def format_percent(value: float) -> str:
    """66.666 -> '66.7%', 50.0 -> '50%'."""
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text}%"
