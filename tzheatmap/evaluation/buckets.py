"""
Weekday x hour bucket counts.

One hash pass counts (weekday, hour) or (country, weekday, hour) keys, then a
densify pass walks the full cross product so every tile exists, with count 0
where no events fell. Bucket tables are plain frames:

  global : weekday, hour, count                 (7 * 24 rows)
  country: country, weekday, hour, count        (len(countries) * 7 * 24 rows)

weekday/hour are ordered categoricals (Monday-first, "00".."23").
"""

from collections import defaultdict
from itertools import product
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from ..models import HOUR_DTYPE, HOURS, WEEKDAY_DTYPE, WEEKDAYS, ResolvedEvent


def _typed(df: pd.DataFrame) -> pd.DataFrame:
    df["weekday"] = df["weekday"].astype(WEEKDAY_DTYPE)
    df["hour"] = df["hour"].astype(HOUR_DTYPE)
    df["count"] = df["count"].astype(np.int64)
    return df


def count_global(resolved: Iterable[ResolvedEvent]) -> pd.DataFrame:
    counts = defaultdict(int)
    for ev in resolved:
        counts[(ev.weekday, ev.hour)] += 1

    records = [(wd, hr, counts.get((wd, hr), 0)) for wd, hr in product(WEEKDAYS, HOURS)]
    return _typed(pd.DataFrame(records, columns=["weekday", "hour", "count"]))


def count_by_country(resolved: Iterable[ResolvedEvent],
                     countries: Optional[List[str]] = None) -> pd.DataFrame:
    """Densified per-country buckets.

    `countries` fixes which countries appear and in what order (e.g. rank order);
    by default every country seen, in encounter order. A listed country with no
    events still gets its 168 zero rows.
    """
    counts = defaultdict(int)
    seen = {}
    for ev in resolved:
        counts[(ev.source_country, ev.weekday, ev.hour)] += 1
        seen.setdefault(ev.source_country, None)

    countries = list(seen) if countries is None else list(dict.fromkeys(countries))
    records = [(cc, wd, hr, counts.get((cc, wd, hr), 0))
               for cc, wd, hr in product(countries, WEEKDAYS, HOURS)]
    df = pd.DataFrame(records, columns=["country", "weekday", "hour", "count"])
    df["country"] = df["country"].astype(pd.CategoricalDtype(countries, ordered=True))
    return _typed(df)


def select_countries(table: pd.DataFrame, countries: List[str]) -> pd.DataFrame:
    """Rows of a country bucket table for `countries`, in the given order."""
    countries = list(dict.fromkeys(countries))
    out = table[table["country"].isin(countries)].copy()
    out["country"] = out["country"].astype(str).astype(pd.CategoricalDtype(countries, ordered=True))
    return out.sort_values(["country", "weekday", "hour"]).reset_index(drop=True)


def to_matrix(table: pd.DataFrame) -> pd.DataFrame:
    """7 x 24 count matrix (rows Monday..Sunday, columns "00".."23")."""
    flat = table.assign(weekday=table["weekday"].astype(str), hour=table["hour"].astype(str))
    mat = flat.pivot_table(index="weekday", columns="hour", values="count", aggfunc="sum")
    return mat.reindex(index=list(WEEKDAYS), columns=list(HOURS)).fillna(0).astype(np.int64)
