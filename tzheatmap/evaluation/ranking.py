"""Country ranking by event volume."""

from collections import Counter
from typing import Iterable, List

import pandas as pd

from ..enrichment.countries import display_name
from ..models import CountryRank, Event


def rank_countries(events: Iterable[Event]) -> List[CountryRank]:
    """Rank source countries by descending event count; ties keep first-seen order."""
    counts = Counter(ev.source_country for ev in events)  # insertion order = encounter order
    total = sum(counts.values())
    if total == 0:
        return []
    # sorted() is stable, so equal counts stay in encounter order
    ordered = sorted(counts.items(), key=lambda kv: -kv[1])
    return [
        CountryRank(code=code, display_name=display_name(code), event_count=n,
                    percent=(n / total) * 100.0, rank=i)
        for i, (code, n) in enumerate(ordered, 1)
    ]


def select_by_rank(ranks: List[CountryRank], first: int, last: int) -> List[CountryRank]:
    """Countries whose rank falls in [first, last], e.g. (3, 12) to drop the top-2 outliers."""
    if first < 1 or last < first:
        raise ValueError(f"Invalid rank range {first}-{last}")
    return [r for r in ranks if first <= r.rank <= last]


def ranks_to_frame(ranks: List[CountryRank]) -> pd.DataFrame:
    return pd.DataFrame({
        "rank":         [r.rank for r in ranks],
        "code":         [r.code for r in ranks],
        "display_name": [r.display_name for r in ranks],
        "event_count":  [r.event_count for r in ranks],
        "percent":      [round(r.percent, 2) for r in ranks],
        "percent_label": [r.percent_label for r in ranks],
    })
