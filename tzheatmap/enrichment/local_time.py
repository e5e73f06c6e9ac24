"""
Local weekday/hour for each event, computed in the event's own IANA zone.

Timestamps are wall-clock strings ("YYYY-MM-DD HH:MM:SS"). By default they are
read as local time in the row's zone. With a reference zone (e.g. "UTC") they
are read in that zone and converted into the row's zone first.

Wall times that fall in a DST gap are normalised to the real instant, so
"2016-03-13 02:30:00" in America/New_York lands in hour "03". Ambiguous wall times (the repeated fall-back hour) take
the first occurrence.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd
from tqdm import tqdm

from ..config import REFERENCE_TZ, TS_FORMAT, TZ_POLICY, log, tqdm_disabled
from ..errors import MalformedRowError, UnknownTimeZoneError
from ..models import HOURS, WEEKDAYS, Event, ResolvedEvent

POLICIES = ("skip", "fail")


@lru_cache(maxsize=None)
def get_zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise UnknownTimeZoneError(tz) from e


def parse_timestamp(ts: str) -> datetime:
    try:
        return datetime.strptime(ts.strip(), TS_FORMAT)
    except ValueError as e:
        raise MalformedRowError(f"Unparseable timestamp {ts!r} (expected {TS_FORMAT})") from e


def localize(naive: datetime, tz: str, reference_tz: Optional[str] = REFERENCE_TZ) -> datetime:
    """Attach `tz` (or `reference_tz`) to a naive wall time and return it as local time in `tz`."""
    zone = get_zone(tz)
    source_zone = get_zone(reference_tz) if reference_tz else zone
    return naive.replace(tzinfo=source_zone).astimezone(timezone.utc).astimezone(zone)


def _bucket(cc: str, local: datetime) -> ResolvedEvent:
    return ResolvedEvent(source_country=cc, weekday=WEEKDAYS[local.weekday()], hour=HOURS[local.hour])


def resolve(cc: str, timestamp: str, tz: str,
            reference_tz: Optional[str] = REFERENCE_TZ) -> ResolvedEvent:
    get_zone(tz)
    return _bucket(cc, localize(parse_timestamp(timestamp), tz, reference_tz))


@dataclass
class Resolution:
    resolved: List[ResolvedEvent] = field(default_factory=list)
    # (row index, reason) for every excluded event
    skipped: List[Tuple[int, str]] = field(default_factory=list)
    skipped_by_reason: Counter = field(default_factory=Counter)

    @property
    def n_skipped(self) -> int:
        return len(self.skipped)


def resolve_events(events: Iterable[Event], policy: str = TZ_POLICY,
                   reference_tz: Optional[str] = REFERENCE_TZ) -> Resolution:
    """Resolve every event; rows with an unknown zone or bad timestamp follow `policy`."""
    if policy not in POLICIES:
        raise ValueError(f"TZ policy must be one of {POLICIES}, got {policy!r}")
    if reference_tz:
        get_zone(reference_tz)  # a bad reference zone is fatal regardless of policy

    events = list(events)
    # one column-wide parse; unparseable -> NaT
    parsed = pd.to_datetime(pd.Series([ev.timestamp for ev in events], dtype=object),
                            format=TS_FORMAT, errors="coerce")

    out = Resolution()
    bad_zones = Counter()
    rows = zip(events, parsed)
    for i, (ev, ts) in enumerate(tqdm(rows, total=len(events), desc="Resolve", unit="row",
                                      disable=tqdm_disabled())):
        try:
            get_zone(ev.tz)
            if pd.isna(ts):
                raise MalformedRowError(f"Unparseable timestamp {ev.timestamp!r} (expected {TS_FORMAT})")
            out.resolved.append(_bucket(ev.source_country,
                                        localize(ts.to_pydatetime(), ev.tz, reference_tz)))
        except UnknownTimeZoneError:
            if policy == "fail":
                raise
            out.skipped.append((i, "unknown_tz"))
            out.skipped_by_reason["unknown_tz"] += 1
            bad_zones[ev.tz] += 1
        except MalformedRowError:
            if policy == "fail":
                raise
            out.skipped.append((i, "bad_timestamp"))
            out.skipped_by_reason["bad_timestamp"] += 1

    for tz, n in bad_zones.most_common():
        log(f"[tz] WARNING unknown zone {tz!r}: skipped {n:,} rows")
    if out.skipped_by_reason["bad_timestamp"]:
        log(f"[tz] WARNING unparseable timestamps: skipped {out.skipped_by_reason['bad_timestamp']:,} rows")
    log(f"[tz] resolved={len(out.resolved):,} skipped={out.n_skipped:,}")
    return out
