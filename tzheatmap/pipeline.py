#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Weekday x Hour Heatmaps of Security Events
-------------------------------------------------------------------------------
Purpose:
    Loads timestamped events (timestamp, source_country, tz), places each event
    in a weekday/hour bucket using the event's OWN time zone, and renders
    heatmaps of when attacks happen in local terms.

Methodology:
    1. Load: read EVENTS_CSV (columns in any order: timestamp, source_country, tz).
    2. Resolve: each timestamp is read as wall time in its row's zone (or, with
       REFERENCE_TZ set, converted from that zone) -> local weekday + hour.
       Rows with an unknown zone / bad timestamp follow TZ_POLICY (skip | fail).
    3. Aggregate: count per (weekday, hour) and per (country, weekday, hour),
       densified so all 7 x 24 tiles exist.
    4. Rank: events per country, share of total, descending rank.
    5. Render:
         - overall heatmap
         - countries in FACET_RANKS on one shared colour scale
         - countries in GRID_RANKS, each on its own colour scale

Output (OUTDIR):
    global_buckets.csv, country_buckets.csv, country_ranks.csv
    heatmap_overall.<fmt>
    heatmap_countries_shared.<fmt>
    heatmap_countries_independent.<fmt>
    where <fmt> in OUTPUT_FORMATS (default svg, png)

Quickstart:
    EVENTS_CSV=events.csv OUTDIR=out_heatmap python3 -m tzheatmap.pipeline
    TZ_POLICY=fail FACET_RANKS=1-10 python3 -m tzheatmap.pipeline
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from .config import (EVENTS_CSV, FACET_RANKS, GRID_NCOLS, GRID_RANKS, OUTDIR, OUTPUT_FORMATS,
                     REFERENCE_TZ, TZ_POLICY, log, parse_rank_range)
from .enrichment.local_time import Resolution, resolve_events
from .evaluation.buckets import count_by_country, count_global
from .evaluation.heatmap import (plot_facets_shared, plot_grid_independent, plot_heatmap,
                                 save_figure)
from .evaluation.ranking import rank_countries, ranks_to_frame, select_by_rank
from .loader import load_events
from .models import CountryRank


@dataclass
class HeatmapReport:
    n_events: int
    resolution: Resolution
    ranks: List[CountryRank]
    global_table: pd.DataFrame
    country_table: pd.DataFrame
    written: List[Path] = field(default_factory=list)


def build_report(path, tz_policy: str = TZ_POLICY,
                 reference_tz: Optional[str] = REFERENCE_TZ) -> HeatmapReport:
    """Load -> resolve -> aggregate -> rank, no files written."""
    events = load_events(path)
    if not events:
        raise ValueError(f"No events in {path}")
    log(f"[load] events={len(events):,}")

    resolution = resolve_events(events, policy=tz_policy, reference_tz=reference_tz)
    ranks = rank_countries(events)

    global_table = count_global(resolution.resolved)
    country_table = count_by_country(resolution.resolved, countries=[r.code for r in ranks])
    log(f"[agg] global buckets={len(global_table)} country buckets={len(country_table):,} "
        f"countries={len(ranks)}")

    return HeatmapReport(n_events=len(events), resolution=resolution, ranks=ranks,
                         global_table=global_table, country_table=country_table)


def write_tables(report: HeatmapReport, outdir: Path) -> List[Path]:
    outdir.mkdir(parents=True, exist_ok=True)
    paths = {
        "global_buckets.csv": report.global_table,
        "country_buckets.csv": report.country_table,
        "country_ranks.csv": ranks_to_frame(report.ranks),
    }
    written = []
    for name, df in paths.items():
        out = outdir / name
        df.to_csv(out, index=False)
        written.append(out)
        log(f"[write] {out} (rows={len(df):,})")
    return written


def render_all(report: HeatmapReport, outdir: Path, facet_ranks: str = FACET_RANKS,
               grid_ranks: str = GRID_RANKS, ncols: int = GRID_NCOLS,
               formats: Sequence[str] = OUTPUT_FORMATS) -> List[Path]:
    written = []
    fig = plot_heatmap(report.global_table)
    written += save_figure(fig, outdir, "heatmap_overall", formats)

    first, last = parse_rank_range(facet_ranks)
    facet = select_by_rank(report.ranks, first, last)
    if facet:
        fig = plot_facets_shared(report.country_table, facet, ncols=ncols,
                                 title=f"Countries ranked {first}-{last} (shared scale)")
        written += save_figure(fig, outdir, "heatmap_countries_shared", formats)
    else:
        log(f"[plot] no countries ranked {first}-{last}; skip shared-scale facets")

    first, last = parse_rank_range(grid_ranks)
    grid = select_by_rank(report.ranks, first, last)
    if grid:
        fig = plot_grid_independent(report.country_table, grid, ncols=ncols,
                                    title=f"Countries ranked {first}-{last} (independent scales)")
        written += save_figure(fig, outdir, "heatmap_countries_independent", formats)
    else:
        log(f"[plot] no countries ranked {first}-{last}; skip independent grid")
    return written


def run(path=EVENTS_CSV, outdir=OUTDIR, tz_policy: str = TZ_POLICY,
        reference_tz: Optional[str] = REFERENCE_TZ, facet_ranks: str = FACET_RANKS,
        grid_ranks: str = GRID_RANKS, ncols: int = GRID_NCOLS,
        formats: Sequence[str] = OUTPUT_FORMATS) -> HeatmapReport:
    t0 = time.time()
    outdir = Path(outdir)
    # validate before the expensive part
    parse_rank_range(facet_ranks)
    parse_rank_range(grid_ranks)

    report = build_report(path, tz_policy=tz_policy, reference_tz=reference_tz)
    report.written += write_tables(report, outdir)
    report.written += render_all(report, outdir, facet_ranks=facet_ranks, grid_ranks=grid_ranks,
                                 ncols=ncols, formats=formats)

    log("----- SUMMARY -----")
    log(f"rows loaded: {report.n_events:,}  resolved: {len(report.resolution.resolved):,}  "
        f"skipped: {report.resolution.n_skipped:,}")
    for reason, n in sorted(report.resolution.skipped_by_reason.items()):
        log(f"  skipped[{reason}]: {n:,}")
    top = ", ".join(f"{r.code} {r.percent_label}" for r in report.ranks[:5])
    log(f"countries: {len(report.ranks)}  top: {top}")
    log(f"files written: {len(report.written)}")
    log(f"TOTAL TIME: {time.time()-t0:.1f}s")
    return report


def main():
    run()


if __name__ == "__main__":
    main()
