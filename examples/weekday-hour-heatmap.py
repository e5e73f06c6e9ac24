"""
===============================================================================
Weekday / Hour Attack Heatmaps
-------------------------------------------------------------------------------
Purpose:
    Notebook-style walk through the analysis: when (in local time) do attacks
    from each source country arrive?

Methodology:
    1. Load events (timestamp, source_country, tz) from CSV.
    2. Resolve every timestamp in its own zone -> weekday + hour.
    3. Count per (weekday, hour), overall and per country (zero-filled).
    4. Rank countries by volume.
    5. Plot:
        - overall heatmap
        - ranks 3-12 on a shared scale (top-2 outliers removed)
        - top 16, each on its own scale

Notes:
    - Unknown zones are skipped and reported (TZ_POLICY = "skip").
"""

from pathlib import Path

from tzheatmap.loader import load_events
from tzheatmap.enrichment.local_time import resolve_events
from tzheatmap.evaluation.buckets import count_by_country, count_global
from tzheatmap.evaluation.ranking import rank_countries, select_by_rank
from tzheatmap.evaluation.heatmap import (plot_facets_shared, plot_grid_independent,
                                         plot_heatmap, save_figure)

# config
FILE_PATH = "data/eventlog.csv"
OUT_DIR   = Path("out_heatmap")
TZ_POLICY = "skip"

# load & resolve
events = load_events(FILE_PATH)
res = resolve_events(events, policy=TZ_POLICY)
if not res.resolved:
    raise ValueError("No resolvable events found in dataset.")

# rank + aggregate
ranks = rank_countries(events)
overall = count_global(res.resolved)
by_cc = count_by_country(res.resolved, countries=[r.code for r in ranks])

for r in ranks[:16]:
    print(f"{r.rank:>3}  {r.display_name:<32} {r.event_count:>9,}  {r.percent_label}")

# overall
save_figure(plot_heatmap(overall), OUT_DIR, "heatmap_overall")

# ranks 3..12, one shared colour scale
save_figure(plot_facets_shared(by_cc, select_by_rank(ranks, 3, 12), ncols=2),
            OUT_DIR, "heatmap_countries_shared")

# top 16, independent colour scales
save_figure(plot_grid_independent(by_cc, select_by_rank(ranks, 1, 16), ncols=2),
            OUT_DIR, "heatmap_countries_independent")
