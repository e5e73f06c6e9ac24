"""
Heatmap rendering (x = hour, y = weekday, colour = count).

Three modes:
  - plot_heatmap               one chart
  - plot_facets_shared         one panel per country, one colour scale for all
  - plot_grid_independent      one panel per country, each scaled to its own min/max
"""

from pathlib import Path
from typing import List, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.colors import Normalize
from matplotlib.ticker import FuncFormatter

from ..config import CMAP, GRID_NCOLS, OUTPUT_FORMATS, log
from ..models import HOURS, WEEKDAYS, CountryRank
from .buckets import select_countries, to_matrix

plt.rcParams.update({
    "font.size": 9,
    "axes.titlesize": 11,
    "axes.labelsize": 9,
    "xtick.labelsize": 7,
    "ytick.labelsize": 8,
    "figure.dpi": 160,
})

TILE_EDGE = "white"
COUNT_FORMAT = FuncFormatter(lambda v, _pos: f"{v:,.0f}")


def _norm_for(values: np.ndarray) -> Normalize:
    vmin = float(values.min()) if values.size else 0.0
    vmax = float(values.max()) if values.size else 1.0
    if vmax <= vmin:
        vmax = vmin + 1.0
    return Normalize(vmin=vmin, vmax=vmax)


def draw_heatmap(ax, matrix: pd.DataFrame, norm: Normalize, cmap: str = CMAP, title: str = ""):
    """Square tiles, Monday on top, thin white tile borders."""
    mesh = ax.pcolormesh(matrix.to_numpy(), cmap=cmap, norm=norm,
                         edgecolors=TILE_EDGE, linewidth=0.3)
    ax.set_aspect("equal")
    ax.invert_yaxis()
    ax.set_xticks(np.arange(len(HOURS)) + 0.5)
    ax.set_xticklabels(HOURS)
    ax.set_yticks(np.arange(len(WEEKDAYS)) + 0.5)
    ax.set_yticklabels(WEEKDAYS)
    ax.tick_params(length=0)
    ax.grid(False)
    for side in ("top", "right", "bottom", "left"):
        ax.spines[side].set_visible(False)
    if title:
        ax.set_title(title, loc="left")
    return mesh


def _add_colorbar(fig, mesh, ax, label="Events"):
    cb = fig.colorbar(mesh, ax=ax, orientation="horizontal", shrink=0.6, pad=0.12,
                      format=COUNT_FORMAT)
    cb.set_label(label)
    cb.outline.set_visible(False)
    return cb


def plot_heatmap(table: pd.DataFrame, title: str = "", cmap: str = CMAP):
    """Single heatmap over a global (weekday, hour, count) bucket table."""
    matrix = to_matrix(table)
    fig, ax = plt.subplots(figsize=(12, 4.5), layout="constrained")
    mesh = draw_heatmap(ax, matrix, _norm_for(matrix.to_numpy()), cmap=cmap,
                        title=title or f"Events by weekday and local hour (n={int(matrix.to_numpy().sum()):,})")
    ax.set_xlabel("Hour (local)")
    _add_colorbar(fig, mesh, ax)
    return fig


def _grid(n: int, ncols: int):
    if n == 0:
        raise ValueError("No countries selected to plot")
    ncols = max(1, min(ncols, n))
    nrows = int(np.ceil(n / ncols))
    fig, axes = plt.subplots(nrows=nrows, ncols=ncols, figsize=(7.5 * ncols, 3.0 * nrows),
                             squeeze=False, layout="constrained")
    flat = axes.ravel()
    for ax in flat[n:]:
        ax.axis("off")
    return fig, flat[:n]


def plot_facets_shared(country_table: pd.DataFrame, ranks: Sequence[CountryRank],
                       ncols: int = GRID_NCOLS, cmap: str = CMAP, title: str = ""):
    """One facet per ranked country; the colour domain spans all selected counts."""
    table = select_countries(country_table, [r.code for r in ranks])
    norm = _norm_for(table["count"].to_numpy())
    fig, axes = _grid(len(ranks), ncols)

    mesh = None
    for ax, r in zip(axes, ranks):
        matrix = to_matrix(table[table["country"] == r.code])
        mesh = draw_heatmap(ax, matrix, norm, cmap=cmap, title=r.display_name)

    cb = fig.colorbar(mesh, ax=list(axes), orientation="horizontal", shrink=0.4,
                      aspect=40, format=COUNT_FORMAT)
    cb.set_label("Events (shared scale)")
    cb.outline.set_visible(False)
    if title:
        fig.suptitle(title)
    return fig


def plot_grid_independent(country_table: pd.DataFrame, ranks: Sequence[CountryRank],
                          ncols: int = GRID_NCOLS, cmap: str = CMAP, title: str = ""):
    """One panel per ranked country, each coloured against its own min/max."""
    table = select_countries(country_table, [r.code for r in ranks])
    fig, axes = _grid(len(ranks), ncols)

    for ax, r in zip(axes, ranks):
        matrix = to_matrix(table[table["country"] == r.code])
        mesh = draw_heatmap(ax, matrix, _norm_for(matrix.to_numpy()), cmap=cmap,
                            title=f"{r.display_name}  {r.percent_label}")
        _add_colorbar(fig, mesh, ax)
    if title:
        fig.suptitle(title)
    return fig


def save_figure(fig, outdir: Path, stem: str, formats: Sequence[str] = OUTPUT_FORMATS) -> List[Path]:
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    written = []
    for fmt in formats:
        out = outdir / f"{stem}.{fmt}"
        fig.savefig(out, dpi=160, bbox_inches="tight")
        written.append(out)
        log(f"[plot] Wrote {out}")
    plt.close(fig)
    return written
