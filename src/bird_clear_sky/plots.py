from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

# ---------------------------------------------------------------------
# Component palette (semantic, reused everywhere)
# ---------------------------------------------------------------------

COMPONENT_ORDER = ["ghi", "dni", "dhi"]

COMPONENT_LABELS = {
    "ghi": "Global horizontal (GHI)",
    "dni": "Direct normal (DNI)",
    "dhi": "Diffuse horizontal (DHI)",
    "dni_mod": "Modified direct normal",
}

COMPONENT_COLORS = {
    "ghi": "#053061",      # dark blue
    "dni": "#B2182B",      # deep red
    "dhi": "#67A9CF",      # light blue
    "dni_mod": "#636363",  # dark gray
}

FIGSIZE_16_9 = (13.33, 7.50)


@dataclass(frozen=True)
class PlotContext:
    location_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    source: str | None = None     # e.g. "Bird clear sky, taua=0.08"


def _apply_theme() -> None:
    """Apply a clean, presentation-friendly global style."""
    plt.rcParams.update(
        {
            "figure.figsize": FIGSIZE_16_9,
            "figure.facecolor": "white",
            "axes.facecolor": "white",
            "axes.edgecolor": "#222222",
            "axes.labelcolor": "#222222",
            "font.size": 12,
            "axes.titlesize": 16,
            "legend.fontsize": 11,
            "grid.color": "#D0D0D0",
            "grid.alpha": 0.7,
        }
    )


def _build_subtitle(context: PlotContext | None) -> str:
    if context is None:
        return ""
    parts = []
    if context.location_name:
        parts.append(context.location_name)
    if context.latitude is not None and context.longitude is not None:
        parts.append(f"Lat {context.latitude:.2f}°, Lon {context.longitude:.2f}°")
    if context.source:
        parts.append(context.source)
    return " | ".join(parts)


def _apply_header(fig: plt.Figure, *, title: str, subtitle: str) -> None:
    """Two-line header. Reserves space at top for consistent layout."""
    fig.suptitle(title, x=0.5, y=0.985, ha="center", va="top", fontweight="bold")
    if subtitle:
        fig.text(0.5, 0.952, subtitle, ha="center", va="top", fontsize=12)
    fig.subplots_adjust(top=0.88)


def _finalize_and_save(fig: plt.Figure, out: Path, *, dpi: int) -> None:
    fig.savefig(out, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def plot_clear_sky_components(
    df: pd.DataFrame,
    out_path: str | Path,
    *,
    x_col: Optional[str] = None,
    prefix: str = "bird_",
    title: str = "Bird clear-sky irradiance",
    context: PlotContext | None = None,
    dpi: int = 150,
) -> Path:
    """
    Plot GHI, DNI and DHI (plus the modified DNI when present) from the
    columns written by add_bird_clear_sky_columns.

    x axis is df[x_col] if given, else the index.
    """
    _apply_theme()

    cols = {c: f"{prefix}{c}" for c in COMPONENT_ORDER}
    for c in cols.values():
        if c not in df.columns:
            raise KeyError(f"Missing column: {c}")
    if x_col is not None and x_col not in df.columns:
        raise KeyError(f"Missing column: {x_col}")

    x = df[x_col] if x_col is not None else df.index

    fig = plt.figure(figsize=FIGSIZE_16_9)
    ax = fig.add_subplot(1, 1, 1)

    for comp in COMPONENT_ORDER:
        y = pd.to_numeric(df[cols[comp]], errors="coerce").to_numpy(dtype=float)
        ax.plot(x, y, color=COMPONENT_COLORS[comp], linewidth=2.0, label=COMPONENT_LABELS[comp])

    mod_col = f"{prefix}dni_mod"
    if mod_col in df.columns:
        y = pd.to_numeric(df[mod_col], errors="coerce").to_numpy(dtype=float)
        ax.plot(
            x,
            y,
            color=COMPONENT_COLORS["dni_mod"],
            linewidth=1.6,
            linestyle="--",
            label=COMPONENT_LABELS["dni_mod"],
        )

    ymax = float(np.nanmax(df[cols["dni"]].to_numpy(dtype=float))) if len(df) else 0.0
    ax.set_ylim(0.0, max(100.0, 1.08 * ymax) if np.isfinite(ymax) else 1100.0)

    ax.set_xlabel(x_col if x_col is not None else (df.index.name or "sample"))
    ax.set_ylabel("Irradiance (W/m²)")
    ax.grid(True, alpha=0.25, linewidth=0.8)
    ax.legend(loc="upper right", frameon=True)

    _apply_header(fig, title=title, subtitle=_build_subtitle(context))

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    _finalize_and_save(fig, out, dpi=dpi)
    return out
