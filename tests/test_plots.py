from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

from bird_clear_sky import bird_clear_sky_frame
from bird_clear_sky.plots import PlotContext, plot_clear_sky_components


def test_plot_clear_sky_components_writes_png(tmp_path: Path):
    zen = [85.0, 70.0, 50.0, 30.0, 20.0, 30.0, 50.0, 70.0, 85.0, 95.0]
    df = bird_clear_sky_frame(zen, 1.0, prefix="bird_", dni_mod=0.8)

    out = plot_clear_sky_components(
        df,
        tmp_path / "plots" / "clear_sky.png",
        context=PlotContext(location_name="Golden, CO", latitude=39.74, longitude=-105.18),
        dpi=60,
    )

    assert out.exists()
    assert out.stat().st_size > 0


def test_plot_requires_bird_columns(tmp_path: Path):
    df = bird_clear_sky_frame([30.0], [1.0], prefix="bird_")
    with pytest.raises(KeyError):
        plot_clear_sky_components(df, tmp_path / "x.png", prefix="other_")
