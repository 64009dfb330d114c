from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from bird_clear_sky import InvalidParameterError, add_bird_clear_sky_columns
from bird_clear_sky.plots import PlotContext, plot_clear_sky_components


def _number_or_column(value: str) -> float | str:
    """
    Numeric CLI values are scalars; anything else names a CSV column.
    "col:<name>" always names a column, for headers that look like numbers.
    """
    if value.startswith("col:"):
        return value[len("col:"):]
    try:
        return float(value)
    except ValueError:
        return value


def run_all(
    in_csv: Path,
    *,
    out_csv: Path | None = None,
    zenith_col: str = "sun_zenith_deg",
    r_col: str = "earth_radius_au",
    pressure: float | str = 1013.25,
    ozone: float | str = 0.3,
    water: float | str = 1.5,
    taua: float | str = 0.08,
    ba: float | str = 0.85,
    albedo: float | str = 0.2,
    dni_mod: float | str | None = None,
    plot: bool = False,
    x_col: str | None = None,
    location_name: str | None = None,
    dpi: int = 150,
) -> Path:
    # --- 1) Load series ---
    df = pd.read_csv(in_csv)
    print(f"Read {len(df)} rows from: {in_csv}")

    # --- 2) Bird clear sky per row ---
    df = add_bird_clear_sky_columns(
        df,
        zenith_col=zenith_col,
        r_col=r_col,
        pressure=pressure,
        ozone=ozone,
        water=water,
        taua=taua,
        ba=ba,
        albedo=albedo,
        dni_mod=dni_mod,
    )

    n_up = int((df["bird_amass"] > 0.0).sum())
    print(f"Rows with sun in model domain: {n_up} / {len(df)}")

    # --- 3) Write CSV next to input ---
    if out_csv is None:
        out_csv = in_csv.parent / f"{in_csv.stem}_bird_clear_sky.csv"
    df.to_csv(out_csv, index=False)
    print(f"Wrote: {out_csv}")

    # --- 4) Optional plot ---
    if plot:
        context = PlotContext(
            location_name=location_name,
            source=f"Bird clear sky, taua={taua}, water={water} cm, ozone={ozone} cm",
        )
        png = plot_clear_sky_components(
            df,
            out_csv.with_suffix(".png"),
            x_col=x_col,
            context=context,
            dpi=dpi,
        )
        print(f"Wrote: {png}")

    return out_csv


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="make_clear_sky",
        description="Append Bird clear-sky DNI/GHI/DHI columns to a CSV holding solar zenith and Earth-Sun distance.",
    )
    p.add_argument("in_csv", type=str, help="Input CSV with zenith [deg] and r [AU] columns")
    p.add_argument("--out-csv", type=str, default=None, help="Output CSV (default: <input>_bird_clear_sky.csv)")
    p.add_argument("--zenith-col", type=str, default="sun_zenith_deg", help="Solar zenith column [deg]")
    p.add_argument("--r-col", type=str, default="earth_radius_au", help="Earth-Sun radius vector column [AU]")

    # Atmosphere: a number applies to all rows, anything else is a column name;
    # prefix "col:" to force a column whose header parses as a number.
    p.add_argument("--pressure", type=_number_or_column, default=1013.25, help="Pressure [mb] or column (col:<name> forces a column)")
    p.add_argument("--ozone", type=_number_or_column, default=0.3, help="Total column ozone [cm] or column (col:<name> forces a column)")
    p.add_argument("--water", type=_number_or_column, default=1.5, help="Precipitable water [cm] or column (col:<name> forces a column)")
    p.add_argument("--taua", type=_number_or_column, default=0.08, help="Broadband aerosol optical depth or column (col:<name> forces a column)")
    p.add_argument("--ba", type=_number_or_column, default=0.85, help="Aerosol forward scattering ratio or column (col:<name> forces a column)")
    p.add_argument("--albedo", type=_number_or_column, default=0.2, help="Ground reflectance or column (col:<name> forces a column)")
    p.add_argument(
        "--dni-mod",
        type=_number_or_column,
        default=None,
        help="DNI modification factor (0.0 - 1.0) or column; enables the *_mod output columns.",
    )

    p.add_argument("--plot", action="store_true", help="Also write a PNG next to the output CSV")
    p.add_argument("--x-col", type=str, default=None, help="Column used as plot x axis (default: row number)")
    p.add_argument("--location-name", type=str, default=None, help='Optional plot subtitle, e.g. "Golden, CO"')
    p.add_argument("--dpi", type=int, default=150, help="PNG output dpi")
    return p


def main() -> None:
    args = build_parser().parse_args()
    in_csv = Path(args.in_csv)

    if not in_csv.exists():
        raise SystemExit(f"Input CSV not found: {in_csv}")

    try:
        run_all(
            in_csv,
            out_csv=Path(args.out_csv) if args.out_csv else None,
            zenith_col=args.zenith_col,
            r_col=args.r_col,
            pressure=args.pressure,
            ozone=args.ozone,
            water=args.water,
            taua=args.taua,
            ba=args.ba,
            albedo=args.albedo,
            dni_mod=args.dni_mod,
            plot=args.plot,
            x_col=args.x_col,
            location_name=args.location_name,
            dpi=args.dpi,
        )
    except (InvalidParameterError, KeyError) as exc:
        raise SystemExit(f"error: {exc}")


if __name__ == "__main__":
    main()
