from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np
import pandas as pd

from .bird_model import (
    PARAMETER_BOUNDS,
    check_parameter_bounds,
    bird_terms,
    horizontal_components,
    sun_in_model_domain,
)

logger = logging.getLogger(__name__)

ScalarOrColumn = Union[float, int, str]

OUTPUT_COLUMNS = ("amass", "dni", "ghi", "dhi")
MOD_OUTPUT_COLUMNS = ("dni_mod", "ghi_mod", "dhi_mod")


def _resolve(df: pd.DataFrame, name: str, value: ScalarOrColumn) -> np.ndarray:
    """
    Turn a scalar or a column name into a float array of len(df).
    """
    if isinstance(value, str):
        if value not in df.columns:
            raise KeyError(f"Missing {name} column: {value}")
        return pd.to_numeric(df[value], errors="coerce").to_numpy(dtype=float)
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        return np.full(len(df), float(value), dtype=float)
    raise TypeError(f"{name} must be a number or a column name, got {type(value).__name__}")


def add_bird_clear_sky_columns(
    df: pd.DataFrame,
    *,
    zenith_col: str = "sun_zenith_deg",
    r_col: str = "earth_radius_au",
    pressure: ScalarOrColumn = 1013.25,
    ozone: ScalarOrColumn = 0.3,
    water: ScalarOrColumn = 1.5,
    taua: ScalarOrColumn = 0.08,
    ba: ScalarOrColumn = 0.85,
    albedo: ScalarOrColumn = 0.2,
    dni_mod: Optional[ScalarOrColumn] = None,
    prefix: str = "bird_",
) -> pd.DataFrame:
    """
    Evaluate the Bird clear-sky model for every row and append columns.

    Each atmospheric argument is either a scalar applied to all rows or the
    name of a column of df holding per-row values.

    Adds (with prefix):
      amass, dni, ghi, dhi
      dni_mod, ghi_mod, dhi_mod   (only when dni_mod is given)

    Rows with the sun outside 0 <= zenith < 90 (or r <= 0) get 0.0.
    Rows where zenith or r is missing/non-numeric get NaN.

    Raises InvalidParameterError if any value of ozone, water, taua, ba,
    albedo or dni_mod lies outside [0, 100] (first parameter in that order).

    Returns a COPY of df with the new columns.
    """
    for c in (zenith_col, r_col):
        if c not in df.columns:
            raise KeyError(f"Missing column: {c}")

    zenith = pd.to_numeric(df[zenith_col], errors="coerce").to_numpy(dtype=float)
    r = pd.to_numeric(df[r_col], errors="coerce").to_numpy(dtype=float)

    params = {
        "pressure": _resolve(df, "pressure", pressure),
        "ozone": _resolve(df, "ozone", ozone),
        "water": _resolve(df, "water", water),
        "taua": _resolve(df, "taua", taua),
        "ba": _resolve(df, "ba", ba),
        "albedo": _resolve(df, "albedo", albedo),
    }
    if dni_mod is not None:
        params["dni_mod"] = _resolve(df, "dni_mod", dni_mod)

    for name in PARAMETER_BOUNDS:
        if name in params:
            check_parameter_bounds(name, params[name])

    n = len(df)
    known = ~np.isnan(zenith) & ~np.isnan(r)
    valid = known & sun_in_model_domain(zenith, r)

    # zero for sun-down rows, NaN where geometry is missing or non-numeric
    base = np.where(known, 0.0, np.nan)
    out_cols = {c: base.copy() for c in OUTPUT_COLUMNS}
    if dni_mod is not None:
        out_cols.update({c: base.copy() for c in MOD_OUTPUT_COLUMNS})

    logger.debug("Bird series: %d rows, %d in model domain", n, int(np.sum(valid)))

    if np.any(valid):
        t = bird_terms(
            zenith[valid],
            r[valid],
            params["pressure"][valid],
            params["ozone"][valid],
            params["water"][valid],
            params["taua"][valid],
            params["ba"][valid],
        )
        albedo_v = params["albedo"][valid]
        ghi, dhi = horizontal_components(t["dni"], t["coszen"], t["ias"], albedo_v, t["rs"])

        out_cols["amass"][valid] = t["amass"]
        out_cols["dni"][valid] = t["dni"]
        out_cols["ghi"][valid] = ghi
        out_cols["dhi"][valid] = dhi

        if dni_mod is not None:
            dni_m = t["dni"] * params["dni_mod"][valid]
            ghi_m, dhi_m = horizontal_components(dni_m, t["coszen"], t["ias"], albedo_v, t["rs"])
            out_cols["dni_mod"][valid] = dni_m
            out_cols["ghi_mod"][valid] = ghi_m
            out_cols["dhi_mod"][valid] = dhi_m

    out = df.copy()
    for c, values in out_cols.items():
        out[f"{prefix}{c}"] = values
    return out


def bird_clear_sky_frame(
    zenith,
    r,
    *,
    index=None,
    prefix: str = "",
    **atmosphere,
) -> pd.DataFrame:
    """
    Array-in / DataFrame-out convenience around add_bird_clear_sky_columns.

    zenith and r are array-likes (or scalars) broadcast against each other;
    atmosphere takes the same keyword arguments (scalars only) as
    add_bird_clear_sky_columns.
    """
    for key, value in atmosphere.items():
        if isinstance(value, str):
            raise TypeError(f"{key} must be numeric here, not a column name")

    zen, rad = np.broadcast_arrays(
        np.atleast_1d(np.asarray(zenith, dtype=float)),
        np.atleast_1d(np.asarray(r, dtype=float)),
    )
    base = pd.DataFrame({"zenith": zen.copy(), "r": rad.copy()}, index=index)
    out = add_bird_clear_sky_columns(base, zenith_col="zenith", r_col="r", prefix=prefix, **atmosphere)
    return out.drop(columns=["zenith", "r"])
