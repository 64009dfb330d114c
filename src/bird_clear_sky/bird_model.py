from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

import numpy as np

logger = logging.getLogger(__name__)

SOLAR_CONSTANT = 1367.0  # W/m², extraterrestrial normal irradiance at 1 AU
STANDARD_PRESSURE_MB = 1013.0

# Checked in this order; the first violation is reported.
PARAMETER_BOUNDS: dict[str, tuple[float, float]] = {
    "ozone": (0.0, 100.0),
    "water": (0.0, 100.0),
    "taua": (0.0, 100.0),
    "ba": (0.0, 100.0),
    "albedo": (0.0, 100.0),
    "dni_mod": (0.0, 100.0),
}

PARAMETER_DESCRIPTIONS = {
    "ozone": "ozone thickness [cm]",
    "water": "water vapor [cm]",
    "taua": "broadband aerosol optical depth",
    "ba": "forward scattering factor",
    "albedo": "ground reflectance",
    "dni_mod": "direct normal irradiance modification factor",
}


class InvalidParameterError(ValueError):
    """An atmospheric input lies outside its accepted range."""

    def __init__(self, parameter: str, value: Any):
        self.parameter = parameter
        self.value = value
        super().__init__(f"invalid {PARAMETER_DESCRIPTIONS[parameter]}: {parameter}={value!r}")


@dataclass(frozen=True)
class BirdInputs:
    zenith: float           # solar zenith angle [deg], from a solar-position algorithm
    r: float                # Earth-Sun radius vector [AU], from a solar-position algorithm
    pressure: float         # local (annual average) pressure [mb]
    ozone: float            # total column ozone [cm], typically 0.05 - 0.4
    water: float            # total column water vapor [cm], typically 0.01 - 6.5
    taua: float             # broadband aerosol optical depth, typically 0.02 - 0.5
    ba: float               # aerosol forward scattering ratio, 0.85 for rural aerosols
    albedo: float           # ground reflectance: 0.2 typical, snow 0.9, vegetation 0.25
    dni_mod: Optional[float] = None  # DNI modification factor (0.0 - 1.0); None = no modified outputs

    def replace(self, **changes: Any) -> "BirdInputs":
        return replace(self, **changes)


@dataclass(frozen=True)
class BirdTransmittances:
    """
    Intermediate terms of one full-model evaluation.

    rayleigh, ozone, gases, water, aerosol are the five broadband
    transmittances, each in (0, 1]. taa is the aerosol absorptance
    transmittance, rs the sky albedo and ias the atmospheric scattered
    irradiance reaching the ground before ground/sky multiple reflection.
    """
    rayleigh: float
    ozone: float
    gases: float
    water: float
    aerosol: float
    taa: float
    rs: float
    ias: float
    etrn: float
    coszen: float


@dataclass(frozen=True)
class BirdResult:
    inputs: BirdInputs

    amass: float            # relative optical air mass (not pressure corrected)
    direct_normal: float    # W/m²
    global_horiz: float     # W/m²
    diffuse_horiz: float    # W/m²

    # Only present when inputs.dni_mod is given:
    direct_normal_mod: Optional[float] = None  # direct_normal * dni_mod
    global_horiz_mod: Optional[float] = None
    diffuse_horiz_mod: Optional[float] = None

    # None when the sun is at/below the horizon or r <= 0
    transmittances: Optional[BirdTransmittances] = None

    @property
    def sun_up(self) -> bool:
        return self.transmittances is not None

    def recompute(self, **changes: Any) -> "BirdResult":
        """Evaluate the model again with some inputs replaced."""
        return compute_bird(self.inputs.replace(**changes))


def check_parameter_bounds(name: str, value: Any) -> None:
    lo, hi = PARAMETER_BOUNDS[name]
    v = np.asarray(value, dtype=float)
    bad = (v < lo) | (v > hi)
    if np.any(bad):
        first = float(v[bad].flat[0]) if v.ndim else float(v)
        logger.debug("Rejected %s=%r (allowed [%g, %g])", name, first, lo, hi)
        raise InvalidParameterError(name, first)


def validate_bird_inputs(inputs: BirdInputs) -> None:
    """
    Check ozone, water, taua, ba, albedo and dni_mod against [0, 100].

    Raises InvalidParameterError for the first parameter out of range.
    zenith, r and pressure are not checked. dni_mod=None is accepted.
    """
    for name in PARAMETER_BOUNDS:
        value = getattr(inputs, name)
        if name == "dni_mod" and value is None:
            continue
        check_parameter_bounds(name, value)


def sun_in_model_domain(zenith: Any, r: Any) -> Any:
    """True where 0 <= zenith < 90 and r > 0 (scalar or array)."""
    return (zenith >= 0.0) & (zenith < 90.0) & (r > 0.0)


# -----------------------------
# Closed-form sub-calculations
# -----------------------------
# These accept floats or numpy arrays. Arguments must be inside the model
# domain (see sun_in_model_domain).

def relative_air_mass(zenith_deg: Any) -> Any:
    """
    Relative optical air mass, not pressure corrected:
      m = 1 / ( cos(z) + 0.50572 * (96.07995 - z)^-1.6364 )
    """
    coszen = np.cos(np.deg2rad(zenith_deg))
    return 1.0 / (coszen + 0.50572 * np.power(96.07995 - zenith_deg, -1.6364))


def rayleigh_transmittance(press: Any) -> Any:
    return np.exp(-0.0903 * np.power(press, 0.84) * (1.0 + press - np.power(press, 1.01)))


def ozone_transmittance(oz: Any) -> Any:
    return (
        1.0
        - 0.1611 * oz * np.power(1.0 + 139.48 * oz, -0.3034)
        - 0.002715 * oz / (1.0 + 0.044 * oz + 0.0003 * oz * oz)
    )


def gas_transmittance(press: Any) -> Any:
    """Uniformly mixed gases (CO2, O2)."""
    return np.exp(-0.0127 * np.power(press, 0.26))


def water_transmittance(wat: Any) -> Any:
    return 1.0 - 2.4959 * wat / (np.power(1.0 + 79.034 * wat, 0.6828) + 6.385 * wat)


def aerosol_transmittance(taua: Any, amass: Any) -> Any:
    return np.exp(
        -np.power(taua, 0.873) * (1.0 + taua - np.power(taua, 0.7088)) * np.power(amass, 0.9108)
    )


def horizontal_components(dni: Any, coszen: Any, ias: Any, albedo: Any, rs: Any) -> tuple[Any, Any]:
    """
    Global and diffuse horizontal irradiance for a given DNI, including
    ground/sky multiple reflection:
      GHI = (DNI cos(z) + Ias) / (1 - albedo * rs)
      DHI = GHI - DNI cos(z)
    """
    dir_horiz = dni * coszen
    ghi = (dir_horiz + ias) / (1.0 - albedo * rs)
    return ghi, ghi - dir_horiz


def bird_terms(
    zenith: Any,
    r: Any,
    pressure: Any,
    ozone: Any,
    water: Any,
    taua: Any,
    ba: Any,
) -> dict[str, Any]:
    """
    Air mass, transmittances, direct normal irradiance and the sky-diffuse
    coupling terms (taa, rs, ias). Shared by the scalar and vectorised paths.
    """
    etrn = SOLAR_CONSTANT / (r * r)
    coszen = np.cos(np.deg2rad(zenith))
    amass = relative_air_mass(zenith)

    press = pressure * amass / STANDARD_PRESSURE_MB
    oz = ozone * amass
    wat = water * amass

    t_rayleigh = rayleigh_transmittance(press)
    t_ozone = ozone_transmittance(oz)
    t_gases = gas_transmittance(press)
    t_water = water_transmittance(wat)
    t_aerosol = aerosol_transmittance(taua, amass)

    dni = 0.9662 * etrn * t_aerosol * t_water * t_gases * t_ozone * t_rayleigh

    taa = 1.0 - 0.1 * (1.0 - amass + np.power(amass, 1.06)) * (1.0 - t_aerosol)
    rs = 0.0685 + (1.0 - ba) * (1.0 - t_aerosol / taa)
    ias = (
        etrn * coszen * 0.79 * t_ozone * t_gases * t_water * taa
        * (0.5 * (1.0 - t_rayleigh) + ba * (1.0 - t_aerosol / taa))
        / (1.0 - amass + np.power(amass, 1.02))
    )

    return {
        "etrn": etrn,
        "coszen": coszen,
        "amass": amass,
        "rayleigh": t_rayleigh,
        "ozone": t_ozone,
        "gases": t_gases,
        "water": t_water,
        "aerosol": t_aerosol,
        "dni": dni,
        "taa": taa,
        "rs": rs,
        "ias": ias,
    }


def compute_bird(inputs: BirdInputs) -> BirdResult:
    """
    Validate and evaluate the Bird & Hulstrom clear-sky model.

    Outside 0 <= zenith < 90 or for r <= 0 every output is 0.0 (the modified
    outputs too, when dni_mod is given); this is not an error.

    Raises InvalidParameterError before computing anything if an input is
    out of range.
    """
    validate_bird_inputs(inputs)

    has_mod = inputs.dni_mod is not None

    if not sun_in_model_domain(inputs.zenith, inputs.r):
        logger.debug("Sun outside model domain (zenith=%r, r=%r): zero output", inputs.zenith, inputs.r)
        zero_mod = 0.0 if has_mod else None
        return BirdResult(
            inputs=inputs,
            amass=0.0,
            direct_normal=0.0,
            global_horiz=0.0,
            diffuse_horiz=0.0,
            direct_normal_mod=zero_mod,
            global_horiz_mod=zero_mod,
            diffuse_horiz_mod=zero_mod,
        )

    t = {
        k: float(v)
        for k, v in bird_terms(
            inputs.zenith,
            inputs.r,
            inputs.pressure,
            inputs.ozone,
            inputs.water,
            inputs.taua,
            inputs.ba,
        ).items()
    }

    ghi, dhi = horizontal_components(t["dni"], t["coszen"], t["ias"], inputs.albedo, t["rs"])

    dni_mod = ghi_mod = dhi_mod = None
    if has_mod:
        dni_mod = t["dni"] * inputs.dni_mod
        ghi_mod, dhi_mod = horizontal_components(dni_mod, t["coszen"], t["ias"], inputs.albedo, t["rs"])

    return BirdResult(
        inputs=inputs,
        amass=t["amass"],
        direct_normal=t["dni"],
        global_horiz=float(ghi),
        diffuse_horiz=float(dhi),
        direct_normal_mod=dni_mod,
        global_horiz_mod=None if ghi_mod is None else float(ghi_mod),
        diffuse_horiz_mod=None if dhi_mod is None else float(dhi_mod),
        transmittances=BirdTransmittances(
            rayleigh=t["rayleigh"],
            ozone=t["ozone"],
            gases=t["gases"],
            water=t["water"],
            aerosol=t["aerosol"],
            taa=t["taa"],
            rs=t["rs"],
            ias=t["ias"],
            etrn=t["etrn"],
            coszen=t["coszen"],
        ),
    )


def bird_clear_sky(
    zenith: float,
    r: float,
    pressure: float,
    ozone: float,
    water: float,
    taua: float,
    ba: float,
    albedo: float,
    dni_mod: Optional[float] = None,
) -> BirdResult:
    """
    Build the inputs (in the fixed order zenith, r, pressure, ozone, water,
    taua, ba, albedo, dni_mod) and evaluate them immediately.

    Raises InvalidParameterError if validation fails.
    """
    return compute_bird(
        BirdInputs(
            zenith=zenith,
            r=r,
            pressure=pressure,
            ozone=ozone,
            water=water,
            taua=taua,
            ba=ba,
            albedo=albedo,
            dni_mod=dni_mod,
        )
    )
