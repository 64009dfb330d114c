import dataclasses
import math

import numpy as np
import pytest

from bird_clear_sky import (
    BirdInputs,
    InvalidParameterError,
    bird_clear_sky,
    compute_bird,
    validate_bird_inputs,
)

REFERENCE = dict(
    zenith=50.11162202402973,
    r=0.9965422973539708,
    pressure=820.0,
    ozone=0.3,
    water=1.5,
    taua=0.08,
    ba=0.85,
    albedo=0.2,
)


def test_reference_scenario():
    res = bird_clear_sky(*REFERENCE.values(), 0.0)

    assert res.direct_normal == pytest.approx(874.5066, rel=1e-3)
    assert res.global_horiz == pytest.approx(664.8749, rel=1e-3)
    assert res.diffuse_horiz == pytest.approx(104.0591, rel=1e-3)

    # dni_mod = 0 leaves only the diffuse part in the modified triple
    assert res.direct_normal_mod == 0.0
    assert res.global_horiz_mod == pytest.approx(res.diffuse_horiz_mod)


def test_physical_properties_over_practical_ranges():
    rng = np.random.default_rng(7)
    for _ in range(300):
        inputs = BirdInputs(
            zenith=float(rng.uniform(0.0, 85.0)),
            r=float(rng.uniform(0.983, 1.017)),
            pressure=float(rng.uniform(600.0, 1050.0)),
            ozone=float(rng.uniform(0.05, 0.4)),
            water=float(rng.uniform(0.01, 6.5)),
            taua=float(rng.uniform(0.02, 0.5)),
            ba=0.85,
            albedo=float(rng.uniform(0.0, 0.9)),
        )
        res = compute_bird(inputs)
        t = res.transmittances

        assert res.sun_up
        assert res.amass > 0.0
        for value in (t.rayleigh, t.ozone, t.gases, t.water, t.aerosol):
            assert 0.0 < value <= 1.0

        coszen = math.cos(math.radians(inputs.zenith))
        assert res.global_horiz == pytest.approx(res.direct_normal * coszen + res.diffuse_horiz, rel=1e-12, abs=1e-9)


def test_air_mass_is_one_at_zenith():
    res = bird_clear_sky(0.0, 1.0, 1013.0, 0.3, 1.5, 0.08, 0.85, 0.2)
    assert res.amass == pytest.approx(1.0, abs=1e-3)
    assert res.transmittances.etrn == pytest.approx(1367.0)


@pytest.mark.parametrize("name", ["ozone", "water", "taua", "ba", "albedo", "dni_mod"])
@pytest.mark.parametrize("bad", [-0.001, 100.5])
def test_out_of_range_parameter_is_rejected(name, bad):
    inputs = BirdInputs(**REFERENCE, dni_mod=0.5).replace(**{name: bad})

    with pytest.raises(InvalidParameterError) as excinfo:
        compute_bird(inputs)

    assert excinfo.value.parameter == name
    assert excinfo.value.value == bad


def test_bounds_are_inclusive():
    validate_bird_inputs(BirdInputs(**{**REFERENCE, "ozone": 0.0, "albedo": 100.0}, dni_mod=100.0))


def test_first_violation_is_reported():
    inputs = BirdInputs(**{**REFERENCE, "water": -1.0, "albedo": 200.0})
    with pytest.raises(InvalidParameterError) as excinfo:
        compute_bird(inputs)
    assert excinfo.value.parameter == "water"
    assert "water vapor" in str(excinfo.value)


def test_geometry_and_pressure_are_not_validated():
    # out-of-range geometry is a zero result, not an error
    res = bird_clear_sky(-500.0, -1.0, 1013.0, 0.3, 1.5, 0.08, 0.85, 0.2)
    assert res.direct_normal == 0.0

    res = bird_clear_sky(30.0, 1.0, 5000.0, 0.3, 1.5, 0.08, 0.85, 0.2)
    assert res.sun_up


def test_factory_raises_on_invalid_input():
    with pytest.raises(InvalidParameterError):
        bird_clear_sky(30.0, 1.0, 1013.0, 0.3, 1.5, 0.08, 0.85, -0.2)


@pytest.mark.parametrize(
    "zenith, r",
    [(90.0, 1.0), (90.0001, 1.0), (120.0, 1.0), (-0.5, 1.0), (45.0, 0.0), (45.0, -1.0)],
)
def test_degenerate_geometry_gives_exact_zeros(zenith, r):
    res = compute_bird(BirdInputs(**{**REFERENCE, "zenith": zenith, "r": r}, dni_mod=0.7))

    assert not res.sun_up
    assert res.transmittances is None
    assert (res.amass, res.direct_normal, res.global_horiz, res.diffuse_horiz) == (0.0, 0.0, 0.0, 0.0)
    assert (res.direct_normal_mod, res.global_horiz_mod, res.diffuse_horiz_mod) == (0.0, 0.0, 0.0)


def test_degenerate_geometry_without_modification_factor():
    res = compute_bird(BirdInputs(**{**REFERENCE, "zenith": 95.0}))
    assert res.direct_normal == 0.0
    assert res.direct_normal_mod is None


def test_modified_outputs_absent_without_factor():
    res = bird_clear_sky(*REFERENCE.values())
    assert res.inputs.dni_mod is None
    assert res.direct_normal_mod is None
    assert res.global_horiz_mod is None
    assert res.diffuse_horiz_mod is None


def test_modification_scaling():
    res = bird_clear_sky(*REFERENCE.values(), 0.6)
    assert res.direct_normal_mod == res.direct_normal * 0.6
    assert res.global_horiz_mod < res.global_horiz

    unit = res.recompute(dni_mod=1.0)
    assert unit.direct_normal_mod == unit.direct_normal
    assert unit.global_horiz_mod == pytest.approx(unit.global_horiz)
    assert unit.diffuse_horiz_mod == pytest.approx(unit.diffuse_horiz)


def test_recompute_is_idempotent_and_pure():
    inputs = BirdInputs(**REFERENCE, dni_mod=0.9)
    a = compute_bird(inputs)
    b = compute_bird(inputs)
    assert a == b

    changed = a.recompute(zenith=10.0)
    assert changed.inputs.zenith == 10.0
    assert a.inputs.zenith == REFERENCE["zenith"]
    assert changed.direct_normal > a.direct_normal
    assert changed.recompute(zenith=REFERENCE["zenith"]) == a


def test_inputs_and_results_are_immutable():
    res = bird_clear_sky(*REFERENCE.values())
    with pytest.raises(dataclasses.FrozenInstanceError):
        res.inputs.zenith = 10.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        res.direct_normal = 0.0


def test_higher_aerosol_load_shifts_direct_to_diffuse():
    clean = bird_clear_sky(30.0, 1.0, 1013.0, 0.3, 1.5, 0.02, 0.85, 0.2)
    hazy = clean.recompute(taua=0.5)
    assert hazy.direct_normal < clean.direct_normal
    assert hazy.diffuse_horiz > clean.diffuse_horiz
