#!/usr/bin/env python3
"""
Runtime configuration.
"""

import pytest

import geoscaling as gs

pytestmark = pytest.mark.level_1

u = gs.units


def test_defaults():
    assert gs.rcParams["scaling.reapply"] == "raise"
    assert gs.rcParams["geo.length"].to("km").magnitude == pytest.approx(1000.0)
    assert gs.rcParams["none.viscosity"] == 1.0


def test_validation():
    with pytest.raises(ValueError):
        gs.rcParams["scaling.reapply"] = "sometimes"
    with pytest.raises(ValueError):
        gs.rcParams["geo.length"] = 10 * u.s
    with pytest.raises(ValueError):
        gs.rcParams["none.stress"] = -1.0
    with pytest.raises(KeyError):
        gs.rcParams["geo.pressure"] = 1.0


def test_bare_numbers_accepted():
    gs.rcParams["geo.length"] = 660
    assert gs.rcParams["geo.length"] == 660.0
    assert gs.geo_scales().length.magnitude == pytest.approx(660.0)


def test_rc_context_restores():
    with gs.rc_context({"si.length": 5 * u.m}, **{"scaling.reapply": "warn"}):
        assert gs.si_scales().length.magnitude == pytest.approx(5.0)
        assert gs.rcParams["scaling.reapply"] == "warn"
    assert gs.rcParams["scaling.reapply"] == "raise"
    assert gs.si_scales().length.magnitude == pytest.approx(1000.0)


def test_rc_context_restores_on_error():
    with pytest.raises(RuntimeError):
        with gs.rc_context({"scaling.reapply": "ignore"}):
            raise RuntimeError()
    assert gs.rcParams["scaling.reapply"] == "raise"


def test_reset():
    gs.rcParams["none.length"] = 3.0
    gs.reset_rcparams()
    assert gs.rcParams["none.length"] == 1.0


def test_dimensionless_defaults():
    gs.rcParams.update({"none.stress": 2.0, "none.viscosity": 4.0})
    assert gs.dimensionless_scales().time == pytest.approx(2.0)


def test_rtol_used_for_sequences(geo):
    ureg = u.ureg
    a = 1.0 * ureg("Pa**-3.05")
    b = 1.0 * ureg("Pa**-3.0500001")
    with pytest.raises(gs.DimensionalityError):
        gs.non_dimensionalise([a, b], geo)
