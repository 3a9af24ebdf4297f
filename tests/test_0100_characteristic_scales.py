#!/usr/bin/env python3
"""
Construction of characteristic scales in GEO, SI and NONE units.
"""

import dataclasses

import pytest

import geoscaling as gs
from geoscaling.units import BaseDimension

u = gs.units


@pytest.mark.tier_a
def test_geo_reference_values(geo):
    assert geo.kind is gs.UnitKind.GEO
    assert geo.length.to("km").magnitude == pytest.approx(1000.0)
    assert geo.stress_si.to("Pa").magnitude == pytest.approx(1e7)
    assert geo.mass_si.to("kg").magnitude == pytest.approx(1e37)
    assert geo.time_si.to("s").magnitude == pytest.approx(1e12)
    assert geo.length_si.to("m").magnitude == pytest.approx(1e6)


def test_geo_family_units(geo):
    assert geo.length.units == u.km
    assert geo.stress.units == u.MPa
    assert geo.time.units == u.ureg.million_years
    assert geo.temperature.units == u.ureg.degC
    # 1000 degC
    assert geo.temperature_si.to("K").magnitude == pytest.approx(1273.15)


def test_time_is_viscosity_over_stress(geo):
    ratio = (geo.viscosity / geo.stress).to("s").magnitude
    assert geo.time.to("s").magnitude == pytest.approx(ratio)


def test_geo_defaults():
    scales = gs.geo_scales()
    assert scales.length.magnitude == pytest.approx(1000.0)
    assert scales.stress.magnitude == pytest.approx(10.0)
    assert scales.viscosity.to("Pa*s").magnitude == pytest.approx(1e20)
    assert scales.time_si.to("s").magnitude == pytest.approx(1e13)
    assert scales.velocity.to("m/s").magnitude == pytest.approx(1e-7)


def test_bare_numbers_take_family_units():
    scales = gs.geo_scales(length=10, stress=100, viscosity=1e21)
    assert scales.length_si.to("m").magnitude == pytest.approx(1e4)
    assert scales.stress_si.to("Pa").magnitude == pytest.approx(1e8)
    assert scales.time_si.to("s").magnitude == pytest.approx(1e13)

    scales = gs.si_scales(length=10, temperature=300)
    assert scales.length.to("m").magnitude == pytest.approx(10.0)
    assert scales.temperature.to("K").magnitude == pytest.approx(300.0)


def test_inputs_in_any_compatible_unit():
    scales = gs.geo_scales(length=1e5 * u.m, stress=1 * u.kbar)
    assert scales.length.to("km").magnitude == pytest.approx(100.0)
    assert scales.stress.units == u.MPa
    assert scales.stress.magnitude == pytest.approx(100.0)


def test_si_scales():
    scales = gs.si_scales(length=1 * u.km)
    assert scales.kind is gs.UnitKind.SI
    assert scales.length.units == u.m
    assert scales.length.magnitude == pytest.approx(1000.0)
    assert scales.time.units == u.s
    assert scales.time.magnitude == pytest.approx(1e19)


def test_dimensionless_scales():
    scales = gs.dimensionless_scales(stress=2.0, viscosity=10.0)
    assert scales.kind is gs.UnitKind.NONE
    assert scales.time == pytest.approx(5.0)
    assert scales.mass_si == pytest.approx(2.0 * 1.0 * 5.0**2)
    assert isinstance(scales.velocity, float)
    assert scales.primary(BaseDimension.TIME) == pytest.approx(5.0)


def test_dimensionless_scales_reject_units():
    with pytest.raises(gs.UnitMismatchError):
        gs.dimensionless_scales(length=10 * u.km)


def test_incompatible_input():
    with pytest.raises(gs.DimensionalityError):
        gs.geo_scales(length=5 * u.s)


def test_derived_fields(geo):
    assert geo.velocity.to("m/s").magnitude == pytest.approx(1e-6)
    assert geo.strainrate.to("1/s").magnitude == pytest.approx(1e-12)
    assert geo.density.to("kg/m**3").magnitude == pytest.approx(1e37 / 1e18)
    assert geo.force.to("N").magnitude == pytest.approx(1e37 * 1e6 / 1e24)
    assert geo.diffusivity.to("m**2/s").magnitude == pytest.approx(1.0)


def test_scales_are_frozen(geo):
    with pytest.raises(dataclasses.FrozenInstanceError):
        geo.length = 1 * u.km


def test_primary_has_no_current(geo):
    with pytest.raises(gs.DimensionalityError):
        geo.primary(BaseDimension.CURRENT)


def test_scales_for():
    assert gs.scales_for("geo").kind is gs.UnitKind.GEO
    assert gs.scales_for(gs.UnitKind.SI, length=2).length.magnitude == pytest.approx(2.0)
    assert gs.scales_for("none").kind is gs.UnitKind.NONE


def test_rcparams_defaults_are_used():
    gs.rcParams["geo.length"] = 660 * u.km
    assert gs.geo_scales().length.magnitude == pytest.approx(660.0)


def test_str_and_html(geo):
    text = str(geo)
    assert text.startswith("Employing GEO units")
    assert "length" in text and "temperature" in text
    assert "<table" in geo._repr_html_()
