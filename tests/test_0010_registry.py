#!/usr/bin/env python3
"""
Tests for the unit registry and the boundary functions wrapping Pint.
"""

import numpy as np
import pint
import pytest
import sympy

import geoscaling as gs
from geoscaling.units import BaseDimension

pytestmark = pytest.mark.level_1


def test_registry_is_pint(ureg):
    assert isinstance(ureg, pint.UnitRegistry)
    assert (1 * gs.units.km).to("m").magnitude == 1000


def test_million_years_defined(ureg):
    assert (1 * ureg.million_years).to("year").magnitude == pytest.approx(1e6)
    assert gs.units.Myrs == ureg.million_years


def test_create_registry_is_independent():
    registry = gs.units.create_registry()
    assert registry is not gs.units.ureg
    assert (2 * registry.million_years).to("year").magnitude == pytest.approx(2e6)


def test_offset_units_multiply(ureg):
    alpha = 3e-5 / ureg.K
    T = ureg.Quantity(100.0, "degC")
    # degC is promoted to kelvin when multiplied
    assert (alpha * T).to("dimensionless").magnitude == pytest.approx(3e-5 * 373.15)


class TestDimensionSignature:
    def test_velocity(self, ureg):
        signature = dict(gs.dimension_signature(ureg("cm/yr")))
        assert signature == {BaseDimension.LENGTH: 1, BaseDimension.TIME: -1}

    def test_fractional_power_is_exact(self, ureg):
        signature = dict(gs.dimension_signature(ureg("Pa**-3.05 / s")))
        assert signature[BaseDimension.MASS] == sympy.Rational(-61, 20)
        assert signature[BaseDimension.LENGTH] == sympy.Rational(61, 20)
        assert signature[BaseDimension.TIME] == sympy.Rational(61, 10) - 1

    def test_unit_and_string(self, ureg):
        assert gs.dimension_signature("J/mol/K") == gs.dimension_signature(ureg.Unit("J/mol/K"))
        assert dict(gs.dimension_signature("J/mol/K"))[BaseDimension.AMOUNT] == -1

    def test_dimensionless_is_empty(self, ureg):
        assert gs.dimension_signature(ureg("km/m")) == ()

    def test_scaled_quantity(self):
        x = gs.ScaledQuantity(3.0, "MPa")
        assert dict(gs.dimension_signature(x))[BaseDimension.MASS] == 1

    def test_unknown_input(self):
        with pytest.raises(TypeError):
            gs.dimension_signature(3.0)


def test_to_canonical(ureg):
    q = gs.to_canonical(ureg.Quantity(1.0, "km"))
    assert q.magnitude == pytest.approx(1000.0)
    assert q.units == ureg.m

    q = gs.to_canonical(ureg.Unit("MPa"))
    assert q.magnitude == pytest.approx(1e6)

    q = gs.to_canonical(ureg.Quantity(0.0, "degC"))
    assert q.magnitude == pytest.approx(273.15)


def test_convert(ureg):
    q = gs.convert(ureg.Quantity(1.0, "m"), "cm")
    assert q.magnitude == pytest.approx(100.0)

    with pytest.raises(gs.DimensionalityError):
        gs.convert(ureg.Quantity(1.0, "m"), "s")


def test_pint_error_is_chained(ureg):
    with pytest.raises(gs.DimensionalityError) as info:
        gs.convert(ureg.Quantity(1.0, "m"), "Pa")
    assert isinstance(info.value.__cause__, pint.errors.DimensionalityError)


def test_error_hierarchy():
    for error in (gs.DimensionalityError, gs.UnitMismatchError, gs.ShapeMismatchError, gs.ScalingStateError):
        assert issubclass(error, gs.UnitsError)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("cm/yr", False),
        (3.0, False),
        (np.ones(3), False),
        (gs.units.ureg.Quantity(3.0, "dimensionless"), False),
        (gs.units.ureg.Quantity(3.0, "m"), True),
        (gs.ScaledQuantity(3.0, "m"), True),
    ],
)
def test_has_units(value, expected):
    assert gs.has_units(value) is expected
