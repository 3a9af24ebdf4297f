#!/usr/bin/env python3
"""
ScaledQuantity: values that remember their units through scaling.
"""

import numpy as np
import pytest

import geoscaling as gs

pytestmark = pytest.mark.level_1


class TestConstruction:
    def test_from_quantity(self, ureg):
        x = gs.ScaledQuantity(8.1 * ureg("cm/yr"))
        assert x.unit == ureg("cm/yr").units
        assert x.is_dimensional

    def test_from_value_and_unit(self, ureg):
        x = gs.ScaledQuantity(3.0, "MPa")
        assert x.value.magnitude == 3.0
        assert x.unit == ureg.MPa

    def test_conversion_on_construction(self, ureg):
        x = gs.ScaledQuantity(1.0 * ureg.km, "m")
        assert x.value.magnitude == pytest.approx(1000.0)
        assert x.unit == ureg.m

    def test_incompatible_unit(self, ureg):
        with pytest.raises(gs.DimensionalityError):
            gs.ScaledQuantity(1.0 * ureg.km, "s")

    def test_bare_value(self, ureg):
        x = gs.ScaledQuantity(2.5)
        assert x.value == 2.5
        assert x.unit == ureg.dimensionless
        assert not x.is_dimensional

    def test_nested_list_with_unit(self):
        z = gs.ScaledQuantity([[100, 1000, 11], [10, 2, 1]], "km")
        assert z.shape == (2, 3)
        assert z[1, 1].magnitude == 2
        assert len(z) == 2

    def test_list_of_quantities(self, ureg):
        x = gs.ScaledQuantity([1 * ureg.km, 500 * ureg.m])
        assert x.unit == ureg.km
        np.testing.assert_allclose(x.value.magnitude, [1.0, 0.5])

    def test_ragged_list(self, ureg):
        with pytest.raises(ValueError):
            gs.ScaledQuantity([[1 * ureg.km], [1 * ureg.km, 2 * ureg.km]])

    def test_copy_is_independent(self, ureg):
        x = gs.ScaledQuantity(np.array([1.0, 2.0]), "km")
        y = gs.ScaledQuantity(x)
        y[0] = 5 * ureg.km
        assert x[0].magnitude == 1.0


@pytest.mark.tier_a
def test_round_trip(geo, ureg):
    v = gs.ScaledQuantity(8.1 * ureg("cm/yr"))
    nd = gs.non_dimensionalise(v, geo)

    assert isinstance(nd, gs.ScaledQuantity)
    assert nd.value == pytest.approx(0.002566735112936345)
    assert nd.unit == ureg("cm/yr").units
    assert not nd.is_dimensional
    # the input is untouched
    assert v.is_dimensional

    back = gs.dimensionalise(nd, None, geo)
    assert back.value.units == ureg("cm/yr").units
    assert back.value.magnitude == 8.1


def test_dimensionalise_with_other_unit(geo, ureg):
    nd = gs.non_dimensionalise(gs.ScaledQuantity(1.0, "km"), geo)
    back = gs.dimensionalise(nd, "m", geo)
    assert back.unit == ureg.m
    assert back.value.magnitude == pytest.approx(1000.0)


def test_inplace_round_trip(geo, ureg):
    z = gs.ScaledQuantity([[100, 1000, 11], [10, 2, 1]], "km")
    gs.non_dimensionalise_inplace(z, geo)
    np.testing.assert_allclose(z.value, [[0.1, 1.0, 0.011], [0.01, 0.002, 0.001]])
    assert z.unit == ureg.km

    gs.dimensionalise_inplace(z, geo)
    assert z.value.units == ureg.km
    np.testing.assert_allclose(z.value.magnitude, [[100, 1000, 11], [10, 2, 1]])


def test_inplace_keeps_float_buffer(geo):
    z = gs.ScaledQuantity(np.array([100.0, 200.0]), "km")
    buffer = z.value.magnitude
    gs.non_dimensionalise_inplace(z, geo)
    # no new array was allocated for the scaled values
    assert np.shares_memory(z.value, buffer)


def test_construction_takes_a_copy(geo, ureg):
    rho = ureg.Quantity(np.array([2900.0, 3300.0]), "kg/m**3")
    x = gs.ScaledQuantity(rho)
    gs.non_dimensionalise_inplace(x, geo)

    assert rho.units == ureg("kg/m**3").units
    np.testing.assert_array_equal(rho.magnitude, [2900.0, 3300.0])

    buffer = np.array([1.0, 2.0])
    y = gs.ScaledQuantity(buffer, "km")
    gs.non_dimensionalise_inplace(y, geo)
    np.testing.assert_array_equal(buffer, [1.0, 2.0])


def test_scaling_twice_is_a_no_op(geo):
    x = gs.ScaledQuantity(1.0, "km")
    gs.non_dimensionalise_inplace(x, geo)
    gs.non_dimensionalise_inplace(x, geo)
    assert x.value == pytest.approx(1e-3)

    gs.dimensionalise_inplace(x, geo)
    gs.dimensionalise_inplace(x, geo)
    assert x.value.magnitude == pytest.approx(1.0)


def test_unitless_value_untouched(geo):
    x = gs.ScaledQuantity(4.0)
    gs.non_dimensionalise_inplace(x, geo)
    gs.dimensionalise_inplace(x, geo)
    assert x.value.magnitude == 4.0


def test_accessors(ureg):
    x = gs.ScaledQuantity(3.0, "MPa")
    assert gs.value_of(x) is x.value
    assert gs.numeric_value_of(x) == 3.0
    assert gs.unit_of(x) == ureg.MPa

    assert gs.value_of(2.0) == 2.0
    assert gs.numeric_value_of(2.0 * ureg.m) == 2.0
    assert gs.unit_of(2.0 * ureg.m) == ureg.m
    assert gs.unit_of(2.0) is None


class TestArithmetic:
    def test_quantities(self, ureg):
        x = gs.ScaledQuantity(1.0, "km")
        y = gs.ScaledQuantity(500.0, "m")
        total = gs.add(x, y)
        assert isinstance(total, gs.ScaledQuantity)
        assert total.value.to("m").magnitude == pytest.approx(1500.0)
        assert gs.subtract(x, y).value.to("m").magnitude == pytest.approx(500.0)

    def test_product_units(self, ureg):
        area = gs.multiply(gs.ScaledQuantity(2.0, "m"), gs.ScaledQuantity(3.0, "m"))
        assert area.value.to("m**2").magnitude == pytest.approx(6.0)
        assert gs.divide(area, 2.0 * ureg.m).value.to("m").magnitude == pytest.approx(3.0)

    def test_numbers_stay_numbers(self, geo):
        x = gs.non_dimensionalise(gs.ScaledQuantity(1.0, "km"), geo)
        assert gs.multiply(x, 2.0) == pytest.approx(2e-3)

    def test_incompatible_addition(self):
        with pytest.raises(Exception):
            gs.add(gs.ScaledQuantity(1.0, "km"), gs.ScaledQuantity(1.0, "s"))

    def test_operators_not_overloaded(self):
        with pytest.raises(TypeError):
            gs.ScaledQuantity(1.0, "km") + gs.ScaledQuantity(1.0, "km")


def test_repr(geo):
    x = gs.non_dimensionalise(gs.ScaledQuantity(1.0, "km"), geo)
    assert "kilometer" in repr(x)
